"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/resolver.py
Duplicate resolution: decides which delete-set files are redundant.

STRATEGIES
----------
SizeBucketResolver   : Resolves one size bucket at a time. Keep-set files of the
                       bucket are hashed first; delete-set files are then hashed
                       in parallel and checked against the keep digests and a
                       shared seen-set. Buckets themselves run in parallel.
DigestIndexResolver  : Builds a digest index for each set over all candidate
                       sizes, then decides per digest group.

INVARIANTS
----------
• A keep-set file is never in the plan, nor is any path that resolves to one.
• A file whose hash failed is never in the plan.
• For every digest, at least one file carrying it stays on disk. When no keep-set
  copy exists, exactly one delete-set copy survives. Which one is unspecified.
"""

import logging
import random
import threading
from concurrent.futures import Executor
from typing import Any, List, Dict, Optional, Set

from dupreaper.core.grouper import FileGrouperImpl
from dupreaper.core.interfaces import DuplicateResolver, DiagnosticsReporter
from dupreaper.core.models import FileRecord, HashResult, DeletionPlan, DigestIndex
from dupreaper.core.reporting import NullReporter

logger = logging.getLogger(__name__)

SizeBuckets = Dict[int, List[FileRecord]]
PhysicalFile = List[FileRecord]  # paths sharing one (st_dev, st_ino) identity


class ConcurrentDigestSet:
    """
    Set of digests with an atomic test-and-insert.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._digests: Set[bytes] = set()

    def add_if_absent(self, digest: bytes) -> bool:
        """Adds the digest and returns True, or returns False if it was already present."""
        with self._lock:
            if digest in self._digests:
                return False
            self._digests.add(digest)
            return True

    def __contains__(self, digest: bytes) -> bool:
        with self._lock:
            return digest in self._digests

    def __len__(self):
        with self._lock:
            return len(self._digests)


class ResolverBase(DuplicateResolver):
    """
    Shared bookkeeping for resolvers: failed hashes and hash counts of the last run.

    Resolution works on physical files, not paths. Paths that share an identity
    (a symlink and its target, hard links) are hashed once and are either all
    planned or all kept.
    """

    def __init__(self, grouper: FileGrouperImpl, reporter: Optional[DiagnosticsReporter] = None):
        self.grouper = grouper
        self.reporter = reporter or NullReporter()
        self.hash_failures: List[HashResult] = []
        self.hashed_count = 0
        self.groups_resolved = 0
        self._lock = threading.Lock()

    def _reset(self) -> None:
        self.hash_failures = []
        self.hashed_count = 0
        self.groups_resolved = 0

    def _record(self, results: List[HashResult]) -> List[HashResult]:
        with self._lock:
            self.hashed_count += len(results)
            self.hash_failures.extend(r for r in results if not r.ok)
        return results

    def _mark(self, plan: DeletionPlan, physical_file: PhysicalFile) -> None:
        for record in physical_file:
            plan.add(record.path, record.size)
            self.reporter.marked_for_deletion(record.path)

    @staticmethod
    def physical_files(records: List[FileRecord]) -> List[PhysicalFile]:
        """Groups records naming the same physical file, in first-seen order."""
        groups: Dict[Any, PhysicalFile] = {}
        for record in records:
            groups.setdefault(record.key, []).append(record)
        return list(groups.values())

    @classmethod
    def deletable_files(cls, keep: List[FileRecord], delete: List[FileRecord]) -> List[PhysicalFile]:
        """Delete-set physical files that cannot also be reached through a keep-set path."""
        keep_keys = {r.key for r in keep}
        result = []
        for physical_file in cls.physical_files(delete):
            if physical_file[0].key in keep_keys:
                logger.debug(f"Same file is reachable from the keep set, not deleting: "
                             f"{[r.path for r in physical_file]}")
                continue
            result.append(physical_file)
        return result

    @staticmethod
    def candidate_sizes(keep_buckets: SizeBuckets, delete_buckets: SizeBuckets) -> List[int]:
        """Sizes present in the delete set that could hold a duplicate."""
        return [
            size for size, records in delete_buckets.items()
            if len({r.key for r in records} | {r.key for r in keep_buckets.get(size, [])}) > 1
        ]


class SizeBucketResolver(ResolverBase):
    """
    Joint per-size-bucket resolution.

    The hash work inside a bucket runs on the grouper's executor; buckets run on
    `bucket_executor`. The two must be different pools: bucket tasks block on hash tasks.
    """

    def __init__(
            self,
            grouper: FileGrouperImpl,
            reporter: Optional[DiagnosticsReporter] = None,
            bucket_executor: Optional[Executor] = None
    ):
        super().__init__(grouper, reporter)
        self.bucket_executor = bucket_executor

    def resolve(self, keep_buckets: SizeBuckets, delete_buckets: SizeBuckets) -> DeletionPlan:
        self._reset()
        sizes = self.candidate_sizes(keep_buckets, delete_buckets)
        self.groups_resolved = len(sizes)
        logger.debug(f"Resolving {len(sizes)} of {len(delete_buckets)} size bucket(s)")

        def resolve_size(size: int) -> DeletionPlan:
            return self.resolve_bucket(keep_buckets.get(size, []), delete_buckets[size])

        if self.bucket_executor is None:
            bucket_plans = [resolve_size(size) for size in sizes]
        else:
            bucket_plans = list(self.bucket_executor.map(resolve_size, sizes))

        plan = DeletionPlan()
        for bucket_plan in bucket_plans:
            plan.merge(bucket_plan)
        return plan

    def resolve_bucket(self, keep: List[FileRecord], delete: List[FileRecord]) -> DeletionPlan:
        """Decides one size bucket. All records must share the same size."""
        plan = DeletionPlan()
        candidates = self.deletable_files(keep, delete)
        keep_files = self.physical_files(keep)
        if not candidates or len(keep_files) + len(candidates) <= 1:
            return plan

        keep_results = self._record(self.grouper.hash_files([f[0] for f in keep_files]))
        keep_digests = frozenset(r.digest for r in keep_results if r.ok)
        seen = ConcurrentDigestSet()

        def is_redundant(physical_file: PhysicalFile) -> bool:
            result = self._record([self.grouper.hasher.compute_full_hash(physical_file[0].path)])[0]
            if not result.ok:
                return False
            # The first delete-set copy to register its digest survives
            return result.digest in keep_digests or not seen.add_if_absent(result.digest)

        decisions = self.grouper.map(is_redundant, candidates)
        for physical_file, redundant in zip(candidates, decisions):
            if redundant:
                self._mark(plan, physical_file)
        return plan


class DigestIndexResolver(ResolverBase):
    """
    Global digest-index resolution.

    Every candidate file of both sets is hashed up front. For a delete-set digest
    group with a keep-set match the whole group is redundant; otherwise one member,
    picked after shuffling, is retained.
    """

    def __init__(
            self,
            grouper: FileGrouperImpl,
            reporter: Optional[DiagnosticsReporter] = None,
            rng: Optional[random.Random] = None
    ):
        super().__init__(grouper, reporter)
        self.rng = rng or random.Random()

    def resolve(self, keep_buckets: SizeBuckets, delete_buckets: SizeBuckets) -> DeletionPlan:
        self._reset()
        sizes = self.candidate_sizes(keep_buckets, delete_buckets)
        self.groups_resolved = len(sizes)

        keep_files = [f for size in sizes for f in self.physical_files(keep_buckets.get(size, []))]
        delete_files = [
            f for size in sizes
            for f in self.deletable_files(keep_buckets.get(size, []), delete_buckets[size])
        ]
        # each physical file is hashed and indexed through its first path
        members = {f[0].path: f for f in delete_files}

        keep_index = DigestIndex(self._record(self.grouper.hash_files([f[0] for f in keep_files])))
        delete_index = DigestIndex(self._record(self.grouper.hash_files([f[0] for f in delete_files])))
        logger.debug(
            f"Digest index: {len(keep_index)} keep digest(s), {len(delete_index)} delete digest(s)"
        )

        plan = DeletionPlan()
        for digest, paths in delete_index.items():
            candidates = sorted(paths)
            if digest not in keep_index:
                self.rng.shuffle(candidates)
                candidates = candidates[1:]
            for path in candidates:
                self._mark(plan, members[path])
        return plan
