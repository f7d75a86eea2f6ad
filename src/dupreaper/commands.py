"""
Unified command orchestrator for keep/delete deduplication.
This is the SINGLE source of truth for the run's business logic; the CLI and
library callers both go through it.

Pipeline: scan → size buckets → resolve (hash) → delete → prune
"""
import logging
import os
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from dupreaper.core.executor import DeletionExecutor
from dupreaper.core.grouper import FileGrouperImpl
from dupreaper.core.hasher import HasherImpl, get_algorithm
from dupreaper.core.interfaces import DeleteAction, DiagnosticsReporter
from dupreaper.core.models import (
    DeduplicationParams, DeduplicationReport, ResolutionStrategy, Stage, Timer
)
from dupreaper.core.pruner import EmptyDirectoryPruner
from dupreaper.core.reporting import LoggingReporter, SafeReporter
from dupreaper.core.resolver import SizeBucketResolver, DigestIndexResolver, ResolverBase
from dupreaper.core.scanner import FileScannerImpl

logger = logging.getLogger(__name__)


def default_workers() -> int:
    return min(32, (os.cpu_count() or 1) + 4)


class DeduplicationCommand:
    """
    Orchestrates the entire run:
    1. List keep-set and delete-set files (in parallel)
    2. Group both sets by size
    3. Resolve redundant delete-set files into a DeletionPlan
    4. Apply the plan through the delete action
    5. Optionally prune directories left empty

    Usage:
        params = DeduplicationParams(keep_dirs=("/photos",), delete_dirs=("/backup",))
        report = DeduplicationCommand().execute(params)

        # Preview first, then apply:
        command = DeduplicationCommand(delete_action=FileService.move_to_trash)
        report = command.find(params)
        if confirm(report.plan):
            command.apply(params, report)
    """

    def __init__(
            self,
            reporter: Optional[DiagnosticsReporter] = None,
            delete_action: Optional[DeleteAction] = None,
            rng: Optional[random.Random] = None
    ):
        self.reporter = SafeReporter(reporter or LoggingReporter())
        self.delete_action = delete_action
        self.rng = rng

    def execute(self, params: DeduplicationParams) -> DeduplicationReport:
        """
        Run the whole pipeline.

        Raises:
            FatalScanError: If a directory or file metadata cannot be read
        """
        report = self.find(params)
        return self.apply(params, report)

    def find(self, params: DeduplicationParams) -> DeduplicationReport:
        """Scan, group and resolve. Nothing is deleted."""
        report = DeduplicationReport()
        stats = report.stats
        workers = params.workers or default_workers()

        scanner = FileScannerImpl(
            path_filter=params.build_path_filter(),
            skip_symlinks=params.skip_symlinks,
            workers=workers
        )

        with Timer() as timer, ThreadPoolExecutor(max_workers=2) as pool:
            self.reporter.listing_roots("keep", params.keep_dirs)
            self.reporter.listing_roots("delete", params.delete_dirs)
            keep_task = pool.submit(scanner.scan, params.keep_dirs)
            delete_task = pool.submit(scanner.scan, params.delete_dirs)
            keep_paths = keep_task.result()
            delete_paths = delete_task.result()
        stats.update_stage(
            Stage.SCAN.value,
            groups_found=len(params.keep_dirs) + len(params.delete_dirs),
            files_processed=len(keep_paths) + len(delete_paths),
            duration=timer.elapsed
        )
        logger.debug(f"Found {len(keep_paths)} keep file(s), {len(delete_paths)} delete file(s)")

        hasher = HasherImpl(get_algorithm(params.algorithm), reporter=self.reporter)

        # Separate pools: bucket tasks block on hash tasks
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="hash") as hash_pool, \
                ThreadPoolExecutor(max_workers=workers, thread_name_prefix="bucket") as bucket_pool:
            grouper = FileGrouperImpl(hasher, size_filter=params.size_passes, executor=hash_pool)

            with Timer() as timer:
                keep_buckets = grouper.group_by_size(keep_paths)
                delete_buckets = grouper.group_by_size(delete_paths)
            stats.update_stage(
                Stage.SIZE.value,
                groups_found=len(ResolverBase.candidate_sizes(keep_buckets, delete_buckets)),
                files_processed=sum(len(v) for v in keep_buckets.values())
                + sum(len(v) for v in delete_buckets.values()),
                duration=timer.elapsed
            )

            resolver = self._build_resolver(params.strategy, grouper, bucket_pool)
            with Timer() as timer:
                report.plan = resolver.resolve(keep_buckets, delete_buckets)
            # Hashing happens inside resolution, so both are timed as one stage
            stats.update_stage(
                Stage.RESOLVE.value,
                groups_found=resolver.groups_resolved,
                files_processed=resolver.hashed_count,
                duration=timer.elapsed
            )

        report.hash_failures = list(resolver.hash_failures)
        stats.total_time += sum(s["time"] for s in stats.stage_stats.values())
        return report

    def apply(self, params: DeduplicationParams, report: DeduplicationReport) -> DeduplicationReport:
        """Delete the planned files, then prune empty directories if configured."""
        stats = report.stats
        executor = DeletionExecutor(self.delete_action, reporter=self.reporter)

        with Timer() as timer:
            report.deleted, report.failed_deletions = executor.execute(report.plan)
        stats.update_stage(
            Stage.DELETE.value,
            groups_found=0,
            files_processed=len(report.deleted),
            duration=timer.elapsed
        )
        stats.total_time += timer.elapsed

        prune_dirs = params.prune_dirs
        if prune_dirs:
            pruner = EmptyDirectoryPruner(self.reporter, prune_roots=params.prune_roots)
            with Timer() as timer:
                report.pruned_dirs = pruner.prune(prune_dirs)
            stats.update_stage(
                Stage.PRUNE.value,
                groups_found=len(prune_dirs),
                files_processed=len(report.pruned_dirs),
                duration=timer.elapsed
            )
            stats.total_time += timer.elapsed

        return report

    def _build_resolver(self, strategy: ResolutionStrategy, grouper: FileGrouperImpl, bucket_pool):
        if strategy == ResolutionStrategy.INDEX:
            return DigestIndexResolver(grouper, self.reporter, rng=self.rng)
        return SizeBucketResolver(grouper, self.reporter, bucket_executor=bucket_pool)
