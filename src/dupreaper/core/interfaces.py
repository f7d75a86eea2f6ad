"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the deduplication system.
These protocols enforce structural typing using Python's `typing.Protocol` so that
hashing, resolution and reporting can be swapped without touching the pipeline.

Key Components:
---------------
- HashAlgorithm: Factory for incremental hash objects (e.g., SHA-512, BLAKE2b).
- Hasher: Computes a whole-content digest for a single file.
- FileScanner: Lists regular files under a set of roots.
- FileGrouper: Groups paths by size and hash results by digest.
- DuplicateResolver: Decides which delete-set files are redundant.
- DiagnosticsReporter: Write-only event sink for human-readable diagnostics.
- DeleteAction: Removes one regular file or raises OSError.
"""

from typing import Protocol, List, Dict, Sequence, Callable, Iterable
from dupreaper.core.models import (
    FileRecord,
    HashResult,
    DigestIndex,
    DeletionPlan,
)


# ===== Interfaces =====

DeleteAction = Callable[[str], None]


class IncrementalHash(Protocol):
    """Subset of the hashlib object API the hasher relies on."""
    def update(self, data) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different collision-resistant hash functions
    without affecting the rest of the deduplication logic.
    """
    name: str

    def new(self) -> IncrementalHash:
        """Returns a fresh incremental hash object."""
        ...


class Hasher(Protocol):
    """Interface for hashing the full content of a file."""
    def compute_full_hash(self, path: str) -> HashResult: ...


class FileScanner(Protocol):
    """
    Interface for scanning file systems and collecting regular-file paths.
    """
    def scan(self, roots: Sequence[str]) -> List[str]:
        """
        Recursively list regular files under the given roots.

        Raises:
            EnumerationError: if any directory cannot be listed.
        """
        ...


class FileGrouper(Protocol):
    """
    Interface for grouping files by size or digest.
    """
    def group_by_size(self, paths: Iterable[str]) -> Dict[int, List[FileRecord]]:
        """Group paths by their size in bytes."""
        ...

    def build_digest_index(self, records: Iterable[FileRecord]) -> DigestIndex:
        """Hash the records and index successful results by digest."""
        ...


class DiagnosticsReporter(Protocol):
    """
    Write-only diagnostics channel. Never used for control flow.
    """
    def listing_roots(self, label: str, roots: Sequence[str]) -> None: ...
    def file_hashed(self, result: HashResult) -> None: ...
    def marked_for_deletion(self, path: str) -> None: ...
    def file_deleted(self, path: str) -> None: ...
    def deletion_failed(self, path: str, error: str) -> None: ...
    def directory_pruned(self, path: str) -> None: ...
    def directory_not_empty(self, path: str) -> None: ...
    def prune_failed(self, path: str, error: str) -> None: ...


class DuplicateResolver(Protocol):
    """
    Interface for the decision step of the pipeline.
    """
    def resolve(
        self,
        keep_buckets: Dict[int, List[FileRecord]],
        delete_buckets: Dict[int, List[FileRecord]],
    ) -> DeletionPlan:
        """
        Decide which delete-set files are redundant.

        Args:
            keep_buckets: Keep-set files grouped by size.
            delete_buckets: Delete-set files grouped by size.

        Returns:
            DeletionPlan that never contains the last copy of any content.
        """
        ...
