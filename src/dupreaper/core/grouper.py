"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Groups scanned paths into size buckets and hash results into digest indexes.
Size comes from filesystem metadata only; hashing is delegated to the injected Hasher.
"""

import logging
import os
from collections import defaultdict
from concurrent.futures import Executor
from typing import List, Dict, Any, Callable, Iterable, Optional, TypeVar

from dupreaper.core.errors import SizeLookupError
from dupreaper.core.interfaces import FileGrouper, Hasher
from dupreaper.core.models import FileRecord, HashResult, DigestIndex
from dupreaper.core.hasher import HasherImpl

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class FileGrouperImpl(FileGrouper):
    """
    A concrete implementation of FileGrouper.
    Uses an injected Hasher and, optionally, an Executor to run
    metadata lookups and hashing on a bounded worker pool.
    """

    def __init__(
            self,
            hasher: Optional[Hasher] = None,
            size_filter: Optional[Callable[[int], bool]] = None,
            executor: Optional[Executor] = None
    ):
        self.hasher = hasher or HasherImpl()
        self.size_filter = size_filter
        self.executor = executor

    def map(self, func: Callable[[T], R], items: Iterable[T]) -> List[R]:
        """Applies func to every item, on the worker pool when one is configured."""
        if self.executor is None:
            return [func(item) for item in items]
        return list(self.executor.map(func, items))

    def group_by_size(self, paths: Iterable[str]) -> Dict[int, List[FileRecord]]:
        """
        Groups paths by their size, in ascending size order.
        Files rejected by the size filter are dropped before grouping.

        Raises:
            SizeLookupError: if any file's metadata cannot be read.
        """
        records = self.map(self._stat, paths)
        if self.size_filter is not None:
            records = [r for r in records if self.size_filter(r.size)]
        groups = self._group_by(records, lambda r: r.size)
        return {size: groups[size] for size in sorted(groups)}

    def hash_files(self, records: Iterable[FileRecord]) -> List[HashResult]:
        """Hashes every record; failures come back as failed HashResults."""
        return self.map(lambda r: self.hasher.compute_full_hash(r.path), records)

    def build_digest_index(self, records: Iterable[FileRecord]) -> DigestIndex:
        """Hashes the records and indexes successful results by digest."""
        return DigestIndex(self.hash_files(records))

    @staticmethod
    def _stat(path: str) -> FileRecord:
        try:
            st = os.stat(path)
        except OSError as e:
            message = f"Could not get size of {path}: {e}"
            logger.error(message)
            raise SizeLookupError(message, path=path) from e
        # os.stat follows symlinks, so a link and its target get the same identity
        identity = (st.st_dev, st.st_ino) if st.st_ino else None
        return FileRecord(path=path, size=st.st_size, identity=identity)

    @staticmethod
    def _group_by(items: Iterable[T], key_func: Callable[[T], Any]) -> Dict[Any, List[T]]:
        """
        Helper method to group items by any computed key.
        Args:
            items: Items to group
            key_func: Function that computes a hashable key from an item
        Returns:
            Dict[key, List[item]]
        """
        groups = defaultdict(list)
        for item in items:
            groups[key_func(item)].append(item)
        return dict(groups)
