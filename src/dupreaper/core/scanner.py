"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements file enumeration for the keep and delete root sets.
Features:
- Recursively walks every root with os.walk, roots in parallel
- Accepts a root that is itself a regular file
- Applies a caller-supplied inclusion predicate
- Any unreadable directory aborts the scan (no partial results)
"""

import os
import time
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Callable

from dupreaper.core.errors import EnumerationError

logger = logging.getLogger(__name__)


def _accept_all(path: str) -> bool:
    return True


class FileScannerImpl:
    """
    Lists regular files under a set of roots.

    Attributes:
        path_filter: Inclusion predicate applied to every regular file
        skip_symlinks: Ignore symlinked files and do not descend into symlinked directories
        workers: Number of roots walked concurrently
    """

    def __init__(
        self,
        path_filter: Optional[Callable[[str], bool]] = None,
        skip_symlinks: bool = False,
        workers: Optional[int] = None
    ):
        self.path_filter = path_filter or _accept_all
        self.skip_symlinks = skip_symlinks
        self.workers = workers

    def scan(self, roots: Sequence[str]) -> List[str]:
        """
        Returns the sorted, de-duplicated list of accepted regular files under `roots`.

        Raises:
            EnumerationError: if a root is missing or any directory cannot be listed.
        """
        logger.debug(f"Starting scan of {len(roots)} root(s)")
        start_time = time.time()

        if not roots:
            return []

        with ThreadPoolExecutor(max_workers=self.workers or min(len(roots), 8)) as pool:
            per_root = list(pool.map(self._scan_root, roots))

        found = sorted({path for paths in per_root for path in paths})

        logger.debug(f"Total scan time: {time.time() - start_time:.2f} seconds")
        logger.debug(f"Scan completed. Found {len(found)} matching files.")
        return found

    def _scan_root(self, root: str) -> List[str]:
        if self.skip_symlinks and os.path.islink(root):
            logger.debug(f"Skipping symbolic link root: {root}")
            return []

        if os.path.isfile(root):
            return [root] if self.path_filter(root) else []

        if not os.path.exists(root):
            error_msg = f"Directory does not exist: {root}"
            logger.error(error_msg)
            raise EnumerationError(error_msg, path=root)
        if not os.path.isdir(root):
            # Sockets, devices and the like are not regular files
            logger.debug(f"Skipping non-regular root: {root}")
            return []

        found = []
        for dirpath, dirnames, filenames in os.walk(
                root, onerror=self._raise_walk_error, followlinks=not self.skip_symlinks):
            for filename in filenames:
                path = os.path.join(dirpath, filename)
                if self._is_regular_file(path) and self.path_filter(path):
                    found.append(path)
        return found

    def _is_regular_file(self, path: str) -> bool:
        if self.skip_symlinks and os.path.islink(path):
            logger.debug(f"Skipping symbolic link: {path}")
            return False
        # isfile follows symlinks and is False for sockets, FIFOs and devices
        return os.path.isfile(path)

    @staticmethod
    def _raise_walk_error(error: OSError) -> None:
        message = f"Cannot list directory {error.filename}: {error.strerror or error}"
        logger.error(message)
        raise EnumerationError(message, path=error.filename or "") from error
