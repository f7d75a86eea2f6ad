"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/reporting.py
Diagnostics reporters. Events go through the logging module by default;
tests and embedding applications can inject their own reporter.
"""

import logging
from typing import Sequence

from dupreaper.core.models import HashResult

logger = logging.getLogger(__name__)


class NullReporter:
    """Discards every event."""

    def listing_roots(self, label: str, roots: Sequence[str]) -> None:
        pass

    def file_hashed(self, result: HashResult) -> None:
        pass

    def marked_for_deletion(self, path: str) -> None:
        pass

    def file_deleted(self, path: str) -> None:
        pass

    def deletion_failed(self, path: str, error: str) -> None:
        pass

    def directory_pruned(self, path: str) -> None:
        pass

    def directory_not_empty(self, path: str) -> None:
        pass

    def prune_failed(self, path: str, error: str) -> None:
        pass


class LoggingReporter(NullReporter):
    """
    Writes diagnostics as log records.
    Hashes go to DEBUG, deletions to INFO and failures to WARNING.
    """

    def __init__(self, log: logging.Logger = logger):
        self.log = log

    def listing_roots(self, label: str, roots: Sequence[str]) -> None:
        self.log.info(f"Listing {label} files in {list(roots)}")

    def file_hashed(self, result: HashResult) -> None:
        if result.ok:
            self.log.debug(f"Hash {result.path} {result.hexdigest}")
        else:
            self.log.warning(f"Error hashing {result.path}: {result.error}")

    def marked_for_deletion(self, path: str) -> None:
        self.log.info(f"Marked for deletion: {path}")

    def file_deleted(self, path: str) -> None:
        self.log.info(f"Deleting {path}")

    def deletion_failed(self, path: str, error: str) -> None:
        self.log.warning(f"Failed to delete {path}: {error}")

    def directory_pruned(self, path: str) -> None:
        self.log.info(f"Removed empty directory {path}")

    def directory_not_empty(self, path: str) -> None:
        self.log.debug(f"Directory not empty: {path}")

    def prune_failed(self, path: str, error: str) -> None:
        self.log.warning(f"Failed to remove directory {path}: {error}")


class SafeReporter:
    """
    Wraps another reporter so a failing handler never aborts the run.
    """

    def __init__(self, inner):
        self._inner = inner

    def __getattr__(self, name):
        handler = getattr(self._inner, name)

        def call(*args, **kwargs):
            try:
                handler(*args, **kwargs)
            except Exception as e:
                logger.warning(f"Error in diagnostics handler '{name}': {e}")

        return call
