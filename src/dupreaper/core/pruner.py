"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/pruner.py
Removes directories left empty after deletion.

The walk is depth-first and evaluates a directory only after its children were
pruned, so a parent emptied by pruning its last child disappears in the same pass.
Symlinked directories are treated as entries, never descended into.
"""

import logging
import os
from typing import Callable, List, Optional, Sequence

from dupreaper.core.interfaces import DiagnosticsReporter
from dupreaper.core.reporting import NullReporter

logger = logging.getLogger(__name__)


class EmptyDirectoryPruner:
    """
    Attributes:
        prune_roots: Whether a root directory may itself be removed once empty
        remove_dir: Primitive used to remove one empty directory
    """

    def __init__(
            self,
            reporter: Optional[DiagnosticsReporter] = None,
            prune_roots: bool = False,
            remove_dir: Callable[[str], None] = os.rmdir
    ):
        self.reporter = reporter or NullReporter()
        self.prune_roots = prune_roots
        self.remove_dir = remove_dir

    def prune(self, roots: Sequence[str]) -> List[str]:
        """Prunes every root in order and returns the removed directories."""
        removed: List[str] = []
        for root in roots:
            if not os.path.isdir(root) or os.path.islink(root):
                logger.debug(f"Skipping prune of non-directory root: {root}")
                continue
            self._prune(root, is_root=True, removed=removed)
        return removed

    def _prune(self, path: str, is_root: bool, removed: List[str]) -> bool:
        """Returns True if `path` no longer exists after pruning."""
        try:
            with os.scandir(path) as it:
                entries = list(it)
        except OSError as e:
            self.reporter.prune_failed(path, str(e))
            return False

        empty = True
        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            if not (is_dir and self._prune(entry.path, is_root=False, removed=removed)):
                empty = False

        if not empty:
            self.reporter.directory_not_empty(path)
            return False
        if is_root and not self.prune_roots:
            return False

        try:
            self.remove_dir(path)
        except OSError as e:
            self.reporter.prune_failed(path, str(e))
            return False

        removed.append(path)
        self.reporter.directory_pruned(path)
        return True
