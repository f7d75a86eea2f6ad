"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/executor.py
Applies a DeletionPlan through an injected delete action.
A failure on one path is reported and the remaining paths are still processed.
"""

import logging
from typing import List, Optional, Tuple

from dupreaper.core.interfaces import DeleteAction, DiagnosticsReporter
from dupreaper.core.models import DeletionPlan
from dupreaper.core.reporting import NullReporter
from dupreaper.services.file_service import FileService

logger = logging.getLogger(__name__)


class DeletionExecutor:
    """Removes every planned path, isolating per-file failures."""

    def __init__(
            self,
            delete_action: Optional[DeleteAction] = None,
            reporter: Optional[DiagnosticsReporter] = None
    ):
        self.delete_action = delete_action or FileService.remove_file
        self.reporter = reporter or NullReporter()

    def execute(self, plan: DeletionPlan) -> Tuple[List[str], List[Tuple[str, str]]]:
        """
        Returns:
            (deleted paths, [(path, error message), ...] for paths left on disk)
        """
        deleted: List[str] = []
        failed: List[Tuple[str, str]] = []

        for path in plan.paths:
            self.reporter.file_deleted(path)
            try:
                self.delete_action(path)
            except Exception as e:
                message = str(e) or e.__class__.__name__
                failed.append((path, message))
                self.reporter.deletion_failed(path, message)
                continue  # Continue with next file
            deleted.append(path)

        if failed:
            logger.warning(f"{len(failed)} of {len(plan)} planned deletion(s) failed")
        return deleted, failed
