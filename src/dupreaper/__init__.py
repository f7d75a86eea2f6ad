"""
dupreaper — delete redundant copies of files you already keep.

Core features:
- Keep directories are never touched; delete directories lose every file whose
  content already exists in a keep directory
- Duplicates inside the delete directories are collapsed to exactly one copy
- Size buckets first, full-content SHA-512 (or BLAKE2b / SHA3-512) second
- Optional trash instead of permanent deletion (via send2trash)
- Optional removal of directories left empty
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("dupreaper")
except Exception:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from dupreaper.commands import DeduplicationCommand
from dupreaper.core import (
    DeduplicationParams, DeduplicationReport, DeletionPlan, ResolutionStrategy, PruneScope,
    FatalScanError,
)
from dupreaper.utils.convert_utils import ConvertUtils
from dupreaper.services.file_service import FileService

__all__ = [
    "DeduplicationCommand",
    "DeduplicationParams",
    "DeduplicationReport",
    "DeletionPlan",
    "ResolutionStrategy",
    "PruneScope",
    "FatalScanError",
    "ConvertUtils",
    "FileService",
    "__version__",
]
