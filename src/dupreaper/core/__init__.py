"""
Core deduplication engine — scanner, grouper, hasher, resolver, executor and pruner.

This package contains the filesystem-facing foundation of dupreaper:
- FileScannerImpl: recursive listing of keep and delete roots
- FileGrouperImpl: size buckets and digest indexes
- HasherImpl + Sha512AlgorithmImpl: whole-content hashing in mapped windows
- SizeBucketResolver / DigestIndexResolver: decide which delete-set files are redundant
- DeletionExecutor, EmptyDirectoryPruner: apply the decision
- Models: FileRecord, HashResult, DeletionPlan and configuration objects

All components are pure Python with no UI dependencies.
"""

from .errors import FatalScanError, EnumerationError, SizeLookupError
from .scanner import FileScannerImpl
from .grouper import FileGrouperImpl
from .hasher import HasherImpl, Sha512AlgorithmImpl, Blake2bAlgorithmImpl, Sha3AlgorithmImpl, get_algorithm
from .resolver import SizeBucketResolver, DigestIndexResolver, ConcurrentDigestSet
from .executor import DeletionExecutor
from .pruner import EmptyDirectoryPruner
from .reporting import LoggingReporter, NullReporter
from .models import (
    FileRecord, HashResult, DigestIndex, DeletionPlan, DeduplicationParams,
    DeduplicationReport, DeduplicationStats, ResolutionStrategy, PruneScope)

__all__ = [
    "FatalScanError",
    "EnumerationError",
    "SizeLookupError",
    "FileScannerImpl",
    "FileGrouperImpl",
    "HasherImpl",
    "Sha512AlgorithmImpl",
    "Blake2bAlgorithmImpl",
    "Sha3AlgorithmImpl",
    "get_algorithm",
    "SizeBucketResolver",
    "DigestIndexResolver",
    "ConcurrentDigestSet",
    "DeletionExecutor",
    "EmptyDirectoryPruner",
    "LoggingReporter",
    "NullReporter",
    "FileRecord",
    "HashResult",
    "DigestIndex",
    "DeletionPlan",
    "DeduplicationParams",
    "DeduplicationReport",
    "DeduplicationStats",
    "ResolutionStrategy",
    "PruneScope",
]
