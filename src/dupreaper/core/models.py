"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and domain logic for keep-set / delete-set deduplication.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Union, Callable, Tuple, Iterable
import logging
import os
import time
from enum import Enum

from dupreaper.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


# =============================
# Enums
# =============================

class ResolutionStrategy(Enum):
    """
    Strategy used to decide which delete-set files are redundant.
    """
    BUCKET = "bucket"
    INDEX = "index"

    @property
    def display_name(self) -> str:
        """Human-readable name for console output."""
        mapping = {
            ResolutionStrategy.BUCKET: "Size bucket",
            ResolutionStrategy.INDEX: "Digest index",
        }
        return mapping.get(self, self.value)

    @property
    def description(self) -> str:
        """Detailed description for help text."""
        mapping = {
            ResolutionStrategy.BUCKET:
                "Size → per-bucket hash, resolved bucket by bucket (scales best)",
            ResolutionStrategy.INDEX:
                "Size → full digest index of both sets, resolved per digest group",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class PruneScope(Enum):
    """Which root sets are swept for empty directories after deletion."""
    NONE = "none"
    DELETE = "delete"
    ALL = "all"

    def __repr__(self) -> str:
        return self.value


class Stage(str, Enum):
    SCAN = "scan"
    SIZE = "size"
    RESOLVE = "resolve"
    DELETE = "delete"
    PRUNE = "prune"

    @classmethod
    def get_all(cls):
        return [cls.SCAN, cls.SIZE, cls.RESOLVE, cls.DELETE, cls.PRUNE]


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileRecord:
    """
    A regular file found during scanning, paired with its byte length.
    Only the path survives past hashing.

    `identity` is the (st_dev, st_ino) pair of the file the path resolves to.
    A symlink and its target, or two hard links, share one identity and are
    the same physical file.
    """
    path: str
    size: int  # in bytes
    identity: Optional[Tuple[int, int]] = None

    @property
    def key(self) -> Union[Tuple[int, int], str]:
        """Physical identity when known, otherwise the path itself."""
        return self.identity if self.identity is not None else self.path

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


@dataclass(frozen=True)
class HashResult:
    """
    Outcome of hashing one file: either a digest or the reason there is none.
    Failed results never enter a digest index.
    """
    path: str
    digest: Optional[bytes] = None
    error: Optional[str] = None

    def __post_init__(self):
        if (self.digest is None) == (self.error is None):
            raise ValueError("HashResult needs exactly one of digest or error")

    @property
    def ok(self) -> bool:
        return self.digest is not None

    @property
    def hexdigest(self) -> str:
        return self.digest.hex() if self.digest is not None else ""

    @classmethod
    def success(cls, path: str, digest: bytes) -> 'HashResult':
        return cls(path=path, digest=digest)

    @classmethod
    def failure(cls, path: str, error: Union[str, BaseException]) -> 'HashResult':
        return cls(path=path, error=str(error) or error.__class__.__name__)

    def __repr__(self):
        if self.ok:
            return f"<HashResult path={self.path}, digest={self.hexdigest[:16]}…>"
        return f"<HashResult path={self.path}, error={self.error}>"


class DigestIndex:
    """
    Maps a digest to every path that produced it.
    Failed hash results are silently excluded.
    """

    def __init__(self, results: Iterable[HashResult] = ()):
        self._paths: Dict[bytes, List[str]] = {}
        for result in results:
            self.add(result)

    def add(self, result: HashResult) -> None:
        if not result.ok:
            return
        self._paths.setdefault(result.digest, []).append(result.path)

    def paths_for(self, digest: bytes) -> List[str]:
        return list(self._paths.get(digest, []))

    def digests(self) -> List[bytes]:
        return list(self._paths.keys())

    def items(self):
        return self._paths.items()

    def __contains__(self, digest: bytes) -> bool:
        return digest in self._paths

    def __len__(self):
        return len(self._paths)

    def __repr__(self):
        return f"<DigestIndex digests={len(self._paths)}>"


@dataclass
class DeletionPlan:
    """
    Paths from the delete set selected for removal.
    Every entry has a byte-identical counterpart that is not itself in the plan.
    """
    entries: Dict[str, int] = field(default_factory=dict)  # path -> size

    def add(self, path: str, size: int) -> None:
        self.entries[path] = size

    @property
    def paths(self) -> List[str]:
        return sorted(self.entries)

    @property
    def total_bytes(self) -> int:
        return sum(self.entries.values())

    def merge(self, other: 'DeletionPlan') -> None:
        self.entries.update(other.entries)

    def __contains__(self, path: str) -> bool:
        return path in self.entries

    def __len__(self):
        return len(self.entries)

    def __bool__(self):
        return bool(self.entries)

    def __iter__(self):
        return iter(self.paths)

    def __repr__(self):
        return f"<DeletionPlan files={len(self.entries)}, bytes={self.total_bytes}>"


@dataclass
class DeduplicationStats:
    """
    Statistics collected during a run.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats are updated."""
        self._listeners.append(listener)

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

        for listener in self._listeners:
            try:
                listener(stage_name, self.stage_stats[stage_name])
            except Exception as e:
                logger.warning(f"Error in stats event handler: {e}")

    def print_summary(self) -> str:
        labels = {
            "scan": "🔎 Files Scanned",
            "size": "📁 Size Buckets",
            "resolve": "🔐 Buckets Resolved / Files Hashed",
            "delete": "🗑️ Files Deleted",
            "prune": "📂 Directories Pruned",
        }

        lines = [
            "📊 Run Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage.lower(), stage.title())
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


@dataclass
class DeduplicationReport:
    """Everything a finished run produced."""
    plan: DeletionPlan = field(default_factory=DeletionPlan)
    deleted: List[str] = field(default_factory=list)
    failed_deletions: List[Tuple[str, str]] = field(default_factory=list)
    hash_failures: List[HashResult] = field(default_factory=list)
    pruned_dirs: List[str] = field(default_factory=list)
    stats: DeduplicationStats = field(default_factory=DeduplicationStats)

    @property
    def bytes_freed(self) -> int:
        return sum(self.plan.entries.get(p, 0) for p in self.deleted)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_deletions)


"""
DTO for run parameters with built-in validation.
"""

PathFilter = Callable[[str], bool]


def _normalize_dirs(dirs: Iterable[str]) -> Tuple[str, ...]:
    return tuple(os.path.abspath(os.path.expanduser(str(d))) for d in dirs)


def _is_same_or_nested(a: str, b: str) -> bool:
    # Symlinked roots are compared by the directory they resolve to
    a = os.path.normcase(os.path.realpath(a))
    b = os.path.normcase(os.path.realpath(b))
    if a == b:
        return True
    return a.startswith(b.rstrip(os.sep) + os.sep) or b.startswith(a.rstrip(os.sep) + os.sep)


@dataclass(frozen=True)
class DeduplicationParams:
    """Parameters for a keep/delete run, validated once on construction."""
    keep_dirs: Tuple[str, ...] = ()
    delete_dirs: Tuple[str, ...] = ()
    prune_scope: PruneScope = PruneScope.NONE
    prune_roots: bool = False
    path_filter: Optional[PathFilter] = None
    extensions: Tuple[str, ...] = ()
    excluded_dirs: Tuple[str, ...] = ()
    min_size_bytes: int = 0
    max_size_bytes: Optional[int] = None
    skip_symlinks: bool = False
    strategy: ResolutionStrategy = ResolutionStrategy.BUCKET
    algorithm: str = "sha512"
    workers: Optional[int] = None

    def __post_init__(self):
        """Validate and normalize parameters immediately after creation."""
        keep_dirs = _normalize_dirs(self.keep_dirs)
        delete_dirs = _normalize_dirs(self.delete_dirs)

        if not delete_dirs:
            raise ValueError("At least one delete directory is required")

        for keep in keep_dirs:
            for delete in delete_dirs:
                if _is_same_or_nested(keep, delete):
                    raise ValueError(
                        f"Keep and delete directories must not overlap: '{keep}' and '{delete}'"
                    )

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if self.max_size_bytes is not None and self.max_size_bytes < self.min_size_bytes:
            raise ValueError("Maximum size cannot be less than minimum size")

        if self.workers is not None and self.workers < 1:
            raise ValueError("Worker count must be at least 1")

        # Normalize extensions: ensure they start with dot and are lowercase
        normalized = []
        for ext in self.extensions:
            ext = ext.strip().lower()
            if ext and not ext.startswith('.'):
                ext = f".{ext}"
            if ext:
                normalized.append(ext)

        # Frozen dataclass: assign normalized values through object.__setattr__
        object.__setattr__(self, "keep_dirs", keep_dirs)
        object.__setattr__(self, "delete_dirs", delete_dirs)
        object.__setattr__(self, "extensions", tuple(normalized))
        object.__setattr__(self, "excluded_dirs", _normalize_dirs(self.excluded_dirs))

    @property
    def prune_dirs(self) -> Tuple[str, ...]:
        """Roots swept by the pruner, delete-set first."""
        if self.prune_scope == PruneScope.DELETE:
            return self.delete_dirs
        if self.prune_scope == PruneScope.ALL:
            return self.delete_dirs + self.keep_dirs
        return ()

    def size_passes(self, size: int) -> bool:
        if size < self.min_size_bytes:
            return False
        if self.max_size_bytes is not None and size > self.max_size_bytes:
            return False
        return True

    def build_path_filter(self) -> PathFilter:
        """
        Combine the user predicate with the extension and excluded-dir filters.
        All filters must accept a path for it to be included.
        """
        filters: List[PathFilter] = []
        if self.extensions:
            extensions = self.extensions
            filters.append(lambda p: os.path.splitext(p)[1].lower() in extensions)
        if self.excluded_dirs:
            excluded = self.excluded_dirs
            filters.append(lambda p: not any(_is_inside(p, d) for d in excluded))
        if self.path_filter is not None:
            filters.append(self.path_filter)

        def accept(path: str) -> bool:
            return all(f(path) for f in filters)

        return accept

    @staticmethod
    def from_human_readable(
            keep_dirs: Iterable[str],
            delete_dirs: Iterable[str],
            min_size_str: str = "0",
            max_size_str: Optional[str] = None,
            extensions_str: str = "",
            **kwargs
    ) -> 'DeduplicationParams':
        """
        Factory method to create params from human-readable inputs.
        Useful for CLI argument parsing or config-file conversion.
        """
        min_size = ConvertUtils.human_to_bytes(min_size_str)
        max_size = ConvertUtils.human_to_bytes(max_size_str) if max_size_str else None

        ext_list = tuple(
            ext.strip() for ext in extensions_str.split(",") if ext.strip()
        ) if extensions_str else ()

        return DeduplicationParams(
            keep_dirs=tuple(keep_dirs),
            delete_dirs=tuple(delete_dirs),
            min_size_bytes=min_size,
            max_size_bytes=max_size,
            extensions=ext_list,
            **kwargs
        )


def _is_inside(path: str, directory: str) -> bool:
    normalized_path = os.path.normpath(path)
    normalized_dir = os.path.normpath(directory)
    return normalized_path == normalized_dir or \
        normalized_path.startswith(normalized_dir.rstrip(os.sep) + os.sep)


class Timer:
    """Small context manager used to time pipeline stages."""

    def __enter__(self) -> 'Timer':
        self.start = time.time()
        self.elapsed = 0.0
        return self

    def __exit__(self, *exc) -> None:
        self.elapsed = time.time() - self.start
