"""
Shared fixtures for dupreaper tests.
Creates isolated keep/delete directory trees with controlled test files.
"""
import threading
import pytest
from pathlib import Path
from typing import Dict, List, Tuple

from dupreaper.core.models import HashResult


class RecordingReporter:
    """Diagnostics reporter that keeps every event for assertions."""

    def __init__(self):
        self._lock = threading.Lock()
        self.events: List[Tuple[str, tuple]] = []

    def _add(self, name: str, *args) -> None:
        with self._lock:
            self.events.append((name, args))

    def listing_roots(self, label, roots):
        self._add("listing_roots", label, tuple(roots))

    def file_hashed(self, result: HashResult):
        self._add("file_hashed", result)

    def marked_for_deletion(self, path):
        self._add("marked_for_deletion", path)

    def file_deleted(self, path):
        self._add("file_deleted", path)

    def deletion_failed(self, path, error):
        self._add("deletion_failed", path, error)

    def directory_pruned(self, path):
        self._add("directory_pruned", path)

    def directory_not_empty(self, path):
        self._add("directory_not_empty", path)

    def prune_failed(self, path, error):
        self._add("prune_failed", path, error)

    def of(self, name: str) -> List[tuple]:
        return [args for event, args in self.events if event == name]

    def paths(self, name: str) -> List[str]:
        return [args[0] for args in self.of(name)]


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Isolated temporary directory, cleaned up by pytest."""
    return tmp_path


@pytest.fixture
def keep_dir(tmp_path) -> Path:
    path = tmp_path / "keep"
    path.mkdir()
    return path


@pytest.fixture
def delete_dir(tmp_path) -> Path:
    path = tmp_path / "delete"
    path.mkdir()
    return path


@pytest.fixture
def test_files(keep_dir, delete_dir) -> Dict[str, Path]:
    """
    Creates controlled keep/delete trees:
    - keep/a.txt           1KB of 'A'
    - keep/photos/b.jpg    2KB of 'B'
    - delete/a_copy.txt    same as keep/a.txt           -> redundant
    - delete/old/b.jpg     same as keep/photos/b.jpg    -> redundant
    - delete/c1.txt        1KB of 'C', no keep copy     -> one of c1/c2 survives
    - delete/sub/c2.txt    same as c1.txt
    - delete/unique.txt    1KB of 'D'                   -> kept (same size, other content)
    - delete/lonely.bin    777 bytes, unique size       -> kept, never hashed
    """
    files = {}

    content_a = b"A" * 1024
    content_b = b"B" * 2048
    content_c = b"C" * 1024

    files["keep_a"] = keep_dir / "a.txt"
    files["keep_a"].write_bytes(content_a)

    (keep_dir / "photos").mkdir()
    files["keep_b"] = keep_dir / "photos" / "b.jpg"
    files["keep_b"].write_bytes(content_b)

    files["del_a"] = delete_dir / "a_copy.txt"
    files["del_a"].write_bytes(content_a)

    (delete_dir / "old").mkdir()
    files["del_b"] = delete_dir / "old" / "b.jpg"
    files["del_b"].write_bytes(content_b)

    files["del_c1"] = delete_dir / "c1.txt"
    files["del_c1"].write_bytes(content_c)

    (delete_dir / "sub").mkdir()
    files["del_c2"] = delete_dir / "sub" / "c2.txt"
    files["del_c2"].write_bytes(content_c)

    files["del_unique"] = delete_dir / "unique.txt"
    files["del_unique"].write_bytes(b"D" * 1024)

    files["del_lonely"] = delete_dir / "lonely.bin"
    files["del_lonely"].write_bytes(b"L" * 777)

    return files
