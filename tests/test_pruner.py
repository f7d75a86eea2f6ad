"""
Tests for EmptyDirectoryPruner.
Directories are removed bottom-up; anything holding a file stays.
"""
import os

import pytest

from dupreaper.core.pruner import EmptyDirectoryPruner


class TestEmptyDirectoryPruner:

    def test_removes_nested_empty_directories(self, temp_dir, reporter):
        deep = temp_dir / "a" / "b" / "c"
        deep.mkdir(parents=True)

        removed = EmptyDirectoryPruner(reporter).prune([str(temp_dir)])

        assert not (temp_dir / "a").exists()
        assert temp_dir.exists()
        # children go before parents
        assert removed == [str(deep), str(deep.parent), str(temp_dir / "a")]
        assert reporter.paths("directory_pruned") == removed

    def test_directory_with_file_is_kept(self, temp_dir, reporter):
        (temp_dir / "full").mkdir()
        (temp_dir / "full" / "file.txt").write_bytes(b"x")
        (temp_dir / "full" / "empty").mkdir()

        EmptyDirectoryPruner(reporter).prune([str(temp_dir)])

        assert (temp_dir / "full" / "file.txt").exists()
        assert not (temp_dir / "full" / "empty").exists()
        assert str(temp_dir / "full") in reporter.paths("directory_not_empty")

    def test_root_is_kept_by_default(self, temp_dir):
        root = temp_dir / "root"
        root.mkdir()

        assert EmptyDirectoryPruner().prune([str(root)]) == []
        assert root.exists()

    def test_root_is_removed_when_allowed(self, temp_dir):
        root = temp_dir / "root"
        (root / "sub").mkdir(parents=True)

        removed = EmptyDirectoryPruner(prune_roots=True).prune([str(root)])

        assert removed == [str(root / "sub"), str(root)]
        assert not root.exists()

    def test_symlinked_directory_is_not_descended(self, temp_dir):
        target = temp_dir / "target"
        (target / "inner").mkdir(parents=True)
        root = temp_dir / "root"
        root.mkdir()
        try:
            (root / "link").symlink_to(target, target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("Symlinks not supported")

        removed = EmptyDirectoryPruner().prune([str(root)])

        assert removed == []
        assert (target / "inner").exists()
        assert os.path.islink(root / "link")

    def test_remove_failure_is_reported(self, temp_dir, reporter):
        (temp_dir / "stuck").mkdir()

        def refuse(path):
            raise PermissionError(13, "Permission denied", path)

        removed = EmptyDirectoryPruner(reporter, remove_dir=refuse).prune([str(temp_dir)])

        assert removed == []
        assert reporter.paths("prune_failed") == [str(temp_dir / "stuck")]
        assert (temp_dir / "stuck").exists()

    def test_missing_or_file_roots_are_skipped(self, temp_dir):
        file_root = temp_dir / "file.txt"
        file_root.write_bytes(b"x")

        removed = EmptyDirectoryPruner(prune_roots=True).prune(
            [str(temp_dir / "missing"), str(file_root)]
        )

        assert removed == []
        assert file_root.exists()

    def test_roots_are_processed_in_order(self, temp_dir):
        first = temp_dir / "first"
        second = temp_dir / "second"
        (first / "x").mkdir(parents=True)
        (second / "y").mkdir(parents=True)

        removed = EmptyDirectoryPruner().prune([str(first), str(second)])

        assert removed == [str(first / "x"), str(second / "y")]
