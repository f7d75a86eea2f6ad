"""
Unit tests for FileGrouperImpl.
Size buckets come from metadata only; digest indexes skip failed hashes.
"""
import os
from concurrent.futures import ThreadPoolExecutor
from unittest import mock

import pytest

from dupreaper.core.errors import SizeLookupError
from dupreaper.core.grouper import FileGrouperImpl
from dupreaper.core.models import FileRecord, HashResult


class TestGroupBySize:

    def test_groups_by_size_in_ascending_order(self, test_files, delete_dir):
        paths = [str(p) for key, p in test_files.items() if key.startswith("del_")]

        buckets = FileGrouperImpl().group_by_size(paths)

        assert list(buckets) == [777, 1024, 2048]
        assert len(buckets[1024]) == 4
        assert {r.path for r in buckets[2048]} == {str(test_files["del_b"])}

    def test_size_comes_from_metadata_without_hashing(self, test_files):
        hasher = mock.Mock()
        grouper = FileGrouperImpl(hasher=hasher)

        grouper.group_by_size([str(test_files["keep_a"]), str(test_files["keep_b"])])

        hasher.compute_full_hash.assert_not_called()

    def test_size_filter_drops_files_before_grouping(self, test_files):
        paths = [str(p) for p in test_files.values()]
        grouper = FileGrouperImpl(size_filter=lambda size: size >= 2048)

        buckets = grouper.group_by_size(paths)

        assert list(buckets) == [2048]
        assert len(buckets[2048]) == 2

    def test_missing_file_is_fatal(self, temp_dir):
        missing = str(temp_dir / "vanished.txt")

        with pytest.raises(SizeLookupError) as exc_info:
            FileGrouperImpl().group_by_size([missing])
        assert exc_info.value.path == missing

    def test_link_and_target_share_an_identity(self, test_files, temp_dir):
        link = temp_dir / "link.txt"
        try:
            link.symlink_to(test_files["keep_a"])
        except (OSError, NotImplementedError):
            pytest.skip("Symlinks not supported")

        buckets = FileGrouperImpl().group_by_size(
            [str(test_files["keep_a"]), str(link), str(test_files["del_a"])]
        )

        by_path = {r.path: r for r in buckets[1024]}
        assert by_path[str(link)].key == by_path[str(test_files["keep_a"])].key
        assert by_path[str(test_files["del_a"])].key != by_path[str(link)].key

    def test_runs_on_executor(self, test_files):
        paths = [str(p) for p in test_files.values()]
        with ThreadPoolExecutor(max_workers=4) as pool:
            parallel = FileGrouperImpl(executor=pool).group_by_size(paths)
        serial = FileGrouperImpl().group_by_size(paths)

        assert {s: sorted(r.path for r in v) for s, v in parallel.items()} == \
            {s: sorted(r.path for r in v) for s, v in serial.items()}


class TestDigestIndex:

    def test_identical_content_shares_a_digest(self, test_files):
        records = [
            FileRecord(str(test_files["del_c1"]), 1024),
            FileRecord(str(test_files["del_c2"]), 1024),
            FileRecord(str(test_files["del_unique"]), 1024),
        ]

        index = FileGrouperImpl().build_digest_index(records)

        assert len(index) == 2
        group_sizes = sorted(len(paths) for _, paths in index.items())
        assert group_sizes == [1, 2]

    def test_failed_hashes_are_excluded(self, temp_dir):
        hasher = mock.Mock()
        hasher.compute_full_hash.side_effect = [
            HashResult.success("/a", b"\x01" * 64),
            HashResult.failure("/b", "Permission denied"),
        ]
        grouper = FileGrouperImpl(hasher=hasher)

        index = grouper.build_digest_index([FileRecord("/a", 1), FileRecord("/b", 1)])

        assert len(index) == 1
        assert index.paths_for(b"\x01" * 64) == ["/a"]

    def test_hash_files_keeps_failures(self, temp_dir):
        existing = temp_dir / "here.txt"
        existing.write_bytes(b"x")
        records = [FileRecord(str(existing), 1), FileRecord(os.path.join(str(temp_dir), "gone"), 1)]

        results = FileGrouperImpl().hash_files(records)

        assert [r.ok for r in results] == [True, False]
