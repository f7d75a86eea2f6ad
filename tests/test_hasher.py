"""
Unit tests for HasherImpl and the hash algorithms.
Verifies whole-content digests, windowed mapping and failure isolation.
"""
import hashlib
import mmap
import pytest

from dupreaper.core.hasher import (
    HasherImpl, Sha512AlgorithmImpl, Blake2bAlgorithmImpl, Sha3AlgorithmImpl, get_algorithm
)


class TestHasherImpl:
    """Test full-content hashing."""

    def test_same_content_produces_same_digest(self, temp_dir):
        content = b"test content " * 1000
        (temp_dir / "one.bin").write_bytes(content)
        (temp_dir / "two.bin").write_bytes(content)

        hasher = HasherImpl()
        first = hasher.compute_full_hash(str(temp_dir / "one.bin"))
        second = hasher.compute_full_hash(str(temp_dir / "two.bin"))

        assert first.ok and second.ok
        assert first.digest == second.digest
        assert len(first.digest) == 64  # SHA-512 = 64 bytes

    def test_digest_matches_hashlib(self, temp_dir):
        content = bytes(range(256)) * 40
        path = temp_dir / "data.bin"
        path.write_bytes(content)

        result = HasherImpl().compute_full_hash(str(path))

        assert result.digest == hashlib.sha512(content).digest()

    def test_different_content_produces_different_digests(self, temp_dir):
        (temp_dir / "a.bin").write_bytes(b"A" * 1024)
        (temp_dir / "b.bin").write_bytes(b"B" * 1024)

        hasher = HasherImpl()
        assert hasher.compute_full_hash(str(temp_dir / "a.bin")).digest != \
            hasher.compute_full_hash(str(temp_dir / "b.bin")).digest

    def test_difference_in_last_byte_is_detected(self, temp_dir):
        """Whole content is hashed, not just a prefix."""
        base = b"X" * (3 * mmap.ALLOCATIONGRANULARITY)
        (temp_dir / "a.bin").write_bytes(base + b"1")
        (temp_dir / "b.bin").write_bytes(base + b"2")

        hasher = HasherImpl(window_size=mmap.ALLOCATIONGRANULARITY)
        assert hasher.compute_full_hash(str(temp_dir / "a.bin")).digest != \
            hasher.compute_full_hash(str(temp_dir / "b.bin")).digest

    def test_multiple_windows_preserve_byte_order(self, temp_dir):
        """A file spanning several windows hashes exactly like a single read."""
        window = mmap.ALLOCATIONGRANULARITY
        content = b"".join(bytes([i]) * window for i in range(5)) + b"tail"
        path = temp_dir / "big.bin"
        path.write_bytes(content)

        windowed = HasherImpl(window_size=window).compute_full_hash(str(path))

        assert windowed.digest == hashlib.sha512(content).digest()

    def test_empty_file_has_digest(self, temp_dir):
        path = temp_dir / "empty.bin"
        path.write_bytes(b"")

        result = HasherImpl().compute_full_hash(str(path))

        assert result.ok
        assert result.digest == hashlib.sha512(b"").digest()

    def test_missing_file_yields_failure_instead_of_raising(self, temp_dir):
        path = temp_dir / "deleted.txt"
        path.write_bytes(b"content")
        path.unlink()

        result = HasherImpl().compute_full_hash(str(path))

        assert not result.ok
        assert result.digest is None
        assert result.error

    def test_directory_yields_failure(self, temp_dir):
        result = HasherImpl().compute_full_hash(str(temp_dir))

        assert not result.ok

    def test_every_attempt_is_reported(self, temp_dir, reporter):
        (temp_dir / "ok.bin").write_bytes(b"data")
        hasher = HasherImpl(reporter=reporter)

        hasher.compute_full_hash(str(temp_dir / "ok.bin"))
        hasher.compute_full_hash(str(temp_dir / "missing.bin"))

        results = [args[0] for args in reporter.of("file_hashed")]
        assert [r.ok for r in results] == [True, False]

    def test_rejects_unaligned_window_size(self):
        with pytest.raises(ValueError, match="multiple"):
            HasherImpl(window_size=mmap.ALLOCATIONGRANULARITY + 1)


class TestAlgorithms:
    """Test the pluggable algorithm registry."""

    @pytest.mark.parametrize("algorithm, expected", [
        (Sha512AlgorithmImpl(), hashlib.sha512),
        (Blake2bAlgorithmImpl(), hashlib.blake2b),
        (Sha3AlgorithmImpl(), hashlib.sha3_512),
    ])
    def test_algorithms_match_hashlib(self, temp_dir, algorithm, expected):
        path = temp_dir / "data.bin"
        path.write_bytes(b"payload" * 100)

        result = HasherImpl(algorithm).compute_full_hash(str(path))

        assert result.digest == expected(b"payload" * 100).digest()
        assert len(result.digest) == 64

    def test_lookup_is_case_insensitive(self):
        assert get_algorithm("SHA512").name == "sha512"
        assert get_algorithm("sha3-512").name == "sha3-512"

    def test_unknown_algorithm_is_rejected(self):
        with pytest.raises(ValueError, match="Unknown hash algorithm"):
            get_algorithm("md5")
