"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements whole-file content hashing with pluggable hash algorithms.

HasherImpl maps the file in bounded windows and feeds them to the hash in order,
so files larger than one mapping can address are still digested in a single pass.
A file that cannot be read yields a failed HashResult instead of an exception.
"""

import hashlib
import logging
import mmap
import os
from typing import Dict, Optional

from dupreaper.core.interfaces import HashAlgorithm, DiagnosticsReporter
from dupreaper.core.models import HashResult
from dupreaper.core.reporting import NullReporter

logger = logging.getLogger(__name__)

# Largest slice of a file mapped at once; a multiple of every platform's allocation granularity
DEFAULT_WINDOW_SIZE = 256 * 1024 * 1024


# Use the same way to implement and use any other hashing algorithm
class Sha512AlgorithmImpl(HashAlgorithm):
    name = "sha512"

    def new(self):
        return hashlib.sha512()


class Blake2bAlgorithmImpl(HashAlgorithm):
    name = "blake2b"

    def new(self):
        return hashlib.blake2b()


class Sha3AlgorithmImpl(HashAlgorithm):
    name = "sha3-512"

    def new(self):
        return hashlib.sha3_512()


ALGORITHMS: Dict[str, HashAlgorithm] = {
    algorithm.name: algorithm
    for algorithm in (Sha512AlgorithmImpl(), Blake2bAlgorithmImpl(), Sha3AlgorithmImpl())
}


def get_algorithm(name: str) -> HashAlgorithm:
    """Looks up a registered algorithm by name (case-insensitive)."""
    try:
        return ALGORITHMS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown hash algorithm: '{name}'. Valid options: {', '.join(ALGORITHMS)}"
        ) from None


class HasherImpl:
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Every attempt, successful or not, is sent to the diagnostics reporter.
    """

    def __init__(
            self,
            algorithm: Optional[HashAlgorithm] = None,
            reporter: Optional[DiagnosticsReporter] = None,
            window_size: int = DEFAULT_WINDOW_SIZE
    ):
        if window_size <= 0 or window_size % mmap.ALLOCATIONGRANULARITY:
            raise ValueError(
                f"Window size must be a positive multiple of {mmap.ALLOCATIONGRANULARITY}"
            )
        self.algorithm = algorithm or Sha512AlgorithmImpl()
        self.reporter = reporter or NullReporter()
        self.window_size = window_size

    def compute_full_hash(self, path: str) -> HashResult:
        try:
            result = HashResult.success(path, self._digest(path))
        except (OSError, ValueError) as e:
            logger.debug(f"Error reading full content of {path}: {e}")
            result = HashResult.failure(path, e)
        self.reporter.file_hashed(result)
        return result

    def _digest(self, path: str) -> bytes:
        hasher = self.algorithm.new()
        with open(path, 'rb') as f:
            size = os.fstat(f.fileno()).st_size
            start = 0
            while start < size:
                length = min(self.window_size, size - start)
                with mmap.mmap(f.fileno(), length, access=mmap.ACCESS_READ, offset=start) as window:
                    hasher.update(window)
                start += length
        return hasher.digest()
