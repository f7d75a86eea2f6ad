"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Fatal errors that abort a run. Per-file problems are reported, never raised.
"""


class FatalScanError(RuntimeError):
    """The core data model could not be built; the whole run stops."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class EnumerationError(FatalScanError):
    """A root or directory inside it could not be listed."""


class SizeLookupError(FatalScanError):
    """File metadata could not be read after the file was enumerated."""
