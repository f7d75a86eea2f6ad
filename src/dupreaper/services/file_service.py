"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Delete primitives handed to the deletion executor: permanent removal
and moving to the system trash.
"""
import errno
import os
from pathlib import Path

from send2trash import send2trash


class FileService:
    """
    Cross-platform single-file delete operations.
    Every operation raises on failure so callers can isolate and report it.
    """

    @staticmethod
    def remove_file(file_path: str) -> None:
        """Permanently removes a regular file."""
        if os.path.isdir(file_path) and not os.path.islink(file_path):
            raise IsADirectoryError(errno.EISDIR, "Is a directory", file_path)
        os.remove(file_path)

    @staticmethod
    def move_to_trash(file_path: str) -> None:
        """Moves a file to the system trash."""
        path = Path(file_path).absolute()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e
