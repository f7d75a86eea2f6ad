"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Size conversions for filters, config values and console output. All units are binary (1K = 1024).
"""
import re
from typing import Union

_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]
_MULTIPLIERS = {"": 1, "K": 1024, "M": 1024 ** 2, "G": 1024 ** 3, "T": 1024 ** 4, "P": 1024 ** 5}

# number, optional prefix letter, optional B / iB suffix: 10, 1.5K, 2MB, 4GiB
_SIZE_PATTERN = re.compile(r"^(-?)(\d+(?:\.\d*)?|\.\d+)\s*([KMGTP]?)(?:I?B)?$")


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 1.50KB, 3.20MB).
        """
        if size_bytes < 0:
            return "0B"

        value = float(size_bytes)
        for unit in _UNITS:
            if value < 1024:
                return f"{value:.2f}{unit}"
            value /= 1024
        return f"{value:.2f}EB"

    @staticmethod
    def human_to_bytes(size_str: Union[str, int]) -> int:
        """
        Convert a size such as '1.5GB', '2048K', '4GiB' or 1000 to bytes.
        Raises ValueError for negative sizes or invalid formats.
        """
        text = str(size_str).strip().upper()
        match = _SIZE_PATTERN.match(text)
        if match is None:
            raise ValueError(
                f"Invalid size format: '{text}'. "
                f"Supported formats: 1.5GB, 2048KB, 1000, 1K, 1M, etc."
            )

        sign, number, prefix = match.groups()
        if sign:
            raise ValueError(f"Negative size not allowed: '{text}'")
        return int(float(number) * _MULTIPLIERS[prefix])

    @staticmethod
    def is_valid_size_format(size_str: str) -> bool:
        try:
            ConvertUtils.human_to_bytes(size_str)
            return True
        except ValueError:
            return False
