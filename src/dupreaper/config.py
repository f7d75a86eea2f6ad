"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

config.py
Loads run settings from a TOML file. Keys mirror the long CLI options;
values given on the command line win over the file.

Example:
    keep = ["~/Photos"]
    delete = ["/mnt/backup/Photos", "~/Downloads"]
    prune = "delete"
    extensions = [".jpg", ".png"]
    min_size = "1K"
    strategy = "bucket"
    trash = true
"""
import os
from pathlib import Path
from typing import Any, Dict

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Python < 3.11: pip install tomli

from dupreaper.utils.convert_utils import ConvertUtils

# key -> expected type(s)
CONFIG_KEYS: Dict[str, tuple] = {
    "keep": (list,),
    "delete": (list,),
    "prune": (str,),
    "prune_roots": (bool,),
    "extensions": (list,),
    "excluded_dirs": (list,),
    "min_size": (str, int),
    "max_size": (str, int),
    "strategy": (str,),
    "algorithm": (str,),
    "workers": (int,),
    "trash": (bool,),
    "skip_symlinks": (bool,),
}

PATH_LIST_KEYS = ("keep", "delete", "excluded_dirs")


def load_config_file(config_path: str) -> Dict[str, Any]:
    """
    Reads and validates a TOML config file.
    Settings may sit at the top level or under a [dupreaper] table.
    Relative paths are resolved against the config file's directory.

    Raises:
        ValueError: on unreadable files, TOML syntax errors, unknown keys or wrong types
    """
    path = Path(config_path).expanduser()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ValueError(f"Cannot read config file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e

    if isinstance(data.get("dupreaper"), dict):
        data = data["dupreaper"]

    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        raise ValueError(f"Unknown config key(s) in {path}: {', '.join(unknown)}")

    base_dir = path.parent.absolute()
    settings: Dict[str, Any] = {}
    for key, value in data.items():
        expected = CONFIG_KEYS[key]
        # bool is a subclass of int; reject it where only numbers make sense
        if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
            names = " or ".join(t.__name__ for t in expected)
            raise ValueError(f"Config key '{key}' must be {names}, got {type(value).__name__}")

        if key in PATH_LIST_KEYS:
            settings[key] = [_resolve(str(item), base_dir) for item in value]
        elif key == "extensions":
            settings[key] = [str(item) for item in value]
        elif key in ("min_size", "max_size"):
            settings[key] = str(value)
            if not ConvertUtils.is_valid_size_format(settings[key]):
                raise ValueError(f"Config key '{key}' has an invalid size: '{value}'")
        else:
            settings[key] = value

    return settings


def _resolve(item: str, base_dir: Path) -> str:
    expanded = os.path.expanduser(item)
    if os.path.isabs(expanded):
        return expanded
    return str(base_dir / expanded)
