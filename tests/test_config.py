"""
Tests for TOML config loading.
"""
import os

import pytest

from dupreaper.config import load_config_file


def write_config(path, text):
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestLoadConfigFile:

    def test_reads_top_level_keys(self, temp_dir):
        config = write_config(temp_dir / "run.toml", """
keep = ["/data/photos"]
delete = ["/mnt/backup"]
prune = "delete"
min_size = "1K"
max_size = 4096
trash = true
workers = 4
""")

        settings = load_config_file(config)

        assert settings["keep"] == ["/data/photos"]
        assert settings["delete"] == ["/mnt/backup"]
        assert settings["prune"] == "delete"
        assert settings["min_size"] == "1K"
        assert settings["max_size"] == "4096"
        assert settings["trash"] is True
        assert settings["workers"] == 4

    def test_reads_named_table(self, temp_dir):
        config = write_config(temp_dir / "pyproject.toml", """
[dupreaper]
delete = ["/tmp/x"]
strategy = "index"
""")

        assert load_config_file(config) == {"delete": ["/tmp/x"], "strategy": "index"}

    def test_relative_paths_resolve_against_config_dir(self, temp_dir):
        config = write_config(temp_dir / "run.toml", 'delete = ["backup"]\nexcluded_dirs = ["backup/cache"]')

        settings = load_config_file(config)

        assert settings["delete"] == [os.path.join(str(temp_dir.absolute()), "backup")]
        assert settings["excluded_dirs"] == [os.path.join(str(temp_dir.absolute()), "backup", "cache")]

    def test_unknown_key_is_rejected(self, temp_dir):
        config = write_config(temp_dir / "run.toml", 'delete = ["/x"]\nfavourite_dirs = ["/y"]')

        with pytest.raises(ValueError, match="Unknown config key"):
            load_config_file(config)

    @pytest.mark.parametrize("text", [
        'delete = "/not/a/list"',
        'workers = true',
        'trash = "yes"',
    ])
    def test_wrong_type_is_rejected(self, temp_dir, text):
        config = write_config(temp_dir / "run.toml", text)

        with pytest.raises(ValueError, match="must be"):
            load_config_file(config)

    def test_invalid_size_is_rejected(self, temp_dir):
        config = write_config(temp_dir / "run.toml", 'min_size = "lots"')

        with pytest.raises(ValueError, match="invalid size"):
            load_config_file(config)

    def test_syntax_error_is_rejected(self, temp_dir):
        config = write_config(temp_dir / "run.toml", 'delete = [')

        with pytest.raises(ValueError, match="Invalid TOML"):
            load_config_file(config)

    def test_missing_file_is_rejected(self, temp_dir):
        with pytest.raises(ValueError, match="Cannot read config file"):
            load_config_file(str(temp_dir / "absent.toml"))
