"""
Unit tests for installer configuration loading.
"""

from pathlib import Path

import pytest

from onedb_installer.core.config import (
    InstallerConfig,
    load_config,
    parse_config_data,
)
from onedb_installer.core.exceptions import ConfigError


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_optional_file_gives_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "onedb-install.yaml")
        assert config == InstallerConfig()

    def test_none_path_gives_defaults(self):
        assert load_config(None) == InstallerConfig()

    def test_missing_required_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.yaml", required=True)

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "onedb-install.yaml"
        path.write_text("")
        assert load_config(path) == InstallerConfig()

    def test_loads_values(self, tmp_path: Path):
        path = tmp_path / "onedb-install.yaml"
        path.write_text(
            "installer_url: https://mirror.example.com/odbc\n"
            "download_timeout: 120\n"
            "min_runtime_version: 12.0\n"
            "build_command: npx node-gyp configure build\n"
        )

        config = load_config(path)

        assert config.installer_url == "https://mirror.example.com/odbc"
        assert config.download_timeout == 120
        assert config.min_runtime_version == "12.0"
        assert config.minimum_runtime == (12, 0)
        assert config.build_command == "npx node-gyp configure build"

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "onedb-install.yaml"
        path.write_text("installer_url: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)


class TestParseConfigData:
    """Tests for validation of parsed YAML."""

    def test_rejects_non_mapping(self):
        with pytest.raises(ConfigError, match="mapping"):
            parse_config_data(["installer_url"])

    def test_rejects_unknown_keys(self):
        with pytest.raises(ConfigError, match="Unknown configuration keys: mirror"):
            parse_config_data({"mirror": "x"})

    def test_rejects_wrong_type(self):
        with pytest.raises(ConfigError, match="download_timeout"):
            parse_config_data({"download_timeout": "soon"})

    def test_rejects_bool_for_int(self):
        with pytest.raises(ConfigError):
            parse_config_data({"download_timeout": True})

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ConfigError, match="positive"):
            parse_config_data({"download_timeout": 0})

    def test_rejects_bad_min_runtime(self):
        with pytest.raises(ConfigError, match="min_runtime_version"):
            parse_config_data({"min_runtime_version": "latest"})

    def test_rejects_bad_runtime_version(self):
        with pytest.raises(ConfigError, match="runtime_version"):
            parse_config_data({"runtime_version": "node"})

    @pytest.mark.parametrize("key", ["runtime_command", "build_command"])
    @pytest.mark.parametrize("value", ["", "   "])
    def test_rejects_empty_command(self, key, value):
        with pytest.raises(ConfigError, match=f"{key} must not be empty"):
            parse_config_data({key: value})

    def test_null_values_keep_defaults(self):
        assert parse_config_data({"installer_url": None}) == InstallerConfig()
