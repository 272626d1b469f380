"""YAML configuration parser for the OneDB installer.

This module provides parsing and validation for onedb-install.yaml files.
Every key is optional; a missing file yields the defaults.
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from onedb_installer.core.exceptions import ConfigError
from onedb_installer.core.platform import RuntimeVersion, parse_runtime_version

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "onedb-install.yaml"


@dataclass(frozen=True)
class InstallerConfig:
    """Installer settings loaded from onedb-install.yaml."""

    installer_url: Optional[str] = None
    download_timeout: int = 30  # seconds per socket read
    min_runtime_version: str = "10.0"
    build_command: str = "node-gyp configure build"
    runtime_command: str = "node"
    runtime_version: Optional[str] = None  # overrides probing the runtime
    sdk_archive: Optional[str] = None  # locally supplied SDK archive

    @property
    def minimum_runtime(self) -> RuntimeVersion:
        version = parse_runtime_version(self.min_runtime_version)
        if version is None:
            raise ConfigError(
                f"Invalid min_runtime_version: {self.min_runtime_version!r}"
            )
        return version


_FIELD_TYPES = {
    "installer_url": str,
    "download_timeout": int,
    "min_runtime_version": str,
    "build_command": str,
    "runtime_command": str,
    "runtime_version": str,
    "sdk_archive": str,
}


def load_config(config_path: Optional[Path], required: bool = False) -> InstallerConfig:
    """
    Load installer configuration.

    Args:
        config_path: Path to the YAML file, or None for defaults
        required: If True, a missing file is an error

    Returns:
        Parsed configuration

    Raises:
        ConfigError: If the file is required but missing, or is invalid
    """
    if config_path is None or not config_path.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_path}")
        logger.debug(f"Config file not found (optional): {config_path}")
        return InstallerConfig()

    logger.debug(f"Loading configuration from {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}")

    if data is None:
        return InstallerConfig()

    return parse_config_data(data)


def parse_config_data(data) -> InstallerConfig:
    """Validate a parsed YAML mapping and build an InstallerConfig."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    known = {f.name for f in fields(InstallerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    values = {}
    for key, value in data.items():
        if value is None:
            continue
        expected = _FIELD_TYPES[key]
        # YAML reads 10.0 as a float
        if expected is str and isinstance(value, (int, float)) and not isinstance(
            value, bool
        ):
            value = str(value)
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ConfigError(
                f"Invalid value for '{key}': expected {expected.__name__}, "
                f"got {type(value).__name__}"
            )
        values[key] = value

    config = InstallerConfig(**values)

    for key in ("runtime_command", "build_command"):
        if not getattr(config, key).strip():
            raise ConfigError(f"{key} must not be empty")
    if config.download_timeout <= 0:
        raise ConfigError("download_timeout must be a positive number of seconds")
    if parse_runtime_version(config.min_runtime_version) is None:
        raise ConfigError(
            f"Invalid min_runtime_version: {config.min_runtime_version!r}"
        )
    if config.runtime_version is not None and parse_runtime_version(
        config.runtime_version
    ) is None:
        raise ConfigError(f"Invalid runtime_version: {config.runtime_version!r}")

    return config


__all__ = [
    "InstallerConfig",
    "DEFAULT_CONFIG_NAME",
    "load_config",
    "parse_config_data",
]
