"""
Install environment probing.

The InstallEnvironment is built once, before anything touches the filesystem
or network, and is passed explicitly to every install step.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from onedb_installer.core.config import InstallerConfig
from onedb_installer.core.platform import (
    PlatformDescriptor,
    RuntimeVersion,
    detect_platform,
    parse_runtime_version,
)

logger = logging.getLogger(__name__)

SDK_HOME_VAR = "CSDK_HOME"
LEGACY_SDK_HOME_VAR = "INFORMIXDIR"
INSTALLER_URL_VAR = "ONEDB_INSTALLER_URL"
# npm exposes package configuration to install scripts with this prefix
CONFIG_INSTALLER_URL_VAR = "npm_config_onedb_installer_url"


@dataclass(frozen=True)
class InstallEnvironment:
    """
    Everything the install pipeline needs to know about the host.

    Attributes:
        platform: Probed OS, architecture and runtime version
        project_root: Directory the binding is installed into
        sdk_home: Value of CSDK_HOME, if set
        legacy_sdk_home: Value of INFORMIXDIR, if set
        installer_url: Override base URL for SDK downloads, if set
        sdk_archive: Locally supplied SDK archive, if any
        config: Settings loaded from onedb-install.yaml
    """

    platform: PlatformDescriptor
    project_root: Path
    sdk_home: Optional[str] = None
    legacy_sdk_home: Optional[str] = None
    installer_url: Optional[str] = None
    sdk_archive: Optional[Path] = None
    config: InstallerConfig = field(default_factory=InstallerConfig)

    @property
    def build_dir(self) -> Path:
        return self.project_root / "build"

    @property
    def binding_path(self) -> Path:
        return self.build_dir / "Release" / "odbc_bindings.node"

    @property
    def installer_dir(self) -> Path:
        return self.project_root / "installer"

    @property
    def sdk_cache_dir(self) -> Path:
        return self.installer_dir / "onedb-odbc-driver"

    @property
    def build_archive(self) -> Path:
        return self.project_root / "build.zip"


def _read_var(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name)
    if value is None or not value.strip():
        return None
    return value


def probe_environment(
    project_root: Path,
    config: Optional[InstallerConfig] = None,
    environ: Optional[Mapping[str, str]] = None,
    runtime_version: Optional[RuntimeVersion] = None,
    sdk_archive: Optional[Path] = None,
    descriptor: Optional[PlatformDescriptor] = None,
) -> InstallEnvironment:
    """
    Probe the host and build the install environment.

    Never fails: unset or empty variables are recorded as None and an
    undetectable runtime leaves runtime_version as None.

    Args:
        project_root: Directory the binding is installed into
        config: Loaded configuration; defaults when None
        environ: Environment mapping; os.environ when None
        runtime_version: Explicit runtime version (CLI flag)
        sdk_archive: Explicit local SDK archive (CLI flag)
        descriptor: Pre-built platform descriptor; probed when None

    Returns:
        Frozen InstallEnvironment
    """
    project_root = Path(project_root)
    config = config or InstallerConfig()
    environ = os.environ if environ is None else environ

    if descriptor is None:
        if runtime_version is None and config.runtime_version:
            runtime_version = parse_runtime_version(config.runtime_version)
        descriptor = detect_platform(
            runtime_version=runtime_version,
            runtime_command=config.runtime_command.split(),
        )

    installer_url = _read_var(environ, INSTALLER_URL_VAR) or _read_var(
        environ, CONFIG_INSTALLER_URL_VAR
    )

    if sdk_archive is None and config.sdk_archive:
        sdk_archive = Path(config.sdk_archive)
    if sdk_archive is not None and not sdk_archive.is_absolute():
        sdk_archive = project_root / sdk_archive

    env = InstallEnvironment(
        platform=descriptor,
        project_root=project_root,
        sdk_home=_read_var(environ, SDK_HOME_VAR),
        legacy_sdk_home=_read_var(environ, LEGACY_SDK_HOME_VAR),
        installer_url=installer_url,
        sdk_archive=sdk_archive,
        config=config,
    )
    logger.debug(f"Probed install environment: {env}")
    return env


__all__ = [
    "InstallEnvironment",
    "probe_environment",
    "SDK_HOME_VAR",
    "LEGACY_SDK_HOME_VAR",
    "INSTALLER_URL_VAR",
    "CONFIG_INSTALLER_URL_VAR",
]
