"""
Client SDK discovery and validation.

The SDK is looked up in this order, first match wins:

1. ``CSDK_HOME``
2. ``INFORMIXDIR`` (legacy name; whitespace is escaped for the build tool)
3. ``<project>/installer/onedb-odbc-driver`` left behind by an earlier download

When nothing matches, the caller has to download the SDK.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from onedb_installer.core.environment import (
    LEGACY_SDK_HOME_VAR,
    SDK_HOME_VAR,
    InstallEnvironment,
)
from onedb_installer.core.exceptions import SdkValidationError
from onedb_installer.core.filesystem import create_link
from onedb_installer.core.platform import PlatformDescriptor

logger = logging.getLogger(__name__)

INCLUDE_SUBDIR = Path("incl") / "cli"
LIB_SUBDIR = "lib"
# Directory some 64-bit SDK builds ship their libraries in
LIB64_SUBDIR = "lib64"


class SdkOrigin(Enum):
    """Where an SDK location came from."""

    ENVIRONMENT_VARIABLE = "environment-variable"
    LOCAL_CACHE = "local-cache"
    DOWNLOADED = "downloaded"


@dataclass(frozen=True)
class SdkLocation:
    """
    A located Client SDK.

    Attributes:
        path: SDK root directory
        origin: How the SDK was found
        build_path: SDK path as handed to the native build tool
        variable: Environment variable the path came from, if any
    """

    path: Path
    origin: SdkOrigin
    build_path: str
    variable: str = SDK_HOME_VAR

    @property
    def include_dir(self) -> Path:
        return self.path / INCLUDE_SUBDIR

    @property
    def lib_dir(self) -> Path:
        return self.path / LIB_SUBDIR

    @property
    def downloaded(self) -> bool:
        return self.origin is SdkOrigin.DOWNLOADED


def escape_whitespace(path: str) -> str:
    r"""
    Escape embedded whitespace for the build tool's shell parser.

    Example:
        >>> escape_whitespace("C:/Program Files/Informix")
        'C:/Program\\ Files/Informix'
    """
    return re.sub(r"\s", lambda m: "\\" + m.group(0), path)


def locate_sdk(env: InstallEnvironment) -> Optional[SdkLocation]:
    """
    Find an already available Client SDK.

    Returns:
        SdkLocation, or None when the SDK has to be downloaded
    """
    if env.sdk_home:
        logger.info(f"FOUND: {SDK_HOME_VAR} environment variable : {env.sdk_home}")
        return SdkLocation(
            path=Path(env.sdk_home),
            origin=SdkOrigin.ENVIRONMENT_VARIABLE,
            build_path=env.sdk_home,
            variable=SDK_HOME_VAR,
        )

    if env.legacy_sdk_home:
        logger.info(
            f"FOUND: {LEGACY_SDK_HOME_VAR} environment variable : "
            f"{env.legacy_sdk_home}"
        )
        return SdkLocation(
            path=Path(env.legacy_sdk_home),
            origin=SdkOrigin.ENVIRONMENT_VARIABLE,
            build_path=escape_whitespace(env.legacy_sdk_home),
            variable=LEGACY_SDK_HOME_VAR,
        )

    if env.sdk_cache_dir.is_dir():
        logger.info(f"FOUND: previously downloaded Client SDK : {env.sdk_cache_dir}")
        return cached_sdk_location(env, SdkOrigin.LOCAL_CACHE)

    logger.debug("No local Client SDK found")
    return None


def cached_sdk_location(env: InstallEnvironment, origin: SdkOrigin) -> SdkLocation:
    """SdkLocation for the SDK cache directory under the project."""
    path = env.sdk_cache_dir
    return SdkLocation(path=path, origin=origin, build_path=str(path))


def ensure_lib_link(sdk_path: Path, platform: PlatformDescriptor) -> bool:
    """
    Provide ``<sdk>/lib`` for build tools that hardcode it.

    On non-Windows hosts, when ``lib`` is missing but ``lib64`` exists, a
    ``lib -> lib64`` symlink is created.

    Returns:
        True if a link was created
    """
    if platform.is_windows:
        return False

    expected = sdk_path / LIB_SUBDIR
    actual = sdk_path / LIB64_SUBDIR
    if expected.exists() or expected.is_symlink() or not actual.is_dir():
        return False

    create_link(actual, expected)
    logger.info(f"Linked {expected} -> {actual}")
    return True


def validate_sdk(location: SdkLocation) -> None:
    """
    Check that the SDK root, include and lib directories exist.

    Raises:
        SdkValidationError: For the first missing directory
    """
    for directory in (location.path, location.include_dir, location.lib_dir):
        if not directory.is_dir():
            raise SdkValidationError(directory, variable=location.variable)
    logger.debug(f"Validated Client SDK at {location.path}")


def prepare_sdk(location: SdkLocation, platform: PlatformDescriptor) -> SdkLocation:
    """Apply the lib shim, then validate. Returns the same location."""
    if location.path.is_dir():
        ensure_lib_link(location.path, platform)
    validate_sdk(location)
    return location


__all__ = [
    "SdkOrigin",
    "SdkLocation",
    "escape_whitespace",
    "locate_sdk",
    "cached_sdk_location",
    "ensure_lib_link",
    "validate_sdk",
    "prepare_sdk",
]
