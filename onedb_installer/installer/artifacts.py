"""
Client SDK artifact selection, download and extraction.

Used only when no local SDK was found. The SDK archive for the host is picked
from a fixed (os, arch) table, fetched from the installer base URL (or taken
from a locally supplied file) and unpacked into ``<project>/installer``.
"""

import functools
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from onedb_installer.core.download import (
    DownloadProgress,
    download_file,
    format_progress,
)
from onedb_installer.core.environment import (
    CONFIG_INSTALLER_URL_VAR,
    INSTALLER_URL_VAR,
    InstallEnvironment,
)
from onedb_installer.core.exceptions import UnsupportedDownloadTargetError
from onedb_installer.core.filesystem import extract_archive, remove_file
from onedb_installer.core.platform import AIX, DARWIN, LINUX, OS390, WIN32
from onedb_installer.installer.sdk import (
    SdkLocation,
    SdkOrigin,
    cached_sdk_location,
    prepare_sdk,
)

logger = logging.getLogger(__name__)

DEFAULT_INSTALLER_URL = (
    "https://github.com/OpenInformix/node-informixdb/releases/download/odbc-driver/"
)

SDK_ARCHIVES = {
    (WIN32, "x64"): "OneDB-Win64-ODBC-Driver.zip",
    (LINUX, "x64"): "OneDB-Linux64-ODBC-Driver.tar.gz",
}

_REJECTED_DOWNLOAD_TARGETS = {
    DARWIN: "node-informixdb does not support MAC OS. "
    "Please install the Client SDK manually and set CSDK_HOME.",
    AIX: "Automatic Client SDK download is not supported on AIX. "
    "Please install the Client SDK manually and set CSDK_HOME.",
    OS390: "Automatic Client SDK download is not supported on z/OS. "
    "Please install the Client SDK manually and set CSDK_HOME.",
}

LICENSE_AGREEMENT = (
    "\n\n****************************************\n"
    "You are downloading a package which includes the Node.js module for "
    "HCL/IBM Informix. The module is licensed under the Apache License 2.0. "
    "Check for additional dependencies, which may come with their own license "
    "agreement(s). Your use of the components of the package and dependencies "
    "constitutes your acceptance of their respective license agreements. If you "
    "do not accept the terms of any license agreement(s), then delete the "
    "relevant component(s) from your device.\n"
    "****************************************\n"
)


class ArchiveKind(Enum):
    """Compression format of an SDK archive."""

    ZIP = "zip"
    TARGZ = "targz"


@dataclass(frozen=True)
class ArtifactSpec:
    """
    The SDK archive selected for this run.

    Exactly one of url and local_path is set.
    """

    filename: str
    archive_kind: ArchiveKind
    destination_dir: Path
    url: Optional[str] = None
    local_path: Optional[Path] = None

    @property
    def is_remote(self) -> bool:
        return self.url is not None

    @property
    def download_path(self) -> Path:
        return self.destination_dir / self.filename


def sdk_archive_name(os_name: str, arch: str) -> str:
    """
    Look up the SDK archive published for a platform.

    Raises:
        UnsupportedDownloadTargetError: For platforms without a download
    """
    if os_name in _REJECTED_DOWNLOAD_TARGETS:
        raise UnsupportedDownloadTargetError(
            os_name, arch, _REJECTED_DOWNLOAD_TARGETS[os_name]
        )

    filename = SDK_ARCHIVES.get((os_name, arch))
    if filename is None:
        raise UnsupportedDownloadTargetError(
            os_name,
            arch,
            f"No Client SDK download is available for {os_name}-{arch}. "
            "Please install the Client SDK manually and set CSDK_HOME.",
        )
    return filename


def archive_kind_for(os_name: str) -> ArchiveKind:
    return ArchiveKind.ZIP if os_name == WIN32 else ArchiveKind.TARGZ


def resolve_base_url(env: InstallEnvironment) -> str:
    """
    Installer base URL, always ending in a single slash.

    Order: ONEDB_INSTALLER_URL, npm_config_onedb_installer_url (both already
    folded into env.installer_url), the config file, the built-in default.
    """
    base = env.installer_url or env.config.installer_url or DEFAULT_INSTALLER_URL
    return base.rstrip("/") + "/"


def select_artifact(env: InstallEnvironment) -> ArtifactSpec:
    """
    Choose the SDK archive for the host.

    A locally supplied archive wins over downloading. Its format follows the
    platform like a download would (zip on Windows, gzip-tar elsewhere), not
    its file name.

    Raises:
        UnsupportedDownloadTargetError: For platforms without a download
    """
    platform = env.platform
    destination = env.installer_dir

    if env.sdk_archive is not None:
        return ArtifactSpec(
            filename=env.sdk_archive.name,
            archive_kind=archive_kind_for(platform.os),
            destination_dir=destination,
            local_path=env.sdk_archive,
        )

    filename = sdk_archive_name(platform.os, platform.arch)
    return ArtifactSpec(
        filename=filename,
        archive_kind=archive_kind_for(platform.os),
        destination_dir=destination,
        url=resolve_base_url(env) + filename,
    )


def print_progress(progress: DownloadProgress) -> None:
    """Progress callback that rewrites a single console line."""
    sys.stdout.write("\r" + format_progress(progress))
    sys.stdout.flush()


def fetch_artifact(
    env: InstallEnvironment,
    artifact: ArtifactSpec,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = print_progress,
) -> Path:
    """
    Make the artifact available as a local file.

    Returns:
        Path of the archive on disk

    Raises:
        DownloadError: If the remote download fails
    """
    if not artifact.is_remote:
        logger.info(f"Using local Client SDK archive: {artifact.local_path}")
        return artifact.local_path

    logger.info(
        f"Downloading Client SDK from {artifact.url}\n"
        f"(override with {INSTALLER_URL_VAR} or {CONFIG_INSTALLER_URL_VAR})"
    )
    path = download_file(
        artifact.url,
        artifact.download_path,
        progress_callback=progress_callback,
        timeout=env.config.download_timeout,
    )
    if progress_callback is print_progress:
        sys.stdout.write("\n")
    return path


@functools.lru_cache(maxsize=1)
def print_license_notice() -> None:
    """Print the license agreement; repeated calls print nothing."""
    print(LICENSE_AGREEMENT)


def extract_sdk(
    env: InstallEnvironment, artifact: ArtifactSpec, archive_path: Path
) -> SdkLocation:
    """
    Unpack the SDK archive and validate the result.

    Downloaded archives are deleted after extraction; a locally supplied one
    is left alone.

    Returns:
        SdkLocation with origin DOWNLOADED

    Raises:
        ArchiveExtractionError: If the archive cannot be unpacked
        SdkValidationError: If the unpacked SDK is incomplete
    """
    logger.info(f"Extracting {archive_path} to {artifact.destination_dir}")
    extract_archive(
        archive_path, artifact.destination_dir, artifact.archive_kind.value
    )

    print_license_notice()

    if artifact.is_remote:
        remove_file(archive_path)

    location = cached_sdk_location(env, SdkOrigin.DOWNLOADED)
    return prepare_sdk(location, env.platform)


__all__ = [
    "DEFAULT_INSTALLER_URL",
    "SDK_ARCHIVES",
    "LICENSE_AGREEMENT",
    "ArchiveKind",
    "ArtifactSpec",
    "sdk_archive_name",
    "archive_kind_for",
    "resolve_base_url",
    "select_artifact",
    "print_progress",
    "fetch_artifact",
    "print_license_notice",
    "extract_sdk",
]
