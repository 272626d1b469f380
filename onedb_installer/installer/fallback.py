"""
Precompiled binding installation.

When the native build cannot run, a prebuilt binding is taken from the
bundled ``build.zip``. The archive holds one binding per runtime ABI
generation; the one whose bracket contains the host runtime is written to
``build/Release/odbc_bindings.node`` and every other entry is skipped.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from onedb_installer.core.environment import SDK_HOME_VAR, InstallEnvironment
from onedb_installer.core.exceptions import (
    BinaryInstallError,
    FallbackUnavailableError,
    SdkNotFoundError,
)
from onedb_installer.core.filesystem import (
    ArchiveExtractionError,
    extract_member,
    remove_file,
    safe_rmtree,
)
from onedb_installer.core.platform import LINUX, WIN32, RuntimeVersion
from onedb_installer.installer.sdk import SdkLocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BinaryVariant:
    """
    A prebuilt binding inside the bundled archive.

    Attributes:
        upper_bound: Runtimes strictly below this version use the entry;
            None marks the default (newest) entry
        entry_path: Path of the binding inside build.zip
    """

    upper_bound: Optional[RuntimeVersion]
    entry_path: str


# (exclusive upper bound, runtime release the binding was built with)
_VARIANT_BRACKETS = (
    ((11, 0), "10.24.1"),
    ((12, 0), "11.15.0"),
    ((13, 0), "12.22.12"),
    ((14, 0), "13.14.0"),
)

_ENTRY_BASES = {
    WIN32: "build/Release/odbc_bindings.node",
    LINUX: "build/Release/odbc_bindings_linux.node",
}


def _variants_for(base: str) -> List[BinaryVariant]:
    variants = [
        BinaryVariant(bound, f"{base}.{release}") for bound, release in _VARIANT_BRACKETS
    ]
    variants.append(BinaryVariant(None, base))
    return variants


BINARY_VARIANTS: Dict[str, List[BinaryVariant]] = {
    os_name: _variants_for(base) for os_name, base in _ENTRY_BASES.items()
}


def select_variant(
    variants: Sequence[BinaryVariant], version: Optional[RuntimeVersion]
) -> BinaryVariant:
    """
    Pick the first variant whose upper bound is above ``version``.

    Variants must be ordered by ascending upper bound with the default
    (bound None) last. An unknown version selects the default.
    """
    default = variants[-1]
    if version is None:
        return default

    for variant in variants:
        if variant.upper_bound is None or version < variant.upper_bound:
            return variant
    return default


def select_binary_variant(
    os_name: str, version: Optional[RuntimeVersion]
) -> BinaryVariant:
    """
    Pick the prebuilt binding for a platform and runtime version.

    Example:
        >>> select_binary_variant("linux", (12, 3)).entry_path
        'build/Release/odbc_bindings_linux.node.12.22.12'

    Raises:
        FallbackUnavailableError: If no prebuilt bindings exist for the OS
    """
    variants = BINARY_VARIANTS.get(os_name)
    if not variants:
        raise FallbackUnavailableError(
            f"No precompiled binding is available for platform '{os_name}'."
        )
    return select_variant(variants, version)


def install_precompiled(
    env: InstallEnvironment, location: Optional[SdkLocation]
) -> Path:
    """
    Install the prebuilt binding matching the host runtime.

    Args:
        env: Install environment
        location: The SDK location established earlier in the run, if any

    Returns:
        Path of the installed binding

    Raises:
        SdkNotFoundError: If no SDK was established earlier in the run
        FallbackUnavailableError: If the bundled archive is missing or the
            platform has no prebuilt bindings
        BinaryInstallError: If the matching entry cannot be extracted
    """
    if location is None:
        raise SdkNotFoundError(
            "Please install the Informix Client SDK prior to installing "
            f"node-informixdb and set the {SDK_HOME_VAR} environment variable "
            "value to the Client SDK installation."
        )

    archive = env.build_archive
    if not archive.is_file():
        raise FallbackUnavailableError(
            f"Precompiled binary archive not found: {archive}"
        )

    variant = select_binary_variant(env.platform.os, env.platform.runtime_version)
    logger.info(
        f"Installing precompiled binding {variant.entry_path} for node.js "
        f"{env.platform.runtime_version_string()}"
    )

    # Old build output is replaced wholesale
    safe_rmtree(env.build_dir, require_prefix=env.project_root)

    try:
        extract_member(archive, variant.entry_path, env.binding_path)
    except ArchiveExtractionError as e:
        raise BinaryInstallError(f"Installation Failed! {e}") from e

    remove_file(archive)
    return env.binding_path


__all__ = [
    "BinaryVariant",
    "BINARY_VARIANTS",
    "select_variant",
    "select_binary_variant",
    "install_precompiled",
]
