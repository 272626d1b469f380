"""Platform compatibility validation module.

Rejects hosts the binding cannot be installed on before any download or
build is attempted.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from onedb_installer.core.platform import (
    AIX,
    DARWIN,
    LINUX,
    OS390,
    WIN32,
    PlatformDescriptor,
    RuntimeVersion,
)

logger = logging.getLogger(__name__)

MINIMUM_RUNTIME_VERSION: RuntimeVersion = (10, 0)

REPOSITORY_URL = "https://github.com/OpenInformix/node-informixdb"

_UNSUPPORTED_OS_MESSAGES = {
    DARWIN: "node-informixdb does not support MAC OS.",
    AIX: "node-informixdb does not support AIX.",
    OS390: "node-informixdb does not support z/OS.",
}


@dataclass
class CompatibilityResult:
    """Result of compatibility validation."""

    valid: bool
    message: str = ""
    warnings: List[str] = field(default_factory=list)


def check_compatibility(
    descriptor: PlatformDescriptor,
    minimum: RuntimeVersion = MINIMUM_RUNTIME_VERSION,
) -> CompatibilityResult:
    """
    Decide whether the host can receive the binding.

    Args:
        descriptor: Probed platform
        minimum: Lowest supported runtime (major, minor)

    Returns:
        CompatibilityResult; valid is False for any rejected combination
    """
    warnings: List[str] = []

    if descriptor.os == WIN32:
        if not descriptor.is_x64:
            return CompatibilityResult(
                False, "Windows 32 bit not supported. Please use an x64 architecture."
            )
    elif descriptor.os == LINUX:
        if not descriptor.is_x64:
            warnings.append(
                f"This platform ({descriptor.platform_string()}) is not completely "
                "supported, you might encounter errors. In such cases please "
                f"open an issue on our repository, {REPOSITORY_URL}."
            )
    elif descriptor.os in _UNSUPPORTED_OS_MESSAGES:
        return CompatibilityResult(False, _UNSUPPORTED_OS_MESSAGES[descriptor.os])
    else:
        return CompatibilityResult(
            False,
            f"Unsupported platform: {descriptor.platform_string()}. "
            "node-informixdb can only be installed on Windows x64 and Linux.",
        )

    if descriptor.runtime_version is None:
        return CompatibilityResult(
            False,
            "Could not determine the node.js version. Please make sure node.js "
            "is installed and available on PATH.",
        )

    if descriptor.runtime_version < minimum:
        return CompatibilityResult(
            False,
            f"node.js version {descriptor.runtime_version_string()} is not "
            f"supported. Please use node.js version >= {minimum[0]}.{minimum[1]}.",
        )

    for warning in warnings:
        logger.warning(warning)

    return CompatibilityResult(True, warnings=warnings)


__all__ = [
    "CompatibilityResult",
    "MINIMUM_RUNTIME_VERSION",
    "check_compatibility",
]
