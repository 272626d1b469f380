"""
Core functionality for the OneDB installer.

This package contains the foundational modules the install steps depend on.
"""

from .platform import (
    PlatformDescriptor,
    detect_platform,
    parse_runtime_version,
)

from .config import (
    InstallerConfig,
    load_config,
)

from .environment import (
    InstallEnvironment,
    probe_environment,
)

from .compatibility import (
    CompatibilityResult,
    check_compatibility,
)

from .exceptions import (
    InstallerError,
    ConfigError,
    UnsupportedDownloadTargetError,
    SdkError,
    SdkNotFoundError,
    SdkValidationError,
    FallbackUnavailableError,
    BinaryInstallError,
)

__all__ = [
    "PlatformDescriptor",
    "detect_platform",
    "parse_runtime_version",
    "InstallerConfig",
    "load_config",
    "InstallEnvironment",
    "probe_environment",
    "CompatibilityResult",
    "check_compatibility",
    "InstallerError",
    "ConfigError",
    "UnsupportedDownloadTargetError",
    "SdkError",
    "SdkNotFoundError",
    "SdkValidationError",
    "FallbackUnavailableError",
    "BinaryInstallError",
]
