"""
Centralized exception hierarchy for the OneDB installer.

Every failure the install pipeline can report derives from InstallerError so
the pipeline can tell its own errors apart from programming errors.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class InstallerError(Exception):
    """Base exception for all installer errors."""

    pass


class ConfigError(InstallerError):
    """Raised when the installer configuration file is invalid."""

    pass


# ============================================================================
# Platform Exceptions
# ============================================================================


class UnsupportedDownloadTargetError(InstallerError):
    """Raised when no SDK archive is published for the host platform."""

    def __init__(self, os_name: str, arch: str, message: str = ""):
        self.os_name = os_name
        self.arch = arch
        super().__init__(
            message or f"No Client SDK download is available for {os_name}-{arch}"
        )


# ============================================================================
# SDK Exceptions
# ============================================================================


class SdkError(InstallerError):
    """Base exception for Client SDK related errors."""

    pass


class SdkNotFoundError(SdkError):
    """Raised when no Client SDK location could be established."""

    pass


class SdkValidationError(SdkError):
    """Raised when a located Client SDK is missing required directories."""

    def __init__(self, missing_dir, variable: str = "CSDK_HOME"):
        self.missing_dir = missing_dir
        self.variable = variable
        super().__init__(
            f"{missing_dir} directory does not exist. Please check if you have "
            f"set the {variable} environment variable's value correctly."
        )


# ============================================================================
# Precompiled Binary Exceptions
# ============================================================================


class FallbackUnavailableError(InstallerError):
    """Raised when the precompiled binary path cannot even be attempted."""

    pass


class BinaryInstallError(InstallerError):
    """Raised when extracting the precompiled binding fails."""

    pass
