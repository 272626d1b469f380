"""
Install steps for the ODBC binding.

Provides SDK discovery, SDK download and extraction, the native build and
the precompiled binding fallback, tied together by the Installer pipeline.
"""

from .pipeline import (
    Installer,
    InstallOutcome,
    InstallStatus,
    StepOutcome,
    StepStatus,
    install,
)
from .sdk import SdkLocation, SdkOrigin, locate_sdk
from .builder import NativeBuilder, BuildResult
from .fallback import BinaryVariant, select_binary_variant

__all__ = [
    "Installer",
    "InstallOutcome",
    "InstallStatus",
    "StepOutcome",
    "StepStatus",
    "install",
    "SdkLocation",
    "SdkOrigin",
    "locate_sdk",
    "NativeBuilder",
    "BuildResult",
    "BinaryVariant",
    "select_binary_variant",
]
