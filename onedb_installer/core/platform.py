"""
Platform detection for the OneDB installer.

This module probes the facts every later install step branches on: the
operating system, the CPU architecture and the version of the JavaScript
runtime that will load the compiled binding.

Usage:
    from onedb_installer.core.platform import detect_platform

    descriptor = detect_platform()
    print(f"OS: {descriptor.os}")
    print(f"Architecture: {descriptor.arch}")
    print(f"Runtime: {descriptor.runtime_version_string()}")
"""

import logging
import platform
import re
import subprocess
import sys
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Operating system names, spelled the way the runtime reports them
WIN32 = "win32"
LINUX = "linux"
DARWIN = "darwin"
AIX = "aix"
OS390 = "os390"
OTHER = "other"


RuntimeVersion = Tuple[int, int]

_VERSION_PATTERN = re.compile(r"^v?(\d+)\.(\d+)")


@dataclass(frozen=True)
class PlatformDescriptor:
    """
    Immutable description of the install host.

    Attributes:
        os: One of 'win32', 'linux', 'darwin', 'aix', 'os390', 'other'
        arch: Normalized CPU architecture ('x64', 'arm64', 'x86', ...)
        runtime_version: (major, minor) of the runtime, or None if unknown
    """

    os: str
    arch: str
    runtime_version: Optional[RuntimeVersion] = None

    @property
    def is_windows(self) -> bool:
        return self.os == WIN32

    @property
    def is_x64(self) -> bool:
        return self.arch == "x64"

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'win32-x64').

        Example:
            >>> PlatformDescriptor('linux', 'x64', (12, 3)).platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    def runtime_version_string(self) -> str:
        if self.runtime_version is None:
            return "unknown"
        return f"{self.runtime_version[0]}.{self.runtime_version[1]}"

    def __str__(self) -> str:
        return f"{self.platform_string()} (runtime {self.runtime_version_string()})"


def detect_platform(
    runtime_version: Optional[RuntimeVersion] = None,
    runtime_command: Sequence[str] = ("node",),
) -> PlatformDescriptor:
    """
    Detect current platform information.

    Args:
        runtime_version: Explicit runtime version; skips probing the runtime
        runtime_command: Command used to query the runtime version

    Returns:
        PlatformDescriptor for the current host
    """
    if runtime_version is None:
        runtime_version = detect_runtime_version(runtime_command)

    return PlatformDescriptor(
        os=detect_os(),
        arch=detect_architecture(),
        runtime_version=runtime_version,
    )


def detect_os(system: Optional[str] = None) -> str:
    """
    Map a ``sys.platform`` value onto the installer's OS names.

    Args:
        system: Platform identifier; defaults to ``sys.platform``

    Returns:
        Normalized OS name
    """
    system = (system if system is not None else sys.platform).lower()

    if system in ("win32", "cygwin"):
        return WIN32
    elif system.startswith("linux"):
        return LINUX
    elif system == "darwin":
        return DARWIN
    elif system.startswith("aix"):
        return AIX
    elif system in ("zos", "os390"):
        return OS390
    return OTHER


def detect_architecture(machine: Optional[str] = None) -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm', or the raw
        machine name for anything else
    """
    machine = (machine if machine is not None else platform.machine()).lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    return machine


def parse_runtime_version(text: str) -> Optional[RuntimeVersion]:
    """
    Parse a runtime version string into (major, minor).

    Example:
        >>> parse_runtime_version("v12.3.1")
        (12, 3)
    """
    if not text:
        return None

    match = _VERSION_PATTERN.match(text.strip())
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def detect_runtime_version(
    command: Sequence[str] = ("node",),
) -> Optional[RuntimeVersion]:
    """
    Ask the runtime for its version.

    Returns:
        (major, minor), or None when the runtime is missing or its output
        cannot be parsed
    """
    if not command:
        logger.debug("No runtime command configured")
        return None

    name = " ".join(command)
    try:
        result = subprocess.run(
            [*command, "--version"], capture_output=True, text=True, timeout=10
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Could not query runtime version via {name}: {e}")
        return None

    if result.returncode != 0:
        logger.debug(f"{name} --version exited with {result.returncode}")
        return None

    version = parse_runtime_version(result.stdout)
    logger.debug(f"Detected runtime version: {version}")
    return version


__all__ = [
    "PlatformDescriptor",
    "RuntimeVersion",
    "WIN32",
    "LINUX",
    "DARWIN",
    "AIX",
    "OS390",
    "OTHER",
    "detect_platform",
    "detect_os",
    "detect_architecture",
    "parse_runtime_version",
    "detect_runtime_version",
]
