"""
Native build backends for the ODBC binding.

The install pipeline only sees the NativeBuilder interface. The SDK path is
exported as CSDK_HOME and the command line only refers to that variable, so
the shell never parses the path itself.
"""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from onedb_installer.core.environment import SDK_HOME_VAR, InstallEnvironment
from onedb_installer.core.filesystem import safe_rmtree
from onedb_installer.core.platform import PlatformDescriptor

logger = logging.getLogger(__name__)

DEFAULT_BUILD_COMMAND = "node-gyp configure build"


@dataclass
class BuildResult:
    """Outcome of one native build invocation."""

    success: bool
    returncode: int
    output: str = ""
    error: Optional[str] = None


class NativeBuilder(ABC):
    """
    Abstract base class for native build backends.

    A builder compiles the binding against a Client SDK.
    """

    @abstractmethod
    def build(self, sdk_path: str, downloaded: bool) -> BuildResult:
        """
        Compile the binding.

        Args:
            sdk_path: Client SDK root as the build tool should see it
            downloaded: Whether the SDK was freshly downloaded by this run

        Returns:
            BuildResult; success is False on any build failure
        """
        pass


class NodeGypBuilder(NativeBuilder):
    """Runs ``node-gyp configure build`` through the shell."""

    def __init__(self, project_root: Path, command: str = DEFAULT_BUILD_COMMAND):
        self.project_root = Path(project_root)
        self.command = command

    @abstractmethod
    def format_sdk_argument(self) -> str:
        """Render the --CSDK_HOME parameter as a reference to the exported variable."""
        pass

    def command_line(self, downloaded: bool) -> str:
        return (
            f"{self.command} {self.format_sdk_argument()} "
            f"--IS_DOWNLOADED={'true' if downloaded else 'false'}"
        )

    def build(self, sdk_path: str, downloaded: bool) -> BuildResult:
        command = self.command_line(downloaded)
        env = dict(os.environ)
        env[SDK_HOME_VAR] = sdk_path

        logger.info(f"Running: {command} ({SDK_HOME_VAR}={sdk_path})")
        try:
            result = subprocess.run(
                command,
                shell=True,
                cwd=self.project_root,
                env=env,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            logger.error(f"Failed to start native build: {e}")
            return BuildResult(success=False, returncode=-1, error=str(e))

        output = (result.stdout or "") + (result.stderr or "")
        if output:
            logger.info(output)

        if result.returncode != 0:
            return BuildResult(
                success=False,
                returncode=result.returncode,
                output=output,
                error=f"{self.command} exited with code {result.returncode}",
            )
        return BuildResult(success=True, returncode=0, output=output)


class WindowsNodeGypBuilder(NodeGypBuilder):
    """node-gyp under cmd.exe: the variable is expanded unquoted."""

    def format_sdk_argument(self) -> str:
        return f"--{SDK_HOME_VAR}=%{SDK_HOME_VAR}%"


class PosixNodeGypBuilder(NodeGypBuilder):
    """node-gyp under a POSIX shell: the variable is expanded double-quoted."""

    def format_sdk_argument(self) -> str:
        return f'--{SDK_HOME_VAR}="${SDK_HOME_VAR}"'


def create_builder(env: InstallEnvironment) -> NodeGypBuilder:
    """Pick the node-gyp adapter for the host platform."""
    return builder_for_platform(
        env.platform, env.project_root, env.config.build_command
    )


def builder_for_platform(
    platform: PlatformDescriptor,
    project_root: Path,
    command: str = DEFAULT_BUILD_COMMAND,
) -> NodeGypBuilder:
    if platform.is_windows and platform.is_x64:
        return WindowsNodeGypBuilder(project_root, command)
    return PosixNodeGypBuilder(project_root, command)


def build_binding(
    env: InstallEnvironment, sdk_path: str, downloaded: bool, builder: NativeBuilder
) -> BuildResult:
    """
    Clean the build directory and compile the binding.

    Raises:
        FilesystemError: If the old build directory cannot be removed
        ValueError: If the build directory resolves outside the project
    """
    safe_rmtree(env.build_dir, require_prefix=env.project_root)
    return builder.build(sdk_path, downloaded)


__all__ = [
    "BuildResult",
    "NativeBuilder",
    "NodeGypBuilder",
    "WindowsNodeGypBuilder",
    "PosixNodeGypBuilder",
    "create_builder",
    "builder_for_platform",
    "build_binding",
]
