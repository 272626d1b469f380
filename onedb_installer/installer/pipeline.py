"""
Install pipeline for the ODBC binding.

Steps run strictly in order:

1. compatibility check
2. local SDK lookup
3. SDK download and extraction (only when no local SDK exists)
4. native build
5. precompiled binding install (only when step 3 or 4 asks for a fallback)

Every step returns a StepOutcome. The Installer dispatches on it; a FALLBACK
outcome leads to exactly one precompiled install attempt, whose failure ends
the run.

Example:
    >>> env = probe_environment(Path.cwd())
    >>> outcome = Installer(env).run()
    >>> sys.exit(outcome.exit_code)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from onedb_installer.core.compatibility import check_compatibility
from onedb_installer.core.download import DownloadError, DownloadProgress
from onedb_installer.core.environment import InstallEnvironment
from onedb_installer.core.exceptions import (
    ConfigError,
    InstallerError,
    SdkValidationError,
    UnsupportedDownloadTargetError,
)
from onedb_installer.core.filesystem import (
    ArchiveExtractionError,
    FilesystemError,
    remove_file,
)
from onedb_installer.installer.artifacts import (
    ArtifactSpec,
    extract_sdk,
    fetch_artifact,
    print_progress,
    select_artifact,
)
from onedb_installer.installer.builder import (
    NativeBuilder,
    build_binding,
    create_builder,
)
from onedb_installer.installer.fallback import install_precompiled
from onedb_installer.installer.sdk import SdkLocation, locate_sdk, prepare_sdk

logger = logging.getLogger(__name__)

SUCCESS_BANNER = (
    "\n"
    "===================================\n"
    "node-informixdb installed successfully!\n"
    "===================================\n"
)


class StepStatus(Enum):
    SUCCESS = "success"
    FALLBACK = "fallback"
    FATAL = "fatal"


@dataclass(frozen=True)
class StepOutcome:
    """Tagged result of one pipeline step."""

    status: StepStatus
    value: Any = None
    reason: str = ""

    @classmethod
    def success(cls, value: Any = None) -> "StepOutcome":
        return cls(StepStatus.SUCCESS, value=value)

    @classmethod
    def fallback(cls, reason: str) -> "StepOutcome":
        return cls(StepStatus.FALLBACK, reason=reason)

    @classmethod
    def fatal(cls, reason: str) -> "StepOutcome":
        return cls(StepStatus.FATAL, reason=reason)


class InstallStatus(Enum):
    BUILT_FROM_SOURCE = "built-from-source"
    INSTALLED_PRECOMPILED = "installed-precompiled"
    FAILED = "failed"


@dataclass(frozen=True)
class InstallOutcome:
    """Terminal state of an install run."""

    status: InstallStatus
    reason: str = ""
    binding_path: Optional[Path] = None

    @property
    def succeeded(self) -> bool:
        return self.status is not InstallStatus.FAILED

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1


class Installer:
    """
    Runs the install pipeline once for an InstallEnvironment.

    Args:
        env: Probed install environment
        builder: Native build backend; node-gyp for the host when None
        progress_callback: Download progress callback
    """

    def __init__(
        self,
        env: InstallEnvironment,
        builder: Optional[NativeBuilder] = None,
        progress_callback: Optional[
            Callable[[DownloadProgress], None]
        ] = print_progress,
    ):
        self.env = env
        self.builder = builder or create_builder(env)
        self.progress_callback = progress_callback

    def run(self) -> InstallOutcome:
        """Run every step and return the terminal outcome."""
        outcome = self.check_platform()
        if outcome.status is not StepStatus.SUCCESS:
            return self._failed(outcome.reason)

        outcome = self.find_local_sdk()
        if outcome.status is not StepStatus.SUCCESS:
            return self._failed(outcome.reason)
        location: Optional[SdkLocation] = outcome.value

        if location is None:
            outcome = self.provision_sdk()
            if outcome.status is StepStatus.FATAL:
                return self._failed(outcome.reason)
            if outcome.status is StepStatus.FALLBACK:
                return self._fall_back(outcome.reason, None)
            location = outcome.value

        outcome = self.build(location)
        if outcome.status is StepStatus.FATAL:
            return self._failed(outcome.reason)
        if outcome.status is StepStatus.FALLBACK:
            return self._fall_back(outcome.reason, location)

        print(SUCCESS_BANNER)
        return InstallOutcome(
            InstallStatus.BUILT_FROM_SOURCE, binding_path=self.env.binding_path
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def check_platform(self) -> StepOutcome:
        platform = self.env.platform
        logger.debug(f"Checking compatibility of {platform}")
        try:
            minimum = self.env.config.minimum_runtime
        except ConfigError as e:
            return StepOutcome.fatal(str(e))

        result = check_compatibility(platform, minimum)
        if not result.valid:
            return StepOutcome.fatal(result.message)
        return StepOutcome.success(platform)

    def find_local_sdk(self) -> StepOutcome:
        """SUCCESS(SdkLocation) for a usable local SDK, SUCCESS(None) if absent."""
        location = locate_sdk(self.env)
        if location is None:
            return StepOutcome.success(None)

        try:
            prepare_sdk(location, self.env.platform)
        except (SdkValidationError, FilesystemError) as e:
            return StepOutcome.fatal(str(e))
        return StepOutcome.success(location)

    def provision_sdk(self) -> StepOutcome:
        """Download (or take the local archive) and extract the SDK."""
        try:
            artifact = select_artifact(self.env)
        except UnsupportedDownloadTargetError as e:
            return StepOutcome.fatal(str(e))

        try:
            archive = fetch_artifact(self.env, artifact, self.progress_callback)
        except (DownloadError, OSError) as e:
            logger.error(f"Client SDK download failed: {e}")
            return StepOutcome.fallback(f"Client SDK download failed: {e}")

        return self._extract(artifact, archive)

    def _extract(self, artifact: ArtifactSpec, archive: Path) -> StepOutcome:
        try:
            location = extract_sdk(self.env, artifact, archive)
        except SdkValidationError as e:
            return StepOutcome.fatal(str(e))
        except (ArchiveExtractionError, FilesystemError) as e:
            logger.error(f"Client SDK extraction failed: {e}")
            return StepOutcome.fallback(f"Client SDK extraction failed: {e}")
        return StepOutcome.success(location)

    def build(self, location: SdkLocation) -> StepOutcome:
        logger.info("ACTION: Build is in progress...")
        try:
            result = build_binding(
                self.env, location.build_path, location.downloaded, self.builder
            )
        except (FilesystemError, ValueError) as e:
            return StepOutcome.fatal(str(e))

        if not result.success:
            logger.error(f"ERROR: native build failed! {result.error or ''}".rstrip())
            return StepOutcome.fallback(result.error or "native build failed")

        remove_file(self.env.build_archive)
        return StepOutcome.success(self.env.binding_path)

    def install_fallback(self, location: Optional[SdkLocation]) -> StepOutcome:
        try:
            path = install_precompiled(self.env, location)
        except (InstallerError, FilesystemError, ValueError) as e:
            return StepOutcome.fatal(str(e))
        return StepOutcome.success(path)

    # ------------------------------------------------------------------
    # Terminal transitions
    # ------------------------------------------------------------------

    def _fall_back(
        self, reason: str, location: Optional[SdkLocation]
    ) -> InstallOutcome:
        logger.info(
            f"{reason}\nACTION: Proceeding with Pre-compiled Binary Installation."
        )
        outcome = self.install_fallback(location)
        if outcome.status is not StepStatus.SUCCESS:
            return self._failed(outcome.reason)

        print(SUCCESS_BANNER)
        return InstallOutcome(
            InstallStatus.INSTALLED_PRECOMPILED, binding_path=outcome.value
        )

    def _failed(self, reason: str) -> InstallOutcome:
        logger.error(f"ERROR: {reason}")
        return InstallOutcome(InstallStatus.FAILED, reason=reason)


def install(env: InstallEnvironment, builder: Optional[NativeBuilder] = None) -> InstallOutcome:
    """Run the install pipeline with default collaborators."""
    return Installer(env, builder=builder).run()


__all__ = [
    "StepStatus",
    "StepOutcome",
    "InstallStatus",
    "InstallOutcome",
    "Installer",
    "install",
    "SUCCESS_BANNER",
]
