"""
Pytest configuration and shared fixtures for the OneDB installer tests.
"""

import sys
from pathlib import Path
from typing import Optional

import pytest

from onedb_installer.core.config import InstallerConfig
from onedb_installer.core.environment import InstallEnvironment
from onedb_installer.core.platform import PlatformDescriptor
from onedb_installer.installer.artifacts import print_license_notice

# Import test fixtures to make them available to all tests
# ruff: noqa: F401
from tests.fixtures.installer import sdk_home, build_zip


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unix_only: marks tests that need POSIX symlink semantics"
    )


def pytest_collection_modifyitems(config, items):
    """Skip unix_only tests on Windows, where symlinks need privileges."""
    if sys.platform != "win32":
        return
    skip_unix = pytest.mark.skip(reason="symlinks need privileges on Windows")
    for item in items:
        if "unix_only" in item.keywords:
            item.add_marker(skip_unix)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_license_notice():
    """Let every test observe the license notice being printed."""
    print_license_notice.cache_clear()
    yield
    print_license_notice.cache_clear()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Empty package directory the binding gets installed into."""
    root = tmp_path / "node-informixdb"
    root.mkdir()
    return root


@pytest.fixture
def linux_x64() -> PlatformDescriptor:
    return PlatformDescriptor("linux", "x64", (12, 3))


@pytest.fixture
def win_x64() -> PlatformDescriptor:
    return PlatformDescriptor("win32", "x64", (12, 3))


@pytest.fixture
def make_env(project_root: Path, linux_x64: PlatformDescriptor):
    """Factory for InstallEnvironment instances rooted at project_root."""

    def _make(
        platform: Optional[PlatformDescriptor] = None,
        config: Optional[InstallerConfig] = None,
        **kwargs,
    ) -> InstallEnvironment:
        return InstallEnvironment(
            platform=platform or linux_x64,
            project_root=project_root,
            config=config or InstallerConfig(),
            **kwargs,
        )

    return _make
