"""
Tests for the install and info command implementations.
"""

from argparse import Namespace
from unittest.mock import patch

import pytest

from onedb_installer.cli.commands import info, install
from onedb_installer.core.platform import PlatformDescriptor
from onedb_installer.installer.pipeline import InstallOutcome, InstallStatus

LINUX = PlatformDescriptor("linux", "x64", (12, 3))


def make_args(project_root, **kwargs):
    defaults = dict(
        project_root=project_root,
        config=None,
        verbose=False,
        quiet=False,
        runtime_version=None,
        archive=None,
    )
    defaults.update(kwargs)
    return Namespace(**defaults)


@pytest.fixture(autouse=True)
def fixed_platform():
    with patch(
        "onedb_installer.core.environment.detect_platform", return_value=LINUX
    ) as mock_detect:
        yield mock_detect


@pytest.fixture(autouse=True)
def clean_environ(monkeypatch):
    for name in (
        "CSDK_HOME",
        "INFORMIXDIR",
        "ONEDB_INSTALLER_URL",
        "npm_config_onedb_installer_url",
    ):
        monkeypatch.delenv(name, raising=False)


class TestInstallCommand:
    @patch("onedb_installer.cli.commands.install.Installer")
    def test_exit_code_from_outcome(self, mock_installer, project_root):
        mock_installer.return_value.run.return_value = InstallOutcome(
            InstallStatus.INSTALLED_PRECOMPILED
        )

        assert install.run(make_args(project_root)) == 0

        env = mock_installer.call_args[0][0]
        assert env.project_root == project_root.resolve()

    @patch("onedb_installer.cli.commands.install.Installer")
    def test_failed_outcome(self, mock_installer, project_root):
        mock_installer.return_value.run.return_value = InstallOutcome(
            InstallStatus.FAILED, reason="nope"
        )
        assert install.run(make_args(project_root)) == 1

    def test_missing_explicit_config(self, project_root):
        args = make_args(project_root, config=project_root / "missing.yaml")
        assert install.run(args) == 1

    @patch("onedb_installer.cli.commands.install.Installer")
    def test_default_config_file_loaded(self, mock_installer, project_root):
        (project_root / "onedb-install.yaml").write_text(
            "installer_url: https://mirror.example.com\n"
        )
        mock_installer.return_value.run.return_value = InstallOutcome(
            InstallStatus.BUILT_FROM_SOURCE
        )

        install.run(make_args(project_root))

        env = mock_installer.call_args[0][0]
        assert env.config.installer_url == "https://mirror.example.com"

    @patch("onedb_installer.cli.commands.install.Installer")
    def test_archive_option(self, mock_installer, project_root, tmp_path):
        mock_installer.return_value.run.return_value = InstallOutcome(
            InstallStatus.BUILT_FROM_SOURCE
        )
        archive = tmp_path / "sdk.tar.gz"

        install.run(make_args(project_root, archive=archive))

        assert mock_installer.call_args[0][0].sdk_archive == archive


class TestInfoCommand:
    def test_reports_download(self, project_root, capsys):
        assert info.run(make_args(project_root)) == 0

        out = capsys.readouterr().out
        assert "linux-x64" in out
        assert "OneDB-Linux64-ODBC-Driver.tar.gz" in out
        assert "odbc_bindings_linux.node.12.22.12" in out

    def test_no_side_effects(self, project_root):
        info.run(make_args(project_root))
        assert list(project_root.iterdir()) == []

    def test_reports_sdk_home(self, project_root, sdk_home, monkeypatch, capsys):
        monkeypatch.setenv("CSDK_HOME", str(sdk_home))

        info.run(make_args(project_root))

        assert str(sdk_home) in capsys.readouterr().out

    def test_unsupported_platform(self, project_root, fixed_platform, capsys):
        fixed_platform.return_value = PlatformDescriptor("darwin", "arm64", (14, 0))

        assert info.run(make_args(project_root)) == 1
        assert "MAC OS" in capsys.readouterr().out
