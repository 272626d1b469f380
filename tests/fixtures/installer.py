"""Reusable Client SDK, archive and builder fixtures for testing.

Archives are built on the fly so tests never need network access or a real
Client SDK installation.
"""

import io
import tarfile
import zipfile
from pathlib import Path
from typing import Dict

import pytest

from onedb_installer.installer.builder import BuildResult, NativeBuilder


SDK_ARCHIVE_ENTRIES = {
    "onedb-odbc-driver/incl/cli/infxcli.h": b"/* header */\n",
    "onedb-odbc-driver/lib/libifcli.so": b"\x7fELF",
}

BUILD_ZIP_ENTRIES = {
    "build/Release/odbc_bindings_linux.node.10.24.1": b"linux-v10",
    "build/Release/odbc_bindings_linux.node.11.15.0": b"linux-v11",
    "build/Release/odbc_bindings_linux.node.12.22.12": b"linux-v12",
    "build/Release/odbc_bindings_linux.node.13.14.0": b"linux-v13",
    "build/Release/odbc_bindings_linux.node": b"linux-default",
    "build/Release/odbc_bindings.node.10.24.1": b"win-v10",
    "build/Release/odbc_bindings.node.12.22.12": b"win-v12",
    "build/Release/odbc_bindings.node": b"win-default",
}


def make_sdk_tree(root: Path, lib_name: str = "lib") -> Path:
    """Create a minimal Client SDK layout (incl/cli and a lib dir)."""
    (root / "incl" / "cli").mkdir(parents=True)
    (root / "incl" / "cli" / "infxcli.h").write_text("/* header */\n")
    (root / lib_name).mkdir()
    (root / lib_name / "libifcli.so").write_bytes(b"\x7fELF")
    return root


def write_zip(path: Path, entries: Dict[str, bytes]) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return path


def write_targz(path: Path, entries: Dict[str, bytes]) -> Path:
    with tarfile.open(path, "w:gz") as tar:
        for name, data in entries.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return path


def sdk_targz_bytes(tmp_path: Path) -> bytes:
    """Bytes of a tar.gz laid out like the published Linux SDK archive."""
    path = write_targz(tmp_path / "sdk-fixture.tar.gz", SDK_ARCHIVE_ENTRIES)
    return path.read_bytes()


class FakeBuilder(NativeBuilder):
    """NativeBuilder that records calls and returns a canned result."""

    def __init__(self, success: bool = True, returncode: int = 1):
        self.success = success
        self.returncode = returncode
        self.calls = []

    def build(self, sdk_path: str, downloaded: bool) -> BuildResult:
        self.calls.append((sdk_path, downloaded))
        if self.success:
            return BuildResult(success=True, returncode=0)
        return BuildResult(
            success=False,
            returncode=self.returncode,
            error=f"node-gyp exited with code {self.returncode}",
        )


@pytest.fixture
def sdk_home(tmp_path) -> Path:
    """A complete Client SDK installed outside the project."""
    return make_sdk_tree(tmp_path / "csdk")


@pytest.fixture
def build_zip(project_root) -> Path:
    """Bundled precompiled binding archive in the project root."""
    return write_zip(project_root / "build.zip", BUILD_ZIP_ENTRIES)
