"""
Unit tests for precompiled binding selection and installation.
"""

import pytest

from onedb_installer.core.exceptions import (
    BinaryInstallError,
    FallbackUnavailableError,
    SdkNotFoundError,
)
from onedb_installer.core.platform import PlatformDescriptor
from onedb_installer.installer.fallback import (
    BINARY_VARIANTS,
    install_precompiled,
    select_binary_variant,
)
from onedb_installer.installer.sdk import SdkLocation, SdkOrigin
from tests.fixtures.installer import write_zip

LINUX_BASE = "build/Release/odbc_bindings_linux.node"
WIN_BASE = "build/Release/odbc_bindings.node"


class TestSelectBinaryVariant:
    @pytest.mark.parametrize(
        "version,entry",
        [
            ((8, 5), f"{LINUX_BASE}.10.24.1"),
            ((10, 0), f"{LINUX_BASE}.10.24.1"),
            ((10, 99), f"{LINUX_BASE}.10.24.1"),
            ((11, 0), f"{LINUX_BASE}.11.15.0"),
            ((12, 3), f"{LINUX_BASE}.12.22.12"),
            ((13, 14), f"{LINUX_BASE}.13.14.0"),
            ((14, 0), LINUX_BASE),
            ((15, 0), LINUX_BASE),
            ((20, 1), LINUX_BASE),
        ],
    )
    def test_linux_ladder(self, version, entry):
        assert select_binary_variant("linux", version).entry_path == entry

    def test_windows_entries(self):
        assert select_binary_variant("win32", (12, 3)).entry_path == f"{WIN_BASE}.12.22.12"
        assert select_binary_variant("win32", (16, 0)).entry_path == WIN_BASE

    def test_unknown_version_selects_default(self):
        assert select_binary_variant("linux", None).entry_path == LINUX_BASE

    def test_monotonic(self):
        variants = BINARY_VARIANTS["linux"]
        versions = [(major, minor) for major in range(8, 17) for minor in (0, 5, 99)]

        indexes = [
            variants.index(select_binary_variant("linux", v)) for v in versions
        ]

        assert indexes == sorted(indexes)

    def test_unsupported_os(self):
        with pytest.raises(FallbackUnavailableError):
            select_binary_variant("darwin", (12, 3))

    def test_default_is_last(self):
        for variants in BINARY_VARIANTS.values():
            assert variants[-1].upper_bound is None
            bounds = [v.upper_bound for v in variants[:-1]]
            assert bounds == sorted(bounds)


class TestInstallPrecompiled:
    def _location(self, env):
        return SdkLocation(env.sdk_cache_dir, SdkOrigin.LOCAL_CACHE, "sdk")

    def test_installs_matching_entry_only(self, make_env, build_zip):
        env = make_env()

        path = install_precompiled(env, self._location(env))

        assert path == env.binding_path
        assert path.read_bytes() == b"linux-v12"
        assert list(env.binding_path.parent.iterdir()) == [env.binding_path]
        assert not build_zip.exists()

    def test_windows_entry(self, make_env, build_zip, win_x64):
        env = make_env(platform=win_x64)

        install_precompiled(env, self._location(env))

        assert env.binding_path.read_bytes() == b"win-v12"

    def test_replaces_stale_build(self, make_env, build_zip):
        env = make_env()
        stale = env.build_dir / "Release" / "stale.o"
        stale.parent.mkdir(parents=True)
        stale.write_bytes(b"old")

        install_precompiled(env, self._location(env))

        assert not stale.exists()
        assert env.binding_path.exists()

    def test_requires_sdk_location(self, make_env, build_zip):
        with pytest.raises(SdkNotFoundError, match="CSDK_HOME"):
            install_precompiled(make_env(), None)
        assert build_zip.exists()

    def test_requires_bundled_archive(self, make_env):
        env = make_env()
        with pytest.raises(FallbackUnavailableError, match="build.zip"):
            install_precompiled(env, self._location(env))

    def test_missing_entry(self, make_env, project_root):
        write_zip(project_root / "build.zip", {"build/Release/other.node": b"x"})
        env = make_env()

        with pytest.raises(BinaryInstallError, match="Installation Failed"):
            install_precompiled(env, self._location(env))
        assert not env.binding_path.exists()

    def test_unsupported_platform(self, make_env, build_zip):
        env = make_env(platform=PlatformDescriptor("aix", "ppc64", (12, 3)))
        with pytest.raises(FallbackUnavailableError):
            install_precompiled(env, self._location(env))
