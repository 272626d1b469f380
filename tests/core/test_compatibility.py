"""
Unit tests for the platform compatibility gate.
"""

import pytest

from onedb_installer.core.compatibility import check_compatibility
from onedb_installer.core.platform import PlatformDescriptor


class TestCheckCompatibility:
    """Tests for check_compatibility."""

    @pytest.mark.parametrize("version", [(10, 0), (12, 3), (20, 11)])
    def test_windows_x64_passes(self, version):
        result = check_compatibility(PlatformDescriptor("win32", "x64", version))
        assert result.valid
        assert result.warnings == []

    def test_linux_x64_passes(self):
        assert check_compatibility(PlatformDescriptor("linux", "x64", (12, 3))).valid

    def test_linux_other_arch_passes_with_warning(self):
        result = check_compatibility(PlatformDescriptor("linux", "arm64", (12, 3)))

        assert result.valid
        assert len(result.warnings) == 1
        assert "not completely supported" in result.warnings[0]

    def test_windows_32_bit_rejected(self):
        result = check_compatibility(PlatformDescriptor("win32", "x86", (12, 3)))

        assert not result.valid
        assert "Windows 32 bit not supported" in result.message

    def test_macos_rejected(self):
        result = check_compatibility(PlatformDescriptor("darwin", "x64", (12, 3)))

        assert not result.valid
        assert "does not support MAC OS" in result.message

    @pytest.mark.parametrize("os_name", ["aix", "os390", "other"])
    def test_other_os_rejected(self, os_name):
        result = check_compatibility(PlatformDescriptor(os_name, "x64", (12, 3)))
        assert not result.valid
        assert result.message

    @pytest.mark.parametrize("version", [(8, 16), (9, 11), (9, 99)])
    def test_old_runtime_rejected(self, version):
        result = check_compatibility(PlatformDescriptor("linux", "x64", version))

        assert not result.valid
        assert ">= 10.0" in result.message

    def test_unknown_runtime_rejected(self):
        result = check_compatibility(PlatformDescriptor("linux", "x64", None))

        assert not result.valid
        assert "Could not determine" in result.message

    def test_custom_minimum(self):
        descriptor = PlatformDescriptor("linux", "x64", (11, 4))
        assert not check_compatibility(descriptor, minimum=(12, 0)).valid

