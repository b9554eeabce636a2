"""Tests for platform/detection.py."""

from __future__ import annotations

from shipctl.platform.detection import Arch, Platform, PlatformInfo, detect


class TestPlatform:
    def test_goos(self) -> None:
        assert Platform.LINUX.goos == "linux"
        assert Platform.MACOS.goos == "darwin"
        assert Platform.WINDOWS.goos == "windows"
        assert Platform.UNKNOWN.goos is None

    def test_exe_name(self) -> None:
        assert Platform.WINDOWS.exe_name("tool") == "tool.exe"
        assert Platform.LINUX.exe_name("tool") == "tool"


class TestArch:
    def test_goarch(self) -> None:
        assert Arch.X64.goarch == "amd64"
        assert Arch.ARM64.goarch == "arm64"
        assert Arch.UNKNOWN.goarch is None


class TestPlatformInfo:
    def test_go_host(self) -> None:
        assert PlatformInfo(platform=Platform.MACOS, arch=Arch.ARM64).go_host == "darwin/arm64"
        assert PlatformInfo(platform=Platform.UNKNOWN, arch=Arch.X64).go_host == "unknown/amd64"

    def test_detect_is_cached(self) -> None:
        assert detect() is detect()
