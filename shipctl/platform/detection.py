"""Host platform and architecture detection.

Maps the running interpreter's OS and CPU onto the names the Go toolchain
uses (``GOOS`` / ``GOARCH``). Detection is cached.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache

__all__ = [
    "Platform",
    "Arch",
    "PlatformInfo",
    "detect",
    "detect_arch",
    "detect_platform",
]


class Platform(Enum):
    """Operating system platform."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def goos(self) -> str | None:
        """Go's name for this OS (None when unknown)."""
        return {
            Platform.LINUX: "linux",
            Platform.MACOS: "darwin",
            Platform.WINDOWS: "windows",
        }.get(self)

    def exe_name(self, name: str) -> str:
        """``name`` with the ``.exe`` suffix on Windows."""
        return f"{name}.exe" if self == Platform.WINDOWS else name


class Arch(Enum):
    """CPU architecture."""

    X64 = auto()
    ARM64 = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def goarch(self) -> str | None:
        return {Arch.X64: "amd64", Arch.ARM64: "arm64"}.get(self)


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    """Detected host platform. Use ``detect()`` to get an instance."""

    platform: Platform
    arch: Arch

    @property
    def go_host(self) -> str:
        """``GOOS/GOARCH`` label for messages."""
        return f"{self.platform.goos or self.platform}/{self.arch.goarch or self.arch}"


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Detect the current operating system (cached)."""
    # NOTE: avoid platform.system() on Windows, it may query WMI and hang.
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Platform.LINUX
    if system.startswith("darwin"):
        return Platform.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    return Platform.UNKNOWN


@lru_cache(maxsize=1)
def detect_arch() -> Arch:
    """Detect the current CPU architecture (cached)."""
    if detect_platform() == Platform.WINDOWS:
        env_arch = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        )
        machine = env_arch.lower()
    else:
        machine = _platform.machine().lower()
    if machine in ("x86_64", "amd64"):
        return Arch.X64
    if machine in ("aarch64", "arm64"):
        return Arch.ARM64
    return Arch.UNKNOWN


@lru_cache(maxsize=1)
def detect() -> PlatformInfo:
    """Detect host platform information (cached)."""
    return PlatformInfo(platform=detect_platform(), arch=detect_arch())
