"""Platform abstraction layer."""

from .detection import (
    Arch,
    Platform,
    PlatformInfo,
    detect,
)
from .process import (
    ProcessError,
    run,
    run_silent,
)

__all__ = [
    # detection
    "Arch",
    "Platform",
    "PlatformInfo",
    "detect",
    # process
    "ProcessError",
    "run",
    "run_silent",
]
