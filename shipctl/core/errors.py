"""Process exit codes.

The release flow is all-or-nothing from the shell's point of view: any caught
failure, an unknown mode or a missing action exits with ``FAILED``.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the CLI. Values are part of the public interface."""

    OK = 0
    FAILED = 1
