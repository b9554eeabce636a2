"""Subprocess execution with Result-based error handling.

Thin wrapper around subprocess.run. Every external tool (go, git, gh, the
frontend bundler) goes through here so that failures come back as values:

    result = run(["git", "rev-parse", "--short", "HEAD"], cwd=root)
    match result:
        case Ok(stdout):
            commit = stdout.strip()
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path

from shipctl.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_silent"]

# Exit statuses that mean "stopped by the user": negative values are how
# subprocess reports death by signal, 128+N is what shells report.
_INTERRUPT_RETURNCODES = frozenset(
    {
        -int(signal.SIGINT),
        -int(signal.SIGTERM),
        128 + int(signal.SIGINT),
        128 + int(signal.SIGTERM),
    }
)


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code of the process (-1 if it never ran or timed out).
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def interrupted(self) -> bool:
        """True if the process was stopped by SIGINT or SIGTERM."""
        return self.returncode in _INTERRUPT_RETURNCODES

    @property
    def detail(self) -> str:
        """Most useful diagnostic text, stderr first."""
        return self.stderr.strip() or self.stdout.strip()


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
    input: str | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Full environment (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).
        input: Text written to the process's stdin.

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            input=input,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=e.stdout if isinstance(e.stdout, str) else "",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=str(e),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_silent(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[None, ProcessError]:
    """Execute a command without capturing output.

    Output streams to the terminal, so the error carries no stdout/stderr.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Full environment (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(None) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=str(e),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout="",
                stderr="",
            )
        )

    return Ok(None)
