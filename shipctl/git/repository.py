"""Git repository abstraction.

The release flow only needs a handful of git operations: a status check,
stage/commit, tag lookup/create, push, and two read-only queries used for
build metadata and the release URL. All of them return Result types.

Usage:
    repo = Repository(Path("/path/to/project"))

    match repo.status():
        case Ok(status):
            if status.is_clean:
                print("nothing to commit")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from shipctl.core.result import Err, Ok, Result
from shipctl.platform.process import ProcessError
from shipctl.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
    "github_slug",
]

_GITHUB_REMOTE = re.compile(r"github\.com[:/]+([^/\s]+)/([^/\s]+?)(?:\.git)?/?$")


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in git status.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Working tree state: current branch and pending changes."""

    branch: str
    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        """True if there is nothing to commit."""
        return len(self.entries) == 0


def github_slug(remote_url: str) -> str | None:
    """Extract ``owner/name`` from a GitHub remote URL (https or ssh)."""
    match = _GITHUB_REMOTE.search(remote_url.strip())
    if match is None:
        return None
    return f"{match.group(1)}/{match.group(2)}"


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def status(self) -> Result[GitStatus, GitError]:
        """Get repository status (`git status --porcelain=v1 -b`)."""
        result = self._run(["status", "--porcelain=v1", "-b"])
        match result:
            case Err(e):
                return Err(self._error("status", e))
            case Ok(stdout):
                return Ok(self._parse_status(stdout))

    def add_all(self) -> Result[None, GitError]:
        """Stage every pending change."""
        result = self._run(["add", "."])
        if isinstance(result, Err):
            return Err(self._error("add .", result.error))
        return Ok(None)

    def commit(self, message: str) -> Result[None, GitError]:
        """Commit staged changes; the message is passed on stdin."""
        result = self._run(["commit", "--file=-"], input=message)
        if isinstance(result, Err):
            return Err(self._error("commit", result.error))
        return Ok(None)

    def tag_exists(self, tag: str) -> Result[bool, GitError]:
        result = self._run(["tag", "-l", tag])
        match result:
            case Err(e):
                return Err(self._error("tag -l", e))
            case Ok(stdout):
                return Ok(tag in stdout.split())

    def create_tag(self, tag: str, message: str) -> Result[None, GitError]:
        """Create an annotated tag on HEAD."""
        result = self._run(["tag", "-a", tag, "-m", message])
        if isinstance(result, Err):
            return Err(self._error("tag -a", result.error))
        return Ok(None)

    def push(self, remote: str | None = None, *, tags: bool = False) -> Result[None, GitError]:
        """Push commits, or all tags when ``tags`` is set.

        Without ``remote`` git pushes to the branch's configured upstream.
        """
        args = ["push"]
        if remote:
            args.append(remote)
        if tags:
            args.append("--tags")
        result = self._run(args)
        if isinstance(result, Err):
            return Err(self._error(" ".join(args), result.error))
        return Ok(None)

    def short_head(self) -> str | None:
        """Short hash of HEAD, None if unavailable (no repo, no commits)."""
        result = self._run(["rev-parse", "--short", "HEAD"])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def remote_url(self, remote: str = "origin") -> str | None:
        result = self._run(["remote", "get-url", remote])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def _run(self, args: list[str], *, input: str | None = None) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = _GIT_NETWORK_TIMEOUT_SECONDS if command == "push" else _GIT_TIMEOUT_SECONDS
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=timeout,
            input=input,
        )

    def _error(self, command: str, e: ProcessError) -> GitError:
        return GitError(
            command=command,
            message=e.detail or f"git {command} failed",
            returncode=e.returncode,
        )

    def _parse_status(self, output: str) -> GitStatus:
        """Parse git status --porcelain=v1 -b output."""
        lines = [ln for ln in output.splitlines() if ln.strip()]
        if not lines:
            return GitStatus(branch="")

        # First line is branch info: ## branch...upstream [ahead N, behind M]
        branch = ""
        if lines[0].startswith("##"):
            head = lines[0][2:].strip().split(" [", 1)[0]
            branch = head.split("...", 1)[0].strip()
            lines = lines[1:]

        entries: list[StatusEntry] = []
        for line in lines:
            if len(line) < 4:
                continue
            entries.append(StatusEntry(xy=line[:2], path=line[3:]))

        return GitStatus(branch=branch, entries=tuple(entries))
