"""Error presentation utilities.

Centralized rendering of release errors so every entry point reports
failures the same way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shipctl.output.console import Style
from shipctl.services.release.errors import (
    AssetsMissing,
    BuildFailed,
    ChangelogUnreadable,
    CleanTree,
    EntryNotFound,
    MalformedHeader,
    MissingDependency,
    ProcessFailed,
    PushFailed,
    ReleaseError,
    TagExists,
)

if TYPE_CHECKING:
    from shipctl.output.console import ConsoleProtocol

__all__ = ["describe_release_error", "print_release_error"]


def describe_release_error(error: ReleaseError) -> tuple[str, str | None]:
    """Return (message, hint) for an error."""
    match error:
        case ChangelogUnreadable(path=path, reason=reason):
            return (f"cannot read changelog: {path}", reason)
        case EntryNotFound():
            return (
                "no changelog entry found",
                "expected a line like '# 1.2.3 - Summary'",
            )
        case MalformedHeader(line_number=n, line=line):
            return (
                f"cannot parse changelog header (line {n}): {line!r}",
                "expected: '# <version> - <summary>'",
            )
        case CleanTree():
            return ("no changes detected, nothing to commit", None)
        case TagExists(tag=tag):
            return (f"git tag '{tag}' already exists", "add a new entry to the changelog")
        case MissingDependency(name=name, hint=hint):
            return (f"{name}: missing", hint)
        case BuildFailed(target=target, returncode=rc, detail=detail):
            return (f"build failed for {target} (exit {rc})", detail or None)
        case PushFailed(what=what, detail=detail):
            return (f"failed to push {what}", detail or None)
        case ProcessFailed(command=command, returncode=rc, detail=detail):
            return (f"{command} failed (exit {rc})", detail or None)
        case AssetsMissing(path=path):
            return (f"no build output found: {path}", "build the artifacts first")


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a release error, with its hint dimmed on the next line."""
    message, hint = describe_release_error(error)
    console.error(message)
    if hint:
        console.print(f"hint: {hint}", Style.DIM)
