"""Release error taxonomy.

Every error is fatal for the run: the sequencer stops at the first one and
the CLI renders it (see ``shipctl.output.errors``).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal


@dataclass(frozen=True, slots=True)
class ChangelogUnreadable:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class EntryNotFound:
    """No ``# <version> - <summary>`` header in the changelog."""


@dataclass(frozen=True, slots=True)
class MalformedHeader:
    line_number: int
    line: str


@dataclass(frozen=True, slots=True)
class CleanTree:
    """Nothing to commit."""


@dataclass(frozen=True, slots=True)
class TagExists:
    tag: str


@dataclass(frozen=True, slots=True)
class MissingDependency:
    name: str
    hint: str


@dataclass(frozen=True, slots=True)
class BuildFailed:
    target: str
    returncode: int
    detail: str = ""


@dataclass(frozen=True, slots=True)
class PushFailed:
    what: Literal["commits", "tags"]
    detail: str = ""


@dataclass(frozen=True, slots=True)
class ProcessFailed:
    command: str
    returncode: int
    detail: str = ""


@dataclass(frozen=True, slots=True)
class AssetsMissing:
    path: Path


ChangelogError = ChangelogUnreadable | EntryNotFound | MalformedHeader

ReleaseError = (
    ChangelogUnreadable
    | EntryNotFound
    | MalformedHeader
    | CleanTree
    | TagExists
    | MissingDependency
    | BuildFailed
    | PushFailed
    | ProcessFailed
    | AssetsMissing
)
