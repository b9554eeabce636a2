"""Changelog parsing.

A changelog is a list of entries, newest first:

    # 1.2.3 - Fix bug
    - did X
    - did Y
    # 1.2.2 - Old
    - Z

The topmost entry is the one being released. Only ``-`` lines of its body
become release notes; any other text is ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from shipctl.core.result import Err, Ok, Result
from shipctl.services.release.errors import (
    ChangelogError,
    ChangelogUnreadable,
    EntryNotFound,
    MalformedHeader,
)

__all__ = [
    "ChangelogEntry",
    "parse_latest_entry",
    "read_latest_entry",
]

_VERSION = r"\d+\.\d+\.\d+[a-z]?"
_HEADER_START = re.compile(rf"^#\s*({_VERSION})\s*-")
_HEADER = re.compile(rf"^#\s*({_VERSION})\s*-\s*(.*)")


@dataclass(frozen=True, slots=True)
class ChangelogEntry:
    """The latest changelog entry.

    Attributes:
        version: ``MAJOR.MINOR.PATCH`` with an optional lowercase suffix letter
        summary: One-line release title
        description: ``* ``-prefixed bullets joined by newlines (may be empty)
    """

    version: str
    summary: str
    description: str

    @property
    def tag(self) -> str:
        return f"v{self.version}"

    @property
    def commit_message(self) -> str:
        if not self.description:
            return self.summary
        return f"{self.summary}\n\n{self.description}"

    @property
    def release_notes(self) -> str:
        return f"{self.summary}\n\n## Changes\n{self.description}"


def _bullets(lines: list[str]) -> list[str]:
    out: list[str] = []
    for raw in lines:
        line = raw.strip()
        if not line.startswith("-"):
            continue
        bullet = f"* {line[1:].strip()}"
        # "* " alone is a stray empty bullet.
        if len(bullet) > 2:
            out.append(bullet)
    return out


def parse_latest_entry(document: str) -> Result[ChangelogEntry, ChangelogError]:
    """Extract the first entry of a changelog document.

    Args:
        document: Full changelog text

    Returns:
        Ok(ChangelogEntry) for the topmost entry
        Err(EntryNotFound) if no header line exists
        Err(MalformedHeader) if the header does not split into version/summary
    """
    lines = document.splitlines()

    start = next((i for i, line in enumerate(lines) if _HEADER_START.match(line)), None)
    if start is None:
        return Err(EntryNotFound())

    end = next(
        (i for i in range(start + 1, len(lines)) if _HEADER_START.match(lines[i])),
        len(lines),
    )

    header = lines[start]
    match = _HEADER.match(header)
    if match is None:
        return Err(MalformedHeader(line_number=start + 1, line=header))

    return Ok(
        ChangelogEntry(
            version=match.group(1).strip(),
            summary=match.group(2).strip(),
            description="\n".join(_bullets(lines[start + 1 : end])),
        )
    )


def read_latest_entry(path: Path) -> Result[ChangelogEntry, ChangelogError]:
    """Read a changelog file and parse its latest entry."""
    try:
        document = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(ChangelogUnreadable(path=path, reason=str(e)))
    return parse_latest_entry(document)
