"""Project root detection.

The project root is the directory the release runs against: it holds the
changelog, the Go module and the git checkout.

It is identified, in order, by:
- the ``SHIPCTL_ROOT`` environment variable
- the nearest directory containing ``shipctl.toml``
- the nearest directory containing ``changelog.md``
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .config import CONFIG_FILENAME, DEFAULT_CHANGELOG, Config
from .result import Err, Ok, Result

__all__ = [
    "Project",
    "ProjectError",
    "detect_project",
    "ENV_ROOT",
]

ENV_ROOT = "SHIPCTL_ROOT"


@dataclass(frozen=True)
class ProjectError:
    """Error when the project root cannot be detected."""

    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class Project:
    """A detected project checkout."""

    root: Path

    @property
    def config_path(self) -> Path:
        """Path to shipctl.toml (may not exist)."""
        return self.root / CONFIG_FILENAME

    def changelog_path(self, config: Config) -> Path:
        return self.root / config.project.changelog


def _find_upward(start: Path, marker: str) -> Path | None:
    for parent in (start, *start.parents):
        if (parent / marker).is_file():
            return parent
    return None


def detect_project(start: Path | None = None) -> Result[Project, ProjectError]:
    """Detect the project root.

    Args:
        start: Directory to search from (defaults to cwd)

    Returns:
        Ok(Project) if found, Err(ProjectError) otherwise
    """
    env = os.environ.get(ENV_ROOT)
    if env:
        root = Path(env).expanduser().resolve()
        if root.is_dir():
            return Ok(Project(root=root))
        return Err(ProjectError(message=f"{ENV_ROOT} is not a directory: {root}"))

    origin = (start or Path.cwd()).resolve()
    for marker in (CONFIG_FILENAME, DEFAULT_CHANGELOG):
        found = _find_upward(origin, marker)
        if found is not None:
            return Ok(Project(root=found))

    return Err(
        ProjectError(
            message=f"no project found (looked for {CONFIG_FILENAME} or {DEFAULT_CHANGELOG})",
            searched_from=origin,
        )
    )
