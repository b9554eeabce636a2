"""Typed configuration loading and access.

The optional ``shipctl.toml`` at the project root is parsed into frozen
dataclasses. Every key has a default, so a project without the file behaves
like the layout the tool was written for (Go backend at the root, Astro
frontend in ``frontend/``, binaries in ``bin/``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import cast

from .result import Err, Ok, Result

__all__ = [
    "CONFIG_FILENAME",
    "BuildConfig",
    "Config",
    "ConfigError",
    "DevConfig",
    "GitConfig",
    "ProjectConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "shipctl.toml"

DEFAULT_CHANGELOG = "changelog.md"
DEFAULT_OUTPUT_DIR = "bin"
DEFAULT_LDFLAGS_PACKAGE = "main"
DEFAULT_FRONTEND_BUILD = ("bunx", "--bun", "astro", "build")
DEFAULT_BACKEND_RUN = ("go", "run", "main.go")

StrDict = dict[str, object]


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """What is being released.

    Attributes:
        product: Binary name prefix. Empty means "use the root directory name".
        repository: GitHub ``owner/name`` slug, used for the release URL.
        changelog: Changelog path relative to the project root.
    """

    product: str = ""
    repository: str | None = None
    changelog: str = DEFAULT_CHANGELOG


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """Go build settings."""

    source: str = "."
    output_dir: str = DEFAULT_OUTPUT_DIR
    ldflags_package: str = DEFAULT_LDFLAGS_PACKAGE


@dataclass(frozen=True, slots=True)
class GitConfig:
    # Empty: push to the branch's configured upstream.
    remote: str = ""


@dataclass(frozen=True, slots=True)
class DevConfig:
    """Development mode: frontend bundle embedded into the backend."""

    frontend_dir: str = "frontend"
    frontend_build: tuple[str, ...] = DEFAULT_FRONTEND_BUILD
    frontend_dist: str = "frontend/dist"
    embed_dir: str = "backend/mpa"
    backend_dir: str = "backend"
    backend_run: tuple[str, ...] = DEFAULT_BACKEND_RUN


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    project: ProjectConfig = field(default_factory=ProjectConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    git: GitConfig = field(default_factory=GitConfig)
    dev: DevConfig = field(default_factory=DevConfig)

    def product_name(self, root: Path) -> str:
        """Binary name prefix, falling back to the project directory name."""
        return self.project.product or root.name

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        project = _get_table(data, "project") or {}
        build = _get_table(data, "build") or {}
        git = _get_table(data, "git") or {}
        dev = _get_table(data, "dev") or {}

        return cls(
            project=ProjectConfig(
                product=_get_str(project, "product") or "",
                repository=_get_str(project, "repository"),
                changelog=_get_str(project, "changelog") or DEFAULT_CHANGELOG,
            ),
            build=BuildConfig(
                source=_get_str(build, "source") or ".",
                output_dir=_get_str(build, "output_dir") or DEFAULT_OUTPUT_DIR,
                ldflags_package=_get_str(build, "ldflags_package") or DEFAULT_LDFLAGS_PACKAGE,
            ),
            git=GitConfig(remote=_get_str(git, "remote") or ""),
            dev=DevConfig(
                frontend_dir=_get_str(dev, "frontend_dir") or "frontend",
                frontend_build=_get_command(dev, "frontend_build") or DEFAULT_FRONTEND_BUILD,
                frontend_dist=_get_str(dev, "frontend_dist") or "frontend/dist",
                embed_dir=_get_str(dev, "embed_dir") or "backend/mpa",
                backend_dir=_get_str(dev, "backend_dir") or "backend",
                backend_run=_get_command(dev, "backend_run") or DEFAULT_BACKEND_RUN,
            ),
        )


def _as_str_dict(obj: object) -> StrDict | None:
    if not isinstance(obj, dict):
        return None
    d = cast(dict[object, object], obj)
    if not all(isinstance(k, str) for k in d.keys()):
        return None
    return cast(StrDict, d)


def _get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return _as_str_dict(table.get(key))


def _get_str(table: Mapping[str, object], key: str) -> str | None:
    """String value, stripped. None if missing, not a str, or blank."""
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def _get_command(table: Mapping[str, object], key: str) -> tuple[str, ...] | None:
    """Command line given either as a list of strings or a single string."""
    value = table.get(key)
    if isinstance(value, str):
        parts = tuple(value.split())
        return parts or None
    if isinstance(value, list):
        items = cast(list[object], value)
        if items and all(isinstance(v, str) and v for v in items):
            return tuple(cast(list[str], items))
    return None


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data = _as_str_dict(tomllib.loads(content.decode("utf-8")))
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except OSError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to shipctl.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config, or the defaults when the file does not exist.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
