from __future__ import annotations

import shutil
from pathlib import Path

from shipctl.core.result import Err, Ok, Result
from shipctl.platform.process import run as run_process
from shipctl.services.release.errors import AssetsMissing, MissingDependency, ProcessFailed
from shipctl.services.release.timeouts import GH_TIMEOUT_SECONDS, GH_UPLOAD_TIMEOUT_SECONDS


def ensure_gh_available() -> Result[None, MissingDependency]:
    if shutil.which("gh") is None:
        return Err(
            MissingDependency(
                name="gh",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def collect_assets(output_dir: Path) -> Result[tuple[Path, ...], AssetsMissing]:
    """Files directly under the build output directory, sorted by name."""
    if not output_dir.is_dir():
        return Err(AssetsMissing(path=output_dir))
    files = tuple(sorted(p for p in output_dir.iterdir() if p.is_file()))
    if not files:
        return Err(AssetsMissing(path=output_dir))
    return Ok(files)


def create_release(
    *,
    root: Path,
    tag: str,
    notes: str,
) -> Result[None, ProcessFailed]:
    """Create a GitHub release for an existing tag, titled after the tag."""
    result = run_process(
        ["gh", "release", "create", tag, "--title", tag, "--notes", notes],
        cwd=root,
        timeout=GH_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(
            ProcessFailed(
                command="gh release create",
                returncode=result.error.returncode,
                detail=result.error.detail,
            )
        )
    return Ok(None)


def upload_release_assets(
    *,
    root: Path,
    tag: str,
    assets: tuple[Path, ...],
) -> Result[None, ProcessFailed]:
    result = run_process(
        ["gh", "release", "upload", tag, *(str(p) for p in assets)],
        cwd=root,
        timeout=GH_UPLOAD_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(
            ProcessFailed(
                command="gh release upload",
                returncode=result.error.returncode,
                detail=result.error.detail,
            )
        )
    return Ok(None)


def release_url(slug: str, tag: str) -> str:
    return f"https://github.com/{slug}/releases/tag/{tag}"
