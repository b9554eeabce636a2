"""Go build driver.

Cross-compiles the backend for the six release targets, or builds a single
binary for the host. Build metadata is injected at link time:

    go build -ldflags "-X main.Version=1.2.3 -X main.BuildDate=... -X main.GitCommit=abc1234" \
        -o bin/<product>-linux-amd64 .
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from shipctl.core.config import Config
from shipctl.core.result import Err, Ok, Result
from shipctl.git.repository import Repository
from shipctl.output.console import ConsoleProtocol, Style
from shipctl.platform.detection import PlatformInfo
from shipctl.platform.process import run as run_process
from shipctl.services.release.errors import BuildFailed, ProcessFailed
from shipctl.services.release.targets import BuildTarget, build_targets
from shipctl.services.release.timeouts import GO_BUILD_TIMEOUT_SECONDS

__all__ = [
    "BuildInfo",
    "build_all",
    "build_local",
    "resolve_build_info",
]

DEV_VERSION = "dev"
UNKNOWN_COMMIT = "unknown"


@dataclass(frozen=True, slots=True)
class BuildInfo:
    """Values substituted into the binary's version variables."""

    version: str
    build_date: str
    commit: str

    def ldflags(self, package: str) -> str:
        return " ".join(
            (
                f"-X {package}.Version={self.version}",
                f"-X {package}.BuildDate={self.build_date}",
                f"-X {package}.GitCommit={self.commit}",
            )
        )


def _iso_timestamp(now: datetime) -> str:
    # Millisecond precision with a Z suffix, e.g. 2026-10-19T08:15:00.123Z
    stamp = now.astimezone(UTC).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def _current_commit(root: Path) -> str:
    return Repository(root).short_head() or UNKNOWN_COMMIT


def resolve_build_info(
    root: Path,
    version: str | None,
    *,
    now: datetime | None = None,
) -> BuildInfo:
    return BuildInfo(
        version=version or DEV_VERSION,
        build_date=_iso_timestamp(now or datetime.now(UTC)),
        commit=_current_commit(root),
    )


def _go_build(
    *,
    root: Path,
    config: Config,
    info: BuildInfo,
    output: Path,
    env_overrides: dict[str, str],
) -> Result[str, BuildFailed]:
    cmd = [
        "go",
        "build",
        "-ldflags",
        info.ldflags(config.build.ldflags_package),
        "-o",
        str(output),
        config.build.source,
    ]
    result = run_process(
        cmd,
        cwd=root,
        env={**os.environ, **env_overrides},
        timeout=GO_BUILD_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(
            BuildFailed(
                target=output.name,
                returncode=result.error.returncode,
                detail=result.error.detail,
            )
        )
    return Ok(result.value)


def _reset_dir(path: Path, root: Path) -> Result[None, ProcessFailed]:
    # Never empty the project itself or anything above it.
    target = path.resolve()
    if not target.is_relative_to(root.resolve()) or target == root.resolve():
        return Err(
            ProcessFailed(
                command=f"reset {path}",
                returncode=-1,
                detail="build output directory must be inside the project root",
            )
        )
    try:
        if path.exists():
            shutil.rmtree(path)
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(ProcessFailed(command=f"reset {path}", returncode=-1, detail=str(e)))
    return Ok(None)


def _print_artifacts(console: ConsoleProtocol, paths: tuple[Path, ...]) -> None:
    console.info("built binaries:")
    for path in paths:
        size_mib = path.stat().st_size / (1024 * 1024) if path.exists() else 0.0
        console.print(f"  {path.name}  ({size_mib:.1f} MiB)", Style.DIM)


def build_all(
    *,
    root: Path,
    config: Config,
    console: ConsoleProtocol,
    version: str | None,
    targets: tuple[BuildTarget, ...] | None = None,
) -> Result[tuple[Path, ...], BuildFailed | ProcessFailed]:
    """Cross-compile every release target into the output directory.

    The output directory is emptied first. Targets are built one at a time;
    the first failure stops the run and leaves earlier binaries in place.

    Returns:
        Ok(paths) of the built binaries, in target order
        Err(BuildFailed) naming the target that failed
    """
    selected = targets if targets is not None else build_targets(config.product_name(root))
    out_dir = root / config.build.output_dir

    with console.status(f"cleaning {config.build.output_dir}/"):
        reset = _reset_dir(out_dir, root)
    if isinstance(reset, Err):
        return reset

    info = resolve_build_info(root, version)
    console.print(
        f"version={info.version} commit={info.commit} date={info.build_date}", Style.DIM
    )

    built: list[Path] = []
    for target in selected:
        output = out_dir / target.output_name
        with console.status(f"building {target.output_name}"):
            result = _go_build(
                root=root,
                config=config,
                info=info,
                output=output,
                env_overrides=target.env,
            )
        if isinstance(result, Err):
            console.error(f"failed to build {target.output_name}")
            return result
        built.append(output)

    paths = tuple(built)
    console.success(f"built {len(paths)} binaries")
    _print_artifacts(console, paths)
    return Ok(paths)


def build_local(
    *,
    root: Path,
    config: Config,
    console: ConsoleProtocol,
    platform: PlatformInfo,
) -> Result[Path, BuildFailed]:
    """Build a development binary for the host platform at the project root."""
    output = root / platform.platform.exe_name(config.product_name(root))
    info = resolve_build_info(root, None)
    with console.status(f"building {output.name} for {platform.go_host}"):
        result = _go_build(
            root=root,
            config=config,
            info=info,
            output=output,
            env_overrides={"CGO_ENABLED": "0"},
        )
    if isinstance(result, Err):
        return result

    console.success(f"built {output.name}")
    return Ok(output)
