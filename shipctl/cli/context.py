from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from shipctl.core.config import Config, load_config_or_default
from shipctl.core.errors import ErrorCode
from shipctl.core.project import Project, detect_project
from shipctl.core.result import Err
from shipctl.output.console import ConsoleProtocol, RichConsole
from shipctl.platform.detection import PlatformInfo, detect


@dataclass(frozen=True, slots=True)
class CLIContext:
    project: Project
    platform: PlatformInfo
    config: Config
    console: ConsoleProtocol


def build_context(root: Path | None = None) -> CLIContext:
    console = RichConsole()

    if root is not None:
        resolved = root.expanduser().resolve()
        if not resolved.is_dir():
            console.error(f"--root is not a directory: {resolved}")
            raise typer.Exit(code=int(ErrorCode.FAILED))
        project = Project(root=resolved)
    else:
        project_result = detect_project()
        if isinstance(project_result, Err):
            console.error(project_result.error.message)
            raise typer.Exit(code=int(ErrorCode.FAILED))
        project = project_result.value

    config_result = load_config_or_default(project.config_path)
    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        raise typer.Exit(code=int(ErrorCode.FAILED))

    return CLIContext(
        project=project,
        platform=detect(),
        config=config_result.value,
        console=console,
    )
