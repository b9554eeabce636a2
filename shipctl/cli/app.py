from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import NoReturn

import typer

from shipctl import __version__
from shipctl.cli.context import CLIContext, build_context
from shipctl.core.errors import ErrorCode
from shipctl.core.result import Err
from shipctl.git.repository import Repository
from shipctl.output.console import Style
from shipctl.output.errors import print_release_error
from shipctl.services.dev import DevService
from shipctl.services.release.builder import build_local
from shipctl.services.release.changelog import read_latest_entry
from shipctl.services.release.sequencer import ReleaseAction, ReleaseContext, run_release

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
)


class Mode(StrEnum):
    dev = "dev"
    build = "build"


USAGE = """\
Usage:
  shipctl --mode <dev|build>
  shipctl --build                           # cross-platform builds
  shipctl [--commit] [--tag] [--push]       # git operations
  shipctl --release                         # create GitHub release
  shipctl --build --commit --tag --push --release   # full release flow"""


def _usage_error(message: str) -> NoReturn:
    typer.echo(f"error: {message}", err=True)
    typer.echo(USAGE, err=True)
    raise typer.Exit(code=int(ErrorCode.FAILED))


def requested_actions(
    *,
    build: bool,
    commit: bool,
    tag: bool,
    push: bool,
    release: bool,
) -> frozenset[ReleaseAction]:
    flags = {
        ReleaseAction.BUILD: build,
        ReleaseAction.COMMIT: commit,
        ReleaseAction.TAG: tag,
        ReleaseAction.PUSH: push,
        ReleaseAction.RELEASE: release,
    }
    return frozenset(action for action, enabled in flags.items() if enabled)


def _run_dev(ctx: CLIContext) -> None:
    service = DevService(root=ctx.project.root, config=ctx.config, console=ctx.console)
    raise typer.Exit(code=service.run())


def _run_local_build(ctx: CLIContext) -> None:
    result = build_local(
        root=ctx.project.root,
        config=ctx.config,
        console=ctx.console,
        platform=ctx.platform,
    )
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=int(ErrorCode.FAILED))
    ctx.console.info(f"binary available at: {result.value}")


def _run_release(
    ctx: CLIContext,
    actions: frozenset[ReleaseAction],
    changelog: Path | None,
) -> None:
    path = changelog or ctx.project.changelog_path(ctx.config)
    ctx.console.info(f"reading changelog: {path}")
    entry = read_latest_entry(path)
    if isinstance(entry, Err):
        print_release_error(entry.error, ctx.console)
        raise typer.Exit(code=int(ErrorCode.FAILED))
    ctx.console.success(f"parsed changelog: {entry.value.tag} - {entry.value.summary}")

    context = ReleaseContext(
        root=ctx.project.root,
        config=ctx.config,
        console=ctx.console,
        repo=Repository(ctx.project.root),
        entry=entry.value,
    )
    result = run_release(actions=actions, context=context)
    if isinstance(result, Err):
        aborted = result.error
        ctx.console.newline()
        ctx.console.error(f"release aborted at step '{aborted.action}'")
        print_release_error(aborted.error, ctx.console)
        if aborted.completed:
            done = ", ".join(a.value for a in aborted.completed)
            ctx.console.print(f"already completed (not rolled back): {done}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.FAILED))

    ctx.console.newline()
    ctx.console.success("release actions completed")


@app.command()
def shipctl(
    mode: str | None = typer.Option(
        None,
        "--mode",
        help="dev: build the frontend and run the backend; build: local binary",
        show_default=False,
    ),
    build: bool = typer.Option(False, "--build", help="Cross-compile release binaries"),
    commit: bool = typer.Option(False, "--commit", help="Stage and commit all changes"),
    tag: bool = typer.Option(False, "--tag", help="Create the v<version> tag"),
    push: bool = typer.Option(False, "--push", help="Push commits, then tags"),
    release: bool = typer.Option(False, "--release", help="Create the GitHub release"),
    root: Path | None = typer.Option(
        None,
        "--root",
        help="Project root (overrides auto detection)",
        show_default=False,
    ),
    changelog: Path | None = typer.Option(
        None,
        "--changelog",
        help="Changelog file (default: from shipctl.toml)",
        show_default=False,
    ),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Build, tag and publish releases from the latest changelog entry."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    actions = requested_actions(build=build, commit=commit, tag=tag, push=push, release=release)

    if mode is not None:
        if mode not in {m.value for m in Mode}:
            _usage_error(f"invalid mode: {mode}")
        ctx = build_context(root)
        if mode == Mode.dev:
            _run_dev(ctx)
        else:
            _run_local_build(ctx)
        return

    if not actions:
        _usage_error("missing mode or action")

    _run_release(build_context(root), actions, changelog)


def main() -> None:
    app()
