"""Tests for the shipctl command line."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from shipctl import __version__
from shipctl.cli import app as app_mod
from shipctl.cli.app import app, requested_actions
from shipctl.cli.context import CLIContext
from shipctl.core.config import Config
from shipctl.core.project import Project
from shipctl.core.result import Err, Ok, Result
from shipctl.output.console import MockConsole
from shipctl.platform.detection import Arch, Platform, PlatformInfo
from shipctl.services.release.changelog import ChangelogEntry
from shipctl.services.release.errors import (
    BuildFailed,
    ChangelogError,
    ChangelogUnreadable,
    TagExists,
)
from shipctl.services.release.sequencer import (
    ReleaseAborted,
    ReleaseAction,
    ReleaseContext,
    ReleaseRun,
    SequenceState,
)

runner = CliRunner()

ENTRY = ChangelogEntry(version="1.2.3", summary="Fix bug", description="* did X")


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def cli_ctx(
    tmp_path: Path, console: MockConsole, monkeypatch: pytest.MonkeyPatch
) -> CLIContext:
    ctx = CLIContext(
        project=Project(root=tmp_path),
        platform=PlatformInfo(platform=Platform.LINUX, arch=Arch.X64),
        config=Config(),
        console=console,
    )
    monkeypatch.setattr(app_mod, "build_context", lambda root=None: ctx)
    return ctx


class _Recorder:
    def __init__(self) -> None:
        self.changelog_paths: list[Path] = []
        self.actions: list[frozenset[ReleaseAction]] = []
        self.outcome: Result[ReleaseRun, ReleaseAborted] = Ok(
            ReleaseRun(state=SequenceState.DONE)
        )
        self.entry: Result[ChangelogEntry, ChangelogError] = Ok(ENTRY)

    def read_latest_entry(self, path: Path) -> Result[ChangelogEntry, ChangelogError]:
        self.changelog_paths.append(path)
        return self.entry

    def run_release(
        self, *, actions: Iterable[ReleaseAction], context: ReleaseContext
    ) -> Result[ReleaseRun, ReleaseAborted]:
        assert context.entry == ENTRY
        self.actions.append(frozenset(actions))
        return self.outcome


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> _Recorder:
    rec = _Recorder()
    monkeypatch.setattr(app_mod, "read_latest_entry", rec.read_latest_entry)
    monkeypatch.setattr(app_mod, "run_release", rec.run_release)
    return rec


# =============================================================================
# Argument handling
# =============================================================================


class TestArguments:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_action_is_a_usage_error(self) -> None:
        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "missing mode or action" in result.output
        assert "Usage:" in result.output

    def test_unknown_mode(self) -> None:
        result = runner.invoke(app, ["--mode", "deploy"])

        assert result.exit_code == 1
        assert "invalid mode: deploy" in result.output

    def test_requested_actions(self) -> None:
        actions = requested_actions(build=True, commit=False, tag=True, push=False, release=True)
        assert actions == {ReleaseAction.BUILD, ReleaseAction.TAG, ReleaseAction.RELEASE}


# =============================================================================
# Modes
# =============================================================================


class TestModes:
    def test_local_build(
        self,
        cli_ctx: CLIContext,
        console: MockConsole,
        recorder: _Recorder,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        binary = cli_ctx.project.root / "tool"

        def fake_build_local(**kwargs: object) -> Result[Path, BuildFailed]:
            assert kwargs["platform"] == cli_ctx.platform
            return Ok(binary)

        monkeypatch.setattr(app_mod, "build_local", fake_build_local)

        result = runner.invoke(app, ["--mode", "build", "--tag"])

        assert result.exit_code == 0
        assert console.find(f"binary available at: {binary}")
        assert recorder.actions == []

    def test_local_build_failure(
        self, cli_ctx: CLIContext, console: MockConsole, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fake_build_local(**kwargs: object) -> Result[Path, BuildFailed]:
            del kwargs
            return Err(BuildFailed(target="tool", returncode=1))

        monkeypatch.setattr(app_mod, "build_local", fake_build_local)

        result = runner.invoke(app, ["--mode", "build"])

        assert result.exit_code == 1
        assert console.has_error()

    @pytest.mark.parametrize("code", [0, 1])
    def test_dev_exit_code(
        self, cli_ctx: CLIContext, monkeypatch: pytest.MonkeyPatch, code: int
    ) -> None:
        class FakeDev:
            def __init__(self, **kwargs: object) -> None:
                assert kwargs["root"] == cli_ctx.project.root

            def run(self) -> int:
                return code

        monkeypatch.setattr(app_mod, "DevService", FakeDev)

        result = runner.invoke(app, ["--mode", "dev"])

        assert result.exit_code == code


# =============================================================================
# Release actions
# =============================================================================


@pytest.mark.usefixtures("cli_ctx")
class TestRelease:
    def test_passes_requested_actions(self, recorder: _Recorder, console: MockConsole) -> None:
        result = runner.invoke(app, ["--push", "--tag"])

        assert result.exit_code == 0
        assert recorder.actions == [frozenset({ReleaseAction.TAG, ReleaseAction.PUSH})]
        assert console.find("parsed changelog: v1.2.3 - Fix bug")
        assert console.find("release actions completed")

    def test_default_changelog_path(self, recorder: _Recorder, cli_ctx: CLIContext) -> None:
        runner.invoke(app, ["--commit"])
        assert recorder.changelog_paths == [cli_ctx.project.root / "changelog.md"]

    def test_changelog_override(self, recorder: _Recorder, tmp_path: Path) -> None:
        custom = tmp_path / "docs" / "CHANGES.md"

        runner.invoke(app, ["--commit", "--changelog", str(custom)])

        assert recorder.changelog_paths == [custom]

    def test_unreadable_changelog(self, recorder: _Recorder, console: MockConsole) -> None:
        recorder.entry = Err(ChangelogUnreadable(path=Path("changelog.md"), reason="missing"))

        result = runner.invoke(app, ["--tag"])

        assert result.exit_code == 1
        assert recorder.actions == []
        assert console.find("cannot read changelog")

    def test_aborted_run(self, recorder: _Recorder, console: MockConsole) -> None:
        recorder.outcome = Err(
            ReleaseAborted(
                action=ReleaseAction.TAG,
                error=TagExists(tag="v1.2.3"),
                completed=(ReleaseAction.COMMIT,),
            )
        )

        result = runner.invoke(app, ["--commit", "--tag"])

        assert result.exit_code == 1
        assert console.find("release aborted at step 'tag'")
        assert console.find("git tag 'v1.2.3' already exists")
        assert console.find("already completed (not rolled back): commit")
