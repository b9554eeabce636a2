"""Release sequence.

The requested actions are an unordered set; execution order is fixed by
``RELEASE_STEPS``:

    build -> commit -> tag -> push -> release

Artifacts must exist before they are committed or uploaded, the tag must
name the new commit, and the tag must be on the remote before a release can
point at it. Each guard (clean tree, tag existence, ``gh`` availability) is
checked right before the mutation it protects.

The run is a small linear state machine: IDLE, then RUNNING(action) for each
requested step, ending in DONE or ABORTED(action, error). The first error
aborts the run; completed steps are not rolled back.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from enum import StrEnum
from pathlib import Path
from typing import Protocol

from shipctl.core.config import Config
from shipctl.core.result import Err, Ok, Result
from shipctl.git.repository import GitError, GitStatus, github_slug
from shipctl.output.console import ConsoleProtocol
from shipctl.services.release.builder import build_all
from shipctl.services.release.changelog import ChangelogEntry
from shipctl.services.release.errors import (
    CleanTree,
    ProcessFailed,
    PushFailed,
    ReleaseError,
    TagExists,
)
from shipctl.services.release.gh import (
    collect_assets,
    create_release,
    ensure_gh_available,
    release_url,
    upload_release_assets,
)

__all__ = [
    "RELEASE_STEPS",
    "ReleaseAborted",
    "ReleaseAction",
    "ReleaseContext",
    "ReleaseRun",
    "ReleaseStep",
    "SequenceState",
    "run_release",
]


class ReleaseAction(StrEnum):
    BUILD = "build"
    COMMIT = "commit"
    TAG = "tag"
    PUSH = "push"
    RELEASE = "release"


class SequenceState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"
    ABORTED = "aborted"


class GitBackend(Protocol):
    """The git operations the sequence needs (see ``shipctl.git.Repository``)."""

    def status(self) -> Result[GitStatus, GitError]: ...

    def add_all(self) -> Result[None, GitError]: ...

    def commit(self, message: str) -> Result[None, GitError]: ...

    def tag_exists(self, tag: str) -> Result[bool, GitError]: ...

    def create_tag(self, tag: str, message: str) -> Result[None, GitError]: ...

    def push(self, remote: str | None = None, *, tags: bool = False) -> Result[None, GitError]: ...

    def remote_url(self, remote: str = "origin") -> str | None: ...


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    root: Path
    config: Config
    console: ConsoleProtocol
    repo: GitBackend
    entry: ChangelogEntry


StepHandler = Callable[[ReleaseContext], Result[None, ReleaseError]]


@dataclass(frozen=True, slots=True)
class ReleaseStep:
    action: ReleaseAction
    run: StepHandler


@dataclass(frozen=True, slots=True)
class ReleaseRun:
    """Snapshot of the sequence.

    Attributes:
        state: Current state
        current: Action being run (RUNNING / ABORTED), None otherwise
        completed: Actions finished so far, in execution order
    """

    state: SequenceState = SequenceState.IDLE
    current: ReleaseAction | None = None
    completed: tuple[ReleaseAction, ...] = ()


@dataclass(frozen=True, slots=True)
class ReleaseAborted:
    """Terminal failure: which action failed, why, and what already happened."""

    action: ReleaseAction
    error: ReleaseError
    completed: tuple[ReleaseAction, ...] = ()


def _git_failed(e: GitError) -> ProcessFailed:
    return ProcessFailed(command=f"git {e.command}", returncode=e.returncode, detail=e.message)


# -----------------------------------------------------------------------------
# Steps
# -----------------------------------------------------------------------------


def _step_build(ctx: ReleaseContext) -> Result[None, ReleaseError]:
    result = build_all(
        root=ctx.root,
        config=ctx.config,
        console=ctx.console,
        version=ctx.entry.version,
    )
    if isinstance(result, Err):
        return result
    return Ok(None)


def _step_commit(ctx: ReleaseContext) -> Result[None, ReleaseError]:
    status = ctx.repo.status()
    if isinstance(status, Err):
        return Err(_git_failed(status.error))
    if status.value.is_clean:
        return Err(CleanTree())
    ctx.console.success(f"{len(status.value.entries)} pending change(s)")

    with ctx.console.status("staging changes (git add .)"):
        added = ctx.repo.add_all()
    if isinstance(added, Err):
        return Err(_git_failed(added.error))

    with ctx.console.status("committing"):
        committed = ctx.repo.commit(ctx.entry.commit_message)
    if isinstance(committed, Err):
        return Err(_git_failed(committed.error))

    ctx.console.success(f"committed: {ctx.entry.summary}")
    return Ok(None)


def _step_tag(ctx: ReleaseContext) -> Result[None, ReleaseError]:
    tag = ctx.entry.tag
    exists = ctx.repo.tag_exists(tag)
    if isinstance(exists, Err):
        return Err(_git_failed(exists.error))
    if exists.value:
        return Err(TagExists(tag=tag))

    with ctx.console.status(f"creating annotated tag {tag}"):
        created = ctx.repo.create_tag(tag, ctx.entry.summary)
    if isinstance(created, Err):
        return Err(_git_failed(created.error))

    ctx.console.success(f"tag {tag} created")
    return Ok(None)


def _step_push(ctx: ReleaseContext) -> Result[None, ReleaseError]:
    remote = ctx.config.git.remote or None

    with ctx.console.status("pushing commits"):
        pushed = ctx.repo.push(remote)
    if isinstance(pushed, Err):
        return Err(PushFailed(what="commits", detail=pushed.error.message))
    ctx.console.success("commits pushed")

    # Not atomic with the commit push above.
    with ctx.console.status("pushing tags"):
        pushed_tags = ctx.repo.push(remote, tags=True)
    if isinstance(pushed_tags, Err):
        return Err(PushFailed(what="tags", detail=pushed_tags.error.message))
    ctx.console.success("tags pushed")
    return Ok(None)


def _repository_slug(ctx: ReleaseContext) -> str | None:
    if ctx.config.project.repository:
        return ctx.config.project.repository
    url = ctx.repo.remote_url(ctx.config.git.remote or "origin")
    return github_slug(url) if url else None


def _step_release(ctx: ReleaseContext) -> Result[None, ReleaseError]:
    tag = ctx.entry.tag

    available = ensure_gh_available()
    if isinstance(available, Err):
        return available

    assets = collect_assets(ctx.root / ctx.config.build.output_dir)
    if isinstance(assets, Err):
        return assets

    with ctx.console.status(f"creating GitHub release {tag}"):
        created = create_release(root=ctx.root, tag=tag, notes=ctx.entry.release_notes)
    if isinstance(created, Err):
        return created

    with ctx.console.status(f"uploading {len(assets.value)} asset(s)"):
        uploaded = upload_release_assets(root=ctx.root, tag=tag, assets=assets.value)
    if isinstance(uploaded, Err):
        return uploaded

    ctx.console.success(f"GitHub release {tag} created")
    slug = _repository_slug(ctx)
    if slug is None:
        ctx.console.warning("release URL unknown (set project.repository in shipctl.toml)")
    else:
        ctx.console.info(f"release URL: {release_url(slug, tag)}")
    return Ok(None)


RELEASE_STEPS: tuple[ReleaseStep, ...] = (
    ReleaseStep(ReleaseAction.BUILD, _step_build),
    ReleaseStep(ReleaseAction.COMMIT, _step_commit),
    ReleaseStep(ReleaseAction.TAG, _step_tag),
    ReleaseStep(ReleaseAction.PUSH, _step_push),
    ReleaseStep(ReleaseAction.RELEASE, _step_release),
)


def run_release(
    *,
    actions: Iterable[ReleaseAction],
    context: ReleaseContext,
    steps: tuple[ReleaseStep, ...] = RELEASE_STEPS,
    on_transition: Callable[[ReleaseRun], None] | None = None,
) -> Result[ReleaseRun, ReleaseAborted]:
    """Run the requested actions in table order, stopping at the first error.

    Args:
        actions: Requested actions (order is ignored)
        context: Shared inputs for every step
        steps: Ordered step table
        on_transition: Called with every new state snapshot

    Returns:
        Ok(ReleaseRun) in state DONE
        Err(ReleaseAborted) carrying the failing action and its error unchanged
    """
    requested = frozenset(actions)
    run = ReleaseRun()

    def transition(new: ReleaseRun) -> ReleaseRun:
        if on_transition is not None:
            on_transition(new)
        return new

    for step in steps:
        if step.action not in requested:
            continue

        run = transition(replace(run, state=SequenceState.RUNNING, current=step.action))
        context.console.header(step.action.value)
        outcome = step.run(context)
        if isinstance(outcome, Err):
            transition(replace(run, state=SequenceState.ABORTED))
            return Err(
                ReleaseAborted(
                    action=step.action,
                    error=outcome.error,
                    completed=run.completed,
                )
            )
        run = replace(run, completed=(*run.completed, step.action))

    return Ok(transition(replace(run, state=SequenceState.DONE, current=None)))
