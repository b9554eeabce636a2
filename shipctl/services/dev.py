"""Development mode.

Builds the frontend bundle, copies it into the directory the backend embeds,
then runs the backend in the foreground until the user stops it.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from shipctl.core.config import Config
from shipctl.core.errors import ErrorCode
from shipctl.core.result import Err, Ok, Result
from shipctl.output.console import ConsoleProtocol, Style
from shipctl.output.errors import print_release_error
from shipctl.platform.process import run_silent
from shipctl.services.release.errors import (
    AssetsMissing,
    BuildFailed,
    ProcessFailed,
    ReleaseError,
)


class DevService:
    """Frontend build + backend server for local development."""

    def __init__(self, *, root: Path, config: Config, console: ConsoleProtocol) -> None:
        self._root = root
        self._config = config
        self._console = console

    def _env(self) -> dict[str, str]:
        return {**os.environ, "FORCE_COLOR": "1"}

    def build_frontend(self) -> Result[None, BuildFailed]:
        dev = self._config.dev
        self._console.info(f"building frontend in {dev.frontend_dir}/")
        result = run_silent(
            list(dev.frontend_build),
            cwd=self._root / dev.frontend_dir,
            env=self._env(),
        )
        if isinstance(result, Err):
            return Err(
                BuildFailed(
                    target="frontend",
                    returncode=result.error.returncode,
                    detail=result.error.detail,
                )
            )
        return Ok(None)

    def embed_frontend(self) -> Result[Path, AssetsMissing | ProcessFailed]:
        """Replace the backend's embed directory with the fresh frontend build."""
        dev = self._config.dev
        dist = self._root / dev.frontend_dist
        target = self._root / dev.embed_dir
        if not dist.is_dir():
            return Err(AssetsMissing(path=dist))

        try:
            if target.exists():
                shutil.rmtree(target)
            shutil.copytree(dist, target)
        except OSError as e:
            return Err(
                ProcessFailed(command=f"copy {dist} -> {target}", returncode=-1, detail=str(e))
            )
        return Ok(target)

    def serve(self) -> Result[None, ProcessFailed]:
        """Run the backend in the foreground. Ctrl+C is a normal stop."""
        dev = self._config.dev
        try:
            result = run_silent(
                list(dev.backend_run),
                cwd=self._root / dev.backend_dir,
                env=self._env(),
            )
        except KeyboardInterrupt:
            return Ok(None)

        if isinstance(result, Err):
            if result.error.interrupted:
                return Ok(None)
            return Err(
                ProcessFailed(
                    command=" ".join(dev.backend_run),
                    returncode=result.error.returncode,
                    detail=result.error.detail,
                )
            )
        return Ok(None)

    def _run_steps(self) -> Result[None, ReleaseError]:
        built = self.build_frontend()
        if isinstance(built, Err):
            return built

        embedded = self.embed_frontend()
        if isinstance(embedded, Err):
            return embedded
        self._console.success(f"frontend copied to {self._config.dev.embed_dir}/")

        self._console.print("starting backend, press Ctrl+C to stop", Style.WARNING)
        return self.serve()

    def run(self) -> int:
        """Build, embed and serve. Returns a process exit code."""
        try:
            result = self._run_steps()
        except KeyboardInterrupt:
            # Ctrl+C before the backend is up, e.g. during the frontend build.
            result = Ok(None)
        finally:
            self._console.print("shutting down development environment", Style.WARNING)

        if isinstance(result, Err):
            print_release_error(result.error, self._console)
            return int(ErrorCode.FAILED)

        self._console.success("development environment stopped")
        return int(ErrorCode.OK)
