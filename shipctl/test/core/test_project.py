"""Tests for core/project.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from shipctl.core.config import Config, ProjectConfig
from shipctl.core.project import ENV_ROOT, Project, detect_project
from shipctl.core.result import Err, Ok


@pytest.fixture(autouse=True)
def _no_env_root(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ENV_ROOT, raising=False)


class TestDetectProject:
    def test_finds_config_upward(self, tmp_path: Path) -> None:
        (tmp_path / "shipctl.toml").write_text("")
        nested = tmp_path / "backend" / "internal"
        nested.mkdir(parents=True)

        result = detect_project(nested)

        assert isinstance(result, Ok)
        assert result.value.root == tmp_path.resolve()

    def test_config_wins_over_nearer_changelog(self, tmp_path: Path) -> None:
        (tmp_path / "shipctl.toml").write_text("")
        sub = tmp_path / "docs"
        sub.mkdir()
        (sub / "changelog.md").write_text("# 1.0.0 - x\n")

        result = detect_project(sub)

        assert isinstance(result, Ok)
        assert result.value.root == tmp_path.resolve()

    def test_falls_back_to_changelog(self, tmp_path: Path) -> None:
        (tmp_path / "changelog.md").write_text("# 1.0.0 - x\n")
        nested = tmp_path / "frontend"
        nested.mkdir()

        result = detect_project(nested)

        assert isinstance(result, Ok)
        assert result.value.root == tmp_path.resolve()

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        other = tmp_path / "elsewhere"
        other.mkdir()
        (tmp_path / "shipctl.toml").write_text("")
        monkeypatch.setenv(ENV_ROOT, str(other))

        result = detect_project(tmp_path)

        assert isinstance(result, Ok)
        assert result.value.root == other.resolve()

    def test_env_var_not_a_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENV_ROOT, str(tmp_path / "missing"))

        result = detect_project(tmp_path)

        assert isinstance(result, Err)
        assert ENV_ROOT in result.error.message


class TestProject:
    def test_paths(self, tmp_path: Path) -> None:
        project = Project(root=tmp_path)
        config = Config(project=ProjectConfig(changelog="docs/CHANGES.md"))

        assert project.config_path == tmp_path / "shipctl.toml"
        assert project.changelog_path(config) == tmp_path / "docs" / "CHANGES.md"
