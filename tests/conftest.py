"""Shared fixtures for aiorepolens tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from git import Repo

from aiorepolens.git import RepoInspector


class RepoBuilder:
    """Build real on-disk repositories with the git CLI through GitPython."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.repo = Repo.init(path, initial_branch="main")
        with self.repo.config_writer() as writer:
            writer.set_value("user", "name", "Test User")
            writer.set_value("user", "email", "test@example.com")
            writer.set_value("commit", "gpgsign", "false")
        self.commits: list[str] = []

    def write(self, relative_path: str, content: str | bytes) -> Path:
        target = self.path / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_bytes(content.encode("utf-8"))
        return target

    def commit(self, message: str, files: dict[str, str | bytes] | None = None) -> str:
        """Write *files*, stage everything and commit; return the new commit id."""
        for relative_path, content in (files or {}).items():
            self.write(relative_path, content)
        self.repo.git.add("-A")
        self.repo.git.commit("-m", message)
        sha = self.repo.head.commit.hexsha
        self.commits.append(sha)
        return sha

    def branch(self, name: str) -> None:
        self.repo.git.branch(name)


@pytest.fixture
def builder(tmp_path: Path) -> Iterator[RepoBuilder]:
    """An empty repository on branch ``main``."""
    repo_builder = RepoBuilder(tmp_path / "repo")
    yield repo_builder
    repo_builder.repo.close()


@pytest.fixture
def scenario(builder: RepoBuilder) -> RepoBuilder:
    """Commit A adds README.md, commit B adds file.txt."""
    builder.commit("Add readme", {"README.md": "# Test"})
    builder.commit("Add file", {"file.txt": "content"})
    return builder


@pytest.fixture
def inspector() -> RepoInspector:
    return RepoInspector()
