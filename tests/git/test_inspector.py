"""Tests for the async RepoInspector facade."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest
from git import Repo

from aiorepolens.exceptions import (
    CommitNotFoundError,
    GitError,
    NotARepositoryError,
    RepositoryNotFoundError,
    UncommittedChangesError,
)
from aiorepolens.git import RepoInspector
from aiorepolens.git.repository import open_repo
from aiorepolens.models.config import InspectorSettings
from aiorepolens.models.git import FileStatus

if TYPE_CHECKING:
    from conftest import RepoBuilder


class TestValidateRepo:
    async def test_valid(self, scenario: RepoBuilder, inspector: RepoInspector) -> None:
        info = await inspector.validate_repo(scenario.path)
        assert info.path == str(scenario.path.resolve())
        assert info.name == "repo"
        assert info.current_branch == "main"

    async def test_missing_path(self, tmp_path: Path, inspector: RepoInspector) -> None:
        with pytest.raises(RepositoryNotFoundError):
            await inspector.validate_repo(tmp_path / "missing")

    async def test_plain_directory(self, tmp_path: Path, inspector: RepoInspector) -> None:
        with pytest.raises(NotARepositoryError, match="not a git repository"):
            await inspector.validate_repo(tmp_path)

    async def test_bare_repository(self, tmp_path: Path, inspector: RepoInspector) -> None:
        Repo.init(tmp_path / "bare.git", bare=True).close()
        with pytest.raises(NotARepositoryError, match="bare"):
            await inspector.validate_repo(tmp_path / "bare.git")


class TestScenario:
    async def test_history_files_and_contents(
        self, scenario: RepoBuilder, inspector: RepoInspector
    ) -> None:
        commit_a, commit_b = scenario.commits

        commits = await inspector.list_commits(scenario.path)
        assert [c.id for c in commits] == [commit_b, commit_a]

        [changed] = await inspector.get_commit_files(scenario.path, commit_b)
        assert (changed.path, changed.status, changed.additions) == (
            "file.txt",
            FileStatus.ADDED,
            1,
        )

        contents = await inspector.get_file_contents(scenario.path, commit_b, "file.txt")
        assert contents.old_content is None
        assert contents.new_content == "content"
        assert contents.is_binary is False

    async def test_range_operations(self, scenario: RepoBuilder, inspector: RepoInspector) -> None:
        commit_a, commit_b = scenario.commits
        files = await inspector.get_commit_range_files(scenario.path, [commit_b, commit_a])
        assert {f.path for f in files} == {"README.md", "file.txt"}

        diff = await inspector.get_commit_range_file_diff(
            scenario.path, [commit_b, commit_a], "README.md"
        )
        assert diff.hunks[0].lines[0].content == "# Test"

        contents = await inspector.get_commit_range_file_contents(
            scenario.path, [commit_b, commit_a], "README.md"
        )
        assert contents.new_content == "# Test"

    async def test_working_tree_and_checkout(
        self, scenario: RepoBuilder, inspector: RepoInspector
    ) -> None:
        scenario.branch("other")
        scenario.write("file.txt", "modified content")

        [change] = await inspector.get_working_changes(scenario.path)
        assert (change.path, change.status) == ("file.txt", FileStatus.MODIFIED)

        diff = await inspector.get_working_file_diff(scenario.path, "file.txt")
        assert len(diff.hunks) == 1

        contents = await inspector.get_working_file_contents(scenario.path, "file.txt")
        assert contents.new_content == "modified content"

        with pytest.raises(UncommittedChangesError):
            await inspector.checkout_branch(scenario.path, "other")

        scenario.write("file.txt", "content")
        await inspector.checkout_branch(scenario.path, "other")
        assert await inspector.get_current_branch(scenario.path) == "other"

        names = [b.name for b in await inspector.list_branches(scenario.path)]
        assert names == ["other", "main"]

    async def test_file_diff(self, scenario: RepoBuilder, inspector: RepoInspector) -> None:
        diff = await inspector.get_file_diff(scenario.path, scenario.commits[1], "file.txt")
        assert diff.new_path == "file.txt"


class TestErrorHandling:
    async def test_library_errors_pass_through(
        self, scenario: RepoBuilder, inspector: RepoInspector
    ) -> None:
        with pytest.raises(CommitNotFoundError):
            await inspector.get_commit_files(scenario.path, "abcdef12")

    async def test_unexpected_errors_are_wrapped(
        self, scenario: RepoBuilder, inspector: RepoInspector
    ) -> None:
        with patch.object(
            inspector.walker, "list_commits", side_effect=PermissionError("denied")
        ):
            with pytest.raises(GitError, match="list_commits failed: denied"):
                await inspector.list_commits(scenario.path)

    async def test_custom_opener_and_settings(self, scenario: RepoBuilder) -> None:
        opener = MagicMock(side_effect=open_repo)
        inspector = RepoInspector(InspectorSettings(commit_limit=1), opener=opener)

        commits = await inspector.list_commits(scenario.path)

        assert len(commits) == 1
        opener.assert_called_once_with(scenario.path)
