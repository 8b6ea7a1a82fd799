"""Tests for StatusReconciler against real working trees."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from git.exc import GitCommandError

from aiorepolens.exceptions import GitError
from aiorepolens.git.repository import Comparison
from aiorepolens.git.status import StatusFlag, StatusReconciler
from aiorepolens.models.git import ChangedFile, FileStatus

if TYPE_CHECKING:
    from conftest import RepoBuilder


@pytest.fixture
def reconciler() -> StatusReconciler:
    return StatusReconciler()


def _by_path(changes: list[ChangedFile]) -> dict[str, ChangedFile]:
    return {change.path: change for change in changes}


class TestWorkingChanges:
    def test_clean_tree(self, scenario: RepoBuilder, reconciler: StatusReconciler) -> None:
        assert reconciler.get_working_changes(scenario.path) == []

    def test_unstaged_modification(
        self, scenario: RepoBuilder, reconciler: StatusReconciler
    ) -> None:
        scenario.write("file.txt", "modified content")
        [change] = reconciler.get_working_changes(scenario.path)
        assert change.path == "file.txt"
        assert change.status is FileStatus.MODIFIED
        assert (change.additions, change.deletions) == (1, 1)

    def test_staged_and_unstaged_modification_is_one_entry(
        self, scenario: RepoBuilder, reconciler: StatusReconciler
    ) -> None:
        scenario.write("file.txt", "staged\n")
        scenario.repo.git.add("file.txt")
        scenario.write("file.txt", "staged\nand more\n")

        [change] = reconciler.get_working_changes(scenario.path)
        assert change.status is FileStatus.MODIFIED
        assert (change.additions, change.deletions) == (2, 1)

    def test_mixed_states(self, scenario: RepoBuilder, reconciler: StatusReconciler) -> None:
        scenario.write("untracked.txt", "u\n")
        scenario.write("staged.txt", "s\n")
        scenario.repo.git.add("staged.txt")
        (scenario.path / "README.md").unlink()

        changes = _by_path(reconciler.get_working_changes(scenario.path))
        assert changes["untracked.txt"].status is FileStatus.UNTRACKED
        assert changes["staged.txt"].status is FileStatus.ADDED
        assert changes["staged.txt"].additions == 1
        assert changes["README.md"].status is FileStatus.DELETED
        assert changes["README.md"].deletions == 1

    def test_untracked_files_in_new_directory(
        self, scenario: RepoBuilder, reconciler: StatusReconciler
    ) -> None:
        scenario.write("newdir/a.txt", "a\n")
        scenario.write("newdir/b.txt", "b\n")
        changes = _by_path(reconciler.get_working_changes(scenario.path))
        assert set(changes) == {"newdir/a.txt", "newdir/b.txt"}
        assert all(c.status is FileStatus.UNTRACKED for c in changes.values())

    def test_staged_rename_has_no_old_path(
        self, builder: RepoBuilder, reconciler: StatusReconciler
    ) -> None:
        builder.commit("Add", {"old.txt": "one\ntwo\nthree\n"})
        builder.repo.git.mv("old.txt", "new.txt")

        [change] = reconciler.get_working_changes(builder.path)
        assert change.path == "new.txt"
        assert change.status is FileStatus.RENAMED
        assert change.old_path is None

    def test_ignored_files_skipped(
        self, scenario: RepoBuilder, reconciler: StatusReconciler
    ) -> None:
        scenario.commit("Ignore logs", {".gitignore": "*.log\n"})
        scenario.write("debug.log", "noise\n")
        assert reconciler.get_working_changes(scenario.path) == []

    def test_unborn_head(self, builder: RepoBuilder, reconciler: StatusReconciler) -> None:
        builder.write("first.txt", "hello\n")
        builder.write("second.txt", "world\n")
        builder.repo.git.add("second.txt")

        changes = _by_path(reconciler.get_working_changes(builder.path))
        assert changes["first.txt"].status is FileStatus.UNTRACKED
        assert changes["second.txt"].status is FileStatus.ADDED
        assert (changes["second.txt"].additions, changes["second.txt"].deletions) == (0, 0)

    def test_line_stats_failure_does_not_abort(
        self, scenario: RepoBuilder, reconciler: StatusReconciler
    ) -> None:
        scenario.write("file.txt", "modified content")
        with patch.object(Comparison, "diff", side_effect=RuntimeError("diff exploded")):
            [change] = reconciler.get_working_changes(scenario.path)
        assert change.status is FileStatus.MODIFIED
        assert (change.additions, change.deletions) == (0, 0)

    def test_status_failure_is_git_error(
        self, scenario: RepoBuilder, reconciler: StatusReconciler
    ) -> None:
        repo = scenario.repo
        with patch.object(
            type(repo.git), "status", side_effect=GitCommandError("status", 128), create=True
        ):
            with pytest.raises(GitError, match="Failed to get repository status"):
                reconciler.status_entries(repo)


class TestCheckoutGuard:
    def test_blocking_paths(self, scenario: RepoBuilder, reconciler: StatusReconciler) -> None:
        scenario.write("file.txt", "modified content")
        scenario.write("untracked.txt", "u\n")
        scenario.write("staged.txt", "s\n")
        scenario.repo.git.add("staged.txt")

        assert reconciler.find_blocking_changes(scenario.repo) == ["file.txt"]

    def test_staged_deletion_blocks(
        self, scenario: RepoBuilder, reconciler: StatusReconciler
    ) -> None:
        scenario.repo.git.rm("README.md")
        entries = {e.path: e.flags for e in reconciler.status_entries(scenario.repo)}
        assert entries["README.md"] == StatusFlag.INDEX_DELETED
        assert reconciler.find_blocking_changes(scenario.repo) == ["README.md"]

    def test_staged_rename_blocks(
        self, builder: RepoBuilder, reconciler: StatusReconciler
    ) -> None:
        builder.commit("Add", {"old.txt": "".join(f"line {idx}\n" for idx in range(10))})
        builder.repo.git.mv("old.txt", "new.txt")

        [entry] = reconciler.status_entries(builder.repo)
        assert entry.flags == StatusFlag.INDEX_RENAMED
        assert entry.orig_path == "old.txt"
        assert reconciler.find_blocking_changes(builder.repo) == ["new.txt"]

    def test_clean_tree_is_safe(self, scenario: RepoBuilder, reconciler: StatusReconciler) -> None:
        reconciler.ensure_checkout_safe(scenario.repo)
