"""Changed-file sets and per-file hunk diffs.

Statuses come from the backend's raw diff (one change letter per delta); line
counts and hunks come from its patch output, parsed by
:mod:`aiorepolens.git.patch`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from os import PathLike
from typing import Any

from git.exc import GitError as BackendGitError

from ..exceptions import FileNotInComparisonError, GitError
from ..models.config import InspectorSettings
from ..models.git import ChangedFile, FileDiff, FileStatus
from .patch import count_line_changes, is_binary_patch, parse_patch
from .repository import (
    Comparison,
    RepoOpener,
    commit_comparison,
    open_repo,
    resolve_commit_range,
    worktree_comparison,
)

logger = logging.getLogger(__name__)

# Change letters as emitted by ``git diff --raw``.  Anything else (type
# changes, unmerged, unknown) is reported as unmodified.
_CHANGE_KIND_STATUS: dict[str, FileStatus] = {
    "A": FileStatus.ADDED,
    "D": FileStatus.DELETED,
    "M": FileStatus.MODIFIED,
    "R": FileStatus.RENAMED,
    "C": FileStatus.COPIED,
}


def status_from_change_kind(change_kind: str | None) -> FileStatus:
    """Map a backend change letter to a :class:`FileStatus`."""
    return _CHANGE_KIND_STATUS.get(change_kind or "", FileStatus.UNMODIFIED)


def delta_path(delta: Any) -> str:
    """The path a delta is reported under: new side first, old side for deletions."""
    return delta.b_path or delta.a_path


class DiffEngine:
    """Compute changed-file sets and single-file diffs for a repository."""

    def __init__(
        self,
        settings: InspectorSettings | None = None,
        *,
        opener: RepoOpener = open_repo,
    ) -> None:
        self.settings = settings or InspectorSettings()
        self._open = opener

    # ------------------------------------------------------------------
    # Changed-file sets
    # ------------------------------------------------------------------

    def get_commit_files(self, repo_path: str | PathLike[str], commit_id: str) -> list[ChangedFile]:
        """Files changed by *commit_id* relative to its first parent."""
        with self._open(repo_path) as repo:
            return self.changed_files(commit_comparison(repo, commit_id))

    def get_commit_range_files(
        self,
        repo_path: str | PathLike[str],
        commit_ids: Sequence[str],
    ) -> list[ChangedFile]:
        """One aggregate changed-file set over a newest-first range of commits."""
        with self._open(repo_path) as repo:
            return self.changed_files(resolve_commit_range(repo, commit_ids))

    def changed_files(self, comparison: Comparison) -> list[ChangedFile]:
        try:
            deltas = comparison.diff()
        except BackendGitError as exc:
            raise GitError(f"Failed to diff trees: {exc}") from exc

        line_stats = self.line_stats(comparison)
        files: list[ChangedFile] = []
        for delta in deltas:
            path = delta_path(delta)
            status = status_from_change_kind(delta.change_type)
            additions, deletions = line_stats.get(path, (0, 0))
            files.append(
                ChangedFile(
                    path=path,
                    status=status,
                    additions=additions,
                    deletions=deletions,
                    old_path=delta.a_path if status is FileStatus.RENAMED else None,
                )
            )
        logger.debug("Comparison yielded %d changed files", len(files))
        return files

    def line_stats(
        self,
        comparison: Comparison,
        paths: Sequence[str] | None = None,
    ) -> dict[str, tuple[int, int]]:
        """Best-effort ``path -> (additions, deletions)`` for *comparison*.

        A failing patch step yields an empty mapping so callers fall back to
        zero counts instead of failing.
        """
        try:
            patches = comparison.diff(
                paths,
                create_patch=True,
                context_lines=self.settings.context_lines,
            )
        except Exception as exc:
            logger.warning("Line statistics unavailable, reporting 0: %s", exc)
            return {}

        stats: dict[str, tuple[int, int]] = {}
        for patch in patches:
            if is_binary_patch(patch.diff):
                continue
            try:
                stats[delta_path(patch)] = count_line_changes(parse_patch(patch.diff))
            except Exception as exc:
                logger.warning("Could not count lines for %s: %s", delta_path(patch), exc)
        return stats

    # ------------------------------------------------------------------
    # Single-file diffs
    # ------------------------------------------------------------------

    def get_file_diff(
        self,
        repo_path: str | PathLike[str],
        commit_id: str,
        file_path: str,
    ) -> FileDiff:
        """Hunks for *file_path* in *commit_id* against its first parent."""
        with self._open(repo_path) as repo:
            return self.file_diff(commit_comparison(repo, commit_id), file_path)

    def get_commit_range_file_diff(
        self,
        repo_path: str | PathLike[str],
        commit_ids: Sequence[str],
        file_path: str,
    ) -> FileDiff:
        """Hunks for *file_path* across a newest-first range of commits."""
        with self._open(repo_path) as repo:
            return self.file_diff(resolve_commit_range(repo, commit_ids), file_path)

    def get_working_file_diff(self, repo_path: str | PathLike[str], file_path: str) -> FileDiff:
        """Hunks for *file_path* between HEAD and the working tree plus index."""
        with self._open(repo_path) as repo:
            return self.file_diff(worktree_comparison(repo), file_path)

    def file_diff(self, comparison: Comparison, file_path: str) -> FileDiff:
        try:
            patches = comparison.diff(
                [file_path],
                create_patch=True,
                context_lines=self.settings.context_lines,
            )
        except BackendGitError as exc:
            raise GitError(f"Failed to diff {file_path}: {exc}") from exc

        # A directory pathspec matches the files beneath it, never the path itself.
        patch = next((p for p in patches if delta_path(p) == file_path), None)
        if patch is None:
            raise FileNotInComparisonError(f"File not found in diff: {file_path}")

        old_path = patch.a_path if (patch.renamed_file or patch.copied_file) else None
        new_path = delta_path(patch)

        if is_binary_patch(patch.diff):
            return FileDiff(old_path=old_path, new_path=new_path, hunks=[], is_binary=True)

        return FileDiff(
            old_path=old_path,
            new_path=new_path,
            hunks=parse_patch(patch.diff),
            is_binary=False,
        )

