"""Async facade over the repository inspection components.

Every public coroutine delegates to a synchronous component via
``asyncio.to_thread`` so that git I/O never blocks the event loop.  The
inspector holds no repository handle: each call opens the repository at
*repo_path* and closes it before returning, so concurrent reads are safe.
Concurrent checkouts of one working tree must be serialised by the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from os import PathLike
from typing import Any, TypeVar

from ..exceptions import GitError, RepoLensError
from ..models.config import InspectorSettings
from ..models.git import BranchInfo, ChangedFile, CommitInfo, FileContents, FileDiff, RepoInfo
from .branches import BranchManager
from .contents import ContentResolver
from .diff import DiffEngine
from .history import RevisionWalker
from .repository import RepoOpener, open_repo, validate_repo
from .status import StatusReconciler

logger = logging.getLogger(__name__)

T = TypeVar("T")

PathArg = str | PathLike[str]


class RepoInspector:
    """Inspect history, diffs and working state of git repositories."""

    def __init__(
        self,
        settings: InspectorSettings | None = None,
        *,
        opener: RepoOpener = open_repo,
    ) -> None:
        self.settings = settings or InspectorSettings()
        self._opener = opener
        self.walker = RevisionWalker(self.settings, opener=opener)
        self.diffs = DiffEngine(self.settings, opener=opener)
        self.contents = ContentResolver(self.settings, opener=opener)
        self.status = StatusReconciler(self.settings, opener=opener)
        self.branches = BranchManager(self.settings, opener=opener, reconciler=self.status)

    async def _run(self, operation: str, func: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(func, *args)
        except RepoLensError:
            raise
        except Exception as exc:
            logger.error("%s failed: %s", operation, exc)
            raise GitError(f"{operation} failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Repository
    # ------------------------------------------------------------------

    async def validate_repo(self, path: PathArg) -> RepoInfo:
        """Check that *path* is a repository and summarise it."""
        return await self._run("validate_repo", self._validate_repo_sync, path)

    def _validate_repo_sync(self, path: PathArg) -> RepoInfo:
        return validate_repo(path, opener=self._opener)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    async def list_commits(self, repo_path: PathArg, limit: int | None = None) -> list[CommitInfo]:
        """Newest-first commits reachable from HEAD, capped at *limit*."""
        return await self._run("list_commits", self.walker.list_commits, repo_path, limit)

    # ------------------------------------------------------------------
    # Commit diffs
    # ------------------------------------------------------------------

    async def get_commit_files(self, repo_path: PathArg, commit_id: str) -> list[ChangedFile]:
        return await self._run(
            "get_commit_files", self.diffs.get_commit_files, repo_path, commit_id
        )

    async def get_commit_range_files(
        self,
        repo_path: PathArg,
        commit_ids: Sequence[str],
    ) -> list[ChangedFile]:
        return await self._run(
            "get_commit_range_files", self.diffs.get_commit_range_files, repo_path, commit_ids
        )

    async def get_file_diff(self, repo_path: PathArg, commit_id: str, file_path: str) -> FileDiff:
        return await self._run(
            "get_file_diff", self.diffs.get_file_diff, repo_path, commit_id, file_path
        )

    async def get_commit_range_file_diff(
        self,
        repo_path: PathArg,
        commit_ids: Sequence[str],
        file_path: str,
    ) -> FileDiff:
        return await self._run(
            "get_commit_range_file_diff",
            self.diffs.get_commit_range_file_diff,
            repo_path,
            commit_ids,
            file_path,
        )

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    async def get_file_contents(
        self,
        repo_path: PathArg,
        commit_id: str,
        file_path: str,
    ) -> FileContents:
        return await self._run(
            "get_file_contents", self.contents.get_file_contents, repo_path, commit_id, file_path
        )

    async def get_commit_range_file_contents(
        self,
        repo_path: PathArg,
        commit_ids: Sequence[str],
        file_path: str,
    ) -> FileContents:
        return await self._run(
            "get_commit_range_file_contents",
            self.contents.get_commit_range_file_contents,
            repo_path,
            commit_ids,
            file_path,
        )

    # ------------------------------------------------------------------
    # Working tree
    # ------------------------------------------------------------------

    async def get_working_changes(self, repo_path: PathArg) -> list[ChangedFile]:
        """Staged, unstaged and untracked changes reconciled per path."""
        return await self._run(
            "get_working_changes", self.status.get_working_changes, repo_path
        )

    async def get_working_file_diff(self, repo_path: PathArg, file_path: str) -> FileDiff:
        return await self._run(
            "get_working_file_diff", self.diffs.get_working_file_diff, repo_path, file_path
        )

    async def get_working_file_contents(self, repo_path: PathArg, file_path: str) -> FileContents:
        return await self._run(
            "get_working_file_contents",
            self.contents.get_working_file_contents,
            repo_path,
            file_path,
        )

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    async def get_current_branch(self, repo_path: PathArg) -> str:
        """Current branch name, or the commit id when HEAD is detached."""
        return await self._run(
            "get_current_branch", self.branches.get_current_branch, repo_path
        )

    async def list_branches(self, repo_path: PathArg) -> list[BranchInfo]:
        return await self._run("list_branches", self.branches.list_branches, repo_path)

    async def checkout_branch(self, repo_path: PathArg, branch_name: str) -> None:
        """Switch to *branch_name* unless tracked files have uncommitted changes."""
        await self._run(
            "checkout_branch", self.branches.checkout_branch, repo_path, branch_name
        )
