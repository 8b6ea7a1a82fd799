"""Branch listing and the guarded checkout."""

from __future__ import annotations

import logging
from os import PathLike

from git import Repo
from git.exc import GitCommandError
from git.refs import Head, Reference

from ..exceptions import BranchNotFoundError, GitError
from ..models.config import InspectorSettings
from ..models.git import BranchInfo
from .repository import RepoOpener, current_branch_name, open_repo
from .status import StatusReconciler

logger = logging.getLogger(__name__)


def sort_branches(branches: list[BranchInfo]) -> list[BranchInfo]:
    """Current branch first, then local, then remote; by name within each group."""
    return sorted(branches, key=lambda b: (not b.is_current, b.is_remote, b.name))


def _tip_id(ref: Reference) -> str:
    try:
        return ref.commit.hexsha
    except (ValueError, TypeError, GitCommandError) as exc:
        logger.debug("Could not resolve tip of %s: %s", ref.path, exc)
        return ""


class BranchManager:
    """Enumerate branches and switch the working tree between them."""

    def __init__(
        self,
        settings: InspectorSettings | None = None,
        *,
        opener: RepoOpener = open_repo,
        reconciler: StatusReconciler | None = None,
    ) -> None:
        self.settings = settings or InspectorSettings()
        self._open = opener
        self.reconciler = reconciler or StatusReconciler(self.settings, opener=opener)

    def get_current_branch(self, repo_path: str | PathLike[str]) -> str:
        """Branch name, or the full commit id when HEAD is detached."""
        with self._open(repo_path) as repo:
            return current_branch_name(repo)

    def list_branches(self, repo_path: str | PathLike[str]) -> list[BranchInfo]:
        with self._open(repo_path) as repo:
            return self.branches(repo)

    def branches(self, repo: Repo) -> list[BranchInfo]:
        current = current_branch_name(repo)
        found = [
            BranchInfo(
                name=head.name,
                is_current=head.name == current,
                is_remote=False,
                commit_id=_tip_id(head),
            )
            for head in repo.heads
        ]
        for remote in repo.remotes:
            for ref in remote.refs:
                if ref.remote_head == "HEAD":
                    continue
                found.append(
                    BranchInfo(
                        name=ref.name,
                        is_current=False,
                        is_remote=True,
                        commit_id=_tip_id(ref),
                    )
                )
        return sort_branches(found)

    def checkout_branch(self, repo_path: str | PathLike[str], branch_name: str) -> None:
        """Switch to a local branch, refusing if uncommitted work could be lost."""
        with self._open(repo_path) as repo:
            self.reconciler.ensure_checkout_safe(repo)
            head = self._find_head(repo, branch_name)

            repo.head.reference = head
            try:
                # Force: the guard has already proven nothing unsaved is at stake.
                repo.head.reset(head.commit, index=True, working_tree=True)
            except GitCommandError as exc:
                raise GitError(
                    f"HEAD now points at {branch_name} but the working tree "
                    f"could not be updated: {exc}"
                ) from exc
        logger.info("Checked out branch %s in %s", branch_name, repo_path)

    @staticmethod
    def _find_head(repo: Repo, branch_name: str) -> Head:
        for head in repo.heads:
            if head.name == branch_name:
                return head
        raise BranchNotFoundError(f"Branch not found: {branch_name}")
