"""Repository access shared by the inspection components.

Every public operation opens the repository through an injectable *opener*
and closes it before returning.  Nothing derived from a repository outlives
the call that opened it.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Any

from git import Repo
from git.diff import NULL_TREE_SHA, DiffIndex
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, ODBError
from git.objects import Commit, Tree
from git.util import hex_to_bin

from ..exceptions import (
    CommitNotFoundError,
    InvalidRevisionIdError,
    NotARepositoryError,
    PathSecurityError,
    RepositoryNotFoundError,
    RevisionResolutionError,
)
from ..models.git import RepoInfo

logger = logging.getLogger(__name__)

RepoOpener = Callable[[str | PathLike[str]], Repo]

_COMMIT_ID_RE = re.compile(r"^[0-9a-fA-F]{4,40}$")

# What GitPython raises while turning a revision string into an object.
_RESOLUTION_ERRORS = (ODBError, ValueError, IndexError, TypeError, GitCommandError)


def open_repo(path: str | PathLike[str]) -> Repo:
    """Open *path* as a non-bare repository without searching parent directories."""
    try:
        repo = Repo(path)
    except NoSuchPathError as exc:
        raise RepositoryNotFoundError(
            f"Failed to open repository: path does not exist: {path}"
        ) from exc
    except InvalidGitRepositoryError as exc:
        raise NotARepositoryError(
            f"Failed to open repository: not a git repository: {path}"
        ) from exc

    if repo.bare:
        repo.close()
        raise NotARepositoryError(f"Failed to open repository: {path} is a bare repository")
    return repo


def empty_tree(repo: Repo) -> Tree:
    """Return git's well-known empty tree, valid in every repository."""
    return Tree(repo, hex_to_bin(NULL_TREE_SHA))


def resolve_revision(repo: Repo, rev: str) -> Commit:
    """Resolve any revision expression (``HEAD``, branch, tag, id) to a commit."""
    try:
        return repo.commit(rev)
    except _RESOLUTION_ERRORS as exc:
        raise RevisionResolutionError(f"Failed to resolve revision {rev!r}: {exc}") from exc


def resolve_commit(repo: Repo, commit_id: str) -> Commit:
    """Resolve a hex commit id (4-40 characters) to a commit."""
    if not commit_id or not _COMMIT_ID_RE.match(commit_id):
        raise InvalidRevisionIdError(f"Invalid commit id: {commit_id!r}")
    try:
        return repo.commit(commit_id)
    except _RESOLUTION_ERRORS as exc:
        raise CommitNotFoundError(f"Commit not found: {commit_id}") from exc


def resolve_head_tree(repo: Repo) -> Tree | None:
    """Return HEAD's tree, or ``None`` while HEAD is unborn."""
    if not repo.head.is_valid():
        return None
    return repo.head.commit.tree


def first_parent_tree(commit: Commit) -> Tree | None:
    return commit.parents[0].tree if commit.parents else None


@dataclass(frozen=True)
class Comparison:
    """The two points of a diff or content request.

    ``before`` is ``None`` when it is the empty tree (root commit, unborn
    HEAD); ``after`` is ``None`` when it is the live working tree.
    """

    repo: Repo
    before: Tree | None
    after: Tree | None

    @property
    def against_worktree(self) -> bool:
        return self.after is None

    @property
    def base(self) -> Tree:
        return self.before if self.before is not None else empty_tree(self.repo)

    def diff(
        self,
        paths: Sequence[str] | None = None,
        *,
        create_patch: bool = False,
        context_lines: int = 3,
    ) -> DiffIndex[Any]:
        """Run the backend diff for this comparison."""
        kwargs: dict[str, Any] = {}
        if create_patch:
            kwargs["unified"] = context_lines
        return self.base.diff(
            self.after,
            paths=list(paths) if paths else None,
            create_patch=create_patch,
            **kwargs,
        )


def commit_comparison(repo: Repo, commit_id: str) -> Comparison:
    """First parent (or the empty tree) against the commit."""
    commit = resolve_commit(repo, commit_id)
    return Comparison(repo, first_parent_tree(commit), commit.tree)


def resolve_commit_range(repo: Repo, commit_ids: Sequence[str]) -> Comparison:
    """Aggregate comparison over *commit_ids*, ordered newest first.

    The oldest commit's first parent is the ``before`` side and the newest
    commit's tree is the ``after`` side.
    """
    if not commit_ids:
        raise InvalidRevisionIdError("Commit range is empty")
    newest = resolve_commit(repo, commit_ids[0])
    oldest = newest if len(commit_ids) == 1 else resolve_commit(repo, commit_ids[-1])
    return Comparison(repo, first_parent_tree(oldest), newest.tree)


def worktree_comparison(repo: Repo) -> Comparison:
    """HEAD (or the empty tree) against the working tree and index."""
    return Comparison(repo, resolve_head_tree(repo), None)


def worktree_path(repo: Repo, relative_path: str) -> Path:
    """Absolute on-disk path for *relative_path*, kept inside the working tree."""
    root = Path(repo.working_tree_dir).resolve()
    candidate = (root / relative_path.lstrip("/")).resolve()
    if candidate != root and root not in candidate.parents:
        raise PathSecurityError(f"Path outside repository: {relative_path}")
    return candidate


def current_branch_name(repo: Repo) -> str:
    """Short branch name, or the full commit id when HEAD is detached."""
    if repo.head.is_detached:
        return repo.head.commit.hexsha
    return repo.head.reference.name


def validate_repo(
    path: str | PathLike[str],
    *,
    opener: RepoOpener = open_repo,
) -> RepoInfo:
    """Open *path* and summarise it for the caller."""
    with opener(path) as repo:
        workdir = Path(repo.working_tree_dir).resolve()
        info = RepoInfo(
            path=str(workdir),
            name=workdir.name,
            current_branch=current_branch_name(repo),
        )
    logger.debug("Validated repository %s (branch %s)", info.path, info.current_branch)
    return info
