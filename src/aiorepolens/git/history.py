"""Commit history traversal."""

from __future__ import annotations

import logging
from os import PathLike

from git.objects import Commit

from ..models.config import InspectorSettings
from ..models.git import CommitInfo
from .repository import RepoOpener, open_repo, resolve_revision

logger = logging.getLogger(__name__)


def first_line(message: str | bytes) -> str:
    """Return only the subject line of a commit message."""
    if isinstance(message, bytes):
        message = message.decode("utf-8", errors="replace")
    lines = message.splitlines()
    return lines[0] if lines else ""


def commit_info(commit: Commit) -> CommitInfo:
    author = commit.author
    return CommitInfo(
        id=commit.hexsha,
        message=first_line(commit.message),
        author=author.name or "Unknown",
        email=author.email or "",
        timestamp=commit.authored_date,
    )


class RevisionWalker:
    """Enumerate history reachable from a starting reference, newest first."""

    def __init__(
        self,
        settings: InspectorSettings | None = None,
        *,
        opener: RepoOpener = open_repo,
    ) -> None:
        self.settings = settings or InspectorSettings()
        self._open = opener

    def list_commits(
        self,
        repo_path: str | PathLike[str],
        limit: int | None = None,
        start_ref: str = "HEAD",
    ) -> list[CommitInfo]:
        """Return at most *limit* commits (default ``settings.commit_limit``).

        The cap is hard: history beyond it is never walked.
        """
        if limit is None:
            limit = self.settings.commit_limit

        with self._open(repo_path) as repo:
            start = resolve_revision(repo, start_ref)
            if limit <= 0:
                return []
            commits = [commit_info(c) for c in repo.iter_commits(start, max_count=limit)]

        logger.debug("Listed %d commits from %s in %s", len(commits), start_ref, repo_path)
        return commits
