"""Exception hierarchy for aiorepolens."""

from __future__ import annotations


class RepoLensError(Exception):
    """Base exception for all aiorepolens errors."""


class GitError(RepoLensError):
    """Error raised by the git backend or the filesystem beneath it."""


class RepositoryNotFoundError(GitError):
    """The path could not be opened as a repository."""


class NotARepositoryError(RepositoryNotFoundError):
    """The path exists but is not a (non-bare) git repository."""


class RevisionResolutionError(GitError):
    """A reference or revision could not be resolved to a commit."""


class CommitNotFoundError(RevisionResolutionError):
    """A well-formed commit id does not name a commit in the repository."""


class InvalidRevisionIdError(RevisionResolutionError):
    """A commit id is malformed (not 4-40 hex characters) or missing."""


class FileNotInComparisonError(RepoLensError):
    """The requested path has no delta in the requested comparison."""


class PathNotFoundError(RepoLensError):
    """The requested path is absent on both sides of a comparison."""


class NonUtf8ContentError(RepoLensError):
    """A non-binary blob could not be decoded as UTF-8 text."""


class PathSecurityError(RepoLensError):
    """A requested path resolved outside the repository working tree."""


class UncommittedChangesError(RepoLensError):
    """Checkout refused because tracked files have uncommitted changes."""

    def __init__(self, message: str, paths: list[str] | None = None) -> None:
        super().__init__(message)
        self.paths = paths or []


class BranchNotFoundError(RepoLensError):
    """The named local branch does not exist."""


class UnknownCommandError(RepoLensError):
    """The command dispatcher received an unknown command name."""
