"""aiorepolens: async Python library for inspecting git history, diffs and working state."""

from ._version import __version__
from .commands import COMMANDS, dispatch
from .exceptions import (
    BranchNotFoundError,
    CommitNotFoundError,
    FileNotInComparisonError,
    GitError,
    InvalidRevisionIdError,
    NonUtf8ContentError,
    NotARepositoryError,
    PathNotFoundError,
    PathSecurityError,
    RepoLensError,
    RepositoryNotFoundError,
    RevisionResolutionError,
    UncommittedChangesError,
    UnknownCommandError,
)
from .git import (
    BranchManager,
    ContentResolver,
    DiffEngine,
    RepoInspector,
    RevisionWalker,
    StatusReconciler,
)
from .models import (
    BranchInfo,
    ChangedFile,
    CommitInfo,
    DiffHunk,
    DiffLine,
    FileContents,
    FileDiff,
    FileStatus,
    InspectorSettings,
    LineType,
    RepoInfo,
    RepoLensResponse,
)

__all__ = [
    "COMMANDS",
    "BranchInfo",
    "BranchManager",
    "BranchNotFoundError",
    "ChangedFile",
    "CommitInfo",
    "CommitNotFoundError",
    "ContentResolver",
    "DiffEngine",
    "DiffHunk",
    "DiffLine",
    "FileContents",
    "FileDiff",
    "FileNotInComparisonError",
    "FileStatus",
    "GitError",
    "InspectorSettings",
    "InvalidRevisionIdError",
    "LineType",
    "NonUtf8ContentError",
    "NotARepositoryError",
    "PathNotFoundError",
    "PathSecurityError",
    "RepoInfo",
    "RepoInspector",
    "RepoLensError",
    "RepoLensResponse",
    "RepositoryNotFoundError",
    "RevisionResolutionError",
    "RevisionWalker",
    "StatusReconciler",
    "UncommittedChangesError",
    "UnknownCommandError",
    "__version__",
    "dispatch",
]
