"""Repository inspection and diff engine built on GitPython."""

from .branches import BranchManager
from .contents import ContentResolver
from .diff import DiffEngine
from .history import RevisionWalker
from .inspector import RepoInspector
from .repository import open_repo, validate_repo
from .status import StatusReconciler

__all__ = [
    "BranchManager",
    "ContentResolver",
    "DiffEngine",
    "RepoInspector",
    "RevisionWalker",
    "StatusReconciler",
    "open_repo",
    "validate_repo",
]
