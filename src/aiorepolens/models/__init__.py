"""Pydantic models for aiorepolens."""

from .common import RepoLensResponse
from .config import InspectorSettings
from .git import (
    BranchInfo,
    ChangedFile,
    CommitInfo,
    DiffHunk,
    DiffLine,
    FileContents,
    FileDiff,
    FileStatus,
    LineType,
    RepoInfo,
)

__all__ = [
    "BranchInfo",
    "ChangedFile",
    "CommitInfo",
    "DiffHunk",
    "DiffLine",
    "FileContents",
    "FileDiff",
    "FileStatus",
    "InspectorSettings",
    "LineType",
    "RepoInfo",
    "RepoLensResponse",
]
