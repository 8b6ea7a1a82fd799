"""Git-related models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FileStatus(str, Enum):
    """Classification of a file's change within a comparison."""

    ADDED = "Added"
    MODIFIED = "Modified"
    DELETED = "Deleted"
    RENAMED = "Renamed"
    COPIED = "Copied"
    UNMODIFIED = "Unmodified"
    UNTRACKED = "Untracked"


class LineType(str, Enum):
    """Classification of a single diff line."""

    CONTEXT = "Context"
    ADDITION = "Addition"
    DELETION = "Deletion"


class CommitInfo(BaseModel):
    """A single commit in the history."""

    model_config = ConfigDict(frozen=True)

    id: str
    message: str
    author: str
    email: str
    timestamp: int


class ChangedFile(BaseModel):
    """One file's change within a comparison."""

    path: str
    status: FileStatus
    additions: int = 0
    deletions: int = 0
    old_path: str | None = None


class DiffLine(BaseModel):
    """One line inside a hunk, marker character stripped."""

    content: str
    line_type: LineType
    old_line_no: int | None = None
    new_line_no: int | None = None


class DiffHunk(BaseModel):
    """One contiguous change region."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: list[DiffLine] = Field(default_factory=list)


class FileDiff(BaseModel):
    """Full diff for one file; binary diffs never carry hunks."""

    old_path: str | None = None
    new_path: str
    hunks: list[DiffHunk] = Field(default_factory=list)
    is_binary: bool = False


class FileContents(BaseModel):
    """Before/after text of one file.

    ``None`` marks a side on which the file does not exist. Binary files carry
    no text on either side.
    """

    old_content: str | None = None
    new_content: str | None = None
    is_binary: bool = False


class BranchInfo(BaseModel):
    """A local or remote-tracking branch."""

    name: str
    is_current: bool = False
    is_remote: bool = False
    commit_id: str = ""


class RepoInfo(BaseModel):
    """Validated repository summary."""

    path: str
    name: str
    current_branch: str
