"""Working-tree status reconciliation and the checkout guard.

The backend reports two independent change sources per path: the index
(staged) and the working tree (unstaged).  They are folded into one
:class:`StatusFlag` set per path, then reconciled into a single
:class:`FileStatus` for the listing.  The checkout guard uses a narrower
predicate over the same flags.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from os import PathLike

from git import Repo
from git.exc import GitCommandError

from ..exceptions import GitError, UncommittedChangesError
from ..models.config import InspectorSettings
from ..models.git import ChangedFile, FileStatus
from .diff import DiffEngine
from .repository import RepoOpener, open_repo, worktree_comparison

logger = logging.getLogger(__name__)


class StatusFlag(enum.Flag):
    """Combined index/worktree status bits for one path."""

    CURRENT = 0
    INDEX_NEW = enum.auto()
    INDEX_MODIFIED = enum.auto()
    INDEX_DELETED = enum.auto()
    INDEX_RENAMED = enum.auto()
    INDEX_TYPECHANGE = enum.auto()
    WT_NEW = enum.auto()
    WT_MODIFIED = enum.auto()
    WT_DELETED = enum.auto()
    WT_TYPECHANGE = enum.auto()
    WT_RENAMED = enum.auto()
    IGNORED = enum.auto()
    CONFLICTED = enum.auto()


_INDEX_FLAGS: dict[str, StatusFlag] = {
    "A": StatusFlag.INDEX_NEW,
    "C": StatusFlag.INDEX_NEW,
    "M": StatusFlag.INDEX_MODIFIED,
    "D": StatusFlag.INDEX_DELETED,
    "R": StatusFlag.INDEX_RENAMED,
    "T": StatusFlag.INDEX_TYPECHANGE,
}

_WORKTREE_FLAGS: dict[str, StatusFlag] = {
    "A": StatusFlag.WT_NEW,
    "M": StatusFlag.WT_MODIFIED,
    "D": StatusFlag.WT_DELETED,
    "R": StatusFlag.WT_RENAMED,
    "T": StatusFlag.WT_TYPECHANGE,
}

_UNMERGED_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})

_NEW = StatusFlag.INDEX_NEW | StatusFlag.WT_NEW
_DELETED = StatusFlag.INDEX_DELETED | StatusFlag.WT_DELETED
_MODIFIED = StatusFlag.INDEX_MODIFIED | StatusFlag.WT_MODIFIED
_RENAMED = StatusFlag.INDEX_RENAMED | StatusFlag.WT_RENAMED

# Changes whose content is not reachable from any commit once the tree is
# overwritten.  A rename deletes its source path.  New files are absent.
CHECKOUT_BLOCKING = _MODIFIED | _DELETED | _RENAMED


@dataclass(frozen=True)
class StatusEntry:
    """One path with a non-empty combined status."""

    path: str
    flags: StatusFlag
    orig_path: str | None = None


def flags_from_code(code: str) -> StatusFlag:
    """Convert a porcelain v1 ``XY`` code into status flags."""
    if code == "??":
        return StatusFlag.WT_NEW
    if code == "!!":
        return StatusFlag.IGNORED
    if code in _UNMERGED_CODES:
        return StatusFlag.CONFLICTED

    index_code, worktree_code = code[0], code[1]
    flags = StatusFlag.CURRENT
    flags |= _INDEX_FLAGS.get(index_code, StatusFlag.CURRENT)
    flags |= _WORKTREE_FLAGS.get(worktree_code, StatusFlag.CURRENT)
    return flags


def parse_porcelain_status(output: str) -> list[StatusEntry]:
    """Parse ``git status --porcelain=v1 -z`` output.

    Records are NUL separated.  Rename and copy records are followed by an
    extra record holding the original path.
    """
    records = output.split("\0")
    entries: list[StatusEntry] = []
    idx = 0
    while idx < len(records):
        record = records[idx]
        idx += 1
        if len(record) < 4:
            continue

        code, path = record[:2], record[3:]
        orig_path = None
        if code[0] in "RC" or code[1] in "RC":
            if idx < len(records):
                orig_path = records[idx] or None
            idx += 1

        flags = flags_from_code(code)
        if flags:
            entries.append(StatusEntry(path=path, flags=flags, orig_path=orig_path))
    return entries


def reconcile_status(flags: StatusFlag) -> FileStatus | None:
    """Fold index and worktree flags into one status; ``None`` means skip."""
    if flags & StatusFlag.WT_NEW and not flags & StatusFlag.INDEX_NEW:
        return FileStatus.UNTRACKED
    if flags & _NEW:
        return FileStatus.ADDED
    if flags & _DELETED:
        return FileStatus.DELETED
    if flags & _MODIFIED:
        return FileStatus.MODIFIED
    if flags & _RENAMED:
        return FileStatus.RENAMED
    return None


def is_checkout_blocking(flags: StatusFlag) -> bool:
    """``True`` if switching trees could destroy this path's uncommitted content."""
    return bool(flags & CHECKOUT_BLOCKING)


class StatusReconciler:
    """List working-tree changes and guard checkouts against losing them."""

    def __init__(
        self,
        settings: InspectorSettings | None = None,
        *,
        opener: RepoOpener = open_repo,
    ) -> None:
        self.settings = settings or InspectorSettings()
        self._open = opener

    def status_entries(self, repo: Repo) -> list[StatusEntry]:
        try:
            output = repo.git.status("--porcelain=v1", "-z", "--untracked-files=all")
        except GitCommandError as exc:
            raise GitError(f"Failed to get repository status: {exc}") from exc
        return parse_porcelain_status(output)

    def get_working_changes(self, repo_path: str | PathLike[str]) -> list[ChangedFile]:
        """Every staged, unstaged or untracked change, one entry per path."""
        with self._open(repo_path) as repo:
            return self.working_changes(repo)

    def working_changes(self, repo: Repo) -> list[ChangedFile]:
        entries = self.status_entries(repo)
        line_stats = self._line_stats(repo) if entries else {}

        changes: list[ChangedFile] = []
        for entry in entries:
            status = reconcile_status(entry.flags)
            if status is None:
                logger.debug("Skipping %s with status %s", entry.path, entry.flags)
                continue
            additions, deletions = line_stats.get(entry.path, (0, 0))
            # Working-tree renames never carry old_path.
            changes.append(
                ChangedFile(
                    path=entry.path,
                    status=status,
                    additions=additions,
                    deletions=deletions,
                )
            )
        return changes

    def _line_stats(self, repo: Repo) -> dict[str, tuple[int, int]]:
        comparison = worktree_comparison(repo)
        if comparison.before is None:
            # Unborn HEAD: nothing to count against.
            return {}
        return DiffEngine(self.settings).line_stats(comparison)

    # ------------------------------------------------------------------
    # Checkout guard
    # ------------------------------------------------------------------

    def find_blocking_changes(self, repo: Repo) -> list[str]:
        """Paths with staged or unstaged modifications, deletions or renames."""
        return [
            entry.path
            for entry in self.status_entries(repo)
            if is_checkout_blocking(entry.flags)
        ]

    def ensure_checkout_safe(self, repo: Repo) -> None:
        """Raise :class:`UncommittedChangesError` if a checkout could lose work."""
        blocking = self.find_blocking_changes(repo)
        if blocking:
            shown = ", ".join(blocking[:10])
            more = f" (and {len(blocking) - 10} more)" if len(blocking) > 10 else ""
            raise UncommittedChangesError(
                f"Cannot switch branches: uncommitted changes in {shown}{more}",
                paths=blocking,
            )
