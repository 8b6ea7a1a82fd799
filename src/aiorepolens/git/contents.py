"""Full before/after file contents for a comparison."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from os import PathLike

from git.objects import Blob, Tree

from ..exceptions import NonUtf8ContentError, PathNotFoundError
from ..models.config import InspectorSettings
from ..models.git import FileContents
from .repository import (
    Comparison,
    RepoOpener,
    commit_comparison,
    open_repo,
    resolve_commit_range,
    worktree_comparison,
    worktree_path,
)

logger = logging.getLogger(__name__)


def looks_binary(data: bytes, scan_bytes: int = 8000) -> bool:
    """Return ``True`` if a NUL byte occurs within the first *scan_bytes*."""
    return b"\0" in data[:scan_bytes]


@dataclass(frozen=True)
class _Side:
    """One resolved comparison point: absent, binary, or raw bytes."""

    exists: bool
    is_binary: bool = False
    data: bytes = b""


_ABSENT = _Side(exists=False)


class ContentResolver:
    """Reconstruct a file's text at the two points of a comparison."""

    def __init__(
        self,
        settings: InspectorSettings | None = None,
        *,
        opener: RepoOpener = open_repo,
    ) -> None:
        self.settings = settings or InspectorSettings()
        self._open = opener

    def get_file_contents(
        self,
        repo_path: str | PathLike[str],
        commit_id: str,
        file_path: str,
    ) -> FileContents:
        """Contents of *file_path* in the first parent and in *commit_id*."""
        with self._open(repo_path) as repo:
            return self.contents(commit_comparison(repo, commit_id), file_path)

    def get_commit_range_file_contents(
        self,
        repo_path: str | PathLike[str],
        commit_ids: Sequence[str],
        file_path: str,
    ) -> FileContents:
        """Contents of *file_path* before the oldest and at the newest commit."""
        with self._open(repo_path) as repo:
            return self.contents(resolve_commit_range(repo, commit_ids), file_path)

    def get_working_file_contents(
        self,
        repo_path: str | PathLike[str],
        file_path: str,
    ) -> FileContents:
        """Contents of *file_path* at HEAD and on disk."""
        with self._open(repo_path) as repo:
            return self.contents(worktree_comparison(repo), file_path)

    def contents(self, comparison: Comparison, file_path: str) -> FileContents:
        before = self._tree_side(comparison.before, file_path)
        if comparison.against_worktree:
            after = self._disk_side(comparison, file_path)
        else:
            after = self._tree_side(comparison.after, file_path)

        if not before.exists and not after.exists:
            raise PathNotFoundError(f"File not found: {file_path}")

        if before.is_binary or after.is_binary:
            return FileContents(old_content=None, new_content=None, is_binary=True)

        return FileContents(
            old_content=self._decode(before, file_path),
            new_content=self._decode(after, file_path),
            is_binary=False,
        )

    # ------------------------------------------------------------------
    # Side resolution
    # ------------------------------------------------------------------

    def _tree_side(self, tree: Tree | None, file_path: str) -> _Side:
        if tree is None:
            return _ABSENT
        try:
            obj = tree / file_path
        except KeyError:
            return _ABSENT
        if not isinstance(obj, Blob):
            return _ABSENT

        data = obj.data_stream.read()
        if looks_binary(data, self.settings.binary_scan_bytes):
            return _Side(exists=True, is_binary=True)
        return _Side(exists=True, data=data)

    def _disk_side(self, comparison: Comparison, file_path: str) -> _Side:
        path = worktree_path(comparison.repo, file_path)
        if not path.is_file():
            return _ABSENT

        data = path.read_bytes()
        if looks_binary(data, self.settings.binary_scan_bytes):
            return _Side(exists=True, is_binary=True)
        return _Side(exists=True, data=data)

    @staticmethod
    def _decode(side: _Side, file_path: str) -> str | None:
        if not side.exists:
            return None
        try:
            return side.data.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.debug("Content of %s is not UTF-8: %s", file_path, exc)
            raise NonUtf8ContentError(
                f"File content is not valid UTF-8: {file_path}"
            ) from exc
