"""Unified-diff hunk parsing.

Turns the per-file patch body the backend produces (everything after the
``+++`` header) into :class:`DiffHunk` objects.  Line content keeps its line
terminator, so concatenating the context and addition lines of the hunks
rebuilds the new side of the file.
"""

from __future__ import annotations

import re

from ..models.git import DiffHunk, DiffLine, LineType

_HUNK_HEADER_RE = re.compile(rb"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_BINARY_RE = re.compile(rb"^Binary files .* differ$", re.MULTILINE)
_NO_NEWLINE_MARKER = b"\\"


def is_binary_patch(patch: bytes | str | None) -> bool:
    """Return ``True`` if git reported the file pair as binary."""
    if not patch:
        return False
    if isinstance(patch, str):
        patch = patch.encode("utf-8", errors="replace")
    return bool(_BINARY_RE.search(patch))


def _split_keep_newlines(data: bytes) -> list[bytes]:
    # bytes.splitlines() would also break on \r, \x0b, \x0c and friends.
    pieces = data.split(b"\n")
    lines = [piece + b"\n" for piece in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return lines


def parse_patch(patch: bytes | str | None) -> list[DiffHunk]:
    """Parse a patch body into hunks, preserving the backend's order."""
    if not patch:
        return []
    if isinstance(patch, str):
        patch = patch.encode("utf-8")

    hunks: list[DiffHunk] = []
    current: DiffHunk | None = None
    old_no = new_no = 0

    for raw in _split_keep_newlines(patch):
        header = _HUNK_HEADER_RE.match(raw)
        if header:
            old_start = int(header.group(1))
            new_start = int(header.group(3))
            current = DiffHunk(
                old_start=old_start,
                old_lines=int(header.group(2)) if header.group(2) is not None else 1,
                new_start=new_start,
                new_lines=int(header.group(4)) if header.group(4) is not None else 1,
            )
            hunks.append(current)
            old_no, new_no = old_start, new_start
            continue

        if current is None:
            # Header residue before the first hunk ("Binary files ...", mode lines).
            continue

        if raw.startswith(_NO_NEWLINE_MARKER):
            # "\ No newline at end of file" belongs to the previous line.
            if current.lines:
                previous = current.lines[-1]
                previous.content = previous.content.rstrip("\n")
            continue

        marker, body = raw[:1], raw[1:]
        content = body.decode("utf-8", errors="replace")
        if marker == b"+":
            current.lines.append(
                DiffLine(content=content, line_type=LineType.ADDITION, new_line_no=new_no)
            )
            new_no += 1
        elif marker == b"-":
            current.lines.append(
                DiffLine(content=content, line_type=LineType.DELETION, old_line_no=old_no)
            )
            old_no += 1
        else:
            current.lines.append(
                DiffLine(
                    content=content,
                    line_type=LineType.CONTEXT,
                    old_line_no=old_no,
                    new_line_no=new_no,
                )
            )
            old_no += 1
            new_no += 1

    return hunks


def count_line_changes(hunks: list[DiffHunk]) -> tuple[int, int]:
    """Return ``(additions, deletions)`` across *hunks*."""
    additions = deletions = 0
    for hunk in hunks:
        for line in hunk.lines:
            if line.line_type is LineType.ADDITION:
                additions += 1
            elif line.line_type is LineType.DELETION:
                deletions += 1
    return additions, deletions
