"""Command table for the UI transport.

The transport (IPC bridge, RPC server...) looks commands up by name and hands
the keyword arguments it received straight to :func:`dispatch`, which returns
a :class:`RepoLensResponse` envelope with JSON-ready data.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from .exceptions import RepoLensError, UnknownCommandError
from .git.inspector import RepoInspector
from .models.common import RepoLensResponse

logger = logging.getLogger(__name__)

COMMANDS: frozenset[str] = frozenset(
    {
        "list_commits",
        "get_commit_files",
        "get_commit_range_files",
        "get_file_diff",
        "get_commit_range_file_diff",
        "get_file_contents",
        "get_commit_range_file_contents",
        "get_current_branch",
        "list_branches",
        "checkout_branch",
        "validate_repo",
        "get_working_changes",
        "get_working_file_diff",
        "get_working_file_contents",
    }
)


def to_payload(result: Any) -> Any:
    """Convert an operation result into JSON-serialisable data."""
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [to_payload(item) for item in result]
    return result


async def dispatch(inspector: RepoInspector, name: str, **params: Any) -> RepoLensResponse:
    """Run command *name* with *params* and wrap the outcome.

    Library errors become ``success=False`` responses; anything else
    propagates to the transport.
    """
    if name not in COMMANDS:
        raise UnknownCommandError(f"Unknown command: {name}")

    try:
        result = await getattr(inspector, name)(**params)
    except RepoLensError as exc:
        logger.debug("Command %s failed: %s", name, exc)
        return RepoLensResponse.failure(name, str(exc))

    return RepoLensResponse.ok(name, to_payload(result))
