"""Transport envelope for dispatched commands."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class RepoLensResponse(BaseModel):
    """Result of one named command, as handed back to the UI transport.

    ``success`` is false only for library errors, in which case ``message``
    carries the error text and ``data`` is empty.  On success ``data`` holds
    the JSON-ready operation result (``None`` for commands such as
    ``checkout_branch`` that return nothing).
    """

    command: str
    success: bool
    message: str | None = None
    data: Any | None = None

    @classmethod
    def ok(cls, command: str, data: Any = None) -> RepoLensResponse:
        return cls(command=command, success=True, data=data)

    @classmethod
    def failure(cls, command: str, message: str) -> RepoLensResponse:
        return cls(command=command, success=False, message=message)
