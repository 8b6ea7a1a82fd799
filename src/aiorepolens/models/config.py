"""Inspector configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class InspectorSettings(BaseModel):
    """Tunables shared by the inspection components.

    Values are passed to the constructor; no environment variables are read.
    """

    commit_limit: int = Field(default=100, ge=0)
    binary_scan_bytes: int = Field(default=8000, ge=1)
    context_lines: int = Field(default=3, ge=0)
