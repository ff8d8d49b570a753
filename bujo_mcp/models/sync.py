"""Sync result models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class PullResult(BaseModel):
    """Outcome of a pull. A conflict is a handled result, not a failure."""

    conflict: bool = False
    message: str = ""
    backup_path: Path | None = None
