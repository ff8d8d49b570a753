"""Task entity and its lifecycle."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bujo_mcp.enums import TaskStatus
from bujo_mcp.errors import (
    EmptyTitleError,
    InvalidStateTransitionError,
    InvalidStatusError,
    TaskValidationError,
)
from bujo_mcp.models.ids import is_empty_task_id, new_task_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC so every comparison is between aware values."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class Task(BaseModel):
    """
    A unit of work in the journal.

    ``id`` and ``created_at`` are frozen once the task exists. Status changes
    go through ``pick``, ``defer`` and ``complete``; a rejected transition
    raises ``InvalidStateTransitionError`` and leaves the task untouched.
    Transitions out of ``done`` are never allowed, except the idempotent
    ``complete``.
    """

    model_config = ConfigDict(extra="ignore")

    id: uuid.UUID = Field(frozen=True)
    created_at: datetime = Field(frozen=True)
    title: str
    notes: str = ""
    status: TaskStatus = TaskStatus.POOL
    tags: list[str] = Field(default_factory=list)
    due_date: datetime | None = None
    completed_at: datetime | None = None
    deferred_count: int = 0

    @field_validator("created_at", "due_date", "completed_at")
    @classmethod
    def _normalize_timezone(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _none_tags_to_empty(cls, v: list[str] | None) -> list[str]:
        return [] if v is None else v

    # ------------------------------------------------------------------
    # Lifecycle transitions
    # ------------------------------------------------------------------

    def pick(self) -> None:
        """pool -> today. Picking a task already in today is a no-op."""
        if self.status == TaskStatus.DONE:
            raise InvalidStateTransitionError(self.id, self.status, "pick")
        self.status = TaskStatus.TODAY

    def defer(self) -> None:
        """today -> pool, counting the postponement. Deferring a pool task is a no-op."""
        if self.status == TaskStatus.DONE:
            raise InvalidStateTransitionError(self.id, self.status, "defer")
        if self.status == TaskStatus.TODAY:
            self.status = TaskStatus.POOL
            self.deferred_count += 1

    def complete(self) -> None:
        """Mark done. The first completion time is kept on repeat calls."""
        if self.status == TaskStatus.DONE:
            return
        self.status = TaskStatus.DONE
        self.completed_at = _utcnow()

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """
        Re-check every invariant and raise on the first violation.

        Raises:
            TaskValidationError: Naming the offending field and the reason
        """
        if not isinstance(self.id, uuid.UUID) or is_empty_task_id(self.id):
            raise TaskValidationError("id", "must be a non-empty UUID")
        if self.created_at is None:
            raise TaskValidationError("created_at", "must be set")
        if not isinstance(self.title, str) or not self.title.strip():
            raise EmptyTitleError()
        if not TaskStatus.is_valid(self.status):
            raise InvalidStatusError(self.status)
        if self.deferred_count < 0:
            raise TaskValidationError("deferred_count", "must be >= 0")

        done = TaskStatus(self.status) == TaskStatus.DONE
        if done and self.completed_at is None:
            raise TaskValidationError("completed_at", "must be set when status is done")
        if not done and self.completed_at is not None:
            raise TaskValidationError("completed_at", "must be empty unless status is done")


def new_task(
    title: str,
    tags: list[str] | None = None,
    *,
    notes: str = "",
    due_date: datetime | None = None,
) -> Task:
    """
    Create a task in the pool with a fresh id and creation time.

    The title is trimmed; a blank title raises ``EmptyTitleError``. Tags are
    copied so later changes to the caller's list do not leak in.
    """
    trimmed = (title or "").strip()
    if not trimmed:
        raise EmptyTitleError()

    return Task(
        id=new_task_id(),
        created_at=_utcnow(),
        title=trimmed,
        notes=notes,
        status=TaskStatus.POOL,
        tags=list(tags) if tags else [],
        due_date=due_date,
    )
