"""Query filter for task collections."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bujo_mcp.enums import TaskStatus
from bujo_mcp.models.task import Task, _as_utc


class TaskFilter(BaseModel):
    """
    Criteria for selecting tasks. Unset fields match everything.

    - status: exact match
    - tags: the task must carry every listed tag
    - due_after / due_before: inclusive bounds; a task without a due date never
      matches when either bound is set
    - limit: advisory cap for the caller, ignored by ``matches``
    """

    model_config = ConfigDict(frozen=True)

    status: TaskStatus | None = None
    tags: tuple[str, ...] = Field(default_factory=tuple)
    due_after: datetime | None = None
    due_before: datetime | None = None
    limit: int | None = Field(default=None, ge=0)

    @field_validator("due_after", "due_before")
    @classmethod
    def _normalize_timezone(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _none_tags_to_empty(cls, v: list[str] | tuple[str, ...] | None) -> tuple[str, ...]:
        return () if v is None else tuple(v)

    def matches(self, task: Task) -> bool:
        if self.status is not None and task.status != self.status:
            return False

        if self.tags and not set(self.tags).issubset(task.tags):
            return False

        if self.due_after is not None:
            if task.due_date is None or task.due_date < self.due_after:
                return False

        if self.due_before is not None:
            if task.due_date is None or task.due_date > self.due_before:
                return False

        return True
