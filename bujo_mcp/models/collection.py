"""Task collection: the aggregate root that owns every task."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel

from bujo_mcp.errors import DuplicateTaskIDError, TaskNotFoundError
from bujo_mcp.models.filter import TaskFilter
from bujo_mcp.models.task import Task, _utcnow

SCHEMA_VERSION = 1


class CollectionMetadata(BaseModel):
    """Persistence metadata carried alongside the tasks."""

    version: int = SCHEMA_VERSION
    last_modified: datetime | None = None
    encryption_mode: str = ""
    salt: str = ""  # Opaque, owned by the cipher


class TaskCollection:
    """
    Tasks keyed by id, with uniqueness enforced here and nowhere else.

    Callers never see the internal mapping: queries return fresh lists, and
    ``get`` hands back a single task. Prefer the ``pick``/``defer``/``complete``
    helpers on the collection so the modification time stays current.
    """

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        metadata: CollectionMetadata | None = None,
    ) -> None:
        self._tasks: dict[uuid.UUID, Task] = {}
        self.metadata = metadata if metadata is not None else CollectionMetadata()
        for task in tasks:
            self.add(task)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    # ---- CRUD ----

    def add(self, task: Task) -> None:
        """Insert a validated task. Never overwrites an existing id."""
        task.validate()
        if task.id in self._tasks:
            raise DuplicateTaskIDError(task.id)
        self._tasks[task.id] = task

    def get(self, task_id: uuid.UUID) -> Task:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise TaskNotFoundError(task_id) from None

    def remove(self, task_id: uuid.UUID) -> Task:
        try:
            return self._tasks.pop(task_id)
        except KeyError:
            raise TaskNotFoundError(task_id) from None

    # ---- queries ----

    def all(self) -> list[Task]:
        """Every task, newest first. Ties on creation time are ordered by id."""
        by_id = sorted(self._tasks.values(), key=lambda t: str(t.id))
        return sorted(by_id, key=lambda t: t.created_at, reverse=True)

    def find(self, task_filter: TaskFilter) -> list[Task]:
        """Tasks matching the filter, in ``all()`` order. ``limit`` is left to the caller."""
        return [t for t in self.all() if task_filter.matches(t)]

    # ---- transitions routed through the aggregate ----

    def pick(self, task_id: uuid.UUID) -> Task:
        task = self.get(task_id)
        task.pick()
        self.touch()
        return task

    def defer(self, task_id: uuid.UUID) -> Task:
        task = self.get(task_id)
        task.defer()
        self.touch()
        return task

    def complete(self, task_id: uuid.UUID) -> Task:
        task = self.get(task_id)
        task.complete()
        self.touch()
        return task

    def touch(self) -> None:
        self.metadata.last_modified = _utcnow()
