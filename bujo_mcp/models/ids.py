"""Task identifiers.

Tasks are identified by random UUIDs. The all-zero UUID is reserved as the
"no identifier" sentinel and is never a valid task id.
"""

from __future__ import annotations

import uuid

from bujo_mcp.errors import TaskValidationError

EMPTY_TASK_ID = uuid.UUID(int=0)


def new_task_id() -> uuid.UUID:
    return uuid.uuid4()


def parse_task_id(raw: str | uuid.UUID) -> uuid.UUID:
    """
    Parse a canonical UUID string into a task id.

    Args:
        raw: UUID string (or an existing UUID, returned unchanged)

    Returns:
        The parsed UUID

    Raises:
        TaskValidationError: If the value is not a well-formed UUID or is the
            empty sentinel
    """
    if isinstance(raw, uuid.UUID):
        task_id = raw
    else:
        text = (raw or "").strip()
        if not text:
            raise TaskValidationError("id", "task id cannot be empty")
        try:
            task_id = uuid.UUID(text)
        except ValueError as e:
            raise TaskValidationError("id", f"malformed task id {text!r}") from e

    if is_empty_task_id(task_id):
        raise TaskValidationError("id", "task id is the empty sentinel")
    return task_id


def is_empty_task_id(task_id: uuid.UUID | None) -> bool:
    return task_id is None or task_id == EMPTY_TASK_ID
