"""Parser helpers between stored task records and Task models."""

from typing import Any

from bujo_mcp.models.task import Task

_OMIT_WHEN_EMPTY = ("notes", "tags")


def _parse_task(task_dict: dict[str, Any]) -> Task:
    """
    Parse a stored task record into a Task.

    Args:
        task_dict: Dictionary from the decrypted store document

    Returns:
        Task instance with validated field types (invariants are checked
        separately by ``Task.validate``)
    """
    return Task.model_validate(task_dict)


def _parse_tasks(tasks: list[dict[str, Any]]) -> list[Task]:
    return [_parse_task(t) for t in tasks]


def _dump_task(task: Task) -> dict[str, Any]:
    """
    Serialize a task to a JSON-ready record.

    Unset optional fields are dropped, as are empty notes and tags.
    """
    record = task.model_dump(mode="json", exclude_none=True)
    for key in _OMIT_WHEN_EMPTY:
        if not record.get(key):
            record.pop(key, None)
    return record
