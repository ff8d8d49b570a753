"""Domain and input models for the journal task store."""

from bujo_mcp.models.collection import SCHEMA_VERSION, CollectionMetadata, TaskCollection
from bujo_mcp.models.filter import TaskFilter
from bujo_mcp.models.ids import EMPTY_TASK_ID, is_empty_task_id, new_task_id, parse_task_id
from bujo_mcp.models.inputs import AddTaskInput, ListTasksInput, SyncInput, TaskIdInput
from bujo_mcp.models.sync import PullResult
from bujo_mcp.models.task import Task, new_task

__all__ = [
    # Identifiers
    "EMPTY_TASK_ID",
    "new_task_id",
    "parse_task_id",
    "is_empty_task_id",
    # Domain models
    "Task",
    "new_task",
    "TaskFilter",
    "TaskCollection",
    "CollectionMetadata",
    "SCHEMA_VERSION",
    "PullResult",
    # Tool input models
    "AddTaskInput",
    "ListTasksInput",
    "TaskIdInput",
    "SyncInput",
]
