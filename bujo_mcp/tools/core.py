"""Core MCP tool definitions for the journal task store."""

import json
import logging
import uuid

from mcp.types import ToolAnnotations

from bujo_mcp import store
from bujo_mcp.enums import ResponseFormat
from bujo_mcp.errors import BujoError, InvalidStateTransitionError, TaskNotFoundError, TaskValidationError
from bujo_mcp.models.collection import TaskCollection
from bujo_mcp.models.filter import TaskFilter
from bujo_mcp.models.ids import parse_task_id
from bujo_mcp.models.inputs import AddTaskInput, ListTasksInput, TaskIdInput
from bujo_mcp.models.task import Task, new_task
from bujo_mcp.server import mcp
from bujo_mcp.utils.formatters import (
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
)
from bujo_mcp.utils.parsers import _dump_task

logger = logging.getLogger(__name__)

_MIN_PREFIX = 4


def _resolve_task_id(collection: TaskCollection, raw: str) -> uuid.UUID:
    """
    Accept a full UUID or a unique prefix (as shown in concise output).

    Raises:
        TaskNotFoundError: If no task matches
        TaskValidationError: If a prefix is too short or ambiguous
    """
    try:
        return parse_task_id(raw)
    except TaskValidationError:
        prefix = raw.strip().lower()
        if len(prefix) < _MIN_PREFIX:
            raise

    matches = [t.id for t in collection.all() if str(t.id).startswith(prefix)]
    if not matches:
        raise TaskNotFoundError(raw)
    if len(matches) > 1:
        raise TaskValidationError("id", f"prefix {raw!r} matches {len(matches)} tasks")
    return matches[0]


def _render_task(task: Task, response_format: ResponseFormat) -> str:
    if response_format == ResponseFormat.JSON:
        return json.dumps(_dump_task(task), indent=2)
    if response_format == ResponseFormat.CONCISE:
        return _format_task_concise(task)
    return _format_task_markdown(task)


@mcp.tool(
    name="bujo_add",
    annotations=ToolAnnotations(
        title="Add Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=False,
    ),
)
async def bujo_add(params: AddTaskInput) -> str:
    """
    Create a new task in the pool.

    USE THIS WHEN:
    - Capturing a new task to track

    DO NOT USE WHEN:
    - Scheduling an existing task for today → use bujo_pick instead

    Args:
        params: AddTaskInput containing title and optional notes, tags, due_date

    Returns:
        Confirmation message with the created task ID

    Examples:
        - Simple task: params with title="Buy milk"
        - Task with tags: params with title="Write report", tags=["work"]
    """
    try:
        repository = store.get_repository()
        task = new_task(params.title, params.tags, notes=params.notes, due_date=params.due_date)
        collection = repository.load()
        collection.add(task)
        collection.touch()
        repository.save(collection)
    except BujoError as e:
        return f"Error: {e}"

    logger.info("Task added id=%s", task.id)
    return f"Task created successfully.\n{_format_task_concise(task)}"


@mcp.tool(
    name="bujo_list",
    annotations=ToolAnnotations(
        title="List Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def bujo_list(params: ListTasksInput) -> str:
    """
    List tasks, newest first, optionally filtered.

    FILTERS (all optional, combined with AND):
    - status: "pool", "today" or "done"
    - tags: task must carry every listed tag
    - due_after / due_before: inclusive due-date bounds (tasks without a due date are excluded)

    Args:
        params: ListTasksInput containing filters, limit, and response_format

    Returns:
        Formatted list of tasks (markdown, concise or JSON)

    Examples:
        - Today's focus: params with status="today"
        - Work backlog: params with status="pool", tags=["work"]
    """
    try:
        task_filter = TaskFilter(
            status=params.status,
            tags=params.tags,
            due_after=params.due_after,
            due_before=params.due_before,
            limit=params.limit,
        )
        tasks = store.get_repository().load().find(task_filter)
    except BujoError as e:
        return f"Error: {e}"

    total_count = len(tasks)
    if task_filter.limit and len(tasks) > task_filter.limit:
        tasks = tasks[: task_filter.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"total": total_count, "count": len(tasks), "tasks": [_dump_task(t) for t in tasks]},
            indent=2,
        )

    title = "Tasks"
    if params.status:
        title = f"Tasks ({params.status.value})"

    if params.response_format == ResponseFormat.CONCISE:
        return _format_tasks_concise(tasks, params.status.value if params.status else None)

    return _format_tasks_markdown(tasks, title)


@mcp.tool(
    name="bujo_get",
    annotations=ToolAnnotations(
        title="Get Task",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def bujo_get(params: TaskIdInput) -> str:
    """
    Get one task by ID (full UUID or unique prefix).

    Args:
        params: TaskIdInput containing task_id and response_format

    Returns:
        The task, formatted
    """
    try:
        collection = store.get_repository().load()
        task = collection.get(_resolve_task_id(collection, params.task_id))
    except BujoError as e:
        return f"Error: {e}"
    return _render_task(task, params.response_format)


async def _transition(params: TaskIdInput, action: str, done_message: str) -> str:
    try:
        repository = store.get_repository()
        collection = repository.load()
        task_id = _resolve_task_id(collection, params.task_id)
        task = getattr(collection, action)(task_id)
        repository.save(collection)
    except InvalidStateTransitionError as e:
        # Non-fatal: the task is unchanged and nothing was saved.
        return f"Not changed: {e}"
    except BujoError as e:
        return f"Error: {e}"

    logger.info("Task %s id=%s", action, task.id)
    return f"{done_message}\n{_render_task(task, params.response_format)}"


@mcp.tool(
    name="bujo_pick",
    annotations=ToolAnnotations(
        title="Pick Task for Today",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def bujo_pick(params: TaskIdInput) -> str:
    """
    Move a task from the pool into today's focus.

    Picking a task already in today is a no-op. Completed tasks cannot be picked.

    Args:
        params: TaskIdInput containing the task_id to pick
    """
    return await _transition(params, "pick", "Task picked for today.")


@mcp.tool(
    name="bujo_defer",
    annotations=ToolAnnotations(
        title="Defer Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def bujo_defer(params: TaskIdInput) -> str:
    """
    Return a task from today to the pool, counting the deferral.

    Deferring a pool task is a no-op. Completed tasks cannot be deferred.

    Args:
        params: TaskIdInput containing the task_id to defer
    """
    return await _transition(params, "defer", "Task deferred to the pool.")


@mcp.tool(
    name="bujo_complete",
    annotations=ToolAnnotations(
        title="Complete Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def bujo_complete(params: TaskIdInput) -> str:
    """
    Mark a task as done. Completing a done task keeps its original completion time.

    Args:
        params: TaskIdInput containing the task_id to complete
    """
    return await _transition(params, "complete", "Task marked as complete.")


@mcp.tool(
    name="bujo_delete",
    annotations=ToolAnnotations(
        title="Delete Task",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def bujo_delete(params: TaskIdInput) -> str:
    """
    Permanently remove a task.

    Args:
        params: TaskIdInput containing the task_id to delete
    """
    try:
        repository = store.get_repository()
        collection = repository.load()
        task = collection.remove(_resolve_task_id(collection, params.task_id))
        collection.touch()
        repository.save(collection)
    except BujoError as e:
        return f"Error: {e}"

    logger.info("Task deleted id=%s", task.id)
    return f"Task {task.id} deleted."
