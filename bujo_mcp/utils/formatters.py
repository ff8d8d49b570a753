"""Formatting utilities for task output."""

from bujo_mcp.enums import TaskStatus
from bujo_mcp.models.task import Task

_STATUS_ICON = {TaskStatus.POOL: "[ ]", TaskStatus.TODAY: "[>]", TaskStatus.DONE: "[x]"}


def _format_task_concise(task: Task) -> str:
    """
    Format a single task in concise format for token efficiency.

    Output: "a1b2c3d4 [>] Title (due:2024-12-31, +work, deferred:2)"
    """
    short_id = str(task.id)[:8]
    title = task.title[:50]

    meta = []
    if task.due_date:
        meta.append(f"due:{task.due_date.date().isoformat()}")
    meta.extend(f"+{tag}" for tag in task.tags)
    if task.deferred_count:
        meta.append(f"deferred:{task.deferred_count}")

    line = f"{short_id} {_STATUS_ICON.get(task.status, '[?]')} {title}"
    if meta:
        return f"{line} ({', '.join(meta)})"
    return line


def _format_tasks_concise(tasks: list[Task], title: str | None = None) -> str:
    """
    Format a list of tasks in concise format.

    Output:
    2 task(s) | today
    a1b2c3d4 [>] Task one
    e5f6a7b8 [>] Task two (+work)
    """
    if not tasks:
        return "0 tasks"

    header = f"{len(tasks)} task(s)"
    if title:
        header = f"{len(tasks)} task(s) | {title}"

    return "\n".join([header, *(_format_task_concise(t) for t in tasks)])


def _format_task_markdown(task: Task) -> str:
    """Format a single task as markdown."""
    lines = [f"### {_STATUS_ICON.get(task.status, '[?]')} {task.title}"]

    details = [f"**ID**: {task.id}", f"**Status**: {task.status.value}"]
    if task.due_date:
        details.append(f"**Due**: {task.due_date.isoformat()}")
    if task.tags:
        details.append(f"**Tags**: {', '.join(task.tags)}")
    if task.deferred_count:
        details.append(f"**Deferred**: {task.deferred_count}x")
    if task.completed_at:
        details.append(f"**Completed**: {task.completed_at.isoformat()}")
    lines.append(" | ".join(details))

    if task.notes:
        lines.append("**Notes:**")
        lines.extend(f"  {line}" for line in task.notes.splitlines())

    return "\n".join(lines)


def _format_tasks_markdown(tasks: list[Task], title: str = "Tasks") -> str:
    """Format a list of tasks as markdown."""
    if not tasks:
        return f"# {title}\n\nNo tasks found."

    lines = [f"# {title}", f"*{len(tasks)} task(s)*", ""]

    for task in tasks:
        lines.append(_format_task_markdown(task))
        lines.append("")

    return "\n".join(lines)
