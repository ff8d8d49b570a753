"""Utility functions for the journal task store."""

from bujo_mcp.utils.formatters import (
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
)
from bujo_mcp.utils.parsers import _dump_task, _parse_task, _parse_tasks

__all__ = [
    "_parse_task",
    "_parse_tasks",
    "_dump_task",
    "_format_task_concise",
    "_format_task_markdown",
    "_format_tasks_concise",
    "_format_tasks_markdown",
]
