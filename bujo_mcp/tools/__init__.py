"""MCP tool definitions for the journal task store."""

# Import all tools to register them with the MCP server
from bujo_mcp.tools.core import (
    bujo_add,
    bujo_complete,
    bujo_defer,
    bujo_delete,
    bujo_get,
    bujo_list,
    bujo_pick,
)
from bujo_mcp.tools.sync import bujo_pull, bujo_push, bujo_sync_status

__all__ = [
    # Task tools
    "bujo_add",
    "bujo_list",
    "bujo_get",
    "bujo_pick",
    "bujo_defer",
    "bujo_complete",
    "bujo_delete",
    # Sync tools
    "bujo_sync_status",
    "bujo_push",
    "bujo_pull",
]
