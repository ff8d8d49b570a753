"""Sync MCP tools: status, push and pull of the encrypted task store."""

import json
import logging

from mcp.types import ToolAnnotations

from bujo_mcp import store
from bujo_mcp.enums import ResponseFormat, SyncStatus
from bujo_mcp.errors import BujoError, RemoteDivergedError
from bujo_mcp.models.inputs import SyncInput
from bujo_mcp.server import mcp

logger = logging.getLogger(__name__)

_STATUS_HINTS = {
    SyncStatus.SYNCED: "Local and remote are in sync.",
    SyncStatus.AHEAD: "Local has changes that are not pushed yet. Run bujo_push.",
    SyncStatus.BEHIND: "Remote has changes that are not pulled yet. Run bujo_pull.",
    SyncStatus.DIVERGED: "Local and remote both changed. bujo_pull keeps the remote and backs up local.",
}


@mcp.tool(
    name="bujo_sync_status",
    annotations=ToolAnnotations(
        title="Sync Status",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def bujo_sync_status(params: SyncInput) -> str:
    """
    Compare the local task store with its remote copy.

    Refreshes the tracked copy of the store in the sync work tree before
    comparing, so it writes there but never changes task data.

    Returns one of: synced, ahead, behind, diverged.

    Args:
        params: SyncInput containing response_format
    """
    try:
        status = store.get_sync_adapter().status()
    except BujoError as e:
        return f"Error: {e}"

    if params.response_format == ResponseFormat.JSON:
        return json.dumps({"status": status.value}, indent=2)
    return f"Sync status: **{status.value}**\n{_STATUS_HINTS[status]}"


@mcp.tool(
    name="bujo_push",
    annotations=ToolAnnotations(
        title="Push Tasks",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def bujo_push(params: SyncInput) -> str:
    """
    Commit and upload the local task store. A push with no changes does nothing.

    If the remote has diverged the push is rejected; run bujo_pull first.

    Args:
        params: SyncInput containing response_format
    """
    try:
        store.get_sync_adapter().push()
    except RemoteDivergedError as e:
        return f"Push rejected: {e}"
    except BujoError as e:
        return f"Error: {e}"

    if params.response_format == ResponseFormat.JSON:
        return json.dumps({"pushed": True}, indent=2)
    return "Task store pushed."


@mcp.tool(
    name="bujo_pull",
    annotations=ToolAnnotations(
        title="Pull Tasks",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=False,
        openWorldHint=True,
    ),
)
async def bujo_pull(params: SyncInput) -> str:
    """
    Fetch and merge remote changes into the local task store.

    On conflict the remote version wins and the local version is saved to a
    backup file whose path is reported.

    Args:
        params: SyncInput containing response_format
    """
    try:
        result = store.get_sync_adapter().pull()
    except BujoError as e:
        return f"Error: {e}"

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(result.model_dump(mode="json"), indent=2)
    if result.conflict:
        return f"Warning: {result.message}"
    return result.message
