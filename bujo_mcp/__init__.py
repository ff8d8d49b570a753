"""
MCP Server for a bullet-journal task store.

Tasks move through pool -> today -> done. The collection is persisted as a
single encrypted blob with atomic writes, and can be synced through git with
a last-write-wins conflict policy that backs up the losing local copy.
"""

# Re-export enums
from bujo_mcp.enums import ResponseFormat, SyncStatus, TaskStatus

# Re-export errors
from bujo_mcp.errors import (
    BujoError,
    CorruptedStoreError,
    CryptoError,
    DuplicateTaskIDError,
    EmptyTitleError,
    InvalidStateTransitionError,
    InvalidStatusError,
    RemoteDivergedError,
    StorageError,
    SyncError,
    SyncNetworkError,
    TaskNotFoundError,
    TaskValidationError,
    WeakPassphraseError,
)

# Re-export models
from bujo_mcp.models import (
    EMPTY_TASK_ID,
    AddTaskInput,
    CollectionMetadata,
    ListTasksInput,
    PullResult,
    SyncInput,
    Task,
    TaskCollection,
    TaskFilter,
    TaskIdInput,
    is_empty_task_id,
    new_task,
    new_task_id,
    parse_task_id,
)

# Re-export MCP server instance
from bujo_mcp.server import mcp

# Re-export storage and sync
from bujo_mcp.storage import Cipher, FileRepository, NoopCipher, PassphraseCipher, TaskRepository
from bujo_mcp.sync import CommandResult, CommandRunner, GitSyncAdapter, SubprocessCommandRunner, SyncAdapter

# Re-export tools
from bujo_mcp.tools import (
    bujo_add,
    bujo_complete,
    bujo_defer,
    bujo_delete,
    bujo_get,
    bujo_list,
    bujo_pick,
    bujo_pull,
    bujo_push,
    bujo_sync_status,
)

__all__ = [
    # Enums
    "ResponseFormat",
    "TaskStatus",
    "SyncStatus",
    # Errors
    "BujoError",
    "TaskValidationError",
    "EmptyTitleError",
    "InvalidStatusError",
    "WeakPassphraseError",
    "TaskNotFoundError",
    "InvalidStateTransitionError",
    "DuplicateTaskIDError",
    "StorageError",
    "CorruptedStoreError",
    "CryptoError",
    "SyncError",
    "SyncNetworkError",
    "RemoteDivergedError",
    # Domain models
    "EMPTY_TASK_ID",
    "new_task_id",
    "parse_task_id",
    "is_empty_task_id",
    "Task",
    "new_task",
    "TaskFilter",
    "TaskCollection",
    "CollectionMetadata",
    "PullResult",
    # Input models
    "AddTaskInput",
    "ListTasksInput",
    "TaskIdInput",
    "SyncInput",
    # Storage
    "Cipher",
    "PassphraseCipher",
    "NoopCipher",
    "TaskRepository",
    "FileRepository",
    # Sync
    "CommandResult",
    "CommandRunner",
    "SubprocessCommandRunner",
    "SyncAdapter",
    "GitSyncAdapter",
    # Tools
    "bujo_add",
    "bujo_list",
    "bujo_get",
    "bujo_pick",
    "bujo_defer",
    "bujo_complete",
    "bujo_delete",
    "bujo_sync_status",
    "bujo_push",
    "bujo_pull",
    # MCP server instance
    "mcp",
]
