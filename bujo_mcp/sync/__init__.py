"""Remote synchronization of the encrypted task blob."""

from bujo_mcp.sync.cli import CommandResult, CommandRunner, SubprocessCommandRunner
from bujo_mcp.sync.git import GitSyncAdapter, SyncAdapter

__all__ = [
    "CommandResult",
    "CommandRunner",
    "SubprocessCommandRunner",
    "SyncAdapter",
    "GitSyncAdapter",
]
