"""Lazily built repository and sync adapter shared by the MCP tools."""

from __future__ import annotations

import logging

from bujo_mcp.config import build_cipher, get_settings
from bujo_mcp.errors import SyncError
from bujo_mcp.storage.repository import FileRepository, TaskRepository
from bujo_mcp.sync.cli import SubprocessCommandRunner
from bujo_mcp.sync.git import GitSyncAdapter, SyncAdapter

logger = logging.getLogger(__name__)

_repository: TaskRepository | None = None
_sync_adapter: SyncAdapter | None = None


def get_repository() -> TaskRepository:
    """Return the process-wide repository, building it from settings on first use."""
    global _repository
    if _repository is None:
        settings = get_settings()
        _repository = FileRepository(settings.store_path, build_cipher(settings))
        logger.info("Task repository ready path=%s", settings.store_path)
    return _repository


def get_sync_adapter() -> SyncAdapter:
    """
    Return the git sync adapter.

    Raises:
        SyncError: If sync is disabled in settings
    """
    global _sync_adapter
    if _sync_adapter is None:
        settings = get_settings()
        if not settings.sync_enabled:
            raise SyncError("sync is disabled (set BUJO_SYNC_ENABLED=1)")
        _sync_adapter = GitSyncAdapter(
            settings.sync_dir,
            settings.store_path,
            runner=SubprocessCommandRunner(),
            remote=settings.sync_remote,
            branch=settings.sync_branch,
            timeout=settings.git_timeout,
        )
    return _sync_adapter


def reset() -> None:
    """Close and drop cached instances (settings changes, tests)."""
    global _repository, _sync_adapter
    if _repository is not None:
        _repository.close()
    _repository = None
    _sync_adapter = None
