"""Domain errors for the bullet journal task store.

Each failure kind is its own class so callers can branch on type instead of
matching message text. Sync conflicts are not errors: they come back as
``PullResult(conflict=True)``.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any


class BujoError(Exception):
    """Base class for every error raised by the task store."""


# ============================================================================
# Domain errors
# ============================================================================


class TaskValidationError(BujoError, ValueError):
    """A task or request violates an invariant."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"validation failed for {field}: {reason}")


class EmptyTitleError(TaskValidationError):
    def __init__(self) -> None:
        super().__init__("title", "task title cannot be empty")


class InvalidStatusError(TaskValidationError):
    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__("status", f"invalid task status {value!r}")


class WeakPassphraseError(TaskValidationError):
    def __init__(self, min_length: int) -> None:
        self.min_length = min_length
        super().__init__("passphrase", f"must be at least {min_length} characters")


class TaskNotFoundError(BujoError, LookupError):
    def __init__(self, task_id: Any) -> None:
        self.task_id = task_id
        super().__init__(f"task not found: {task_id}")


class InvalidStateTransitionError(BujoError):
    """A lifecycle method was rejected because of the task's current status."""

    def __init__(self, task_id: Any, status: Any, action: str) -> None:
        self.task_id = task_id
        self.status = status
        self.action = action
        status_text = getattr(status, "value", status)
        super().__init__(f"invalid state transition: cannot {action} task {task_id} in status '{status_text}'")


class DuplicateTaskIDError(BujoError):
    def __init__(self, task_id: Any) -> None:
        self.task_id = task_id
        super().__init__(f"task with this ID already exists: {task_id}")


# ============================================================================
# Storage and crypto errors
# ============================================================================


class StorageError(BujoError):
    """I/O failure reading or writing the blob or its directory."""

    def __init__(self, operation: str, path: Path | str, detail: str = "") -> None:
        self.operation = operation
        self.path = Path(path)
        message = f"{operation} failed for {self.path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class CorruptedStoreError(StorageError):
    """The blob exists but could not be decrypted or parsed."""

    def __init__(self, path: Path | str, detail: str = "corrupted or wrong key") -> None:
        super().__init__("load", path, detail)


class CryptoError(BujoError):
    """Authenticated decryption failed (wrong key or tampered data)."""


# ============================================================================
# Sync errors
# ============================================================================


class SyncError(BujoError):
    """Base class for sync failures that are not handled conflicts."""


class SyncNetworkError(SyncError):
    """Transport or tooling failure while talking to the remote."""

    def __init__(self, message: str, *, command: Sequence[str] = (), stderr: str = "") -> None:
        self.command = tuple(command)
        self.stderr = stderr
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class RemoteDivergedError(SyncError):
    """A push was rejected because the remote has commits we lack."""

    def __init__(self, remote: str, branch: str, stderr: str = "") -> None:
        self.remote = remote
        self.branch = branch
        self.stderr = stderr
        super().__init__(f"remote diverged: push to {remote}/{branch} rejected, pull first")
