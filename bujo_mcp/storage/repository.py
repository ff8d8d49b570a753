"""Encrypted, atomically written file repository for task collections."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from bujo_mcp.errors import BujoError, CorruptedStoreError, CryptoError, StorageError
from bujo_mcp.models.collection import SCHEMA_VERSION, CollectionMetadata, TaskCollection
from bujo_mcp.models.task import _utcnow
from bujo_mcp.storage.cipher import Cipher
from bujo_mcp.storage.fs import atomic_write
from bujo_mcp.utils.parsers import _dump_task, _parse_tasks

logger = logging.getLogger(__name__)


class TaskRepository(Protocol):
    """The only way the rest of the app reads or writes persisted tasks."""

    def load(self) -> TaskCollection: ...
    def save(self, collection: TaskCollection) -> None: ...
    def close(self) -> None: ...


def _encode_collection(collection: TaskCollection, metadata: CollectionMetadata) -> bytes:
    document = {
        "metadata": metadata.model_dump(mode="json", exclude_none=True),
        "tasks": [_dump_task(t) for t in collection.all()],
    }
    return json.dumps(document, ensure_ascii=False, indent=2).encode("utf-8")


def _decode_collection(payload: bytes) -> TaskCollection:
    document: Any = json.loads(payload.decode("utf-8"))
    if not isinstance(document, dict):
        raise ValueError("store document must be a JSON object")

    metadata = CollectionMetadata.model_validate(document.get("metadata") or {})
    raw_tasks = document.get("tasks") or []
    if not isinstance(raw_tasks, list):
        raise ValueError("'tasks' must be a list")

    # add() re-validates every task and rejects duplicate ids.
    return TaskCollection(_parse_tasks(raw_tasks), metadata=metadata)


class FileRepository:
    """
    Stores a TaskCollection as one encrypted blob.

    - a missing file loads as an empty collection
    - any decrypt/parse failure is a CorruptedStoreError ("corrupted or wrong key")
    - saves go through a temp file + rename, so a crash never leaves a torn blob

    Single writer only: there is no locking against other processes.
    """

    def __init__(self, path: str | Path, cipher: Cipher) -> None:
        self._path = Path(path).expanduser()
        self._cipher = cipher
        self._closed = False

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise StorageError(operation, self._path, "repository is closed")

    def load(self) -> TaskCollection:
        self._ensure_open("load")

        if not self._path.exists():
            logger.info("No task store at %s; starting empty", self._path)
            return TaskCollection()

        try:
            blob = self._path.read_bytes()
        except OSError as e:
            raise StorageError("load", self._path, str(e)) from e

        try:
            payload = self._cipher.decrypt(blob)
            collection = _decode_collection(payload)
        except (CryptoError, ValidationError, ValueError, BujoError) as e:
            # ValueError covers JSON and UTF-8 decode errors.
            logger.error("Task store %s could not be read: %s", self._path, type(e).__name__)
            raise CorruptedStoreError(self._path) from e

        if collection.metadata.version > SCHEMA_VERSION:
            raise CorruptedStoreError(
                self._path,
                f"store version {collection.metadata.version} is newer than supported version {SCHEMA_VERSION}",
            )

        logger.info("Loaded %d task(s) from %s", len(collection), self._path)
        return collection

    def save(self, collection: TaskCollection) -> None:
        self._ensure_open("save")

        # Stamp a copy; the caller's metadata only changes once the write lands.
        metadata = collection.metadata.model_copy(
            update={"version": SCHEMA_VERSION, "encryption_mode": self._cipher.mode, "last_modified": _utcnow()}
        )
        blob = self._cipher.encrypt(_encode_collection(collection, metadata))

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            atomic_write(self._path, blob)
        except OSError as e:
            raise StorageError("save", self._path, str(e)) from e

        collection.metadata = metadata
        logger.info("Saved %d task(s) to %s", len(collection), self._path)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.debug("Repository closed path=%s", self._path)
