"""Encrypted persistence for the journal task store."""

from bujo_mcp.storage.cipher import MIN_PASSPHRASE_LENGTH, Cipher, NoopCipher, PassphraseCipher
from bujo_mcp.storage.fs import atomic_write
from bujo_mcp.storage.repository import FileRepository, TaskRepository

__all__ = [
    "Cipher",
    "PassphraseCipher",
    "NoopCipher",
    "MIN_PASSPHRASE_LENGTH",
    "TaskRepository",
    "FileRepository",
    "atomic_write",
]
