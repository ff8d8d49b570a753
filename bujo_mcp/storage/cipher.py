"""Authenticated encryption for the persisted blob."""

from __future__ import annotations

import logging
import os
from typing import Protocol

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from bujo_mcp.errors import CryptoError, TaskValidationError, WeakPassphraseError

logger = logging.getLogger(__name__)

MIN_PASSPHRASE_LENGTH = 12

_MAGIC = b"BJ1\x00"
_SALT_SIZE = 16
_NONCE_SIZE = 12
_KEY_SIZE = 32
_TAG_SIZE = 16
_HEADER_SIZE = len(_MAGIC) + _SALT_SIZE + _NONCE_SIZE


class Cipher(Protocol):
    """Encrypts and decrypts opaque payloads. Decrypt must detect tampering."""

    mode: str

    def encrypt(self, plaintext: bytes) -> bytes: ...
    def decrypt(self, ciphertext: bytes) -> bytes: ...


class PassphraseCipher:
    """
    AES-256-GCM keyed from a passphrase through scrypt.

    Blob layout: magic | salt | nonce | ciphertext+tag. Salt and nonce are
    fresh on every call, so two encryptions of the same payload differ. The
    header is fed to GCM as associated data.
    """

    mode = "aes-256-gcm+scrypt"

    def __init__(self, passphrase: str, *, work_factor: int = 2**15) -> None:
        if passphrase is None or len(passphrase) < MIN_PASSPHRASE_LENGTH:
            raise WeakPassphraseError(MIN_PASSPHRASE_LENGTH)
        if not isinstance(work_factor, int) or work_factor < 2 or work_factor & (work_factor - 1):
            raise TaskValidationError("work_factor", "must be a power of two greater than 1")
        self._passphrase = passphrase.encode("utf-8")
        self._work_factor = work_factor

    def __repr__(self) -> str:
        return f"PassphraseCipher(mode={self.mode!r}, work_factor={self._work_factor})"

    def _derive_key(self, salt: bytes) -> bytes:
        kdf = Scrypt(salt=salt, length=_KEY_SIZE, n=self._work_factor, r=8, p=1)
        return kdf.derive(self._passphrase)

    def encrypt(self, plaintext: bytes) -> bytes:
        salt = os.urandom(_SALT_SIZE)
        nonce = os.urandom(_NONCE_SIZE)
        header = _MAGIC + salt + nonce
        sealed = AESGCM(self._derive_key(salt)).encrypt(nonce, plaintext, header)
        return header + sealed

    def decrypt(self, ciphertext: bytes) -> bytes:
        if len(ciphertext) < _HEADER_SIZE + _TAG_SIZE or not ciphertext.startswith(_MAGIC):
            raise CryptoError("decryption failed: corrupted data or wrong key")

        header = ciphertext[:_HEADER_SIZE]
        salt = header[len(_MAGIC) : len(_MAGIC) + _SALT_SIZE]
        nonce = header[len(_MAGIC) + _SALT_SIZE :]
        try:
            return AESGCM(self._derive_key(salt)).decrypt(nonce, ciphertext[_HEADER_SIZE:], header)
        except InvalidTag:
            # Wrong key and tampering are deliberately indistinguishable.
            raise CryptoError("decryption failed: corrupted data or wrong key") from None


class NoopCipher:
    """Identity transform for test harnesses. Never use it for real data."""

    mode = "none"

    def __init__(self) -> None:
        logger.warning("NoopCipher in use: task data is stored unencrypted")

    def encrypt(self, plaintext: bytes) -> bytes:
        return bytes(plaintext)

    def decrypt(self, ciphertext: bytes) -> bytes:
        return bytes(ciphertext)
