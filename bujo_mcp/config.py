"""Settings loaded from environment variables (+ optional .env).

One frozen Settings object for the whole app. Nothing secret is read at
import time; call ``get_settings()`` when the values are needed.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from bujo_mcp.errors import TaskValidationError
from bujo_mcp.storage.cipher import Cipher, NoopCipher, PassphraseCipher

ENV_PREFIX = "BUJO"

ENCRYPTION_AES_GCM = "aes-gcm"
ENCRYPTION_NONE = "none"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- Storage ----
    data_dir: Path
    store_path: Path
    passphrase: str | None
    encryption: str

    # ---- Sync ----
    sync_enabled: bool
    sync_dir: Path
    sync_remote: str
    sync_branch: str
    git_timeout: float

    # ---- Logging ----
    log_level: str
    log_dir: Path

    def __repr__(self) -> str:
        # Keep the passphrase out of logs and tracebacks.
        return (
            f"Settings(store_path={self.store_path!s}, encryption={self.encryption}, "
            f"sync_enabled={self.sync_enabled}, sync_dir={self.sync_dir!s})"
        )

    @staticmethod
    def from_env(*, load_env_file: bool = True) -> "Settings":
        if load_env_file:
            load_dotenv(override=False)

        data_dir = _env_path(_k("DATA_DIR"), Path("~/.local/share/bujo").expanduser())
        store_path = _env_path(_k("STORE_PATH"), data_dir / "tasks.enc")
        passphrase = os.getenv(_k("PASSPHRASE")) or None
        encryption = _env(_k("ENCRYPTION"), ENCRYPTION_AES_GCM).strip().lower()

        sync_enabled = _env_bool(_k("SYNC_ENABLED"), False)
        sync_dir = _env_path(_k("SYNC_DIR"), data_dir)
        sync_remote = _env(_k("SYNC_REMOTE"), "origin").strip() or "origin"
        sync_branch = _env(_k("SYNC_BRANCH"), "main").strip() or "main"
        git_timeout = _env_float(_k("GIT_TIMEOUT"), 60.0)

        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        return Settings(
            data_dir=data_dir,
            store_path=store_path,
            passphrase=passphrase,
            encryption=encryption,
            sync_enabled=sync_enabled,
            sync_dir=sync_dir,
            sync_remote=sync_remote,
            sync_branch=sync_branch,
            git_timeout=git_timeout,
            log_level=log_level,
            log_dir=log_dir,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def build_cipher(settings: Settings) -> Cipher:
    """
    Build the cipher selected by ``settings.encryption``.

    Raises:
        WeakPassphraseError: If AES-GCM is selected and the passphrase is
            missing or shorter than the minimum length
        TaskValidationError: If the encryption mode is unknown
    """
    if settings.encryption == ENCRYPTION_NONE:
        return NoopCipher()
    if settings.encryption == ENCRYPTION_AES_GCM:
        return PassphraseCipher(settings.passphrase or "")
    raise TaskValidationError(
        "encryption",
        f"unknown mode {settings.encryption!r} (expected '{ENCRYPTION_AES_GCM}' or '{ENCRYPTION_NONE}')",
    )
