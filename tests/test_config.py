"""Tests for settings, cipher selection, logging setup and the shared store."""

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fakes import PASSPHRASE

from bujo_mcp import (
    FileRepository,
    GitSyncAdapter,
    NoopCipher,
    PassphraseCipher,
    TaskValidationError,
    WeakPassphraseError,
    store,
)
from bujo_mcp.config import Settings, build_cipher
from bujo_mcp.logging_setup import setup_logging

_ENV_NAMES = [
    "BUJO_DATA_DIR",
    "BUJO_STORE_PATH",
    "BUJO_PASSPHRASE",
    "BUJO_ENCRYPTION",
    "BUJO_SYNC_ENABLED",
    "BUJO_SYNC_DIR",
    "BUJO_SYNC_REMOTE",
    "BUJO_SYNC_BRANCH",
    "BUJO_GIT_TIMEOUT",
    "BUJO_LOG_LEVEL",
    "BUJO_LOG_DIR",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Tests for Settings.from_env."""

    def test_defaults(self, clean_env):
        settings = Settings.from_env(load_env_file=False)
        assert settings.store_path == settings.data_dir / "tasks.enc"
        assert settings.encryption == "aes-gcm"
        assert settings.passphrase is None
        assert settings.sync_enabled is False
        assert settings.sync_dir == settings.data_dir
        assert settings.sync_remote == "origin"
        assert settings.sync_branch == "main"
        assert settings.git_timeout == 60.0
        assert settings.log_level == "INFO"

    def test_overrides(self, clean_env, tmp_path):
        clean_env.setenv("BUJO_DATA_DIR", str(tmp_path))
        clean_env.setenv("BUJO_SYNC_ENABLED", "yes")
        clean_env.setenv("BUJO_SYNC_DIR", str(tmp_path / "repo"))
        clean_env.setenv("BUJO_SYNC_BRANCH", "journal")
        clean_env.setenv("BUJO_GIT_TIMEOUT", "15")
        clean_env.setenv("BUJO_LOG_LEVEL", "debug")

        settings = Settings.from_env(load_env_file=False)

        assert settings.store_path == tmp_path / "tasks.enc"
        assert settings.sync_enabled is True
        assert settings.sync_dir == tmp_path / "repo"
        assert settings.sync_branch == "journal"
        assert settings.git_timeout == 15.0
        assert settings.log_level == "DEBUG"

    def test_bad_timeout_falls_back(self, clean_env):
        clean_env.setenv("BUJO_GIT_TIMEOUT", "soon")
        assert Settings.from_env(load_env_file=False).git_timeout == 60.0

    def test_repr_hides_passphrase(self, clean_env):
        clean_env.setenv("BUJO_PASSPHRASE", PASSPHRASE)
        settings = Settings.from_env(load_env_file=False)
        assert settings.passphrase == PASSPHRASE
        assert PASSPHRASE not in repr(settings)


class TestBuildCipher:
    """Tests for build_cipher."""

    def test_aes_gcm(self, clean_env):
        clean_env.setenv("BUJO_PASSPHRASE", PASSPHRASE)
        assert isinstance(build_cipher(Settings.from_env(load_env_file=False)), PassphraseCipher)

    def test_missing_passphrase(self, clean_env):
        with pytest.raises(WeakPassphraseError):
            build_cipher(Settings.from_env(load_env_file=False))

    def test_none(self, clean_env):
        clean_env.setenv("BUJO_ENCRYPTION", "none")
        assert isinstance(build_cipher(Settings.from_env(load_env_file=False)), NoopCipher)

    def test_unknown_mode(self, clean_env):
        clean_env.setenv("BUJO_ENCRYPTION", "rot13")
        with pytest.raises(TaskValidationError) as exc_info:
            build_cipher(Settings.from_env(load_env_file=False))
        assert exc_info.value.field == "encryption"


class TestStore:
    """Tests for the lazily built shared instances."""

    @pytest.fixture(autouse=True)
    def _reset_store(self):
        store.reset()
        yield
        store.reset()

    def test_repository_is_built_once(self, clean_env, tmp_path):
        clean_env.setenv("BUJO_DATA_DIR", str(tmp_path))
        clean_env.setenv("BUJO_ENCRYPTION", "none")
        settings = Settings.from_env(load_env_file=False)
        clean_env.setattr(store, "get_settings", lambda: settings)

        repository = store.get_repository()
        assert isinstance(repository, FileRepository)
        assert repository.path == tmp_path / "tasks.enc"
        assert store.get_repository() is repository

    def test_sync_adapter(self, clean_env, tmp_path):
        clean_env.setenv("BUJO_DATA_DIR", str(tmp_path))
        clean_env.setenv("BUJO_SYNC_ENABLED", "1")
        settings = Settings.from_env(load_env_file=False)
        clean_env.setattr(store, "get_settings", lambda: settings)

        adapter = store.get_sync_adapter()
        assert isinstance(adapter, GitSyncAdapter)
        assert adapter.tracked_path == tmp_path / "tasks.enc"

    def test_reset_closes_repository(self):
        repository = MagicMock()
        store._repository = repository
        store.reset()
        repository.close.assert_called_once()
        assert store._repository is None


class TestLoggingSetup:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def _restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)
        logging.captureWarnings(False)

    def test_writes_log_file(self, tmp_path):
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("bujo_mcp.test").debug("hello from the journal")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file == tmp_path / "logs" / "bujo.log"
        assert "hello from the journal" in Path(log_file).read_text(encoding="utf-8")

    def test_console_filters_third_party_noise(self, tmp_path):
        setup_logging(log_dir=tmp_path)
        console = next(h for h in logging.getLogger().handlers if not isinstance(h, logging.FileHandler))

        def record(name, level):
            return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

        assert console.filter(record("bujo_mcp.storage", logging.INFO))
        assert not console.filter(record("httpx", logging.INFO))
        assert console.filter(record("httpx", logging.ERROR))
