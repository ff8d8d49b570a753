"""Pytest configuration and fixtures for bujo-mcp tests."""

import pytest
from fakes import FAST_WORK_FACTOR, PASSPHRASE, FakeRunner

from bujo_mcp import store
from bujo_mcp.storage.cipher import NoopCipher, PassphraseCipher
from bujo_mcp.storage.repository import FileRepository


@pytest.fixture
def fast_cipher():
    """A real AES-GCM cipher with a cheap KDF so tests stay quick."""
    return PassphraseCipher(PASSPHRASE, work_factor=FAST_WORK_FACTOR)


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "tasks.enc"


@pytest.fixture
def repository(store_path, fast_cipher):
    repo = FileRepository(store_path, fast_cipher)
    yield repo
    repo.close()


@pytest.fixture
def plain_repository(store_path):
    """Repository with the no-op cipher, installed as the tools' shared repository."""
    repo = FileRepository(store_path, NoopCipher())
    store.reset()
    store._repository = repo
    yield repo
    store.reset()


@pytest.fixture
def fake_runner():
    return FakeRunner()
