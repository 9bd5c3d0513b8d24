"""Tests for core/db_connection.py; the motor client is replaced with a mock."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from placecache.core import db_connection as db_module
from placecache.core.config import settings
from placecache.core.db_connection import AsyncDBConnection, get_db


@pytest.fixture(autouse=True)
def fresh_client():
    AsyncDBConnection._client = None
    yield
    AsyncDBConnection._client = None


def test_local_mode_has_no_database(monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_MODE", "local")

    with pytest.raises(RuntimeError):
        get_db()
    assert AsyncDBConnection._client is None


def test_mongodb_mode_creates_one_client(monkeypatch):
    client_cls = MagicMock()
    monkeypatch.setattr(db_module, "AsyncIOMotorClient", client_cls)
    monkeypatch.setattr(settings, "STORAGE_MODE", "mongodb")

    first = get_db()
    second = get_db()

    client_cls.assert_called_once_with(
        settings.MONGO_URI, serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS
    )
    client_cls.return_value.__getitem__.assert_called_with(settings.MONGO_DB_NAME)
    assert first is second


def test_close(monkeypatch):
    client_cls = MagicMock()
    monkeypatch.setattr(db_module, "AsyncIOMotorClient", client_cls)
    monkeypatch.setattr(settings, "STORAGE_MODE", "mongodb")
    get_db()

    AsyncDBConnection.close()
    AsyncDBConnection.close()

    client_cls.return_value.close.assert_called_once()
    assert AsyncDBConnection._client is None
