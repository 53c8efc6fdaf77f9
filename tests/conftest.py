"""Test fixtures for client manager tests."""

import os
import sys
from pathlib import Path

# Set ENVIRONMENT before importing any modules that use config
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.pop("DATABASE_URL", None)

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest  # noqa: E402

from client_manager.db.client_store import ClientStore  # noqa: E402


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep tests on SQLite regardless of the caller's environment."""
    for var in ("DATABASE_URL", "CLIENTS_DB", "PGDATABASE", "PGUSER", "PGPASSWORD", "PGHOSTADDR", "PGPORT"):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def test_db_path(tmp_path):
    """Provide a temporary database path."""
    db_file = tmp_path / "clients.db"
    return str(db_file)


@pytest.fixture
def store(test_db_path):
    """Connected store with schema in place; disconnected afterwards."""
    client_store = ClientStore(db_path=test_db_path)
    client_store.connect()
    client_store.ensure_schema()
    yield client_store
    client_store.disconnect()
