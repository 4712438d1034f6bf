"""Shared fixtures for the test suite."""

import pytest
from fastapi.testclient import TestClient

from api.config import Settings
from api.main import create_app
from database import SumStore


@pytest.fixture
def tmp_store(tmp_path):
    """Fresh SumStore backed by a real SQLite DB in tmp_path, schema created."""
    store = SumStore(db_path=str(tmp_path / "test.db"))
    store.ensure_schema()
    return store


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        PORT=8443,
        DB_PATH=str(tmp_path / "test.db"),
        CERT_FILE=str(tmp_path / "app.crt"),
        KEY_FILE=str(tmp_path / "app.key"),
    )


@pytest.fixture
def client(test_settings, tmp_store):
    """TestClient over the full app, sharing tmp_store."""
    app = create_app(test_settings, tmp_store)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def query():
    """Factory: build an ordered query mapping from keyword overrides."""
    def _make(**params):
        return {k: str(v) for k, v in params.items()}
    return _make
