"""Shared test fixtures and configuration.

Sets up environment variables before any src imports so the settings
singleton never picks up a developer's .env (real API URL or LLM key),
and provides common fixtures like a temp DB and an in-memory local store.
"""

import os

# Patch env vars BEFORE any src imports
os.environ["SYNC_API_BASE_URL"] = ""
os.environ["LLM_API_KEY"] = ""
os.environ.setdefault("LLM_PROVIDER", "gemini")
os.environ.setdefault("DATABASE_PATH", "data/test_life_tracker.db")
os.environ.setdefault("LOCAL_STORE_PATH", "data/test_local_store.json")

import pytest


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_sync.db")


@pytest.fixture
def user_data_db(tmp_db_path):
    """Return a UserDataDB instance backed by a temp file."""
    from src.data.db import UserDataDB
    return UserDataDB(db_path=tmp_db_path)


@pytest.fixture
def api_client(user_data_db):
    """Return a FastAPI TestClient for the sync API over a temp DB."""
    from fastapi.testclient import TestClient

    from src.server.app import create_app
    return TestClient(create_app(db=user_data_db, cors_origins=["*"], max_body_bytes=1024 * 1024))


@pytest.fixture
def memory_storage():
    from src.adapters.local_storage import MemoryStorage
    return MemoryStorage()


@pytest.fixture
def store(memory_storage):
    """Return a LocalStore over in-memory storage."""
    from src.core.local_store import LocalStore
    return LocalStore(memory_storage)
