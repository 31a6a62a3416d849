# tests/conftest.py

import os
import tempfile
from pathlib import Path

# Point the app at a throwaway database before anything imports taskhub
_DB_DIR = Path(tempfile.mkdtemp(prefix="taskhub-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'test.sqlite3'}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["CREATE_TABLES"] = "false"  # the reset_db fixture owns the schema

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import taskhub.models  # noqa: E402,F401
from taskhub.database import Base, SessionLocal, engine  # noqa: E402
from taskhub.services.user_directory import UserDirectory  # noqa: E402
from main import app  # noqa: E402

from .helpers import register_user  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db():
    """Fresh schema for every test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    # Context manager: HTTP calls and WebSocket sessions share one event loop
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_user(db):
    """Create a user row directly, bypassing the HTTP layer"""
    directory = UserDirectory(db)

    def _make(name: str, email: str):
        return directory.create(name=name, email=email, hashed_password="not-a-real-hash")

    return _make


@pytest.fixture()
def alice(client):
    return register_user(client, "Alice", "alice@example.com")


@pytest.fixture()
def bob(client):
    return register_user(client, "Bob", "bob@example.com")


@pytest.fixture()
def carol(client):
    return register_user(client, "Carol", "carol@example.com")
