# tests/conftest.py

import os
import tempfile
from pathlib import Path

# The API modules read their configuration at import time
_DB_DIR = Path(tempfile.mkdtemp(prefix="todo-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'todo.sqlite3'}"
os.environ["AUTH_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel

from database import engine
from main import app

from .fakes import FakeTaskStore


@pytest.fixture()
def client():
    """TestClient over a freshly created schema."""
    SQLModel.metadata.drop_all(engine)
    with TestClient(app) as test_client:
        yield test_client


def register(client: TestClient, email: str = "ada@example.com", password: str = "secret123") -> dict:
    response = client.post("/api/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def store() -> FakeTaskStore:
    return FakeTaskStore()
