"""Shared fixtures: an application bound to a throwaway SQLite file."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from todo_api.db import Database
from todo_api.main import create_app
from todo_api.repositories import TodoRepository
from todo_api.settings import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a fresh database file under tmp_path."""
    return Settings(sqlite_db_path=str(tmp_path / "data" / "todos.db"))


@pytest.fixture
def client(settings):
    """TestClient entered as a context manager so the lifespan opens and closes the store."""
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(tmp_path):
    """An open Database on a temporary file, closed after the test."""
    database = Database(str(tmp_path / "todos.db"))
    database.open()
    yield database
    database.close()


@pytest.fixture
def repo(db) -> TodoRepository:
    return TodoRepository(db)
