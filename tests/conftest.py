# tests/conftest.py

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from taskcards.board import Board
from taskcards.repository import TaskRepository
from taskcards.store import TaskStore

TODAY = date(2024, 6, 1)


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'tasks.sqlite3'}"


@pytest.fixture()
def store(database_url: str):
    """
    Real SQLite-backed store per test.

    The push semantics of the live query are part of what we test, so the
    store is not faked here.
    """
    s = TaskStore.from_url(database_url)
    yield s
    s.close()


@pytest.fixture()
def repository(store: TaskStore) -> TaskRepository:
    return TaskRepository(store, clock=lambda: datetime(2024, 6, 1, 9, 30, tzinfo=timezone.utc))


@pytest.fixture()
def board(repository: TaskRepository, store: TaskStore) -> Board:
    return Board(repository, today=lambda: TODAY, assignees=["Hina", "Togawa"])
