# tests/conftest.py

from __future__ import annotations

import asyncio
import itertools
from pathlib import Path
from typing import Any, Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from task_list_api.app.core.config import settings
from task_list_api.app.core.db import init_db
from task_list_api.app.core.security import get_current_user
from task_list_api.app.main import app
from task_list_api.app.schemas.task import TaskRead
from task_list_api.app.schemas.user import UserCreate, UserRead
from task_list_api.app.services.task_service import TaskService
from task_list_api.app.services.user_service import UserService


def run(coro: Any) -> Any:
    """Run a service coroutine to completion."""
    return asyncio.run(coro)


@pytest.fixture()
def db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the app at a fresh SQLite file with all migrations applied."""
    path = tmp_path / "task_list.sqlite3"
    monkeypatch.setattr(settings, "database_url", str(path))
    init_db()
    return path


@pytest.fixture()
def make_user(db: Path) -> Callable[..., UserRead]:
    counter = itertools.count(1)

    def _make_user(email: str | None = None, password: str = "password123") -> UserRead:
        email = email or f"user{next(counter)}@example.com"
        return run(UserService.create_user(UserCreate(email=email, password=password)))

    return _make_user


@pytest.fixture()
def user(make_user: Callable[..., UserRead]) -> UserRead:
    return make_user()


@pytest.fixture()
def other_user(make_user: Callable[..., UserRead]) -> UserRead:
    return make_user()


@pytest.fixture()
def make_task(db: Path) -> Callable[..., TaskRead]:
    """Create tasks titled "Task 1", "Task 2", ... unless a title is given."""
    counter = itertools.count(1)

    def _make_task(owner: UserRead, **attributes: Any) -> TaskRead:
        attributes.setdefault("title", f"Task {next(counter)}")
        attributes.setdefault("completed", False)
        return run(TaskService.create_task(owner, attributes))

    return _make_task


@pytest.fixture()
def client(db: Path) -> Iterator[TestClient]:
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def login_as() -> Callable[[UserRead], None]:
    """
    Make every request authenticate as the given user.

    Replaces the token-based ``get_current_user`` dependency, so task
    tests never go through a real credential check.
    """

    def _login_as(user: UserRead) -> None:
        app.dependency_overrides[get_current_user] = lambda: user

    return _login_as
