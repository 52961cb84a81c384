# tests/test_users_api.py

from __future__ import annotations

import pytest

from task_list_api.app.core.exceptions import NotFoundError
from task_list_api.app.services.task_service import TaskService
from task_list_api.app.services.user_service import UserService

from .conftest import run


def _login(client, email: str, password: str = "password123") -> dict:
    response = client.post("/api/v1/users/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def test_register_user(client) -> None:
    response = client.post(
        "/api/v1/users/", json={"email": "Alice@Example.com", "password": "secret"}
    )

    assert response.status_code == 201
    assert response.json()["email"] == "alice@example.com"
    assert "password" not in response.json()


def test_register_requires_email_and_password(client) -> None:
    response = client.post("/api/v1/users/", json={"email": "", "password": ""})

    assert response.status_code == 422
    assert response.json()["detail"]["errors"] == {
        "email": ["can't be blank"],
        "password": ["can't be blank"],
    }


def test_register_rejects_duplicate_email_ignoring_case(client, make_user) -> None:
    make_user("bob@example.com")

    response = client.post(
        "/api/v1/users/", json={"email": "BOB@example.com", "password": "secret"}
    )

    assert response.status_code == 422
    assert response.json()["detail"]["errors"] == {"email": ["has already been taken"]}


def test_login_and_me_with_real_token(client, make_user) -> None:
    user = make_user("carol@example.com")

    headers = _login(client, "CAROL@example.com")
    response = client.get("/api/v1/users/me", headers=headers)

    assert response.status_code == 200
    assert response.json()["id"] == user.id


def test_login_with_wrong_password(client, make_user) -> None:
    make_user("dave@example.com")

    response = client.post(
        "/api/v1/users/login", json={"email": "dave@example.com", "password": "nope"}
    )

    assert response.status_code == 401


def test_tasks_with_real_token(client, make_user) -> None:
    make_user("erin@example.com")
    headers = _login(client, "erin@example.com")

    created = client.post("/api/v1/tasks/", json={"title": "Token task"}, headers=headers)
    listed = client.get("/api/v1/tasks/", headers=headers)

    assert created.status_code == 201
    assert [t["title"] for t in listed.json()] == ["Token task"]


def test_invalid_token_is_rejected(client) -> None:
    response = client.get("/api/v1/tasks/", headers={"Authorization": "Bearer not.a.token"})

    assert response.status_code == 401


def test_delete_account_removes_all_tasks(client, make_user, make_task) -> None:
    user = make_user("frank@example.com")
    other = make_user()
    kept = make_task(other)
    task = make_task(user)
    deleted = make_task(user)
    run(TaskService.soft_delete_task(deleted))
    headers = _login(client, "frank@example.com")

    response = client.delete("/api/v1/users/me", headers=headers)

    assert response.status_code == 204
    assert run(UserService.get_user_by_id(user.id)) is None
    for task_id in (task.id, deleted.id):
        with pytest.raises(NotFoundError):
            run(TaskService.find_task_including_deleted(task_id))
    assert run(TaskService.count_tasks(include_deleted=True)) == 1
    assert run(TaskService.find_task(other, kept.id)).id == kept.id
    assert client.get("/api/v1/users/me", headers=headers).status_code == 401


def test_delete_unknown_user_is_not_found(db) -> None:
    with pytest.raises(NotFoundError):
        run(UserService.delete_user(12345))
