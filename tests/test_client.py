# tests/test_client.py

from __future__ import annotations

import json
from unittest.mock import MagicMock

import requests

from task_list_client import TaskListAPI


def _response(status_code: int, json_body=None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    if json_body is not None:
        response._content = json.dumps(json_body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = b""
    return response


def _api(*responses: requests.Response) -> tuple[TaskListAPI, MagicMock]:
    session = MagicMock(spec=requests.Session)
    session.request.side_effect = list(responses)
    return TaskListAPI(base_url="http://testserver/", session=session), session


def test_login_stores_token_for_following_requests() -> None:
    api, session = _api(
        _response(200, {"access_token": "tok", "token_type": "bearer"}),
        _response(200, [{"id": 1, "title": "A", "completed": False, "user_id": 1}]),
    )

    api.login("user@example.com", "secret")
    tasks, error = api.list_tasks()

    assert error is None
    assert tasks[0]["title"] == "A"
    last_call = session.request.call_args_list[-1].kwargs
    assert last_call["url"] == "http://testserver/api/v1/tasks/"
    assert last_call["headers"]["Authorization"] == "Bearer tok"


def test_create_task_validation_error_surfaces_field_errors() -> None:
    api, _ = _api(_response(422, {"detail": {"errors": {"title": ["can't be blank"]}}}))

    data, error = api.create_task("")

    assert data is None
    assert error == {"status_code": 422, "message": {"title": ["can't be blank"]}}


def test_get_task_not_found() -> None:
    api, _ = _api(_response(404, {"detail": "Task not found"}))

    data, error = api.get_task(99)

    assert data is None
    assert error == {"status_code": 404, "message": "Task not found"}


def test_update_task_sends_only_given_fields() -> None:
    api, session = _api(_response(200, {"id": 3, "completed": True}))

    api.update_task(3, completed=True)

    call = session.request.call_args.kwargs
    assert call["method"] == "PATCH"
    assert call["url"].endswith("/api/v1/tasks/3")
    assert call["json"] == {"completed": True}


def test_delete_task_returns_no_data() -> None:
    api, _ = _api(_response(204))

    assert api.delete_task(3) == (None, None)


def test_connection_error_is_reported() -> None:
    session = MagicMock(spec=requests.Session)
    session.request.side_effect = requests.ConnectionError("refused")
    api = TaskListAPI(base_url="http://testserver", session=session)

    tasks, error = api.list_tasks()

    assert tasks == []
    assert error == {"status_code": None, "message": "refused"}
