"""Task List API client.

A thin wrapper around the HTTP API of ``task_list_api`` built on the
``requests`` library.  Every public method returns a tuple
``(data, error)``: on success ``data`` holds the decoded JSON (or
``None`` for empty responses) and ``error`` is ``None``; on failure
``data`` is ``None`` and ``error`` is a dictionary with the keys
``status_code`` and ``message``.

Example::

    api = TaskListAPI(base_url="http://localhost:8000")
    api.login("user@example.com", "secret")
    task, error = api.create_task("Buy milk")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class TaskListAPI:
    """Client for the Task List API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        prefix: str = "/api/v1",
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:8000``.
            api_key: Optional bearer token.  ``login`` sets it as well.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            prefix: Path prefix of the API version.
            timeout: Seconds to wait for each request.
        """
        self.base_url = base_url.rstrip("/") + prefix
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``).
            path: Path relative to the API prefix (e.g. ``/tasks/``).
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)`` as described in the module
            docstring.  For 422 responses ``message`` is the field error
            mapping, e.g. ``{"title": ["can't be blank"]}``.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message: Any = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                except ValueError:
                    message = exc.response.text
                else:
                    detail = err_json.get("detail") if isinstance(err_json, dict) else None
                    if isinstance(detail, dict) and "errors" in detail:
                        message = detail["errors"]
                    else:
                        message = detail or str(err_json)
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def register(self, email: str, password: str) -> Result:
        """Create a new account."""
        return self._request("POST", "/users/", json_body={"email": email, "password": password})

    def login(self, email: str, password: str) -> Result:
        """Obtain a token and use it for all following requests."""
        data, error = self._request(
            "POST", "/users/login", json_body={"email": email, "password": password}
        )
        if data and data.get("access_token"):
            self.api_key = data["access_token"]
        return data, error

    def me(self) -> Result:
        """Return the authenticated user."""
        return self._request("GET", "/users/me")

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------
    def list_tasks(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Retrieve all tasks of the authenticated user."""
        data, error = self._request("GET", "/tasks/")
        return data or [], error

    def get_task(self, task_id: int) -> Result:
        return self._request("GET", f"/tasks/{task_id}")

    def create_task(self, title: str, completed: bool = False) -> Result:
        return self._request(
            "POST", "/tasks/", json_body={"title": title, "completed": completed}
        )

    def update_task(
        self,
        task_id: int,
        *,
        title: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Result:
        """Change the given fields of a task; ``None`` leaves a field as is."""
        body: Dict[str, Any] = {}
        if title is not None:
            body["title"] = title
        if completed is not None:
            body["completed"] = completed
        return self._request("PATCH", f"/tasks/{task_id}", json_body=body)

    def delete_task(self, task_id: int) -> Result:
        """Delete a task.  The server keeps it as a soft-deleted record."""
        return self._request("DELETE", f"/tasks/{task_id}")
