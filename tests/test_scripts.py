# tests/test_scripts.py

from __future__ import annotations

import create_token
import reset_password
from task_list_api.app.core.security import decode_access_token
from task_list_api.app.services.user_service import UserService

from .conftest import run


def test_create_token_for_existing_user(make_user, capsys) -> None:
    make_user("token@example.com")

    assert create_token.main(["--email", "Token@Example.com", "--days", "2"]) == 0

    payload = decode_access_token(capsys.readouterr().out.strip())
    assert payload["sub"] == "token@example.com"


def test_create_token_for_unknown_user(db, capsys) -> None:
    assert create_token.main(["--email", "nobody@example.com"]) == 1
    assert "User not found" in capsys.readouterr().err


def test_reset_password_replaces_hash(db, make_user) -> None:
    make_user("reset@example.com", password="old-password")

    code = reset_password.main(
        ["--db", str(db), "--email", "RESET@example.com", "--password", "new-password"]
    )

    assert code == 0
    assert run(UserService.authenticate("reset@example.com", "new-password")) is not None
    assert run(UserService.authenticate("reset@example.com", "old-password")) is None


def test_reset_password_unknown_user(db) -> None:
    code = reset_password.main(
        ["--db", str(db), "--email", "ghost@example.com", "--password", "x"]
    )

    assert code == 2
