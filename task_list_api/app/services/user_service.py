"""
Business logic for users.

Users are identified by a case-insensitive e‑mail address, which is
stored lower-cased.  Deleting a user removes all of their tasks
physically, including soft-deleted ones.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Dict, List, Optional

from task_list_api.app.core.db import get_connection
from task_list_api.app.core.exceptions import NotFoundError, ValidationError
from task_list_api.app.core.security import hash_password, verify_password
from task_list_api.app.schemas.user import UserCreate, UserRead


logger = logging.getLogger(__name__)


def _normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def _row_to_user(row: sqlite3.Row) -> UserRead:
    return UserRead(id=row["id"], email=row["email"], created_at=row["created_at"])


class UserService:
    """Registration, authentication and removal of users."""

    @classmethod
    async def create_user(cls, data: UserCreate) -> UserRead:
        """Register a new user.

        The password is stored as a PBKDF2 hash.  Raises
        ``ValidationError`` when the e‑mail or password is blank or the
        e‑mail is already registered (in any letter case).
        """
        email = _normalize_email(data.email)
        errors: Dict[str, List[str]] = {}
        if not email:
            errors["email"] = ["can't be blank"]
        if not data.password:
            errors["password"] = ["can't be blank"]
        if errors:
            raise ValidationError(errors)

        now = datetime.now(timezone.utc).isoformat()
        conn = get_connection()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT INTO users (email, password, created_at, updated_at) VALUES (?, ?, ?, ?)",
                    (email, hash_password(data.password), now, now),
                )
            except sqlite3.IntegrityError as e:
                raise ValidationError({"email": ["has already been taken"]}) from e
            user_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        logger.info("Registered user %s (%s)", user_id, email)
        return UserRead(id=user_id, email=email, created_at=now)

    @classmethod
    async def authenticate(cls, email: str, password: str) -> Optional[UserRead]:
        """Return the user if ``email`` and ``password`` match, else ``None``."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, email, password, created_at FROM users WHERE email = ?",
                (_normalize_email(email),),
            ).fetchone()
        finally:
            conn.close()
        if row and verify_password(password or "", row["password"]):
            return _row_to_user(row)
        return None

    @classmethod
    async def get_user_by_email(cls, email: str) -> Optional[UserRead]:
        """Retrieve a user by e‑mail, ignoring letter case."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, email, created_at FROM users WHERE email = ?",
                (_normalize_email(email),),
            ).fetchone()
            return _row_to_user(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def get_user_by_id(cls, user_id: int) -> Optional[UserRead]:
        """Retrieve a user by ID."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, email, created_at FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
            return _row_to_user(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def delete_user(cls, user_id: int) -> None:
        """Delete a user together with all of their tasks.

        Tasks are removed physically, soft-deleted ones included.
        Raises ``NotFoundError`` if the user does not exist.
        """
        if await cls.get_user_by_id(user_id) is None:
            raise NotFoundError(f"User {user_id} not found")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM tasks WHERE user_id = ?", (user_id,))
            removed = cursor.rowcount
            cursor.execute("DELETE FROM users WHERE id = ?", (user_id,))
            conn.commit()
        finally:
            conn.close()
        logger.info("Deleted user %s and %s task(s)", user_id, removed)
