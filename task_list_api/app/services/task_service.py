"""
Service for managing a user's tasks.

Every task belongs to exactly one user and every lookup is made inside
that user's tasks: a task owned by somebody else is simply not found.
Deleting a task only sets ``deleted_at``; the row stays in the table
and is hidden from all reads unless ``include_deleted`` is requested
explicitly.  All reads go through ``_scoped_select`` so the
``deleted_at IS NULL`` filter cannot be forgotten by a new query.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from task_list_api.app.core.db import get_connection
from task_list_api.app.core.exceptions import NotFoundError, ValidationError
from task_list_api.app.schemas.task import TaskRead


logger = logging.getLogger(__name__)

TASK_COLUMNS = "id, user_id, title, completed, deleted_at, created_at, updated_at"

# Attributes a client is allowed to set.  The owner is fixed at creation.
PERMITTED_FIELDS = ("title", "completed")

NOT_FOUND_MESSAGE = "Task not found"

# Largest value an SQLite INTEGER column can hold.
MAX_TASK_ID = 2 ** 63 - 1


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_task(row: sqlite3.Row) -> TaskRead:
    return TaskRead(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        completed=bool(row["completed"]),
        deleted_at=row["deleted_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _as_dict(attributes: Any, partial: bool) -> Dict[str, Any]:
    if isinstance(attributes, BaseModel):
        # Only fields the client actually sent count for a partial update.
        return attributes.model_dump(exclude_unset=partial)
    return dict(attributes or {})


class TaskService:
    """Ownership-scoped store and lifecycle operations for tasks."""

    # ------------------------------------------------------------------
    # Query construction
    # ------------------------------------------------------------------
    @staticmethod
    def _scoped_select(
        cursor: sqlite3.Cursor,
        where: Sequence[str] = (),
        params: Sequence[Any] = (),
        *,
        include_deleted: bool = False,
        columns: str = TASK_COLUMNS,
        order_by: Optional[str] = "id",
    ) -> List[sqlite3.Row]:
        """Run a ``SELECT`` against ``tasks`` with the default scope applied.

        Parameters
        ----------
        cursor : sqlite3.Cursor
            Cursor of an open connection.
        where : Sequence[str]
            SQL conditions joined with ``AND``.  Each may use ``?``
            placeholders bound from ``params``.
        params : Sequence[Any]
            Values for the placeholders, in order.
        include_deleted : bool
            Skip the ``deleted_at IS NULL`` condition.  Only the
            unfiltered lookups below pass ``True``.
        columns : str
            Column list to select.
        order_by : Optional[str]
            Column to order by; ``None`` for aggregate queries.

        Returns
        -------
        List[sqlite3.Row]
            Matching rows, ordered by ``id`` unless told otherwise.
        """
        conditions = list(where)
        if not include_deleted:
            conditions.append("deleted_at IS NULL")
        sql = f"SELECT {columns} FROM tasks"
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        if order_by:
            sql += f" ORDER BY {order_by}"
        return cursor.execute(sql, tuple(params)).fetchall()

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    @staticmethod
    def validate_attributes(attributes: Mapping[str, Any], partial: bool = False) -> Dict[str, List[str]]:
        """Return field errors for ``attributes``; empty when valid.

        With ``partial=True`` only the keys present are checked, which
        is what an update needs.
        """
        errors: Dict[str, List[str]] = {}
        if not partial or "title" in attributes:
            title = attributes.get("title")
            if not isinstance(title, str) or not title.strip():
                errors.setdefault("title", []).append("can't be blank")
        if not partial or "completed" in attributes:
            if not isinstance(attributes.get("completed"), bool):
                errors.setdefault("completed", []).append("is not included in the list")
        return errors

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    @classmethod
    async def list_tasks(cls, owner: Any) -> List[TaskRead]:
        """Return all active tasks of ``owner`` ordered by ID."""
        conn = get_connection()
        try:
            rows = cls._scoped_select(conn.cursor(), ["user_id = ?"], [owner.id])
            return [_row_to_task(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def find_task(cls, owner: Any, task_id: int) -> TaskRead:
        """Return the active task ``task_id`` among the tasks of ``owner``.

        Raises
        ------
        NotFoundError
            If no such task exists, it was soft-deleted, or it belongs
            to another user.  The three cases are indistinguishable.
        """
        if not 0 < task_id <= MAX_TASK_ID:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        conn = get_connection()
        try:
            rows = cls._scoped_select(
                conn.cursor(), ["user_id = ?", "id = ?"], [owner.id, task_id]
            )
        finally:
            conn.close()
        if not rows:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return _row_to_task(rows[0])

    @classmethod
    async def find_task_including_deleted(cls, task_id: int) -> TaskRead:
        """Return task ``task_id`` regardless of owner or soft deletion.

        Intended for administrative checks and tests; no endpoint calls
        it.
        """
        if not 0 < task_id <= MAX_TASK_ID:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        conn = get_connection()
        try:
            rows = cls._scoped_select(
                conn.cursor(), ["id = ?"], [task_id], include_deleted=True
            )
        finally:
            conn.close()
        if not rows:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return _row_to_task(rows[0])

    @classmethod
    async def count_tasks(cls, owner: Any = None, include_deleted: bool = False) -> int:
        """Count tasks, optionally for one owner, through the default scope."""
        where: List[str] = []
        params: List[Any] = []
        if owner is not None:
            where.append("user_id = ?")
            params.append(owner.id)
        conn = get_connection()
        try:
            rows = cls._scoped_select(
                conn.cursor(),
                where,
                params,
                include_deleted=include_deleted,
                columns="COUNT(*) AS count",
                order_by=None,
            )
            return rows[0]["count"]
        finally:
            conn.close()

    @staticmethod
    def build_task(owner: Any) -> TaskRead:
        """Return an unsaved task for ``owner`` with default values."""
        return TaskRead(user_id=owner.id)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    @classmethod
    async def create_task(cls, owner: Any, attributes: Any) -> TaskRead:
        """Validate and store a new task owned by ``owner``.

        ``attributes`` may be a ``TaskCreate`` or a plain mapping.
        ``completed`` defaults to ``False`` when omitted.

        Raises
        ------
        ValidationError
            If the title is blank or ``completed`` is not a boolean.
            Nothing is written in that case.
        """
        data = _as_dict(attributes, partial=False)
        values = {field: data[field] for field in PERMITTED_FIELDS if field in data}
        values.setdefault("completed", False)
        errors = cls.validate_attributes(values)
        if errors:
            logger.info("Rejected new task for user %s: %s", owner.id, errors)
            raise ValidationError(errors)

        now = _now()
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO tasks (user_id, title, completed, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (owner.id, values["title"], 1 if values["completed"] else 0, now, now),
            )
            task_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        logger.info("Created task %s for user %s", task_id, owner.id)
        return await cls.find_task(owner, task_id)

    @classmethod
    async def update_task(cls, task: TaskRead, attributes: Any) -> TaskRead:
        """Change ``title`` and/or ``completed`` of an owned task.

        Keys other than those two are ignored, so the owner cannot be
        reassigned.  Returns the task as stored after the update.

        Raises
        ------
        ValidationError
            If the change would leave the title blank or ``completed``
            is not a boolean.  The stored task is left unchanged.
        """
        data = _as_dict(attributes, partial=True)
        dropped = sorted(set(data) - set(PERMITTED_FIELDS))
        if dropped:
            logger.debug("Ignoring unpermitted task attributes %s", dropped)
        updates = {field: data[field] for field in PERMITTED_FIELDS if field in data}
        errors = cls.validate_attributes(updates, partial=True)
        if errors:
            logger.info("Rejected update of task %s: %s", task.id, errors)
            raise ValidationError(errors)

        if updates:
            fields = []
            values: List[Any] = []
            for key, value in updates.items():
                fields.append(f"{key} = ?")
                # SQLite stores booleans as integers
                values.append((1 if value else 0) if isinstance(value, bool) else value)
            values.extend([_now(), task.id, task.user_id])
            conn = get_connection()
            try:
                conn.execute(
                    f"UPDATE tasks SET {', '.join(fields)}, updated_at = ? "
                    "WHERE id = ? AND user_id = ?",
                    tuple(values),
                )
                conn.commit()
            finally:
                conn.close()
            logger.info("Updated task %s: %s", task.id, ", ".join(updates))
        return await cls.find_task_including_deleted(task.id)

    @classmethod
    async def soft_delete_task(cls, task: TaskRead) -> TaskRead:
        """Mark ``task`` as deleted without removing the row.

        Only a task whose ``deleted_at`` is still empty is stamped, so
        calling this twice keeps the first timestamp.
        """
        now = _now()
        conn = get_connection()
        try:
            conn.execute(
                "UPDATE tasks SET deleted_at = ?, updated_at = ? "
                "WHERE id = ? AND user_id = ? AND deleted_at IS NULL",
                (now, now, task.id, task.user_id),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("Soft-deleted task %s of user %s", task.id, task.user_id)
        return await cls.find_task_including_deleted(task.id)
