"""SQLite-backed task storage."""

from __future__ import annotations

import enum
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Type, TypeVar, Union

from todobot.domain import NotFoundError, Task, TaskPriority, TaskStatus
from todobot.storage.database import Database, DatabaseError

_COLUMNS = (
    "id, title, description, status, priority, "
    "created_at, updated_at, completed_at, notify_at, user_id"
)

_E = TypeVar("_E", bound=enum.Enum)


def _value(value: Union[str, enum.Enum, None]) -> Union[str, None]:
    return value.value if isinstance(value, enum.Enum) else value


def _enum_or_raw(cls: Type[_E], value: str) -> Union[_E, str]:
    try:
        return cls(value)
    except ValueError:
        return value


def _row_to_task(row: sqlite3.Row) -> Task:
    return Task(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        status=_enum_or_raw(TaskStatus, row["status"]),
        priority=_enum_or_raw(TaskPriority, row["priority"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        completed_at=row["completed_at"],
        notify_at=row["notify_at"],
        user_id=row["user_id"],
    )


class TaskStore:
    """Stores tasks in the ``tasks`` table; deletion only marks a task deleted."""

    def __init__(self, db: Database) -> None:
        self._db = db

    @contextmanager
    def _transaction(self, action: str) -> Iterator[sqlite3.Connection]:
        try:
            with self._db.lock, self._db.connection as conn:
                yield conn
        except sqlite3.Error as exc:
            raise DatabaseError(f"failed to {action}: {exc}") from exc

    def _query(self, action: str, sql: str, params: tuple) -> List[Task]:
        with self._transaction(action) as conn:
            rows = conn.execute(sql, params).fetchall()
        return [_row_to_task(row) for row in rows]

    def create(self, task: Task) -> None:
        """Insert the task and fill in its id and timestamps."""
        with self._transaction("create task") as conn:
            cursor = conn.execute(
                "INSERT INTO tasks (title, description, status, priority, user_id, notify_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    task.title,
                    task.description,
                    _value(task.status),
                    _value(task.priority),
                    task.user_id,
                    task.notify_at,
                ),
            )
            row = conn.execute(
                "SELECT id, created_at, updated_at FROM tasks WHERE id = ?",
                (cursor.lastrowid,),
            ).fetchone()
        task.id, task.created_at, task.updated_at = row

    def get_by_id(self, task_id: int) -> Task:
        """Return the task unless it is missing or deleted."""
        with self._transaction("get task") as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE id = ? AND status <> 'deleted'",
                (task_id,),
            ).fetchone()
        if row is None:
            raise NotFoundError("task not found")
        return _row_to_task(row)

    def get_by_user_id(self, user_id: int, status: Union[TaskStatus, str]) -> List[Task]:
        return self._query(
            "get tasks",
            f"SELECT {_COLUMNS} FROM tasks WHERE user_id = ? AND status = ? "
            "ORDER BY created_at DESC, id DESC",
            (user_id, _value(status)),
        )

    def get_all(self, user_id: int) -> List[Task]:
        """Every non-deleted task: pending first, then by priority, newest first."""
        return self._query(
            "get all tasks",
            f"SELECT {_COLUMNS} FROM tasks WHERE user_id = ? AND status <> 'deleted' "
            "ORDER BY "
            "CASE status WHEN 'pending' THEN 1 WHEN 'completed' THEN 2 ELSE 3 END, "
            "CASE priority WHEN 'high' THEN 1 WHEN 'medium' THEN 2 WHEN 'low' THEN 3 "
            "ELSE 4 END, "
            "created_at DESC, id DESC",
            (user_id,),
        )

    def update(self, task: Task) -> None:
        task.updated_at = datetime.now()
        with self._transaction("update task") as conn:
            conn.execute(
                "UPDATE tasks SET title = ?, description = ?, status = ?, priority = ?, "
                "updated_at = ?, completed_at = ?, notify_at = ? WHERE id = ?",
                (
                    task.title,
                    task.description,
                    _value(task.status),
                    _value(task.priority),
                    task.updated_at,
                    task.completed_at,
                    task.notify_at,
                    task.id,
                ),
            )

    def delete(self, task_id: int) -> None:
        """Mark the task deleted."""
        with self._transaction("delete task") as conn:
            conn.execute(
                "UPDATE tasks SET status = 'deleted', updated_at = ? WHERE id = ?",
                (datetime.now(), task_id),
            )

    def get_tasks_for_notification(self, before_time: datetime) -> List[Task]:
        """Pending tasks whose reminder time is at or before ``before_time``."""
        return self._query(
            "get notification tasks",
            f"SELECT {_COLUMNS} FROM tasks WHERE notify_at IS NOT NULL "
            "AND notify_at <= ? AND status = 'pending' ORDER BY notify_at ASC",
            (before_time,),
        )