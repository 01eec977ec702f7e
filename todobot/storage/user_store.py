"""SQLite-backed user storage."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator

from todobot.domain import NotFoundError, User
from todobot.storage.database import Database, DatabaseError

_COLUMNS = (
    "id, telegram_id, username, first_name, last_name, "
    "is_active, created_at, updated_at, last_login_at"
)


class UserStore:
    """Stores users in the ``users`` table."""

    def __init__(self, db: Database) -> None:
        self._db = db

    @contextmanager
    def _transaction(self, action: str) -> Iterator[sqlite3.Connection]:
        try:
            with self._db.lock, self._db.connection as conn:
                yield conn
        except sqlite3.Error as exc:
            raise DatabaseError(f"failed to {action}: {exc}") from exc

    def create(self, user: User) -> None:
        """Insert the user and fill in its id and timestamps."""
        with self._transaction("create user") as conn:
            cursor = conn.execute(
                "INSERT INTO users (telegram_id, username, first_name, last_name) "
                "VALUES (?, ?, ?, ?)",
                (user.telegram_id, user.username, user.first_name, user.last_name),
            )
            row = conn.execute(
                "SELECT id, created_at, updated_at, last_login_at FROM users WHERE id = ?",
                (cursor.lastrowid,),
            ).fetchone()
        user.id, user.created_at, user.updated_at, user.last_login_at = row
        user.is_active = True

    def get_by_telegram_id(self, telegram_id: int) -> User:
        with self._transaction("get user") as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM users WHERE telegram_id = ?", (telegram_id,)
            ).fetchone()
        if row is None:
            raise NotFoundError("user not found")
        return User(
            id=row["id"],
            telegram_id=row["telegram_id"],
            username=row["username"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            last_login_at=row["last_login_at"],
        )

    def update(self, user: User) -> None:
        now = datetime.now()
        with self._transaction("update user") as conn:
            conn.execute(
                "UPDATE users SET username = ?, first_name = ?, last_name = ?, "
                "is_active = ?, updated_at = ?, last_login_at = ? WHERE id = ?",
                (
                    user.username,
                    user.first_name,
                    user.last_name,
                    user.is_active,
                    now,
                    user.last_login_at,
                    user.id,
                ),
            )
        user.updated_at = now