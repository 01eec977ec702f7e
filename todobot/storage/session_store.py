"""SQLite-backed session storage."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator

from todobot.domain import NotFoundError, Session
from todobot.storage.database import Database, DatabaseError


class SessionStore:
    """Stores one session per chat user in the ``sessions`` table."""

    def __init__(self, db: Database) -> None:
        self._db = db

    @contextmanager
    def _transaction(self, action: str) -> Iterator[sqlite3.Connection]:
        try:
            with self._db.lock, self._db.connection as conn:
                yield conn
        except sqlite3.Error as exc:
            raise DatabaseError(f"failed to {action}: {exc}") from exc

    def create(self, session: Session) -> None:
        """Insert the session, replacing any existing one for the same user."""
        with self._transaction("create session") as conn:
            conn.execute(
                "INSERT INTO sessions (user_id, telegram_id, is_active, expires_at) "
                "VALUES (?, ?, ?, ?) "
                "ON CONFLICT (telegram_id) DO UPDATE SET "
                "user_id = excluded.user_id, "
                "is_active = excluded.is_active, "
                "created_at = datetime('now', 'localtime'), "
                "expires_at = excluded.expires_at",
                (session.user_id, session.telegram_id, session.is_active, session.expires_at),
            )
            row = conn.execute(
                "SELECT created_at FROM sessions WHERE telegram_id = ?",
                (session.telegram_id,),
            ).fetchone()
        session.created_at = row["created_at"]

    def get_by_telegram_id(self, telegram_id: int) -> Session:
        with self._transaction("get session") as conn:
            row = conn.execute(
                "SELECT user_id, telegram_id, is_active, created_at, expires_at "
                "FROM sessions WHERE telegram_id = ?",
                (telegram_id,),
            ).fetchone()
        if row is None:
            raise NotFoundError("session not found")
        return Session(
            user_id=row["user_id"],
            telegram_id=row["telegram_id"],
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
            expires_at=row["expires_at"],
        )

    def update(self, session: Session) -> None:
        with self._transaction("update session") as conn:
            conn.execute(
                "UPDATE sessions SET is_active = ?, expires_at = ? WHERE telegram_id = ?",
                (session.is_active, session.expires_at, session.telegram_id),
            )

    def delete(self, telegram_id: int) -> None:
        with self._transaction("delete session") as conn:
            conn.execute("DELETE FROM sessions WHERE telegram_id = ?", (telegram_id,))

    def cleanup_expired(self) -> None:
        """Remove every session whose expiry time has passed."""
        with self._transaction("cleanup expired sessions") as conn:
            conn.execute("DELETE FROM sessions WHERE expires_at < ?", (datetime.now(),))