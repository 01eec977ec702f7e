"""SQLite connection and schema."""

from __future__ import annotations

import os
import sqlite3
import threading
from datetime import datetime
from typing import Union


class DatabaseError(Exception):
    """Raised when the database cannot be opened or a query fails."""


sqlite3.register_adapter(datetime, lambda value: value.isoformat(" "))
sqlite3.register_converter("TIMESTAMP", lambda raw: datetime.fromisoformat(raw.decode()))
sqlite3.register_converter("BOOLEAN", lambda raw: raw not in (b"0", b""))

_NOW = "(datetime('now', 'localtime'))"

_SCHEMA = (
    f"""CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        telegram_id INTEGER UNIQUE NOT NULL,
        username TEXT NOT NULL DEFAULT '',
        first_name TEXT NOT NULL DEFAULT '',
        last_name TEXT NOT NULL DEFAULT '',
        is_active BOOLEAN NOT NULL DEFAULT 1,
        created_at TIMESTAMP NOT NULL DEFAULT {_NOW},
        updated_at TIMESTAMP NOT NULL DEFAULT {_NOW},
        last_login_at TIMESTAMP NOT NULL DEFAULT {_NOW}
    )""",
    f"""CREATE TABLE IF NOT EXISTS sessions (
        user_id INTEGER NOT NULL,
        telegram_id INTEGER NOT NULL PRIMARY KEY,
        is_active BOOLEAN NOT NULL DEFAULT 1,
        created_at TIMESTAMP NOT NULL DEFAULT {_NOW},
        expires_at TIMESTAMP NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    )""",
    f"""CREATE TABLE IF NOT EXISTS tasks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        status TEXT NOT NULL DEFAULT 'pending',
        priority TEXT NOT NULL DEFAULT 'medium',
        created_at TIMESTAMP NOT NULL DEFAULT {_NOW},
        updated_at TIMESTAMP NOT NULL DEFAULT {_NOW},
        completed_at TIMESTAMP,
        notify_at TIMESTAMP,
        user_id INTEGER NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    )""",
    f"""CREATE TABLE IF NOT EXISTS notes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL DEFAULT '',
        content TEXT NOT NULL DEFAULT '',
        type TEXT NOT NULL DEFAULT 'text',
        category TEXT NOT NULL DEFAULT 'general',
        url TEXT NOT NULL DEFAULT '',
        file_id TEXT NOT NULL DEFAULT '',
        file_name TEXT NOT NULL DEFAULT '',
        file_size INTEGER NOT NULL DEFAULT 0,
        tags TEXT NOT NULL DEFAULT '',
        is_favorite BOOLEAN NOT NULL DEFAULT 0,
        created_at TIMESTAMP NOT NULL DEFAULT {_NOW},
        updated_at TIMESTAMP NOT NULL DEFAULT {_NOW},
        user_id INTEGER NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    )""",
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_id ON tasks(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_notify_at ON tasks(notify_at)",
    "CREATE INDEX IF NOT EXISTS idx_sessions_telegram_id ON sessions(telegram_id)",
    "CREATE INDEX IF NOT EXISTS idx_notes_user_id ON notes(user_id)",
)


class Database:
    """An open SQLite database shared by the stores.

    ``connection`` is the underlying connection and ``lock`` serialises
    access to it across threads.
    """

    def __init__(self, path: Union[str, "os.PathLike[str]"]) -> None:
        try:
            self.connection = sqlite3.connect(
                path,
                detect_types=sqlite3.PARSE_DECLTYPES,
                check_same_thread=False,
            )
            self.connection.row_factory = sqlite3.Row
            self.connection.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as exc:
            raise DatabaseError(f"failed to open database: {exc}") from exc
        self.lock = threading.RLock()

    def close(self) -> None:
        self.connection.close()

    def create_tables(self) -> None:
        """Create every table and index that does not exist yet."""
        with self.lock:
            for statement in _SCHEMA:
                try:
                    with self.connection:
                        self.connection.execute(statement)
                except sqlite3.Error as exc:
                    raise DatabaseError(
                        f"failed to execute query: {statement}, error: {exc}"
                    ) from exc

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()