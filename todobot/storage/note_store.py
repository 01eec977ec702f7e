"""SQLite-backed note storage."""

from __future__ import annotations

import enum
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional, Type, TypeVar, Union

from todobot.domain import Note, NoteCategory, NoteType, NotFoundError
from todobot.storage.database import Database, DatabaseError

_COLUMNS = (
    "id, title, content, type, category, url, file_id, file_name, file_size, "
    "tags, is_favorite, created_at, updated_at, user_id"
)

_E = TypeVar("_E", bound=enum.Enum)


def _value(value: Union[str, enum.Enum]) -> str:
    return value.value if isinstance(value, enum.Enum) else value


def _enum_or_raw(cls: Type[_E], value: str) -> Union[_E, str]:
    try:
        return cls(value)
    except ValueError:
        return value


def _lower(text: Optional[str]) -> Optional[str]:
    return text.lower() if text is not None else None


def _row_to_note(row: sqlite3.Row) -> Note:
    return Note(
        id=row["id"],
        title=row["title"],
        content=row["content"],
        type=_enum_or_raw(NoteType, row["type"]),
        category=_enum_or_raw(NoteCategory, row["category"]),
        url=row["url"],
        file_id=row["file_id"],
        file_name=row["file_name"],
        file_size=row["file_size"],
        tags=row["tags"],
        is_favorite=bool(row["is_favorite"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        user_id=row["user_id"],
    )


class NoteStore:
    """Stores notes in the ``notes`` table."""

    def __init__(self, db: Database) -> None:
        self._db = db
        with db.lock:
            # SQLite's LOWER only folds ASCII; searches must fold any script.
            db.connection.create_function("unicode_lower", 1, _lower, deterministic=True)

    @contextmanager
    def _transaction(self, action: str) -> Iterator[sqlite3.Connection]:
        try:
            with self._db.lock, self._db.connection as conn:
                yield conn
        except sqlite3.Error as exc:
            raise DatabaseError(f"failed to {action}: {exc}") from exc

    def _query(self, action: str, where: str, params: tuple) -> List[Note]:
        sql = f"SELECT {_COLUMNS} FROM notes WHERE {where} ORDER BY created_at DESC, id DESC"
        with self._transaction(action) as conn:
            rows = conn.execute(sql, params).fetchall()
        return [_row_to_note(row) for row in rows]

    def create(self, note: Note) -> None:
        """Insert the note and fill in its id and timestamps."""
        with self._transaction("create note") as conn:
            cursor = conn.execute(
                "INSERT INTO notes (title, content, type, category, url, file_id, "
                "file_name, file_size, tags, is_favorite, user_id) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    note.title,
                    note.content,
                    _value(note.type),
                    _value(note.category),
                    note.url,
                    note.file_id,
                    note.file_name,
                    note.file_size,
                    note.tags,
                    note.is_favorite,
                    note.user_id,
                ),
            )
            row = conn.execute(
                "SELECT id, created_at, updated_at FROM notes WHERE id = ?",
                (cursor.lastrowid,),
            ).fetchone()
        note.id, note.created_at, note.updated_at = row

    def get_by_id(self, note_id: int) -> Note:
        with self._transaction("get note") as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM notes WHERE id = ?", (note_id,)
            ).fetchone()
        if row is None:
            raise NotFoundError("note not found")
        return _row_to_note(row)

    def get_by_user_id(self, user_id: int) -> List[Note]:
        return self._query("get notes", "user_id = ?", (user_id,))

    def get_by_category(self, user_id: int, category: Union[NoteCategory, str]) -> List[Note]:
        return self._query(
            "get notes by category",
            "user_id = ? AND category = ?",
            (user_id, _value(category)),
        )

    def get_by_type(self, user_id: int, note_type: Union[NoteType, str]) -> List[Note]:
        return self._query(
            "get notes by type", "user_id = ? AND type = ?", (user_id, _value(note_type))
        )

    def get_favorites(self, user_id: int) -> List[Note]:
        return self._query("get favorite notes", "user_id = ? AND is_favorite = 1", (user_id,))

    def search(self, user_id: int, query: str) -> List[Note]:
        """Notes whose title, content or tags contain ``query``, ignoring case."""
        pattern = f"%{query.lower()}%"
        return self._query(
            "search notes",
            "user_id = ? AND (unicode_lower(title) LIKE ? "
            "OR unicode_lower(content) LIKE ? OR unicode_lower(tags) LIKE ?)",
            (user_id, pattern, pattern, pattern),
        )

    def update(self, note: Note) -> None:
        note.updated_at = datetime.now()
        with self._transaction("update note") as conn:
            conn.execute(
                "UPDATE notes SET title = ?, content = ?, type = ?, category = ?, url = ?, "
                "file_id = ?, file_name = ?, file_size = ?, tags = ?, is_favorite = ?, "
                "updated_at = ? WHERE id = ?",
                (
                    note.title,
                    note.content,
                    _value(note.type),
                    _value(note.category),
                    note.url,
                    note.file_id,
                    note.file_name,
                    note.file_size,
                    note.tags,
                    note.is_favorite,
                    note.updated_at,
                    note.id,
                ),
            )

    def delete(self, note_id: int) -> None:
        with self._transaction("delete note") as conn:
            conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))