"""Storage interfaces the services depend on."""

from __future__ import annotations

from datetime import datetime
from typing import List, Protocol

from todobot.domain import (
    Note,
    NoteCategory,
    NoteType,
    Session,
    Task,
    TaskStatus,
    User,
)


class TaskRepository(Protocol):
    """Persistence for tasks."""

    def create(self, task: Task) -> None: ...

    def get_by_id(self, task_id: int) -> Task: ...

    def get_by_user_id(self, user_id: int, status: TaskStatus) -> List[Task]: ...

    def get_all(self, user_id: int) -> List[Task]: ...

    def update(self, task: Task) -> None: ...

    def delete(self, task_id: int) -> None: ...

    def get_tasks_for_notification(self, before_time: datetime) -> List[Task]: ...


class UserRepository(Protocol):
    """Persistence for users."""

    def create(self, user: User) -> None: ...

    def get_by_telegram_id(self, telegram_id: int) -> User: ...

    def update(self, user: User) -> None: ...


class SessionRepository(Protocol):
    """Persistence for login sessions."""

    def create(self, session: Session) -> None: ...

    def get_by_telegram_id(self, telegram_id: int) -> Session: ...

    def update(self, session: Session) -> None: ...

    def delete(self, telegram_id: int) -> None: ...

    def cleanup_expired(self) -> None: ...


class NoteRepository(Protocol):
    """Persistence for notes."""

    def create(self, note: Note) -> None: ...

    def get_by_id(self, note_id: int) -> Note: ...

    def get_by_user_id(self, user_id: int) -> List[Note]: ...

    def get_by_category(self, user_id: int, category: NoteCategory) -> List[Note]: ...

    def get_by_type(self, user_id: int, note_type: NoteType) -> List[Note]: ...

    def get_favorites(self, user_id: int) -> List[Note]: ...

    def search(self, user_id: int, query: str) -> List[Note]: ...

    def update(self, note: Note) -> None: ...

    def delete(self, note_id: int) -> None: ...