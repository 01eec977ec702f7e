"""Core entities: tasks, notes, users and sessions."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union


class NotFoundError(LookupError):
    """Raised when a requested record does not exist."""


class ServiceError(Exception):
    """A failure reported by a service, with a message meant for the user."""


class NoteType(str, enum.Enum):
    """Kind of content a note holds."""

    TEXT = "text"
    LINK = "link"
    DOCUMENT = "document"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"


class NoteCategory(str, enum.Enum):
    """Category a note is filed under."""

    GENERAL = "general"
    WORK = "work"
    STUDY = "study"
    PERSONAL = "personal"
    RESOURCES = "resources"
    IDEAS = "ideas"


class TaskStatus(str, enum.Enum):
    """Lifecycle state of a task."""

    PENDING = "pending"
    COMPLETED = "completed"
    DELETED = "deleted"


class TaskPriority(str, enum.Enum):
    """Priority of a task."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _plain(value: Union[str, enum.Enum]) -> str:
    return value.value if isinstance(value, enum.Enum) else value


_NOTE_TYPE_LABELS = {
    "text": "📝 Текст",
    "link": "🔗 Ссылка",
    "document": "📄 Документ",
    "image": "🖼️ Изображение",
    "video": "🎥 Видео",
    "audio": "🎵 Аудио",
}

_NOTE_CATEGORY_LABELS = {
    "general": "🗂️ Общее",
    "work": "💼 Работа",
    "study": "📚 Учеба",
    "personal": "👤 Личное",
    "resources": "🔗 Ресурсы",
    "ideas": "💡 Идеи",
}

_FILE_TYPES = frozenset({"document", "image", "video", "audio"})


@dataclass
class Note:
    """A saved piece of information: text, a link or a file."""

    id: int = 0
    title: str = ""
    content: str = ""
    type: NoteType = NoteType.TEXT
    category: NoteCategory = NoteCategory.GENERAL
    url: str = ""
    file_id: str = ""
    file_name: str = ""
    file_size: int = 0
    tags: str = ""
    is_favorite: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    user_id: int = 0

    def is_link(self) -> bool:
        return _plain(self.type) == NoteType.LINK.value

    def is_file(self) -> bool:
        return _plain(self.type) in _FILE_TYPES

    def toggle_favorite(self) -> None:
        self.is_favorite = not self.is_favorite
        self.updated_at = datetime.now()

    def display_type(self) -> str:
        return _NOTE_TYPE_LABELS.get(_plain(self.type), "📝 Заметка")

    def display_category(self) -> str:
        return _NOTE_CATEGORY_LABELS.get(_plain(self.category), "🗂️ Общее")


@dataclass
class Task:
    """A to-do item belonging to a user."""

    id: int = 0
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    notify_at: Optional[datetime] = None
    user_id: int = 0

    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_deleted(self) -> bool:
        return self.status == TaskStatus.DELETED

    def can_notify(self) -> bool:
        """True when a reminder is due and the task is still open."""
        return (
            self.notify_at is not None
            and self.notify_at < datetime.now()
            and not self.is_completed()
            and not self.is_deleted()
        )

    def complete(self) -> None:
        now = datetime.now()
        self.status = TaskStatus.COMPLETED
        self.updated_at = now
        self.completed_at = now

    def delete(self) -> None:
        self.status = TaskStatus.DELETED
        self.updated_at = datetime.now()

    def set_notification(self, notify_at: datetime) -> None:
        self.notify_at = notify_at
        self.updated_at = datetime.now()


@dataclass
class User:
    """A registered chat user."""

    id: int = 0
    telegram_id: int = 0
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    last_login_at: datetime = field(default_factory=datetime.now)


@dataclass
class Session:
    """A login session bound to a chat user."""

    user_id: int = 0
    telegram_id: int = 0
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.now)
    expires_at: datetime = field(default_factory=datetime.now)

    def is_expired(self) -> bool:
        return datetime.now() > self.expires_at

    def is_valid(self) -> bool:
        return self.is_active and not self.is_expired()