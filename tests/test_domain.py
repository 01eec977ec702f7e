from datetime import datetime, timedelta

import pytest

from todobot.domain import (
    Note,
    NoteCategory,
    NoteType,
    Session,
    Task,
    TaskPriority,
    TaskStatus,
)


@pytest.mark.parametrize(
    "note_type, label",
    [
        (NoteType.TEXT, "📝 Текст"),
        (NoteType.LINK, "🔗 Ссылка"),
        (NoteType.DOCUMENT, "📄 Документ"),
        (NoteType.IMAGE, "🖼️ Изображение"),
        (NoteType.VIDEO, "🎥 Видео"),
        (NoteType.AUDIO, "🎵 Аудио"),
    ],
)
def test_display_type(note_type, label):
    assert Note(type=note_type).display_type() == label


def test_display_type_unknown_falls_back():
    assert Note(type="sticker").display_type() == "📝 Заметка"


@pytest.mark.parametrize(
    "category, label",
    [
        (NoteCategory.GENERAL, "🗂️ Общее"),
        (NoteCategory.WORK, "💼 Работа"),
        (NoteCategory.STUDY, "📚 Учеба"),
        (NoteCategory.PERSONAL, "👤 Личное"),
        (NoteCategory.RESOURCES, "🔗 Ресурсы"),
        (NoteCategory.IDEAS, "💡 Идеи"),
    ],
)
def test_display_category(category, label):
    assert Note(category=category).display_category() == label


def test_display_category_accepts_plain_strings():
    assert Note(category="work").display_category() == "💼 Работа"
    assert Note(category="unknown").display_category() == "🗂️ Общее"


@pytest.mark.parametrize(
    "note_type, is_file",
    [
        (NoteType.TEXT, False),
        (NoteType.LINK, False),
        (NoteType.DOCUMENT, True),
        (NoteType.IMAGE, True),
        (NoteType.VIDEO, True),
        (NoteType.AUDIO, True),
    ],
)
def test_is_file(note_type, is_file):
    assert Note(type=note_type).is_file() is is_file


def test_is_link():
    assert Note(type=NoteType.LINK).is_link() is True
    assert Note(type=NoteType.TEXT).is_link() is False


def test_toggle_favorite_flips_and_touches_updated_at():
    old = datetime(2000, 1, 1)
    note = Note(updated_at=old)
    note.toggle_favorite()
    assert note.is_favorite is True
    assert note.updated_at > old
    note.toggle_favorite()
    assert note.is_favorite is False


def test_task_complete():
    task = Task()
    task.complete()
    assert task.is_completed()
    assert task.status == TaskStatus.COMPLETED
    assert task.completed_at is not None and task.completed_at <= datetime.now()


def test_task_delete():
    task = Task()
    task.delete()
    assert task.is_deleted()
    assert not task.is_completed()


def test_task_defaults():
    task = Task()
    assert task.status == TaskStatus.PENDING
    assert task.priority == TaskPriority.MEDIUM
    assert task.notify_at is None


def test_task_set_notification():
    when = datetime.now() + timedelta(hours=2)
    task = Task()
    task.set_notification(when)
    assert task.notify_at == when


def test_can_notify_when_due_and_pending():
    task = Task(notify_at=datetime.now() - timedelta(minutes=1))
    assert task.can_notify() is True


def test_cannot_notify_in_future_or_without_time():
    assert Task(notify_at=datetime.now() + timedelta(hours=1)).can_notify() is False
    assert Task().can_notify() is False


def test_cannot_notify_closed_tasks():
    past = datetime.now() - timedelta(minutes=1)
    done = Task(notify_at=past)
    done.complete()
    gone = Task(notify_at=past)
    gone.delete()
    assert done.can_notify() is False
    assert gone.can_notify() is False


def test_session_validity():
    future = datetime.now() + timedelta(hours=1)
    past = datetime.now() - timedelta(hours=1)
    assert Session(expires_at=future).is_valid() is True
    assert Session(expires_at=past).is_expired() is True
    assert Session(expires_at=past).is_valid() is False
    assert Session(expires_at=future, is_active=False).is_valid() is False