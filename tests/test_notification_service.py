from datetime import datetime, timedelta

import pytest

from todobot.domain import Task
from todobot.services.notification_service import NotificationService
from todobot.services.task_service import TaskService


class FakeTaskRepository:
    def __init__(self, tasks=None, fail_query=False):
        self.tasks = list(tasks or [])
        self.fail_query = fail_query
        self.updated = []

    def get_tasks_for_notification(self, before_time):
        if self.fail_query:
            raise RuntimeError("db down")
        return list(self.tasks)

    def update(self, task):
        self.updated.append(task.id)


class FakeSender:
    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def send_message(self, chat_id, text, keyboard=None, parse_mode=None):
        if chat_id in self.fail_for:
            raise ConnectionError("unreachable")
        self.sent.append((chat_id, text, keyboard))


def due_task(task_id, user_id, description=""):
    return Task(
        id=task_id,
        title=f"task {task_id}",
        description=description,
        user_id=user_id,
        notify_at=datetime.now() - timedelta(minutes=1),
    )


def test_sends_reminder_and_clears_time():
    task = due_task(5, 11, "bring the report")
    repo = FakeTaskRepository([task])
    sender = FakeSender()
    NotificationService(sender, TaskService(repo)).send_task_notifications()

    assert len(sender.sent) == 1
    chat_id, text, keyboard = sender.sent[0]
    assert chat_id == 11
    assert text.startswith("⏰ Напоминание о задаче!\n\n📌 task 5\n")
    assert "💬 bring the report\n" in text
    assert text.endswith("\n🆔 Задача [5]")
    buttons = keyboard.to_dict()["inline_keyboard"][0]
    assert [b["callback_data"] for b in buttons] == ["complete_5", "show_5"]
    assert task.notify_at is None
    assert repo.updated == [5]


def test_text_without_description():
    task = due_task(2, 1)
    sender = FakeSender()
    NotificationService(sender, TaskService(FakeTaskRepository([task]))).send_task_notifications()
    assert "💬" not in sender.sent[0][1]


def test_failed_send_keeps_reminder_and_continues():
    failing = due_task(1, 100)
    ok = due_task(2, 200)
    repo = FakeTaskRepository([failing, ok])
    sender = FakeSender(fail_for={100})
    NotificationService(sender, TaskService(repo)).send_task_notifications()

    assert [s[0] for s in sender.sent] == [200]
    assert failing.notify_at is not None
    assert ok.notify_at is None
    assert repo.updated == [2]


def test_query_error_propagates():
    service = NotificationService(FakeSender(), TaskService(FakeTaskRepository(fail_query=True)))
    with pytest.raises(RuntimeError, match="db down"):
        service.send_task_notifications()


def test_no_tasks_sends_nothing():
    sender = FakeSender()
    NotificationService(sender, TaskService(FakeTaskRepository())).send_task_notifications()
    assert sender.sent == []


def test_send_message_delivers_text():
    sender = FakeSender()
    NotificationService(sender, TaskService(FakeTaskRepository())).send_message(7, "hello")
    assert sender.sent == [(7, "hello", None)]


def test_send_message_reraises():
    service = NotificationService(FakeSender(fail_for={7}), TaskService(FakeTaskRepository()))
    with pytest.raises(ConnectionError):
        service.send_message(7, "hello")