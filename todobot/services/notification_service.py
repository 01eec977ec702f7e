"""Reminder delivery for due tasks."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from todobot.domain import Task
from todobot.services.task_service import TaskService
from todobot.telegram.keyboards import Button, Keyboard

logger = logging.getLogger(__name__)


class MessageSender(Protocol):
    """Something that can deliver a chat message."""

    def send_message(
        self,
        chat_id: int,
        text: str,
        keyboard: Optional[Keyboard] = None,
        parse_mode: Optional[str] = None,
    ) -> object: ...


def _reminder_text(task: Task) -> str:
    text = f"⏰ Напоминание о задаче!\n\n📌 {task.title}\n"
    if task.description:
        text += f"💬 {task.description}\n"
    return text + f"\n🆔 Задача [{task.id}]"


def _reminder_keyboard(task: Task) -> Keyboard:
    return Keyboard(
        (
            (
                Button("✅ Выполнить", f"complete_{task.id}"),
                Button("📋 Подробнее", f"show_{task.id}"),
            ),
        )
    )


class NotificationService:
    """Sends task reminders and plain messages to users."""

    def __init__(self, sender: MessageSender, task_service: TaskService) -> None:
        self._sender = sender
        self._tasks = task_service

    def send_task_notifications(self) -> None:
        """Remind about every due task, then clear its reminder time."""
        try:
            tasks = self._tasks.get_tasks_for_notification()
        except Exception:
            logger.exception("failed to get notification tasks")
            raise

        for task in tasks:
            try:
                self._sender.send_message(
                    task.user_id, _reminder_text(task), _reminder_keyboard(task)
                )
            except Exception as exc:
                logger.error(
                    "failed to send notification, task_id=%s user_id=%s: %s",
                    task.id, task.user_id, exc,
                )
                continue

            task.notify_at = None
            try:
                self._tasks.task_repository.update(task)
            except Exception as exc:
                logger.error("failed to clear notification time, task_id=%s: %s", task.id, exc)

        if tasks:
            logger.info("notifications sent, count=%d", len(tasks))

    def send_message(self, user_id: int, text: str) -> None:
        try:
            self._sender.send_message(user_id, text)
        except Exception as exc:
            logger.error("failed to send message, user_id=%s: %s", user_id, exc)
            raise