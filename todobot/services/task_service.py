"""Task business rules and text formatting."""

from __future__ import annotations

import enum
import logging
import re
from datetime import datetime
from typing import Iterable, List, Union

from todobot.domain import ServiceError, Task, TaskPriority, TaskStatus
from todobot.repositories import TaskRepository

logger = logging.getLogger(__name__)

_DATE_FORMAT = "%d.%m.%Y %H:%M"
_INTEGER = re.compile(r"[+-]?\d+", re.ASCII)

_PRIORITY_ICONS = {"high": "🔴", "medium": "🟡", "low": "🟢"}
_PRIORITY_LABELS = {"high": "🔴 Высокий", "medium": "🟡 Средний", "low": "🟢 Низкий"}


def _value(value: Union[str, enum.Enum]) -> str:
    return value.value if isinstance(value, enum.Enum) else value


class TaskService:
    """Creates, changes and describes a user's tasks."""

    def __init__(self, task_repository: TaskRepository) -> None:
        self.task_repository = task_repository

    def create_task(
        self,
        user_id: int,
        title: str,
        description: str,
        priority: Union[TaskPriority, str],
    ) -> Task:
        if not title.strip():
            raise ServiceError("название задачи не может быть пустым")
        now = datetime.now()
        task = Task(
            title=title.strip(),
            description=description.strip(),
            status=TaskStatus.PENDING,
            priority=priority,
            user_id=user_id,
            created_at=now,
            updated_at=now,
        )
        try:
            self.task_repository.create(task)
        except Exception as exc:
            logger.error("failed to create task: %s", exc)
            raise ServiceError("ошибка создания задачи") from exc
        logger.info("task created, task_id=%s user_id=%s", task.id, user_id)
        return task

    def get_tasks(self, user_id: int) -> List[Task]:
        try:
            return self.task_repository.get_all(user_id)
        except Exception as exc:
            logger.error("failed to get tasks: %s", exc)
            raise ServiceError("ошибка получения задач") from exc

    def get_tasks_by_status(self, user_id: int, status: Union[TaskStatus, str]) -> List[Task]:
        try:
            return self.task_repository.get_by_user_id(user_id, status)
        except Exception as exc:
            logger.error("failed to get tasks by status: %s", exc)
            raise ServiceError("ошибка получения задач") from exc

    def get_task_by_id(self, task_id: int, user_id: int) -> Task:
        """Return the task if it exists and belongs to ``user_id``."""
        try:
            task = self.task_repository.get_by_id(task_id)
        except Exception as exc:
            logger.error("failed to get task: %s", exc)
            raise ServiceError("задача не найдена") from exc
        if task.user_id != user_id:
            raise ServiceError("задача не принадлежит пользователю")
        return task

    def complete_task(self, task_id: int, user_id: int) -> Task:
        task = self.get_task_by_id(task_id, user_id)
        if task.is_completed():
            raise ServiceError("задача уже выполнена")
        task.complete()
        try:
            self.task_repository.update(task)
        except Exception as exc:
            logger.error("failed to complete task: %s", exc)
            raise ServiceError("ошибка завершения задачи") from exc
        logger.info("task completed, task_id=%s user_id=%s", task_id, user_id)
        return task

    def delete_task(self, task_id: int, user_id: int) -> None:
        task = self.get_task_by_id(task_id, user_id)
        if task.is_deleted():
            raise ServiceError("задача уже удалена")
        try:
            self.task_repository.delete(task_id)
        except Exception as exc:
            logger.error("failed to delete task: %s", exc)
            raise ServiceError("ошибка удаления задачи") from exc
        logger.info("task deleted, task_id=%s user_id=%s", task_id, user_id)

    def update_task(
        self,
        task_id: int,
        user_id: int,
        title: str,
        description: str,
        priority: Union[TaskPriority, str],
    ) -> Task:
        """Change an open task; a blank title leaves the old one in place."""
        task = self.get_task_by_id(task_id, user_id)
        if task.is_completed() or task.is_deleted():
            raise ServiceError("нельзя редактировать завершенную или удаленную задачу")
        if title.strip():
            task.title = title.strip()
        task.description = description.strip()
        task.priority = priority
        task.updated_at = datetime.now()
        try:
            self.task_repository.update(task)
        except Exception as exc:
            logger.error("failed to update task: %s", exc)
            raise ServiceError("ошибка обновления задачи") from exc
        logger.info("task updated, task_id=%s user_id=%s", task_id, user_id)
        return task

    def set_task_notification(self, task_id: int, user_id: int, notify_at: datetime) -> Task:
        task = self.get_task_by_id(task_id, user_id)
        if task.is_completed() or task.is_deleted():
            raise ServiceError(
                "нельзя установить уведомление для завершенной или удаленной задачи"
            )
        if notify_at < datetime.now():
            raise ServiceError("время уведомления должно быть в будущем")
        task.set_notification(notify_at)
        try:
            self.task_repository.update(task)
        except Exception as exc:
            logger.error("failed to set notification: %s", exc)
            raise ServiceError("ошибка установки уведомления") from exc
        logger.info("notification set, task_id=%s notify_at=%s", task_id, notify_at)
        return task

    def get_tasks_for_notification(self) -> List[Task]:
        """Tasks whose reminder is due now; repository errors propagate."""
        try:
            return self.task_repository.get_tasks_for_notification(datetime.now())
        except Exception:
            logger.exception("failed to get notification tasks")
            raise

    def parse_task_id_from_text(self, text: str) -> int:
        """Return the first positive integer among the words of ``text``."""
        for word in text.split():
            if _INTEGER.fullmatch(word) and int(word) > 0:
                return int(word)
        raise ServiceError("не удалось найти ID задачи в тексте")

    def format_task_list(self, tasks: Iterable[Task]) -> str:
        tasks = list(tasks)
        if not tasks:
            return "📝 Задач нет"

        parts = ["📝 Ваши задачи:\n\n"]
        for task in tasks:
            status = "✅" if task.is_completed() else "⏳"
            priority = _PRIORITY_ICONS.get(_value(task.priority), "")
            parts.append(f"{status} {priority} [{task.id}] {task.title}\n")
            if task.description:
                parts.append(f"   💬 {task.description}\n")
            if task.notify_at is not None:
                parts.append(f"   ⏰ {task.notify_at.strftime(_DATE_FORMAT)}\n")
            parts.append("\n")
        return "".join(parts)

    def format_task(self, task: Task) -> str:
        status = "✅ Выполнена" if task.is_completed() else "⏳ Не выполнена"
        priority = _PRIORITY_LABELS.get(_value(task.priority), "")

        lines = [f"📋 Задача [{task.id}]\n\n", f"📌 Название: {task.title}\n"]
        if task.description:
            lines.append(f"💬 Описание: {task.description}\n")
        lines.append(f"📊 Статус: {status}\n")
        lines.append(f"🎯 Приоритет: {priority}\n")
        lines.append(f"📅 Создана: {task.created_at.strftime(_DATE_FORMAT)}\n")
        if task.notify_at is not None:
            lines.append(f"⏰ Уведомление: {task.notify_at.strftime(_DATE_FORMAT)}\n")
        if task.completed_at is not None:
            lines.append(f"✅ Завершена: {task.completed_at.strftime(_DATE_FORMAT)}\n")
        return "".join(lines)