"""Inline keyboards shown under the bot's messages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple

_LIST_LIMIT = 5


@dataclass(frozen=True)
class Button:
    """An inline button that sends ``callback_data`` when pressed."""

    text: str
    callback_data: str


@dataclass(frozen=True)
class Keyboard:
    """An inline keyboard made of rows of buttons."""

    rows: Tuple[Tuple[Button, ...], ...]

    def to_dict(self) -> Dict[str, Any]:
        """The keyboard as a ``reply_markup`` object for the Bot API."""
        return {
            "inline_keyboard": [
                [{"text": b.text, "callback_data": b.callback_data} for b in row]
                for row in self.rows
            ]
        }


@dataclass(frozen=True)
class TaskListItem:
    id: int
    title: str


@dataclass(frozen=True)
class NoteListItem:
    id: int
    title: str
    is_favorite: bool = False


def _keyboard(*rows: Iterable[Button]) -> Keyboard:
    return Keyboard(tuple(tuple(row) for row in rows))


def truncate(text: str, max_len: int) -> str:
    """Shorten text to ``max_len`` UTF-8 bytes, ending it with an ellipsis."""
    raw = text.encode("utf-8")
    if len(raw) <= max_len:
        return text
    return raw[: max_len - 3].decode("utf-8", errors="ignore") + "..."


_MENU_BUTTON = Button("🏠 Главное меню", "cmd_menu")


def main_menu_keyboard() -> Keyboard:
    return _keyboard(
        [Button("📋 Мои задачи", "cmd_tasks"), Button("➕ Добавить задачу", "cmd_add_task")],
        [Button("📝 Мои заметки", "cmd_notes"), Button("📄 Добавить заметку", "cmd_add_note")],
        [Button("⏰ Активные задачи", "cmd_pending"), Button("✅ Выполненные", "cmd_completed")],
        [Button("🔍 Поиск заметок", "cmd_search"), Button("⭐ Избранные", "cmd_favorites")],
        [Button("❓ Справка", "cmd_help"), Button("🚪 Выйти", "cmd_logout")],
    )


def task_actions_keyboard(task_id: int) -> Keyboard:
    return _keyboard(
        [Button("✅ Выполнить", f"complete_{task_id}"), Button("👀 Подробнее", f"show_{task_id}")],
        [Button("⏰ Напоминание", f"notify_{task_id}"), Button("🗑️ Удалить", f"delete_{task_id}")],
        [Button("🔙 Назад к задачам", "cmd_tasks")],
    )


def priority_keyboard() -> Keyboard:
    return _keyboard(
        [
            Button("🔴 Высокий", "priority_high"),
            Button("🟡 Средний", "priority_medium"),
            Button("🟢 Низкий", "priority_low"),
        ]
    )


def category_keyboard() -> Keyboard:
    return _keyboard(
        [Button("🗂️ Общее", "category_general"), Button("💼 Работа", "category_work")],
        [Button("📚 Учеба", "category_study"), Button("👤 Личное", "category_personal")],
        [Button("🔗 Ресурсы", "category_resources"), Button("💡 Идеи", "category_ideas")],
    )


def note_actions_keyboard(note_id: int, is_favorite: bool) -> Keyboard:
    if is_favorite:
        favorite = Button("✨ Убрать из избранного", f"favorite_remove_{note_id}")
    else:
        favorite = Button("⭐ В избранное", f"favorite_add_{note_id}")
    return _keyboard(
        [favorite, Button("📝 Редактировать", f"edit_note_{note_id}")],
        [Button("🗑️ Удалить", f"delete_note_{note_id}"), Button("🔙 К заметкам", "cmd_notes")],
    )


def task_list_keyboard(tasks: Iterable[TaskListItem]) -> Keyboard:
    """One row per task (at most five), then add/refresh and menu rows."""
    rows = [
        [
            Button("✅", f"complete_{task.id}"),
            Button(f"👀 [{task.id}] {truncate(task.title, 20)}", f"show_{task.id}"),
        ]
        for task, _ in zip(tasks, range(_LIST_LIMIT))
    ]
    rows.append([Button("➕ Добавить задачу", "cmd_add_task"), Button("🔄 Обновить", "cmd_tasks")])
    rows.append([_MENU_BUTTON])
    return _keyboard(*rows)


def note_list_keyboard(notes: Iterable[NoteListItem]) -> Keyboard:
    """One row per note (at most five), then add/refresh and menu rows."""
    rows = [
        [
            Button(
                f"{'⭐' if note.is_favorite else ''}📝 [{note.id}] {truncate(note.title, 18)}",
                f"show_note_{note.id}",
            )
        ]
        for note, _ in zip(notes, range(_LIST_LIMIT))
    ]
    rows.append([Button("📄 Добавить заметку", "cmd_add_note"), Button("🔄 Обновить", "cmd_notes")])
    rows.append([_MENU_BUTTON])
    return _keyboard(*rows)


def confirmation_keyboard(action: str, item_id: int) -> Keyboard:
    return _keyboard(
        [
            Button("✅ Да", f"confirm_{action}_{item_id}"),
            Button("❌ Отмена", f"cancel_{action}"),
        ]
    )


def back_to_menu_keyboard() -> Keyboard:
    return _keyboard([_MENU_BUTTON])