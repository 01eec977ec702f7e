"""Note business rules and text formatting."""

from __future__ import annotations

import enum
import re
from datetime import datetime
from typing import List, Union

from todobot.domain import Note, NoteCategory, NoteType, ServiceError
from todobot.repositories import NoteRepository

_URL_PREFIX = re.compile(r"^https?://")
_DATE_FORMAT = "%d.%m.%Y %H:%M"
_CONTENT_LIMIT = 300


def _value(value: Union[str, enum.Enum]) -> str:
    return value.value if isinstance(value, enum.Enum) else value


def _category(value: Union[NoteCategory, str]) -> Union[NoteCategory, str]:
    if isinstance(value, NoteCategory):
        return value
    if not value:
        return NoteCategory.GENERAL
    try:
        return NoteCategory(value)
    except ValueError:
        return value


def _cut_bytes(text: str, limit: int) -> str:
    """The first ``limit`` bytes of the UTF-8 text, dropping a split character."""
    return text.encode("utf-8")[:limit].decode("utf-8", errors="ignore")


def is_url(text: str) -> bool:
    """True when the text starts with an http:// or https:// scheme."""
    return bool(_URL_PREFIX.match(text))


def extract_url(content: str) -> str:
    """Return the first line of ``content`` that is a URL, or an empty string."""
    for line in content.split("\n"):
        line = line.strip()
        if is_url(line):
            return line
    return ""


def _note_type_for(content: str) -> NoteType:
    return NoteType.LINK if is_url(content) else NoteType.TEXT


class NoteService:
    """Creates, finds and describes a user's notes."""

    def __init__(self, note_repository: NoteRepository) -> None:
        self._notes = note_repository

    def create_note(
        self,
        user_id: int,
        title: str,
        content: str,
        category: Union[NoteCategory, str],
        tags: str,
    ) -> Note:
        """Create a text or link note; the type is inferred from the content."""
        note = Note(
            title=title,
            content=content,
            type=_note_type_for(content),
            category=_category(category),
            tags=tags,
            user_id=user_id,
        )
        if note.type == NoteType.LINK:
            note.url = extract_url(content)
        try:
            self._notes.create(note)
        except Exception as exc:
            raise ServiceError(f"failed to create note: {exc}") from exc
        return note

    def create_note_from_file(
        self,
        user_id: int,
        title: str,
        file_id: str,
        file_name: str,
        file_size: int,
        note_type: Union[NoteType, str],
        category: Union[NoteCategory, str],
        tags: str,
    ) -> Note:
        note = Note(
            title=title,
            type=note_type,
            category=_category(category),
            file_id=file_id,
            file_name=file_name,
            file_size=file_size,
            tags=tags,
            user_id=user_id,
        )
        try:
            self._notes.create(note)
        except Exception as exc:
            raise ServiceError(f"failed to create note from file: {exc}") from exc
        return note

    def get_note(self, note_id: int) -> Note:
        try:
            return self._notes.get_by_id(note_id)
        except Exception as exc:
            raise ServiceError(f"failed to get note: {exc}") from exc

    def get_user_notes(self, user_id: int) -> List[Note]:
        try:
            return self._notes.get_by_user_id(user_id)
        except Exception as exc:
            raise ServiceError(f"failed to get user notes: {exc}") from exc

    def get_notes_by_category(
        self, user_id: int, category: Union[NoteCategory, str]
    ) -> List[Note]:
        try:
            return self._notes.get_by_category(user_id, category)
        except Exception as exc:
            raise ServiceError(f"failed to get notes by category: {exc}") from exc

    def get_notes_by_type(self, user_id: int, note_type: Union[NoteType, str]) -> List[Note]:
        try:
            return self._notes.get_by_type(user_id, note_type)
        except Exception as exc:
            raise ServiceError(f"failed to get notes by type: {exc}") from exc

    def get_favorite_notes(self, user_id: int) -> List[Note]:
        try:
            return self._notes.get_favorites(user_id)
        except Exception as exc:
            raise ServiceError(f"failed to get favorite notes: {exc}") from exc

    def search_notes(self, user_id: int, query: str) -> List[Note]:
        if query == "":
            raise ServiceError("search query cannot be empty")
        try:
            return self._notes.search(user_id, query)
        except Exception as exc:
            raise ServiceError(f"failed to search notes: {exc}") from exc

    def update_note(self, note: Note) -> None:
        """Save the note, re-inferring its type when it has content."""
        note.updated_at = datetime.now()
        if note.content != "":
            note.type = _note_type_for(note.content)
            if note.type == NoteType.LINK:
                note.url = extract_url(note.content)
        try:
            self._notes.update(note)
        except Exception as exc:
            raise ServiceError(f"failed to update note: {exc}") from exc

    def toggle_favorite(self, note_id: int) -> Note:
        try:
            note = self._notes.get_by_id(note_id)
        except Exception as exc:
            raise ServiceError(f"failed to get note: {exc}") from exc
        note.toggle_favorite()
        try:
            self._notes.update(note)
        except Exception as exc:
            raise ServiceError(f"failed to toggle favorite: {exc}") from exc
        return note

    def delete_note(self, note_id: int) -> None:
        try:
            self._notes.delete(note_id)
        except Exception as exc:
            raise ServiceError(f"failed to delete note: {exc}") from exc

    def format_note_for_display(self, note: Note) -> str:
        """Markdown text describing the note."""
        parts = [f"{note.display_type()} *{note.title}*\n"]

        if _value(note.category) != NoteCategory.GENERAL.value:
            parts.append(f"Категория: {note.display_category()}\n")

        if note.content:
            if len(note.content.encode("utf-8")) > _CONTENT_LIMIT:
                parts.append(f"```\n{_cut_bytes(note.content, _CONTENT_LIMIT)}...\n```\n")
            else:
                parts.append(f"```\n{note.content}\n```\n")

        if note.is_link() and note.url:
            parts.append(f"🔗 [Перейти по ссылке]({note.url})\n")

        if note.is_file():
            parts.append(f"📎 {note.file_name}")
            if note.file_size > 0:
                parts.append(f" ({note.file_size / 1024:.1f} KB)")
            parts.append("\n")

        if note.tags:
            parts.append(f"🏷️ {note.tags}\n")

        if note.is_favorite:
            parts.append("⭐ Избранное\n")

        parts.append(f"📅 {note.created_at.strftime(_DATE_FORMAT)}")
        return "".join(parts)