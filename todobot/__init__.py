"""Tasks, reminders, notes and sessions for a chat bot, stored in SQLite."""

__version__ = "0.1.0"