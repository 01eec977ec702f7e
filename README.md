# todobot

The core of a chat bot that keeps a personal to-do list and a collection of
notes: the entities, SQLite storage, business rules, message formatting,
inline keyboards and a background scheduler for reminders. User-facing texts
are in Russian. The package uses only the standard library.

## What it provides

- **Tasks** (`todobot.domain.Task`) with a title, description, priority
  (`TaskPriority`: high, medium, low) and status (`TaskStatus`: pending,
  completed, deleted). `TaskService` creates, completes, deletes, edits and
  lists tasks, checks that a task belongs to the asking user, sets reminder
  times (which must lie in the future) and formats tasks and task lists as
  chat text. `parse_task_id_from_text` returns the first positive integer
  among the words of a text.
- **Notes** (`todobot.domain.Note`): text notes, links and files (document,
  image, video, audio), with a category, tags and a favourite flag.
  `NoteService` marks a note as a link when its content starts with `http://`
  or `https://` and stores the first such line as its URL; it also searches
  title, content and tags without regard to case, and formats a note as
  Markdown (content longer than 300 bytes is cut short).
- **Sessions**: `AuthService.login` checks a shared password, creates or
  refreshes the user and opens a session lasting the configured timeout;
  `is_authenticated` returns the user while the session is valid;
  `logout` and `cleanup_expired_sessions` remove sessions.
- **Reminders**: `NotificationService.send_task_notifications` sends each due
  task a reminder with "complete" and "details" buttons through a
  `MessageSender`, then clears its reminder time.
- **Scheduler**: `Scheduler.start(stop_event)` wakes at the top of every minute
  to send reminders and, at minutes 0 and 30, sweeps expired sessions, until
  the `threading.Event` is set.
- **Keyboards**: `todobot.telegram.keyboards` builds the inline keyboards
  (main menu, task and note actions, priority and category pickers, task and
  note lists of at most five items, confirmation, back to menu);
  `Keyboard.to_dict()` gives the `reply_markup` object the Bot API expects.

Service failures raise `todobot.domain.ServiceError` with a message meant for
the user; missing records raise `NotFoundError`; storage failures raise
`todobot.storage.database.DatabaseError`.

## Example

```python
import threading
from datetime import timedelta

from todobot.scheduler import Scheduler
from todobot.services.auth_service import AuthService
from todobot.services.note_service import NoteService
from todobot.services.notification_service import NotificationService
from todobot.services.task_service import TaskService
from todobot.storage.database import Database
from todobot.storage.note_store import NoteStore
from todobot.storage.session_store import SessionStore
from todobot.storage.task_store import TaskStore
from todobot.storage.user_store import UserStore


class PrintSender:
    def send_message(self, chat_id, text, keyboard=None, parse_mode=None):
        print(chat_id, text, keyboard.to_dict() if keyboard else None)


password = "password"

with Database("todobot.sqlite3") as db:
    db.create_tables()

    auth_service = AuthService(UserStore(db), SessionStore(db), password, timedelta(hours=24))
    task_service = TaskService(TaskStore(db))
    note_service = NoteService(NoteStore(db))

    user = auth_service.login(1001, "alice", "Alice", "", password)
    task = task_service.create_task(user.id, "Купить молоко", "", "high")
    print(task_service.format_task(task))

    notifications = NotificationService(PrintSender(), task_service)
    stop_event = threading.Event()
    worker = threading.Thread(
        target=Scheduler(notifications, auth_service).start, args=(stop_event,)
    )
    worker.start()
    try:
        stop_event.wait()
    except KeyboardInterrupt:
        stop_event.set()
    worker.join()
```

## Layout

- `todobot.domain` — tasks, notes, users, sessions and the error types.
- `todobot.repositories` — the storage interfaces the services depend on.
- `todobot.storage` — SQLite implementations: `Database`, `UserStore`,
  `SessionStore`, `TaskStore`, `NoteStore`.
- `todobot.services` — `AuthService`, `TaskService`, `NoteService`,
  `NotificationService`.
- `todobot.scheduler` — periodic reminders and session cleanup.
- `todobot.telegram.keyboards` — inline keyboards.

## What it does not do

The package has no Telegram Bot API client and does not receive or dispatch
updates: there are no chat command or button handlers, no multi-step dialogues
and no parser for reminder times typed by users. Sending messages goes through
any object with a `send_message` method that you supply. There is no
command-line program; you wire the pieces together in your own code.