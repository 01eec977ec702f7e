from datetime import datetime, timedelta

import pytest

from todobot.domain import NotFoundError, Task, TaskPriority, TaskStatus, User
from todobot.storage.database import Database
from todobot.storage.task_store import TaskStore
from todobot.storage.user_store import UserStore


@pytest.fixture
def db():
    database = Database(":memory:")
    database.create_tables()
    yield database
    database.close()


@pytest.fixture
def user(db):
    u = User(telegram_id=1001, username="alice")
    UserStore(db).create(u)
    return u


@pytest.fixture
def store(db):
    return TaskStore(db)


def make_task(user, title, priority=TaskPriority.MEDIUM, notify_at=None):
    return Task(
        title=title,
        description="desc",
        status=TaskStatus.PENDING,
        priority=priority,
        user_id=user.id,
        notify_at=notify_at,
    )


def test_create_assigns_id_and_round_trips(store, user):
    notify = datetime(2030, 1, 2, 3, 4, 5)
    task = make_task(user, "Buy milk", TaskPriority.HIGH, notify)
    store.create(task)
    assert task.id > 0
    loaded = store.get_by_id(task.id)
    assert loaded.title == "Buy milk"
    assert loaded.description == "desc"
    assert loaded.status == TaskStatus.PENDING
    assert loaded.priority == TaskPriority.HIGH
    assert loaded.notify_at == notify
    assert loaded.completed_at is None
    assert loaded.user_id == user.id
    assert loaded.created_at == task.created_at


def test_ids_increase(store, user):
    first = make_task(user, "a")
    second = make_task(user, "b")
    store.create(first)
    store.create(second)
    assert second.id > first.id


def test_get_missing_raises(store):
    with pytest.raises(NotFoundError):
        store.get_by_id(999)


def test_delete_hides_task(store, user):
    task = make_task(user, "gone")
    store.create(task)
    store.delete(task.id)
    with pytest.raises(NotFoundError):
        store.get_by_id(task.id)
    assert [t.id for t in store.get_by_user_id(user.id, TaskStatus.DELETED)] == [task.id]
    assert store.get_all(user.id) == []


def test_update_persists_fields(store, user):
    task = make_task(user, "old")
    store.create(task)
    task.title = "new"
    task.complete()
    store.update(task)
    loaded = store.get_by_id(task.id)
    assert loaded.title == "new"
    assert loaded.status == TaskStatus.COMPLETED
    assert loaded.completed_at == task.completed_at
    assert loaded.updated_at == task.updated_at


def test_get_by_user_id_filters_status(store, user):
    pending = make_task(user, "p")
    done = make_task(user, "d")
    store.create(pending)
    store.create(done)
    done.complete()
    store.update(done)
    assert [t.id for t in store.get_by_user_id(user.id, TaskStatus.PENDING)] == [pending.id]
    assert [t.id for t in store.get_by_user_id(user.id, "completed")] == [done.id]


def test_get_all_orders_by_status_then_priority(store, user):
    low = make_task(user, "low", TaskPriority.LOW)
    high = make_task(user, "high", TaskPriority.HIGH)
    done = make_task(user, "done", TaskPriority.HIGH)
    for task in (low, high, done):
        store.create(task)
    done.complete()
    store.update(done)
    assert [t.id for t in store.get_all(user.id)] == [high.id, low.id, done.id]


def test_get_all_is_per_user(db, store, user):
    other = User(telegram_id=2002)
    UserStore(db).create(other)
    store.create(make_task(user, "mine"))
    store.create(make_task(other, "theirs"))
    assert [t.title for t in store.get_all(other.id)] == ["theirs"]


def test_tasks_for_notification(store, user):
    now = datetime.now()
    due_late = make_task(user, "late", notify_at=now - timedelta(minutes=5))
    due_early = make_task(user, "early", notify_at=now - timedelta(hours=1))
    future = make_task(user, "future", notify_at=now + timedelta(hours=1))
    none = make_task(user, "none")
    finished = make_task(user, "finished", notify_at=now - timedelta(minutes=1))
    for task in (due_late, due_early, future, none, finished):
        store.create(task)
    finished.complete()
    store.update(finished)
    result = store.get_tasks_for_notification(now)
    assert [t.id for t in result] == [due_early.id, due_late.id]


def test_create_rejects_unknown_user(store):
    task = Task(title="orphan", user_id=12345)
    with pytest.raises(Exception, match="create task"):
        store.create(task)
    assert store.get_all(12345) == []