# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from ambitask.core.errors import NotFoundError, StoreError, ValidationError
from ambitask.tasks.task_store import TaskStore, db_path_from_url


def test_create_task_defaults_and_trimmed_title(task_store: TaskStore) -> None:
    task = task_store.create_task(title="  Pay rent  ")

    assert task.id
    assert task.title == "Pay rent"
    assert task.completed is False
    assert task.important is False
    assert task.notified is False
    assert task.due_at is None
    assert task.created_at == task.updated_at

    stored = task_store.get_task(task.id)
    assert stored == task


@pytest.mark.parametrize("title", ["", "   ", "\t\n"])
def test_blank_title_is_rejected_and_nothing_persisted(task_store: TaskStore, title: str) -> None:
    with pytest.raises(ValidationError):
        task_store.create_task(title=title)
    assert task_store.count_tasks() == 0


def test_ids_are_unique(task_store: TaskStore) -> None:
    ids = {task_store.create_task(title=f"task {i}").id for i in range(25)}
    assert len(ids) == 25


def test_list_is_newest_first(task_store: TaskStore) -> None:
    a = task_store.create_task(title="a", now_ts=100.0)
    b = task_store.create_task(title="b", now_ts=300.0)
    c = task_store.create_task(title="c", now_ts=200.0)

    assert [t.id for t in task_store.list_tasks()] == [b.id, c.id, a.id]


def test_list_ties_keep_insertion_order_newest_first(task_store: TaskStore) -> None:
    first = task_store.create_task(title="first", now_ts=50.0)
    second = task_store.create_task(title="second", now_ts=50.0)

    assert [t.id for t in task_store.list_tasks()] == [second.id, first.id]


def test_partial_update_preserves_other_fields(task_store: TaskStore) -> None:
    task = task_store.create_task(title="Pay rent", important=True, due_at=5_000.0, now_ts=10.0)

    updated = task_store.update_task(task.id, {"completed": True}, now_ts=20.0)

    assert updated.completed is True
    assert updated.title == "Pay rent"
    assert updated.important is True
    assert updated.due_at == 5_000.0
    assert updated.notified is False
    assert updated.created_at == 10.0
    assert updated.updated_at == 20.0


def test_update_can_clear_due_time(task_store: TaskStore) -> None:
    task = task_store.create_task(title="x", due_at="2030-01-01T10:00:00Z")
    assert task.due_at is not None

    updated = task_store.update_task(task.id, {"due_at": None})
    assert updated.due_at is None


def test_update_with_blank_title_changes_nothing(task_store: TaskStore) -> None:
    task = task_store.create_task(title="keep me")

    with pytest.raises(ValidationError):
        task_store.update_task(task.id, {"title": "  ", "completed": True})

    assert task_store.get_task(task.id).title == "keep me"
    assert task_store.get_task(task.id).completed is False


def test_update_rejects_unknown_fields(task_store: TaskStore) -> None:
    task = task_store.create_task(title="x")
    with pytest.raises(ValidationError):
        task_store.update_task(task.id, {"id": "other"})


def test_update_missing_task_is_not_found(task_store: TaskStore) -> None:
    with pytest.raises(NotFoundError):
        task_store.update_task("nope", {"completed": True})


def test_delete_missing_task_leaves_collection_alone(task_store: TaskStore) -> None:
    task_store.create_task(title="a")
    task_store.create_task(title="b")

    with pytest.raises(NotFoundError):
        task_store.delete_task("does-not-exist")

    assert task_store.count_tasks() == 2


def test_delete_removes_task(task_store: TaskStore) -> None:
    task = task_store.create_task(title="a")
    task_store.delete_task(task.id)

    assert task_store.count_tasks() == 0
    with pytest.raises(NotFoundError):
        task_store.get_task(task.id)


def test_invalid_due_time_is_a_validation_error(task_store: TaskStore) -> None:
    with pytest.raises(ValidationError):
        task_store.create_task(title="x", due_at="next tuesday")
    assert task_store.count_tasks() == 0


@pytest.mark.parametrize(
    "due_at",
    [
        datetime(9999, 12, 31, 23, 0, tzinfo=timezone(timedelta(hours=-5))),
        1e20,
        float("nan"),
    ],
)
def test_due_time_outside_datetime_range_is_rejected(task_store: TaskStore, due_at: object) -> None:
    with pytest.raises(ValidationError):
        task_store.create_task(title="x", due_at=due_at)

    assert task_store.count_tasks() == 0
    assert task_store.list_tasks() == []


def test_update_with_out_of_range_due_time_changes_nothing(task_store: TaskStore) -> None:
    task = task_store.create_task(title="x", due_at=1_000.0)

    with pytest.raises(ValidationError):
        task_store.update_task(task.id, {"due_at": 1e20})

    assert task_store.get_task(task.id).due_at == 1_000.0


@pytest.mark.parametrize("changes", [{"title": None}, {"completed": None}, {"notified": None}])
def test_update_rejects_null_for_non_nullable_fields(task_store: TaskStore, changes: dict) -> None:
    task = task_store.create_task(title="keep", completed=True, notified=True)

    with pytest.raises(ValidationError):
        task_store.update_task(task.id, changes)

    assert task_store.get_task(task.id) == task


def test_tasks_survive_reopen(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    task = TaskStore(db).create_task(title="durable", due_at=1_234.0)

    reopened = TaskStore(f"sqlite:///{db}")
    assert reopened.get_task(task.id) == task


def test_old_schema_is_migrated(tmp_path: Path) -> None:
    db = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(str(db))
    conn.execute(
        "CREATE TABLE tasks (id TEXT PRIMARY KEY, title TEXT NOT NULL, "
        "completed INTEGER NOT NULL DEFAULT 0, created_at REAL NOT NULL)"
    )
    conn.execute("INSERT INTO tasks(id, title, completed, created_at) VALUES ('old1', 'legacy', 1, 42.0)")
    conn.commit()
    conn.close()

    store = TaskStore(db)
    (task,) = store.list_tasks()

    assert task.id == "old1"
    assert task.completed is True
    assert task.notified is False
    assert task.due_at is None
    assert task.updated_at == 42.0


def test_unopenable_store_raises_store_error(tmp_path: Path) -> None:
    # A directory cannot be opened as a database file.
    with pytest.raises(StoreError):
        TaskStore(tmp_path)


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("sqlite:///data/tasks.sqlite3", Path("data/tasks.sqlite3")),
        ("sqlite:////var/lib/ambitask/tasks.sqlite3", Path("/var/lib/ambitask/tasks.sqlite3")),
        ("tasks.sqlite3", Path("tasks.sqlite3")),
    ],
)
def test_db_path_from_url(url: str, expected: Path) -> None:
    assert db_path_from_url(url) == expected


@pytest.mark.parametrize("url", ["", "mongodb://localhost/tasks", "sqlite:///"])
def test_db_path_from_url_rejects_unusable_urls(url: str) -> None:
    with pytest.raises(StoreError):
        db_path_from_url(url)
