# src/ambitask/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
import uuid
from collections.abc import Iterator, Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..core.errors import NotFoundError, StoreError, ValidationError
from .task_models import UPDATABLE_FIELDS, Task, parse_timestamp

logger = logging.getLogger(__name__)

_SQLITE_PREFIX = "sqlite:///"


def db_path_from_url(store_url: str | Path) -> Path:
    """
    Resolve a store connection string to a SQLite file path.

    Accepted forms:
    - sqlite:///relative/path.sqlite3
    - sqlite:////absolute/path.sqlite3
    - a bare filesystem path
    """
    if isinstance(store_url, Path):
        return store_url
    raw = store_url.strip()
    if not raw:
        raise StoreError("Store URL is empty")
    if raw.startswith(_SQLITE_PREFIX):
        rest = raw[len(_SQLITE_PREFIX):]
        if not rest:
            raise StoreError(f"Store URL has no database path: {store_url}")
        return Path(rest).expanduser()
    if "://" in raw:
        scheme = raw.split("://", 1)[0]
        raise StoreError(f"Unsupported store URL scheme: {scheme}")
    return Path(raw).expanduser()


def _clean_title(raw: Any) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError("title is required")
    return raw.strip()


def _clean_due_at(raw: Any) -> float | None:
    try:
        ts = parse_timestamp(raw)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"dueAt is not a valid timestamp: {raw!r}") from e
    if ts is None:
        return None
    # Stored values must render back as a UTC datetime on every later read.
    try:
        datetime.fromtimestamp(ts, tz=UTC)
    except (OverflowError, OSError, ValueError) as e:
        raise ValidationError(f"dueAt is out of range: {raw!r}") from e
    return ts


def _clean_flag(name: str, raw: Any) -> bool:
    if raw is None:
        raise ValidationError(f"{name} must be true or false")
    return bool(raw)


class TaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection (the API serves sync routes
      from a thread pool)

    Any sqlite3 failure surfaces as StoreError.
    """

    def __init__(self, store_url: str | Path = "tasks.sqlite3") -> None:
        self._db_path = db_path_from_url(store_url)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create store directory {self._db_path.parent}: {e}") from e
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def _session(self, op: str) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            logger.exception("TaskStore connect failed op=%s db=%s", op, self._db_path)
            raise StoreError(f"Task store unavailable: {e}") from e
        try:
            yield conn
        except sqlite3.Error as e:
            logger.exception("TaskStore %s failed", op)
            raise StoreError(f"Task store {op} failed: {e}") from e
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._session("schema") as conn:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    completed INTEGER NOT NULL DEFAULT 0,
                    important INTEGER NOT NULL DEFAULT 0,
                    due_at REAL,
                    notified INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("important", "INTEGER NOT NULL DEFAULT 0")
            add_col("due_at", "REAL")
            add_col("notified", "INTEGER NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_created ON tasks(created_at)")
            conn.commit()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        created_at = float(row["created_at"] or 0.0)
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            completed=bool(row["completed"]),
            important=bool(row["important"]),
            due_at=float(row["due_at"]) if row["due_at"] is not None else None,
            notified=bool(row["notified"]),
            created_at=created_at,
            updated_at=float(row["updated_at"] or created_at),
        )

    @staticmethod
    def _fetch(conn: sqlite3.Connection, task_id: str) -> Task | None:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return TaskStore._row_to_task(row) if row else None

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._session("count") as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)

    def create_task(
        self,
        *,
        title: str,
        completed: bool = False,
        important: bool = False,
        due_at: Any = None,
        notified: bool = False,
        now_ts: float | None = None,
    ) -> Task:
        clean_title = _clean_title(title)
        due_ts = _clean_due_at(due_at)
        now = time.time() if now_ts is None else float(now_ts)
        task = Task(
            id=uuid.uuid4().hex,
            title=clean_title,
            completed=bool(completed),
            important=bool(important),
            due_at=due_ts,
            notified=bool(notified),
            created_at=now,
            updated_at=now,
        )

        with self._session("create") as conn:
            conn.execute(
                """
                INSERT INTO tasks(
                    id, title, completed, important, due_at, notified, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.id,
                    task.title,
                    int(task.completed),
                    int(task.important),
                    task.due_at,
                    int(task.notified),
                    task.created_at,
                    task.updated_at,
                ),
            )
            conn.commit()

        logger.debug("Task added id=%s due_at=%s", task.id, task.due_at)
        return task

    def list_tasks(self) -> list[Task]:
        """All tasks, newest first (insertion order breaks created_at ties)."""
        with self._session("list") as conn:
            rows = conn.execute(
                "SELECT * FROM tasks ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
            return [self._row_to_task(r) for r in rows]

    def get_task(self, task_id: str) -> Task:
        with self._session("get") as conn:
            task = self._fetch(conn, task_id)
        if task is None:
            raise NotFoundError.for_task(task_id)
        return task

    def update_task(
        self, task_id: str, changes: Mapping[str, Any], *, now_ts: float | None = None
    ) -> Task:
        """
        Apply a sparse set of changes; fields not in `changes` are left untouched.

        `due_at=None` clears the due time.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown task fields: {', '.join(sorted(unknown))}")

        fields: list[str] = []
        params: list[Any] = []

        if "title" in changes:
            fields.append("title = ?")
            params.append(_clean_title(changes["title"]))

        for flag in ("completed", "important", "notified"):
            if flag in changes:
                fields.append(f"{flag} = ?")
                params.append(int(_clean_flag(flag, changes[flag])))

        if "due_at" in changes:
            fields.append("due_at = ?")
            params.append(_clean_due_at(changes["due_at"]))

        now = time.time() if now_ts is None else float(now_ts)
        fields.append("updated_at = ?")
        params.append(now)
        params.append(task_id)

        sql = f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?"

        with self._session("update") as conn:
            cur = conn.execute(sql, params)
            if cur.rowcount == 0:
                conn.rollback()
                raise NotFoundError.for_task(task_id)
            task = self._fetch(conn, task_id)
            conn.commit()

        if task is None:
            # Deleted between UPDATE and SELECT by another writer.
            raise NotFoundError.for_task(task_id)
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        return task

    def delete_task(self, task_id: str) -> None:
        with self._session("delete") as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            conn.commit()
            deleted = cur.rowcount
        if deleted == 0:
            raise NotFoundError.for_task(task_id)
        logger.debug("Task deleted id=%s", task_id)
