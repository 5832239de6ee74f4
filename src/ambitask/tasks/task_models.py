# src/ambitask/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

# Fields a client may change through a partial update.
UPDATABLE_FIELDS = frozenset({"title", "completed", "important", "due_at", "notified"})


class TaskFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"
    IMPORTANT = "important"

    @classmethod
    def parse(cls, raw: str | None) -> TaskFilter:
        if not raw:
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.ALL


class WatchState(StrEnum):
    """
    Due-task watcher view of a task.

    PENDING  -> nothing to do yet (no due time, due in the future, completed)
    DUE      -> due time passed, not completed, not yet notified
    NOTIFIED -> terminal: the notification already fired
    """

    PENDING = "pending"
    DUE = "due"
    NOTIFIED = "notified"


@dataclass(slots=True)
class Task:
    id: str
    title: str
    completed: bool
    important: bool
    due_at: float | None
    notified: bool
    created_at: float
    updated_at: float

    def watch_state(self, now_ts: float) -> WatchState:
        if self.notified:
            return WatchState.NOTIFIED
        if self.completed or self.due_at is None:
            return WatchState.PENDING
        if self.due_at <= now_ts:
            return WatchState.DUE
        return WatchState.PENDING

    def to_wire(self) -> dict[str, Any]:
        """camelCase JSON shape used by the HTTP API."""
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "important": self.important,
            "dueAt": ts_to_iso(self.due_at),
            "notified": self.notified,
            "createdAt": ts_to_iso(self.created_at),
            "updatedAt": ts_to_iso(self.updated_at),
        }

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> Task:
        created_at = parse_timestamp(data.get("createdAt")) or 0.0
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            completed=bool(data.get("completed", False)),
            important=bool(data.get("important", False)),
            due_at=parse_timestamp(data.get("dueAt")),
            notified=bool(data.get("notified", False)),
            created_at=created_at,
            updated_at=parse_timestamp(data.get("updatedAt")) or created_at,
        )


def ts_to_iso(ts: float | None) -> str | None:
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=UTC).isoformat()


def parse_timestamp(raw: Any) -> float | None:
    """
    Normalize a due/created timestamp to epoch seconds.

    Accepts None / "" (no timestamp), epoch numbers, datetimes and ISO-8601 strings
    (a trailing "Z" is accepted). Naive values are taken as UTC.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError("timestamp must not be a boolean")
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, datetime):
        dt = raw
    else:
        s = str(raw).strip()
        if not s:
            return None
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.timestamp()
