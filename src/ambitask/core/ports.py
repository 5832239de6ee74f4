# src/ambitask/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the store/HTTP transport/notification output swappable and lets the
watcher be tested against synthetic task sets and a synthetic clock.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """Server-side persistence port (implemented by TaskStore)."""

    def list_tasks(self) -> list[Task]: ...
    def get_task(self, task_id: str) -> Task: ...
    def create_task(
            self,
            *,
            title: str,
            completed: bool = False,
            important: bool = False,
            due_at: Any = None,
            notified: bool = False,
            now_ts: float | None = None,
    ) -> Task: ...
    def update_task(
            self, task_id: str, changes: Mapping[str, Any], *, now_ts: float | None = None
    ) -> Task: ...
    def delete_task(self, task_id: str) -> None: ...


class TaskApi(Protocol):
    """
    Client-side port: how the console client reaches the Task API.

    Implementations raise NetworkError on any failure.
    `changes` uses wire (camelCase) field names, e.g. {"dueAt": None}.
    """

    async def list_tasks(self) -> list[Task]: ...
    async def create_task(self, payload: Mapping[str, Any]) -> Task: ...
    async def update_task(self, task_id: str, changes: Mapping[str, Any]) -> Task: ...
    async def delete_task(self, task_id: str) -> None: ...


class Notifier(Protocol):
    """Host capability that tells the user a task is due (text, sound, desktop...)."""

    def announce(self, task: Task) -> None: ...
