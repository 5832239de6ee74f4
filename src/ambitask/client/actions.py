# src/ambitask/client/actions.py

from __future__ import annotations

"""
Mutation plumbing for the console client.

Each action calls the Task API, then patches ClientState with the server's answer.
On NetworkError the failure is logged and client state is left exactly as it was
(stale but consistent); nothing is retried.
"""

import logging
from collections.abc import Mapping
from typing import Any

from ..core.errors import NetworkError
from ..core.ports import TaskApi
from ..tasks.task_models import Task, ts_to_iso
from .state import ClientState

logger = logging.getLogger(__name__)


class TaskActions:
    def __init__(self, api: TaskApi, state: ClientState) -> None:
        self.api = api
        self.state = state

    async def refresh(self) -> bool:
        try:
            tasks = await self.api.list_tasks()
        except NetworkError:
            logger.exception("Loading tasks failed")
            return False
        self.state.replace_all(tasks)
        return True

    async def add_task(self, title: str, due_at: float | None = None) -> Task | None:
        clean = (title or "").strip()
        if not clean:
            return None

        payload = {
            "title": clean,
            "completed": False,
            "important": False,
            "dueAt": ts_to_iso(due_at),
            "notified": False,
        }
        try:
            task = await self.api.create_task(payload)
        except NetworkError:
            logger.exception("Creating task failed title=%r", clean)
            return None
        self.state.prepend(task)
        return task

    async def update_task(self, task_id: str, changes: Mapping[str, Any]) -> Task | None:
        try:
            task = await self.api.update_task(task_id, changes)
        except NetworkError:
            logger.exception("Updating task failed id=%s fields=%s", task_id, sorted(changes))
            return None
        self.state.upsert(task)
        return task

    async def toggle_completion(self, task: Task) -> Task | None:
        return await self.update_task(task.id, {"completed": not task.completed})

    async def toggle_important(self, task: Task) -> Task | None:
        return await self.update_task(task.id, {"important": not task.important})

    async def mark_notified(self, task_id: str) -> Task | None:
        return await self.update_task(task_id, {"notified": True})

    async def save_edit(self) -> Task | None:
        """
        Persist the current edit session (title + due time).

        An empty title keeps the session open and sends nothing; a failed request
        also keeps it open so the user can retry.
        """
        session = self.state.editing
        if session is None:
            return None
        clean = session.title.strip()
        if not clean:
            return None

        task = await self.update_task(
            session.task_id,
            {"title": clean, "dueAt": ts_to_iso(session.due_at)},
        )
        if task is not None and self.state.editing is session:
            self.state.editing = None
        return task

    async def delete_task(self, task_id: str) -> bool:
        try:
            await self.api.delete_task(task_id)
        except NetworkError:
            logger.exception("Deleting task failed id=%s", task_id)
            return False
        self.state.remove(task_id)
        return True
