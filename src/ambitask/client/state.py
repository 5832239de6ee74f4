# src/ambitask/client/state.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from ..tasks.task_models import Task, TaskFilter

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EditSession:
    """Draft of the single task currently being edited."""

    task_id: str
    title: str
    due_at: float | None


@dataclass(slots=True)
class Banner:
    """Inline "task is due" message; display-only, never persisted."""

    task_id: str
    message: str
    expires_at: float


@dataclass
class ClientState:
    """
    In-memory view of the task list that drives rendering.

    - replaced wholesale on load (replace_all)
    - patched element-wise after each mutation response (upsert / prepend / remove)

    Order is kept as the server returned it (newest first); new tasks go on top.
    """

    tasks: list[Task] = field(default_factory=list)
    current_filter: TaskFilter = TaskFilter.ALL
    editing: EditSession | None = None
    banners: list[Banner] = field(default_factory=list)

    # ---- task list ----

    def replace_all(self, tasks: list[Task]) -> None:
        self.tasks = list(tasks)
        if self.editing is not None and self.get(self.editing.task_id) is None:
            self.editing = None
        logger.debug("Client state loaded: %d tasks", len(self.tasks))

    def get(self, task_id: str) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    def prepend(self, task: Task) -> None:
        self.tasks.insert(0, task)

    def upsert(self, task: Task) -> None:
        for i, t in enumerate(self.tasks):
            if t.id == task.id:
                self.tasks[i] = task
                return
        self.prepend(task)

    def remove(self, task_id: str) -> None:
        self.tasks = [t for t in self.tasks if t.id != task_id]
        if self.editing is not None and self.editing.task_id == task_id:
            self.editing = None

    def mark_notified(self, task_id: str) -> None:
        """Local-only flip, done before the network write is even issued."""
        for i, t in enumerate(self.tasks):
            if t.id == task_id:
                self.tasks[i] = replace(t, notified=True)
                return

    def visible_tasks(self) -> list[Task]:
        return filter_tasks(self.tasks, self.current_filter)

    # ---- modal editing ----

    def begin_edit(self, task_id: str) -> EditSession | None:
        """Start editing a task; any other in-progress edit is dropped unsaved."""
        task = self.get(task_id)
        if task is None:
            return None
        if self.editing is not None and self.editing.task_id != task_id:
            logger.debug("Discarding unsaved edit of task %s", self.editing.task_id)
        self.editing = EditSession(task_id=task.id, title=task.title, due_at=task.due_at)
        return self.editing

    def cancel_edit(self) -> None:
        self.editing = None

    # ---- banners ----

    def add_banner(self, banner: Banner) -> None:
        self.banners = [b for b in self.banners if b.task_id != banner.task_id]
        self.banners.append(banner)

    def active_banners(self, now_ts: float) -> list[Banner]:
        self.banners = [b for b in self.banners if b.expires_at > now_ts]
        return list(self.banners)


def filter_tasks(tasks: list[Task], task_filter: TaskFilter) -> list[Task]:
    if task_filter == TaskFilter.ACTIVE:
        return [t for t in tasks if not t.completed]
    if task_filter == TaskFilter.COMPLETED:
        return [t for t in tasks if t.completed]
    if task_filter == TaskFilter.IMPORTANT:
        return [t for t in tasks if t.important]
    return list(tasks)
