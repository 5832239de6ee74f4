# src/ambitask/tasks/due_watcher.py

from __future__ import annotations

"""
Due-task watcher.

A small polling loop that, every tick:
- scans client state for tasks whose due time has passed,
- skips completed and already-notified tasks,
- announces each newly due task through the injected Notifier,
- shows a short-lived inline banner,
- persists notified=true through the same API path user edits take.

A task is treated as handled the moment the watcher decides to notify: it is
flipped to notified in local state (and remembered in-process) before the network
write starts, so neither a slow round-trip nor a refresh returning the stale
record can make it fire twice. The durable "already fired" marker is the
`notified` flag in the store; the in-process memory is lost on restart by design.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from ..client.actions import TaskActions
from ..client.state import Banner, ClientState
from ..core.ports import Notifier
from .task_models import Task, WatchState

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 1.0
DEFAULT_DISPLAY_SECONDS = 5.0


def banner_text(task: Task) -> str:
    return f'Task "{task.title}" is due!'


class DueTaskWatcher:
    def __init__(
        self,
        actions: TaskActions,
        notifier: Notifier,
        *,
        display_seconds: float = DEFAULT_DISPLAY_SECONDS,
    ) -> None:
        self.actions = actions
        self.notifier = notifier
        self.display_seconds = max(0.0, float(display_seconds))
        self._handled: set[str] = set()

    @property
    def state(self) -> ClientState:
        return self.actions.state

    def due_tasks(self, now_ts: float) -> list[Task]:
        return [
            t
            for t in self.state.tasks
            if t.id not in self._handled and t.watch_state(now_ts) == WatchState.DUE
        ]

    async def tick(self, now_ts: float) -> list[Task]:
        """
        Run one evaluation pass at `now_ts` (epoch seconds).

        Returns the tasks that were announced during this tick.
        """
        due = self.due_tasks(now_ts)

        # Decide and mark first; only then start any network I/O.
        for task in due:
            self._handled.add(task.id)
            self.state.mark_notified(task.id)
            try:
                self.notifier.announce(task)
            except Exception:
                logger.exception("Notifier failed task_id=%s", task.id)
            self.state.add_banner(
                Banner(
                    task_id=task.id,
                    message=banner_text(task),
                    expires_at=now_ts + self.display_seconds,
                )
            )
            logger.info("Task %s is due -> notified", task.id)

        for task in due:
            if await self.actions.mark_notified(task.id) is None:
                logger.warning("Persisting notified=true failed task_id=%s", task.id)

        return due


async def run_due_watcher(
        watcher: DueTaskWatcher,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.time,
) -> None:
    """
    Tick forever every interval_seconds. To stop the watcher, cancel the coroutine/task.

    A failing tick is logged; the loop keeps going.
    """
    sleep_s = max(0.05, float(interval_seconds))

    while True:
        try:
            await watcher.tick(clock())
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Due-task watcher tick failed")

        await asyncio.sleep(sleep_s)
