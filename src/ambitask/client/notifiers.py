# src/ambitask/client/notifiers.py

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from datetime import datetime

from ..tasks.task_models import Task

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "Task Due!"


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _ring_bell() -> None:
    try:
        if sys.stdout.isatty():
            sys.stdout.write("\a")
            sys.stdout.flush()
    except Exception:
        logger.debug("Terminal bell failed.", exc_info=True)


class ConsoleNotifier:
    """
    Terminal stand-in for the desktop notification + alert sound.

    `emit` receives the full user-visible line (print by default).
    """

    def __init__(
        self,
        *,
        emit: Callable[[str], None] | None = None,
        sound_enabled: bool = True,
    ) -> None:
        self._emit = emit or (lambda text: print(text, flush=True))
        self.sound_enabled = sound_enabled

    def announce(self, task: Task) -> None:
        if self.sound_enabled:
            _ring_bell()
        self._emit(f"[{_ts_local()}] [{NOTIFICATION_TITLE}] {task.title}")
