# src/ambitask/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..client.actions import TaskActions
from ..client.state import ClientState
from ..tasks.due_watcher import DueTaskWatcher
from .ports import Notifier, TaskApi

if TYPE_CHECKING:
    from ..config import Settings


@dataclass
class AppState:
    """Everything the console client needs, wired once in cli.bootstrap."""

    settings: Settings
    api: TaskApi
    client_state: ClientState
    actions: TaskActions
    notifier: Notifier
    watcher: DueTaskWatcher
