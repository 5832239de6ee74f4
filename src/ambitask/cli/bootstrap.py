# src/ambitask/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations (store, HTTP client, notifier, watcher).
"""

from __future__ import annotations

import logging

import httpx

from ..api.app import create_app
from ..client.actions import TaskActions
from ..client.http_client import TaskApiClient
from ..client.notifiers import ConsoleNotifier
from ..client.state import ClientState
from ..config import Settings, get_settings
from ..core.ports import Notifier, TaskApi
from ..core.state import AppState
from ..tasks.due_watcher import DueTaskWatcher
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_server_app(*, settings: Settings | None = None, task_store: TaskStore | None = None):
    """
    Open the store and build the API app.

    StoreError propagates: serving without a working store is pointless.
    """
    if settings is None:
        settings = get_settings()
    _ensure_local_dirs(settings)

    if task_store is None:
        task_store = TaskStore(settings.store_url)
    return create_app(task_store, cors_origins=settings.cors_origins)


def create_initial_state(
    *,
    settings: Settings | None = None,
    api: TaskApi | None = None,
    notifier: Notifier | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppState:
    """
    Create the console client's AppState.

    Keeping api/notifier injectable makes the client easy to test against fakes.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if api is None:
        api = TaskApiClient(
            settings.api_url,
            timeout_seconds=settings.api_timeout_seconds,
            transport=transport,
        )
    if notifier is None:
        notifier = ConsoleNotifier(sound_enabled=settings.sound_enabled)

    client_state = ClientState()
    actions = TaskActions(api, client_state)
    watcher = DueTaskWatcher(
        actions,
        notifier,
        display_seconds=settings.notify_display_seconds,
    )
    return AppState(
        settings=settings,
        api=api,
        client_state=client_state,
        actions=actions,
        notifier=notifier,
        watcher=watcher,
    )
