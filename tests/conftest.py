# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from ambitask.api.app import create_app
from ambitask.cli.bootstrap import create_initial_state
from ambitask.core.state import AppState
from ambitask.tasks.task_store import TaskStore

from .fakes import FakeTaskApi, RecordingNotifier


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with Settings.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="ambitask-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        store_url=f"sqlite:///{tmp_path / 'data' / 'tasks.sqlite3'}",
        host="127.0.0.1",
        port=5000,
        cors_origins=["*"],
        api_url="http://testserver",
        api_timeout_seconds=5.0,
        watch_interval_seconds=0.01,
        notify_display_seconds=5.0,
        sound_enabled=False,
    )


@pytest.fixture()
def task_store(tmp_path: Path) -> TaskStore:
    return TaskStore(tmp_path / "tasks.sqlite3")


@pytest.fixture()
def http(task_store: TaskStore) -> TestClient:
    return TestClient(create_app(task_store))


@pytest.fixture()
def fake_api() -> FakeTaskApi:
    return FakeTaskApi()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def state(settings: SimpleNamespace, fake_api: FakeTaskApi, notifier: RecordingNotifier) -> AppState:
    """AppState wired with deterministic fakes (no HTTP, no terminal)."""
    return create_initial_state(settings=settings, api=fake_api, notifier=notifier)
