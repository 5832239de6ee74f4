# src/ambitask/cli/main.py

"""
CLI entrypoints.

- `ambitask-server`: opens the task store and serves the Task API with uvicorn.
- `ambitask`: console client; loads tasks, runs the due-task watcher in the
  background and the command console in the foreground, on one event loop.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

import uvicorn

from ..cli.bootstrap import create_initial_state, create_server_app
from ..config import Settings, get_settings
from ..connectors.console_connector import run_console_loop
from ..core.errors import StoreError
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.due_watcher import run_due_watcher

logger = logging.getLogger(__name__)


def _setup_logging(settings: Settings) -> int:
    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)
    return console_level


async def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    close = getattr(state.api, "aclose", None)
    if close is None:
        return
    try:
        await close()
    except Exception:
        logger.debug("API client close failed.", exc_info=True)


async def run_client(state: AppState) -> None:
    if not await state.actions.refresh():
        logger.warning("Could not load tasks from %s; starting with an empty list.", state.settings.api_url)

    watcher_task = asyncio.create_task(
        run_due_watcher(state.watcher, interval_seconds=state.settings.watch_interval_seconds)
    )
    try:
        await run_console_loop(state)
    finally:
        watcher_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher_task
        await _shutdown(state)


def main() -> None:
    settings = get_settings()
    _setup_logging(settings)

    logger.info("Starting %s console client...", settings.app_name)

    state = create_initial_state(settings=settings)
    try:
        asyncio.run(run_client(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


def serve() -> None:
    settings = get_settings()
    console_level = _setup_logging(settings)

    logger.info("Starting %s API on %s:%s", settings.app_name, settings.host, settings.port)

    try:
        app = create_server_app(settings=settings)
    except (StoreError, OSError) as e:
        logger.critical("Cannot open task store %s: %s", settings.store_url, e)
        raise SystemExit(1) from e

    # log_config=None: uvicorn logs through the handlers configured above.
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=logging.getLevelName(console_level).lower(),
    )


if __name__ == "__main__":
    main()
