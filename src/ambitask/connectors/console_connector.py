# src/ambitask/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import queue
import sys
import threading
import time
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..ui.render import render_screen

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    try:
        if sys.stdout.isatty():
            sys.stdout.write("\033[1A\033[2K\r")
            sys.stdout.write(line + "\n")
            sys.stdout.flush()
        else:
            print(line)
    except Exception:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


class _StdinReader:
    """
    Reads console lines on a daemon thread, one line per readline() call.

    A blocked input() must not keep the process alive after Ctrl+C, so this
    avoids the event loop's default executor (asyncio.run joins it on exit).
    """

    def __init__(self, prompt: str = "> ") -> None:
        self._prompt = prompt
        self._loop = asyncio.get_running_loop()
        self._requests: queue.SimpleQueue[asyncio.Future[str]] = queue.SimpleQueue()
        self._thread = threading.Thread(target=self._run, name="console-stdin", daemon=True)
        self._thread.start()

    @property
    def thread(self) -> threading.Thread:
        return self._thread

    def _deliver(self, fut: asyncio.Future[str], line: str | None, exc: BaseException | None) -> None:
        if fut.done():
            return
        if exc is not None:
            fut.set_exception(exc)
        else:
            fut.set_result(line or "")

    def _post(self, fut: asyncio.Future[str], line: str | None, exc: BaseException | None) -> None:
        # A closed loop means nobody is waiting for this line any more.
        with contextlib.suppress(RuntimeError):
            self._loop.call_soon_threadsafe(self._deliver, fut, line, exc)

    def _run(self) -> None:
        while True:
            fut = self._requests.get()
            try:
                line = input(self._prompt)
            except Exception as e:
                self._post(fut, None, e)
                return
            self._post(fut, line, None)

    async def readline(self) -> str:
        if not self._thread.is_alive():
            raise EOFError
        fut: asyncio.Future[str] = self._loop.create_future()
        self._requests.put(fut)
        return await fut


async def run_console_loop(state: AppState) -> None:
    """
    Read commands until /exit or EOF.

    input() blocks, so it runs on a daemon reader thread; the event loop (and with
    it the due-task watcher) keeps ticking while the user types.
    """
    logger.info("Console connector started (api=%s).", state.settings.api_url)
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")
    print(render_screen(state.client_state, time.time()))

    reader = _StdinReader()
    while True:
        try:
            user_input = (await reader.readline()).strip()
            _rewrite_prev_line(f"[{_ts_local()}] > {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        # Plain text is a shortcut for /add.
        line = user_input if user_input.startswith("/") else f"/add {user_input}"

        try:
            reply = await command_registry.handle(state, line)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            print(reply)

    logger.info("Console connector finished.")
