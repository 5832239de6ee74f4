# src/ambitask/cli/commands.py

from __future__ import annotations

import inspect
import logging
import re
import time
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..core.state import AppState
from ..tasks.task_models import Task, TaskFilter
from ..ui.render import format_due, render_screen

CommandHandler = Callable[[AppState, list[str]], str | Awaitable[str]]

logger = logging.getLogger(__name__)

_RELATIVE_RE = re.compile(r"^\+(\d+)\s*([mhd])$", re.IGNORECASE)
_UNIT_SECONDS = {"m": 60, "h": 3600, "d": 86400}


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        result = handler(state, args)
        if inspect.isawaitable(result):
            result = await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def parse_when(text: str, now_ts: float | None = None) -> float | None:
    """
    Parse a user-entered due time.

    - "none" / "-" / ""          -> None (no due time)
    - "+15m", "+2h", "+1d"       -> relative to now
    - ISO date or date-time      -> naive values are local time
    """
    s = (text or "").strip()
    if s.lower() in ("", "none", "-"):
        return None

    m = _RELATIVE_RE.match(s)
    if m:
        base = time.time() if now_ts is None else now_ts
        return base + int(m.group(1)) * _UNIT_SECONDS[m.group(2).lower()]

    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.timestamp()


def _screen(state: AppState) -> str:
    return render_screen(state.client_state, time.time())


def _pick(state: AppState, args: list[str]) -> Task | str:
    """Resolve a 1-based row number in the rendered list, or return an error text."""
    if not args:
        return "Give a task number from /list."
    try:
        n = int(args[0])
    except ValueError:
        return f"Not a task number: {args[0]}"
    visible = state.client_state.visible_tasks()
    if n < 1 or n > len(visible):
        return f"No task #{n} in the current list."
    return visible[n - 1]


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return _screen(state)


async def cmd_refresh(state: AppState, args: list[str]) -> str:
    if not await state.actions.refresh():
        return "Could not reach the task server; showing the last known list."
    return _screen(state)


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter                 -> show the current filter
    /filter all|active|completed|important
    """
    if not args:
        return f"Current filter: {state.client_state.current_filter.value}"
    raw = args[0].lower()
    if raw not in {f.value for f in TaskFilter}:
        return "Usage: /filter all | active | completed | important"
    state.client_state.current_filter = TaskFilter(raw)
    return _screen(state)


async def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title> [@ <when>]"""
    text = " ".join(args)
    # Only " @" starts the due time, so addresses like bob@example.com stay in the title.
    head, sep, tail = text.rpartition(" @")
    title, when = (head, tail) if sep else (text, "")
    if not title.strip():
        return "Usage: /add <title> [@ <when>]"
    try:
        due_at = parse_when(when)
    except ValueError:
        return f"Cannot parse due time: {when.strip()}"

    task = await state.actions.add_task(title, due_at)
    if task is None:
        return "Task was not saved (server unreachable?)."
    return _screen(state)


async def cmd_done(state: AppState, args: list[str]) -> str:
    task = _pick(state, args)
    if isinstance(task, str):
        return task
    if await state.actions.toggle_completion(task) is None:
        return "Update failed; nothing changed."
    return _screen(state)


async def cmd_star(state: AppState, args: list[str]) -> str:
    task = _pick(state, args)
    if isinstance(task, str):
        return task
    if await state.actions.toggle_important(task) is None:
        return "Update failed; nothing changed."
    return _screen(state)


async def cmd_delete(state: AppState, args: list[str]) -> str:
    task = _pick(state, args)
    if isinstance(task, str):
        return task
    if not await state.actions.delete_task(task.id):
        return "Delete failed; nothing changed."
    return _screen(state)


def cmd_edit(state: AppState, args: list[str]) -> str:
    task = _pick(state, args)
    if isinstance(task, str):
        return task
    state.client_state.begin_edit(task.id)
    return _screen(state)


def cmd_title(state: AppState, args: list[str]) -> str:
    session = state.client_state.editing
    if session is None:
        return "Not editing. Use /edit <n> first."
    session.title = " ".join(args)
    return _screen(state)


def cmd_due(state: AppState, args: list[str]) -> str:
    session = state.client_state.editing
    if session is None:
        return "Not editing. Use /edit <n> first."
    raw = " ".join(args)
    try:
        session.due_at = parse_when(raw)
    except ValueError:
        return f"Cannot parse due time: {raw}"
    due = format_due(session.due_at) or "none"
    return f"Due time set to {due} (not saved yet, use /save)."


async def cmd_save(state: AppState, args: list[str]) -> str:
    session = state.client_state.editing
    if session is None:
        return "Not editing. Use /edit <n> first."
    if not session.title.strip():
        return "Title cannot be empty."
    if await state.actions.save_edit() is None:
        return "Save failed; edit is still open."
    return _screen(state)


def cmd_cancel(state: AppState, args: list[str]) -> str:
    state.client_state.cancel_edit()
    return _screen(state)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks for the current filter.", aliases=["ls"])
registry.register("refresh", cmd_refresh, help_text="Reload tasks from the server.")
registry.register("filter", cmd_filter, help_text="Filter: /filter all | active | completed | important.")
registry.register("add", cmd_add, help_text="Add a task: /add <title> [@ <when>] (when: ISO time or +15m/+2h/+1d).")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.")
registry.register("star", cmd_star, help_text="Toggle importance: /star <n>.")
registry.register("del", cmd_delete, help_text="Delete a task: /del <n>.", aliases=["rm"])
registry.register("edit", cmd_edit, help_text="Start editing a task: /edit <n>.")
registry.register("title", cmd_title, help_text="While editing: /title <new title>.")
registry.register("due", cmd_due, help_text="While editing: /due <when> | /due none.")
registry.register("save", cmd_save, help_text="Save the current edit.")
registry.register("cancel", cmd_cancel, help_text="Discard the current edit.")
