# src/ambitask/ui/render.py

"""Pure text rendering of client state. No I/O, no mutation besides banner expiry."""

from __future__ import annotations

from datetime import datetime

from ..client.state import Banner, ClientState, EditSession
from ..tasks.task_models import Task, TaskFilter

APP_TITLE = "My Tasks"
EMPTY_STATE = "You're all caught up!"
FILTER_ORDER = (TaskFilter.ALL, TaskFilter.ACTIVE, TaskFilter.COMPLETED, TaskFilter.IMPORTANT)


def format_due(ts: float | None) -> str:
    if ts is None:
        return ""
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M")


def render_filters(current: TaskFilter) -> str:
    parts = []
    for f in FILTER_ORDER:
        label = f.value.capitalize()
        parts.append(f"[{label}]" if f == current else label)
    return "Filters: " + " ".join(parts)


def render_task_line(index: int, task: Task) -> str:
    check = "[x]" if task.completed else "[ ]"
    star = "*" if task.important else " "
    line = f"{index:>3}. {check} {star} {task.title}"
    if task.due_at is not None:
        line += f"  (due {format_due(task.due_at)})"
    return line


def render_edit_line(index: int, session: EditSession) -> str:
    due = format_due(session.due_at) or "none"
    return (
        f"{index:>3}. [editing] title: {session.title!r}  due: {due}"
        "  (/title, /due, /save, /cancel)"
    )


def render_banners(banners: list[Banner]) -> list[str]:
    return [f"  ! {b.message}" for b in banners]


def render_task_list(tasks: list[Task], editing: EditSession | None = None) -> list[str]:
    if not tasks:
        return [f"  {EMPTY_STATE}"]
    lines = []
    for i, task in enumerate(tasks, start=1):
        if editing is not None and editing.task_id == task.id:
            lines.append(render_edit_line(i, editing))
        else:
            lines.append(render_task_line(i, task))
    return lines


def render_screen(state: ClientState, now_ts: float) -> str:
    lines = [APP_TITLE]
    lines.extend(render_banners(state.active_banners(now_ts)))
    lines.append(render_filters(state.current_filter))
    lines.extend(render_task_list(state.visible_tasks(), state.editing))
    return "\n".join(lines)
