# src/quokka/engine/render.py

"""
Rendering helpers for CLI output.

Turns session replies and load reports into printable lines. It is
presentation-only: it must not mutate task state or touch the store.
"""

from __future__ import annotations

import re
import sys
from typing import Iterable

from .model import AnyTask
from .ops import LoadResult
from .session import (
    Farewell,
    NotUnderstood,
    Rejected,
    Reply,
    StatusChanged,
    TaskAdded,
    TaskDeleted,
    TaskListing,
)


# ---------------------------------------------------------------------
# ANSI / terminal helpers
# ---------------------------------------------------------------------

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

_RESET = "\033[0m"
_DONE = "\033[90m"   # grey
_ERROR = "\033[31m"  # red

INDENT = "    "


def supports_color() -> bool:
    """Return True if stdout is a TTY."""
    return sys.stdout.isatty()


def strip_ansi(s: str) -> str:
    return _ANSI_RE.sub("", s)


# ---------------------------------------------------------------------
# Replies
# ---------------------------------------------------------------------

def render_reply(reply: Reply, *, color: bool = False) -> list[str]:
    """
    Render a session reply as console lines (without indentation).
    """
    if isinstance(reply, TaskAdded):
        return [
            "Got it. I've added this task:",
            f"  {_task(reply.task, color=color)}",
            f"Now you have {_count(reply.count)} in the list.",
        ]

    if isinstance(reply, TaskListing):
        return render_listing(reply.tasks, color=color)

    if isinstance(reply, StatusChanged):
        head = "Nice! I've marked this task as done:" if reply.done else "OK, I've marked this task as not done yet:"
        return [head, f"  {_task(reply.task, color=color)}"]

    if isinstance(reply, TaskDeleted):
        return [
            "Noted. I've removed this task:",
            f"  {_task(reply.task, color=color)}",
            f"Now you have {_count(reply.count)} in the list.",
        ]

    if isinstance(reply, Farewell):
        lines = []
        if reply.backup is not None:
            lines.append(f"Previous data file kept as {reply.backup}")
        if not reply.saved.ok:
            lines.append(_error(str(reply.saved.failure), color=color))
        lines.append("Bye. Hope to see you again soon!")
        return lines

    if isinstance(reply, Rejected):
        return [_error(reply.failure.message, color=color)]

    if isinstance(reply, NotUnderstood):
        return ["I'm sorry, I don't understand that command."]

    raise TypeError(f"Unknown reply: {reply!r}")


def render_listing(tasks: Iterable[AnyTask], *, color: bool = False) -> list[str]:
    items = list(tasks)
    if not items:
        return ["No tasks added yet."]

    lines = ["Here are the tasks in your list:"]
    for i, task in enumerate(items, start=1):
        lines.append(f"{i}. {_task(task, color=color)}")
    return lines


# ---------------------------------------------------------------------
# Load report
# ---------------------------------------------------------------------

def render_load_report(result: LoadResult, *, color: bool = False) -> list[str]:
    """
    Notices to show after loading the store. Empty when a store was
    loaded cleanly.
    """
    lines: list[str] = []

    if result.first_run:
        lines.append("No existing data file found. Starting with empty task list.")

    if result.error is not None:
        lines.append(_error(result.error.message, color=color))
        lines.append("Continuing with an empty task list.")

    if result.failures:
        lines.append(f"Data file contains corrupted data; skipped {len(result.failures)} line(s):")
        for failure in result.failures:
            lines.append(f"  - {failure}")

    if result.dropped:
        lines.append(f"Task list is full; ignored {result.dropped} stored line(s).")

    return lines


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _task(task: AnyTask, *, color: bool) -> str:
    s = task.display()
    if color and task.is_done:
        return f"{_DONE}{s}{_RESET}"
    return s


def _count(n: int) -> str:
    return f"{n} task" if n == 1 else f"{n} tasks"


def _error(message: str, *, color: bool) -> str:
    s = f"Error: {message}"
    return f"{_ERROR}{s}{_RESET}" if color else s
