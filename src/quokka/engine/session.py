# src/quokka/engine/session.py

"""
Command session.

Glues the engine together for one interactive run:

    input line -> parse_command -> TaskList -> (on bye) save_tasks

`Session.handle()` never prints. It returns a Reply describing what
happened; rendering is the caller's concern (see `render.py`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .actions import DEFAULT_CAPACITY, TaskList
from .commands import (
    AddCommand,
    Command,
    Delete,
    Exit,
    ListTasks,
    Mark,
    Unmark,
    Unrecognized,
    parse_command,
)
from .model import AnyTask
from .ops import LoadResult, backup_store, load_tasks, save_tasks
from .validate import Failure, FailureKind, Result

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Replies
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class TaskAdded:
    task: AnyTask
    count: int


@dataclass(frozen=True, slots=True)
class TaskListing:
    tasks: tuple[AnyTask, ...]


@dataclass(frozen=True, slots=True)
class StatusChanged:
    task: AnyTask
    done: bool


@dataclass(frozen=True, slots=True)
class TaskDeleted:
    task: AnyTask
    count: int


@dataclass(frozen=True, slots=True)
class Farewell:
    saved: Result[Path]
    backup: Optional[Path] = None


@dataclass(frozen=True, slots=True)
class Rejected:
    failure: Failure


@dataclass(frozen=True, slots=True)
class NotUnderstood:
    text: str


Reply = TaskAdded | TaskListing | StatusChanged | TaskDeleted | Farewell | Rejected | NotUnderstood


# ---------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------

class Session:
    """
    Owns the task list for a single run and applies commands to it.
    """

    def __init__(self, task_list: TaskList, store_path: str | Path, *, store_unreadable: bool = False) -> None:
        self.task_list = task_list
        self.store_path = Path(store_path)
        self.finished = False
        # The store exists but was not loaded; it must be backed up before any save.
        self.store_unreadable = store_unreadable

    @classmethod
    def open(cls, store_path: str | Path, *, capacity: int = DEFAULT_CAPACITY) -> tuple[Session, LoadResult]:
        """
        Load the store and start a session over its tasks.
        """
        loaded = load_tasks(store_path, capacity=capacity)
        task_list = TaskList(loaded.tasks, capacity=capacity)
        return cls(task_list, store_path, store_unreadable=loaded.error is not None), loaded

    def handle(self, line: str) -> Reply:
        parsed = parse_command(line)
        if not parsed.ok:
            logger.debug("Rejected input %r: %s", line, parsed.failure)
            return Rejected(parsed.failure)

        return self.apply(parsed.unwrap())

    def apply(self, command: Command) -> Reply:
        if isinstance(command, AddCommand):
            try:
                task = command.build()
            except ValueError as e:
                return Rejected(Failure(FailureKind.VALIDATION, str(e)))

            added = self.task_list.add(task)
            if not added.ok:
                return Rejected(added.failure)
            payload = added.unwrap()
            return TaskAdded(task=payload.task, count=payload.size)

        if isinstance(command, (Mark, Unmark)):
            done = isinstance(command, Mark)
            changed = self.task_list.set_status(command.index, done)
            if not changed.ok:
                return Rejected(changed.failure)
            return StatusChanged(task=changed.unwrap(), done=done)

        if isinstance(command, Delete):
            removed = self.task_list.delete(command.index)
            if not removed.ok:
                return Rejected(removed.failure)
            payload = removed.unwrap()
            return TaskDeleted(task=payload.task, count=payload.size)

        if isinstance(command, ListTasks):
            return TaskListing(self.task_list.all())

        if isinstance(command, Exit):
            return self.close()

        if isinstance(command, Unrecognized):
            return NotUnderstood(command.text)

        raise TypeError(f"Unknown command: {command!r}")

    def close(self) -> Farewell:
        """
        Save the task list and mark the session finished.

        A failed save is reported in the reply; the session still ends.
        If the store could not be read at startup it is backed up first,
        and left untouched when the backup fails.
        """
        self.finished = True

        backup: Optional[Path] = None
        if self.store_unreadable and self.store_path.exists():
            backed_up = backup_store(self.store_path)
            if not backed_up.ok:
                return Farewell(Result(failure=backed_up.failure))
            backup = backed_up.unwrap()
            self.store_unreadable = False

        saved = save_tasks(self.task_list.all(), self.store_path)
        return Farewell(saved, backup=backup)
