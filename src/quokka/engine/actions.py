# src/quokka/engine/actions.py

"""
Task list and its mutation actions.

This module contains *all* state-changing operations on the task list:
adding, status changes and removal.

Design principles:
- No parsing or file access here (handled elsewhere).
- Indices are 1-based at this boundary.
- Every operation returns a Result; failures never mutate the list.
"""

import logging
from dataclasses import dataclass
from typing import Final, Iterable

from .model import AnyTask
from .validate import FailureKind, Result

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY: Final[int] = 100


# ---------------------------------------------------------------------
# Confirmation payloads
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Added:
    task: AnyTask
    size: int


@dataclass(frozen=True, slots=True)
class Removed:
    task: AnyTask
    size: int


# ---------------------------------------------------------------------
# Task list
# ---------------------------------------------------------------------

class TaskList:
    """
    Ordered, capacity-bounded collection of tasks.

    Insertion order is list order is display order.
    Invariant: len(self) <= self.capacity.
    """

    def __init__(self, tasks: Iterable[AnyTask] = (), *, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")

        items = list(tasks)
        if len(items) > capacity:
            raise ValueError(f"{len(items)} tasks exceed capacity {capacity}")

        self._tasks: list[AnyTask] = items
        self._capacity = capacity

    # -----------------------------------------------------------------
    # Read access
    # -----------------------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        return len(self._tasks)

    @property
    def is_full(self) -> bool:
        return self.size >= self._capacity

    def all(self) -> tuple[AnyTask, ...]:
        """Snapshot of the tasks in list order."""
        return tuple(self._tasks)

    def __len__(self) -> int:
        return self.size

    # -----------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------

    def add(self, task: AnyTask) -> Result[Added]:
        if self.is_full:
            return Result.fail(
                FailureKind.CAPACITY_EXCEEDED,
                f"Sorry, the task list is full ({self._capacity} tasks). You cannot add more tasks.",
            )

        self._tasks.append(task)
        logger.debug("Added task #%d: %s", self.size, task.to_line())
        return Result.success(Added(task=task, size=self.size))

    def set_status(self, index: int, done: bool) -> Result[AnyTask]:
        """
        Mark the task at 1-based `index` as done / not done.
        """
        failure = self._check_index(index)
        if failure is not None:
            return failure

        task = self._tasks[index - 1]
        if done:
            task.mark_done()
        else:
            task.mark_not_done()

        logger.debug("Task #%d marked %s", index, "done" if done else "not done")
        return Result.success(task)

    def delete(self, index: int) -> Result[Removed]:
        """
        Remove the task at 1-based `index`; later tasks shift up by one.
        """
        failure = self._check_index(index)
        if failure is not None:
            return failure

        task = self._tasks.pop(index - 1)
        logger.debug("Deleted task #%d: %s", index, task.to_line())
        return Result.success(Removed(task=task, size=self.size))

    # -----------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------

    def _check_index(self, index: int) -> Result | None:
        if 1 <= index <= self.size:
            return None

        if self.size == 0:
            message = f"Invalid task index {index}: the list is empty."
        else:
            message = f"Invalid task index {index}: choose a number from 1 to {self.size}."
        return Result.fail(FailureKind.INDEX_OUT_OF_RANGE, message)
