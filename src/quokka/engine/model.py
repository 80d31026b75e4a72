# src/quokka/engine/model.py

"""
Core domain models.

This module defines the in-memory task variants (todo, deadline, event),
their core invariants and their two textual forms:

- the display form shown to the user,
- the one-line storage form written to the store.

The variant set is closed. Code that needs per-variant behaviour switches
on `Task.kind` rather than relying on subclass overrides.

No filesystem access should happen here.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Final


# ---------------------------------------------------------------------
# Storage format constants
# ---------------------------------------------------------------------

DELIMITER: Final[str] = "|"
FIELD_SEP: Final[str] = f" {DELIMITER} "
DONE_FLAG: Final[str] = "1"
NOT_DONE_FLAG: Final[str] = "0"


# ---------------------------------------------------------------------
# Kind
# ---------------------------------------------------------------------

class TaskKind(str, Enum):
    """
    Task variant tag.

    The value doubles as the type tag in the store and in the display form.
    """

    TODO = "T"
    DEADLINE = "D"
    EVENT = "E"

    @property
    def field_count(self) -> int:
        """
        Number of storage fields for this kind (tag and flag included).
        """
        counts = {
            TaskKind.TODO: 3,
            TaskKind.DEADLINE: 4,
            TaskKind.EVENT: 5,
        }
        return counts[self]


# ---------------------------------------------------------------------
# Task
# ---------------------------------------------------------------------

def _require_text(value: str, name: str) -> None:
    """
    Fields must be non-empty, free of the store delimiter and single-line,
    so that every task survives `to_line()` -> `parse_line()` unchanged.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string")
    if DELIMITER in value:
        raise ValueError(f"{name} must not contain '{DELIMITER}'")
    if "\n" in value or "\r" in value:
        raise ValueError(f"{name} must be a single line")


@dataclass(slots=True)
class Task:
    """
    Common task state.

    Notes:
    - description is never empty.
    - is_done is the only field that may change after construction.
    """

    kind: ClassVar[TaskKind]

    description: str
    is_done: bool = field(default=False, kw_only=True)

    def __post_init__(self) -> None:
        _require_text(self.description, "description")

    # -----------------------------------------------------------------
    # Status
    # -----------------------------------------------------------------

    def mark_done(self) -> None:
        self.is_done = True

    def mark_not_done(self) -> None:
        self.is_done = False

    @property
    def status_icon(self) -> str:
        return "X" if self.is_done else " "

    # -----------------------------------------------------------------
    # Text forms
    # -----------------------------------------------------------------

    def display(self) -> str:
        """
        Human-readable rendering, e.g. `[D][X] submit report (by: Friday)`.
        """
        head = f"[{self.kind.value}][{self.status_icon}] {self.description}"

        if self.kind is TaskKind.TODO:
            return head
        if self.kind is TaskKind.DEADLINE:
            return f"{head} (by: {self.by})"
        if self.kind is TaskKind.EVENT:
            return f"{head} (from: {self.start} to: {self.end})"

        raise TypeError(f"Unknown task kind: {self.kind!r}")

    def to_line(self) -> str:
        """
        One-line storage encoding, e.g. `D | 1 | submit report | Friday`.

        Field order: type tag, done flag, description, variant fields.
        `parse.parse_line` is the inverse.
        """
        flag = DONE_FLAG if self.is_done else NOT_DONE_FLAG
        fields = [self.kind.value, flag, self.description]

        if self.kind is TaskKind.DEADLINE:
            fields.append(self.by)
        elif self.kind is TaskKind.EVENT:
            fields.extend([self.start, self.end])
        elif self.kind is not TaskKind.TODO:
            raise TypeError(f"Unknown task kind: {self.kind!r}")

        return FIELD_SEP.join(fields)

    def __str__(self) -> str:
        return self.display()


@dataclass(slots=True)
class Todo(Task):
    """A plain task with no date attached."""

    kind: ClassVar[TaskKind] = TaskKind.TODO


@dataclass(slots=True)
class Deadline(Task):
    """
    A task due by an opaque date/time token.
    """

    kind: ClassVar[TaskKind] = TaskKind.DEADLINE

    by: str

    def __post_init__(self) -> None:
        Task.__post_init__(self)
        _require_text(self.by, "by")


@dataclass(slots=True)
class Event(Task):
    """
    A task spanning two opaque date/time tokens.

    `start` and `end` are the `/from` and `/to` parts of the command.
    """

    kind: ClassVar[TaskKind] = TaskKind.EVENT

    start: str
    end: str

    def __post_init__(self) -> None:
        Task.__post_init__(self)
        _require_text(self.start, "start")
        _require_text(self.end, "end")


AnyTask = Todo | Deadline | Event
