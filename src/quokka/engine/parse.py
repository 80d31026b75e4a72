# src/quokka/engine/parse.py

"""
Stored record parser.

Parses one line of the task store back into a task model. The line
format is produced by `Task.to_line()`:

    T | 0 | read book
    D | 1 | submit report | 2024-12-01
    E | 0 | team sync | Mon 2pm | Mon 3pm

Field order: type tag, done flag (0/1), description, variant fields.

This module performs *structural* parsing only. Bad records are reported
as CORRUPT_RECORD results; nothing here raises on malformed input.
"""

from dataclasses import dataclass

from .model import DONE_FLAG, FIELD_SEP, NOT_DONE_FLAG, AnyTask, Deadline, Event, TaskKind, Todo
from .validate import FailureKind, Result


# ---------------------------------------------------------------------
# Failure report
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LineFailure:
    """
    A stored line that could not be parsed.

    `line_no` is 1-based, counted over every physical line of the store.
    """

    line_no: int
    reason: str

    def __str__(self) -> str:
        return f"line {self.line_no}: {self.reason}"


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def parse_line(line: str) -> Result[AnyTask]:
    """
    Parse a single stored line into a task.

    Rejects:
    - unknown type tag,
    - wrong field count for the tag,
    - done flag other than 0/1,
    - empty required fields.
    """
    fields = line.rstrip("\r\n").split(FIELD_SEP)

    tag = fields[0].strip()
    try:
        kind = TaskKind(tag)
    except ValueError:
        return _corrupt(f"Unknown task type '{tag}'")

    if len(fields) != kind.field_count:
        return _corrupt(
            f"Expected {kind.field_count} fields for type '{kind.value}', got {len(fields)}"
        )

    flag = fields[1].strip()
    if flag not in (DONE_FLAG, NOT_DONE_FLAG):
        return _corrupt(f"Invalid done flag '{flag}' (allowed: {NOT_DONE_FLAG}, {DONE_FLAG})")
    is_done = flag == DONE_FLAG

    try:
        task = _build(kind, fields[2:], is_done=is_done)
    except ValueError as e:
        return _corrupt(str(e))

    return Result.success(task)


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _build(kind: TaskKind, values: list[str], *, is_done: bool) -> AnyTask:
    if kind is TaskKind.TODO:
        (description,) = values
        return Todo(description, is_done=is_done)

    if kind is TaskKind.DEADLINE:
        description, by = values
        return Deadline(description, by, is_done=is_done)

    description, start, end = values
    return Event(description, start, end, is_done=is_done)


def _corrupt(message: str) -> Result[AnyTask]:
    return Result.fail(FailureKind.CORRUPT_RECORD, message)
