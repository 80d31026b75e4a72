# src/quokka/engine/commands.py

"""
Command grammar.

Turns one raw input line into a Command object:

    todo <description>
    deadline <description> /by <when>
    event <description> /from <start> /to <end>
    mark <index>
    unmark <index>
    delete <index>
    list
    bye

The leading keyword is matched case-insensitively. Anything else is
`Unrecognized`, which is an ordinary outcome, not a failure.

All delimiter splits are first-occurrence splits, so a description that
itself contains "/by", "/from" or "/to" is cut at the first match.
"""

from dataclasses import dataclass
from typing import Final

from .model import DELIMITER, AnyTask, Deadline, Event, Todo
from .validate import FailureKind, Result


# ---------------------------------------------------------------------
# Grammar constants
# ---------------------------------------------------------------------

BY_MARKER: Final[str] = "/by"
FROM_MARKER: Final[str] = "/from"
TO_MARKER: Final[str] = "/to"

DEADLINE_USAGE: Final[str] = "deadline <description> /by <date/time>"
EVENT_USAGE: Final[str] = "event <description> /from <start> /to <end>"


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AddTodo:
    description: str

    def build(self) -> AnyTask:
        return Todo(self.description)


@dataclass(frozen=True, slots=True)
class AddDeadline:
    description: str
    by: str

    def build(self) -> AnyTask:
        return Deadline(self.description, self.by)


@dataclass(frozen=True, slots=True)
class AddEvent:
    description: str
    start: str
    end: str

    def build(self) -> AnyTask:
        return Event(self.description, self.start, self.end)


@dataclass(frozen=True, slots=True)
class Mark:
    index: int


@dataclass(frozen=True, slots=True)
class Unmark:
    index: int


@dataclass(frozen=True, slots=True)
class Delete:
    index: int


@dataclass(frozen=True, slots=True)
class ListTasks:
    pass


@dataclass(frozen=True, slots=True)
class Exit:
    pass


@dataclass(frozen=True, slots=True)
class Unrecognized:
    text: str


AddCommand = AddTodo | AddDeadline | AddEvent
IndexCommand = Mark | Unmark | Delete
Command = AddTodo | AddDeadline | AddEvent | Mark | Unmark | Delete | ListTasks | Exit | Unrecognized


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def parse_command(line: str) -> Result[Command]:
    """
    Parse one input line.

    Returns a VALIDATION failure for malformed add-commands and an INDEX
    failure for a missing or non-numeric index. Index range is not checked
    here; that belongs to the task list.
    """
    text = line.strip()
    keyword, rest = _split_keyword(text)

    if keyword == "todo":
        return _parse_todo(rest)
    if keyword == "deadline":
        return _parse_deadline(rest)
    if keyword == "event":
        return _parse_event(rest)
    if keyword == "mark":
        return _parse_index(rest, Mark)
    if keyword == "unmark":
        return _parse_index(rest, Unmark)
    if keyword == "delete":
        return _parse_index(rest, Delete)
    if keyword == "list" and not rest:
        return Result.success(ListTasks())
    if keyword == "bye" and not rest:
        return Result.success(Exit())

    return Result.success(Unrecognized(text))


# ---------------------------------------------------------------------
# Per-family parsers
# ---------------------------------------------------------------------

def _split_keyword(text: str) -> tuple[str, str]:
    parts = text.split(maxsplit=1)
    if not parts:
        return "", ""
    keyword = parts[0].lower()
    rest = parts[1].strip() if len(parts) == 2 else ""
    return keyword, rest


def _parse_todo(rest: str) -> Result[Command]:
    description = rest.strip()
    if not description:
        return _invalid("Please provide a description for the todo task.")
    if DELIMITER in description:
        return _delimiter_in_text()
    return Result.success(AddTodo(description))


def _parse_deadline(rest: str) -> Result[Command]:
    description, sep, by = rest.partition(BY_MARKER)
    if not sep:
        return _invalid(f"Invalid deadline format. Please use: {DEADLINE_USAGE}")

    description = description.strip()
    by = by.strip()
    if not description or not by:
        return _invalid("Please provide both description and deadline for the task.")
    if DELIMITER in description or DELIMITER in by:
        return _delimiter_in_text()

    return Result.success(AddDeadline(description, by))


def _parse_event(rest: str) -> Result[Command]:
    description, sep, span = rest.partition(FROM_MARKER)
    if not sep:
        return _invalid(f"Invalid event format. Please use: {EVENT_USAGE}")

    start, sep, end = span.partition(TO_MARKER)
    if not sep:
        return _invalid(f"Invalid event format. Please use: {EVENT_USAGE}")

    description = description.strip()
    start = start.strip()
    end = end.strip()
    if not description or not start or not end:
        return _invalid("Please provide description, start time, and end time for the event task.")
    if any(DELIMITER in s for s in (description, start, end)):
        return _delimiter_in_text()

    return Result.success(AddEvent(description, start, end))


def _parse_index(rest: str, command: type[IndexCommand]) -> Result[Command]:
    """
    Parse a 1-based task index for mark/unmark/delete.
    """
    if not rest:
        return Result.fail(FailureKind.INDEX, "Please provide a task index.")

    try:
        index = int(rest)
    except ValueError:
        return Result.fail(FailureKind.INDEX, "Invalid task index format.")

    if index < 1:
        return Result.fail(FailureKind.INDEX, "Invalid task index format.")

    return Result.success(command(index))


def _invalid(message: str) -> Result[Command]:
    return Result.fail(FailureKind.VALIDATION, message)


def _delimiter_in_text() -> Result[Command]:
    return _invalid(f"Task text must not contain '{DELIMITER}' (it separates fields in the data file).")
