# tests/test_session.py

from __future__ import annotations

from pathlib import Path

from quokka.engine.actions import TaskList
from quokka.engine.model import Deadline, Todo
from quokka.engine.ops import save_tasks
from quokka.engine.session import (
    Farewell,
    NotUnderstood,
    Rejected,
    Session,
    StatusChanged,
    TaskAdded,
    TaskDeleted,
    TaskListing,
)
from quokka.engine.validate import FailureKind


def _session(store_path: Path, *tasks, capacity: int = 100) -> Session:
    return Session(TaskList(tasks, capacity=capacity), store_path)


def test_todo_scenario(store_path: Path) -> None:
    s = _session(store_path)
    reply = s.handle("todo read book")

    assert isinstance(reply, TaskAdded)
    assert reply.count == 1
    assert [t.display() for t in s.task_list.all()] == ["[T][ ] read book"]


def test_deadline_scenario(store_path: Path) -> None:
    s = _session(store_path)
    reply = s.handle("deadline submit report /by 2024-12-01")

    assert reply.task == Deadline("submit report", "2024-12-01")


def test_event_then_mark_scenario(store_path: Path) -> None:
    s = _session(store_path)
    s.handle("event team sync /from Mon 2pm /to Mon 3pm")
    reply = s.handle("mark 1")

    assert isinstance(reply, StatusChanged)
    assert reply.done is True
    assert reply.task.display() == "[E][X] team sync (from: Mon 2pm to: Mon 3pm)"

    reply = s.handle("unmark 1")
    assert reply.done is False
    assert reply.task.display() == "[E][ ] team sync (from: Mon 2pm to: Mon 3pm)"


def test_deadline_without_description_leaves_list_unchanged(store_path: Path) -> None:
    s = _session(store_path, Todo("a"))
    reply = s.handle("deadline /by tomorrow")

    assert isinstance(reply, Rejected)
    assert reply.failure.kind is FailureKind.VALIDATION
    assert s.task_list.all() == (Todo("a"),)


def test_mark_out_of_range_leaves_list_unchanged(store_path: Path) -> None:
    s = _session(store_path, Todo("a"), Todo("b"))
    reply = s.handle("mark 5")

    assert isinstance(reply, Rejected)
    assert reply.failure.kind is FailureKind.INDEX_OUT_OF_RANGE
    assert not any(t.is_done for t in s.task_list.all())


def test_capacity_exceeded_is_rejected(store_path: Path) -> None:
    s = _session(store_path, Todo("a"), capacity=1)
    reply = s.handle("todo b")

    assert reply.failure.kind is FailureKind.CAPACITY_EXCEEDED
    assert len(s.task_list) == 1


def test_delete_and_list(store_path: Path) -> None:
    s = _session(store_path, Todo("a"), Todo("b"), Todo("c"))

    reply = s.handle("delete 2")
    assert isinstance(reply, TaskDeleted)
    assert reply.task == Todo("b")
    assert reply.count == 2

    listing = s.handle("list")
    assert isinstance(listing, TaskListing)
    assert listing.tasks == (Todo("a"), Todo("c"))


def test_unrecognized(store_path: Path) -> None:
    reply = _session(store_path).handle("blah blah")
    assert reply == NotUnderstood("blah blah")


def test_bye_saves_and_finishes(store_path: Path) -> None:
    s = _session(store_path)
    s.handle("todo read book")
    s.handle("mark 1")

    reply = s.handle("BYE")
    assert isinstance(reply, Farewell)
    assert reply.saved.ok
    assert s.finished
    assert store_path.read_text(encoding="utf-8") == "T | 1 | read book\n"


def test_bye_with_unwritable_store_still_finishes(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")

    s = _session(blocker / "tasks.txt", Todo("a"))
    reply = s.handle("bye")

    assert not reply.saved.ok
    assert reply.saved.failure.kind is FailureKind.IO_FAILURE
    assert s.finished


def test_open_loads_store_and_reports_failures(store_path: Path) -> None:
    store_path.parent.mkdir(parents=True)
    store_path.write_text("T | 0 | a\nnonsense\nD | 1 | b | c\n", encoding="utf-8")

    s, loaded = Session.open(store_path, capacity=10)
    assert len(s.task_list) == 2
    assert s.task_list.capacity == 10
    assert [f.line_no for f in loaded.failures] == [2]


def test_session_survives_save_load_cycle(store_path: Path) -> None:
    s, _ = Session.open(store_path)
    for line in [
        "todo read book",
        "deadline submit report /by 2024-12-01",
        "event team sync /from Mon 2pm /to Mon 3pm",
        "mark 2",
        "bye",
    ]:
        s.handle(line)

    again, loaded = Session.open(store_path)
    assert loaded.ok
    assert again.task_list.all() == s.task_list.all()


def test_bad_bytes_in_store_do_not_lose_other_tasks(store_path: Path) -> None:
    store_path.parent.mkdir(parents=True)
    store_path.write_bytes(b"T | 0 | keep me\nT | 0 | bad \xff byte\nT | 1 | also keep\n")

    s, loaded = Session.open(store_path)
    assert len(loaded.failures) == 1
    reply = s.handle("bye")

    assert reply.saved.ok
    assert store_path.read_text(encoding="utf-8") == "T | 0 | keep me\nT | 1 | also keep\n"


def test_unreadable_store_is_not_overwritten(store_path: Path) -> None:
    # A directory in place of the store can be neither read nor backed up.
    store_path.mkdir(parents=True)

    s, loaded = Session.open(store_path)
    assert loaded.error is not None
    assert s.store_unreadable
    s.handle("todo new task")

    reply = s.handle("bye")
    assert isinstance(reply, Farewell)
    assert not reply.saved.ok
    assert reply.saved.failure.kind is FailureKind.IO_FAILURE
    assert reply.backup is None
    assert store_path.is_dir()
    assert s.finished


def test_unreadable_store_is_backed_up_before_save(store_path: Path) -> None:
    save_tasks([Todo("old")], store_path)
    s = Session(TaskList([Todo("new")]), store_path, store_unreadable=True)

    reply = s.close()
    assert reply.saved.ok
    assert reply.backup is not None
    assert reply.backup.read_text(encoding="utf-8") == "T | 0 | old\n"
    assert store_path.read_text(encoding="utf-8") == "T | 0 | new\n"


def test_pipe_in_description_is_rejected_and_store_stays_loadable(store_path: Path) -> None:
    s = _session(store_path)
    reply = s.handle("todo pick A | B")

    assert isinstance(reply, Rejected)
    assert reply.failure.kind is FailureKind.VALIDATION
    assert len(s.task_list) == 0
