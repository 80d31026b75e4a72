# tests/test_cli.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from quokka import cli
from quokka.engine.actions import TaskList
from quokka.engine.session import Session


@pytest.fixture(autouse=True)
def _restore_logging():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def _scripted(lines: list[str]):
    it = iter(lines)

    def read(_prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return read


def test_run_loop_prints_greeting_replies_and_farewell(store_path: Path) -> None:
    out: list[str] = []
    session = Session(TaskList(), store_path)

    cli.run_loop(session, read=_scripted(["todo read book", "", "list", "bye", "todo never"]), out=out.append)

    assert out[:2] == ["Hello! I'm Quokka", "What can I do for you?"]
    assert "    Got it. I've added this task:" in out
    assert "    1. [T][ ] read book" in out
    assert out[-1] == "    Bye. Hope to see you again soon!"
    assert len(session.task_list) == 1
    assert store_path.read_text(encoding="utf-8") == "T | 0 | read book\n"


def test_run_loop_saves_on_end_of_input(store_path: Path) -> None:
    out: list[str] = []
    session = Session(TaskList(), store_path)

    cli.run_loop(session, read=_scripted(["deadline pay rent /by 1st"]), out=out.append)

    assert session.finished
    assert store_path.read_text(encoding="utf-8") == "D | 0 | pay rent | 1st\n"


def test_main_end_to_end(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("QUOKKA_CONFIG", raising=False)
    store = tmp_path / "tasks.txt"
    store.write_text("T | 0 | old task\nbroken\n", encoding="utf-8")

    monkeypatch.setattr("builtins.input", _scripted(["mark 1", "delete 9", "bye"]))
    code = cli.main(["--file", str(store), "--no-color"])

    assert code == 0
    printed = capsys.readouterr().out
    assert "skipped 1 line(s)" in printed
    assert "[T][X] old task" in printed
    assert "Error: Invalid task index 9" in printed
    assert store.read_text(encoding="utf-8") == "T | 1 | old task\n"


def test_main_rejects_bad_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    code = cli.main(["--config", str(tmp_path / "missing.yml")])

    assert code == 1
    assert "Config file not found" in capsys.readouterr().out


def test_main_first_run_reads_from_builtin_input(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("QUOKKA_CONFIG", raising=False)
    store = tmp_path / "fresh" / "tasks.txt"

    monkeypatch.setattr("builtins.input", _scripted(["todo read book"]))
    code = cli.main(["--file", str(store), "--no-color"])

    assert code == 0
    printed = capsys.readouterr().out
    assert "No existing data file found. Starting with empty task list." in printed
    assert store.read_text(encoding="utf-8") == "T | 0 | read book\n"
