# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from quokka.engine.actions import TaskList
from quokka.engine.model import Deadline, Event, Todo


@pytest.fixture()
def store_path(tmp_path: Path) -> Path:
    """Task store location inside the per-test tmp dir (not created)."""
    return tmp_path / "data" / "tasks.txt"


@pytest.fixture()
def sample_tasks() -> list:
    """One task of each variant, the deadline already done."""
    return [
        Todo("read book"),
        Deadline("submit report", "2024-12-01", is_done=True),
        Event("team sync", "2024-11-01 1400", "2024-11-01 1500"),
    ]


@pytest.fixture()
def task_list(sample_tasks: list) -> TaskList:
    return TaskList(sample_tasks, capacity=5)
