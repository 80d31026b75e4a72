# src/quokka/engine/ops.py

"""
Filesystem-level operations on the task store.

This module contains:
- serialisation of the task list to the store (one line per task),
- loading of the store back into task models.

The store is rewritten wholesale on every save via write-to-temp then
rename, so a reader never sees a partially written file.

Record parsing itself lives in `parse.py`.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from datetime import datetime
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .actions import DEFAULT_CAPACITY
from .model import AnyTask
from .parse import LineFailure, parse_line
from .validate import Failure, FailureKind, Result

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Result objects
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LoadResult:
    """
    Outcome of loading the store.

    - tasks: parsed tasks in file order
    - failures: one entry per skipped corrupt line
    - error: set when an existing store could not be read at all
    - first_run: no store existed yet
    """

    tasks: tuple[AnyTask, ...] = ()
    failures: tuple[LineFailure, ...] = ()
    error: Optional[Failure] = None
    dropped: int = 0
    first_run: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failures


# ---------------------------------------------------------------------
# Save
# ---------------------------------------------------------------------

def save_tasks(tasks: Iterable[AnyTask], path: str | Path) -> Result[Path]:
    """
    Persist tasks to `path`, one `to_line()` per line.

    Behaviour:
    - the parent directory is created when missing;
    - the target is replaced atomically (temp file + os.replace);
    - OSError is reported as an IO_FAILURE result, never raised.
    """
    p = Path(path)
    text = "".join(task.to_line() + "\n" for task in tasks)

    tmp_name: str | None = None
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=p.parent)
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.replace(tmp_name, p)
        tmp_name = None
    except OSError as e:
        logger.warning("Cannot save tasks to %s: %s", p, e)
        return Result.fail(FailureKind.IO_FAILURE, f"Error occurred while saving tasks to file: {e}")
    finally:
        if tmp_name is not None:
            _discard(Path(tmp_name))

    logger.info("Saved tasks to %s", p)
    return Result.success(p)


def _discard(tmp: Path) -> None:
    try:
        tmp.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.debug("Cannot remove temp file %s: %s", tmp, e)


def backup_store(path: str | Path) -> Result[Path]:
    """
    Copy an existing store aside as `<name>.<timestamp>.bak`.

    Used before overwriting a store that could not be loaded, so its
    content is never silently replaced.
    """
    p = Path(path)
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    target = p.with_name(f"{p.name}.{stamp}.bak")

    try:
        shutil.copy2(p, target)
    except OSError as e:
        logger.warning("Cannot back up %s: %s", p, e)
        return Result.fail(
            FailureKind.IO_FAILURE,
            f"Refusing to overwrite unreadable data file {p} (backup failed: {e})",
        )

    logger.info("Backed up %s to %s", p, target)
    return Result.success(target)


# ---------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------

def load_tasks(path: str | Path, *, capacity: int = DEFAULT_CAPACITY) -> LoadResult:
    """
    Load tasks from `path`.

    Rules:
    - missing store: empty result, no failures (first run);
    - lines are separated by "\\n" only (a trailing "\\r" is dropped);
    - blank lines are ignored;
    - a corrupt line (bad UTF-8 or bad record) is recorded as a
      LineFailure and skipped;
    - at most `capacity` tasks are loaded; later lines are dropped.
    """
    p = Path(path)

    if not p.exists():
        logger.info("No existing data file at %s. Starting with empty task list.", p)
        return LoadResult(first_run=True)

    try:
        data = p.read_bytes()
    except OSError as e:
        logger.warning("Cannot read tasks from %s: %s", p, e)
        return LoadResult(error=Failure(FailureKind.IO_FAILURE, f"Cannot read data file {p}: {e}"))

    tasks: list[AnyTask] = []
    failures: list[LineFailure] = []
    dropped = 0

    for line_no, raw in enumerate(data.split(b"\n"), start=1):
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        if not raw.strip():
            continue

        if len(tasks) >= capacity:
            dropped += 1
            continue

        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            res = Result.fail(FailureKind.CORRUPT_RECORD, f"Invalid UTF-8: {e.reason} at byte {e.start}")
        else:
            res = parse_line(line)

        if res.ok:
            tasks.append(res.unwrap())
            continue

        failure = LineFailure(line_no=line_no, reason=str(res.failure))
        logger.warning("Skipping corrupt record in %s, %s", p, failure)
        failures.append(failure)

    if dropped:
        logger.warning("Task list is full (%d); dropped %d stored line(s) from %s", capacity, dropped, p)

    logger.info("Loaded %d task(s) from %s", len(tasks), p)
    return LoadResult(tasks=tuple(tasks), failures=tuple(failures), dropped=dropped)
