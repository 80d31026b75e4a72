# src/quokka/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable:
    - quokka logs pass at the handler level
    - third-party and captured warnings only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "quokka" or record.name.startswith("quokka."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/quokka",
    console_level: int | str = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path | None:
    """
    Configure logging with:
    - Console handler (stderr): filtered, quiet by default so it does not
      interleave with the conversation on stdout
    - File handler: full logs for debugging

    Call this once, before the first log call. Returns the log file path,
    or None when the log directory cannot be created.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)

    log_file = Path(log_dir) / "quokka.log"
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
    except OSError as e:
        logging.getLogger(__name__).warning("File logging disabled (%s): %s", log_file, e)
        return None

    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)
    return log_file
