# src/quokka/cli.py

"""
Command-line interface for quokka.

This module:
- defines argument parsing,
- runs the interactive read loop (greeting, one command per line, farewell),
- delegates all task logic to the engine session and prints its replies.

KISS rule: the loop reads, dispatches and prints; nothing else.
"""

import argparse
import logging
from pathlib import Path
from typing import Callable, Optional

from quokka.config import ConfigError, Settings, load_settings
from quokka.engine.render import INDENT, render_load_report, render_reply, supports_color
from quokka.engine.session import Session
from quokka.logging_setup import setup_logging

logger = logging.getLogger(__name__)

GREETING = ("Hello! I'm Quokka", "What can I do for you?")


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quokka",
        description="Personal task tracker driven by short text commands",
    )
    parser.add_argument(
        "-f",
        "--file",
        type=str,
        default=None,
        help="Task store path (default: .local/quokka/tasks.txt)",
    )
    parser.add_argument(
        "--capacity",
        type=int,
        default=None,
        help="Maximum number of tasks in the list (default: 100)",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="YAML config file (default: ./quokka.yml if present)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Console log level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output",
    )
    return parser


# ---------------------------------------------------------------------
# Loop
# ---------------------------------------------------------------------

def _emit(lines: list[str], out: Callable[[str], None]) -> None:
    for line in lines:
        out(f"{INDENT}{line}")


def run_loop(
    session: Session,
    *,
    read: Optional[Callable[[str], str]] = None,
    out: Callable[[str], None] = print,
    color: bool = False,
) -> None:
    """
    Read commands until `bye`. End of input is treated as `bye`.

    `read` defaults to the builtin `input`, looked up at call time.
    """
    if read is None:
        read = input

    for line in GREETING:
        out(line)

    while not session.finished:
        try:
            raw = read("")
        except EOFError:
            logger.info("End of input; saving and exiting")
            _emit(render_reply(session.close(), color=color), out)
            break

        line = raw.strip()
        if not line:
            continue

        _emit(render_reply(session.handle(line), color=color), out)


# ---------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------

def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    return settings.with_overrides(
        data_file=args.file,
        capacity=args.capacity,
        log_level=args.log_level,
    )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _settings_from_args(args)
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    setup_logging(log_dir=settings.log_dir, console_level=settings.log_level)
    logger.debug("Settings: %s", settings)

    color = not bool(args.no_color) and supports_color()

    session, loaded = Session.open(Path(settings.data_file), capacity=settings.capacity)
    _emit(render_load_report(loaded, color=color), print)

    run_loop(session, color=color)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
