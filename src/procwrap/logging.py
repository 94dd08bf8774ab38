"""Logging configuration for procwrap.

Two destinations are used:

- the console (stderr), rendered by Rich, quiet unless ``--debug`` is given
  so that scheduled runs stay silent;
- the per-task log file, which records every lifecycle event with a local
  timestamp and the task name.
"""

import contextlib
import logging
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler

from .config import DirectoryPermissionError

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
PACKAGE_LOGGER = "procwrap"


def format_timestamp(when: datetime | None = None) -> str:
    """Format a local time as used in task log lines."""
    when = when or datetime.now()
    return when.astimezone().strftime(TIMESTAMP_FORMAT)


class TaskLogFormatter(logging.Formatter):
    """Render records as ``[timestamp]: [name] message``."""

    def __init__(self, name: str) -> None:
        super().__init__(f"[%(asctime)s]: [{name}] %(message)s")

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        return format_timestamp(datetime.fromtimestamp(record.created))


def configure_logging(
    debug: bool = False,
    no_color: bool = False,
    stream: TextIO | None = None,
) -> Console:
    """Configure console logging based on CLI options.

    Args:
        debug: Enable debug output on the console
        no_color: Disable colored output
        stream: Output stream for logs (default: stderr)

    Returns:
        Configured Rich console for output
    """
    level = logging.DEBUG if debug else logging.WARNING

    console = Console(
        file=stream,
        stderr=stream is None,
        no_color=no_color,
    )

    handler = RichHandler(
        console=console,
        show_time=debug,
        show_path=debug,
    )
    handler.setLevel(level)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if debug else logging.INFO)

    return console


@contextlib.contextmanager
def task_log(log_file: Path, name: str, debug: bool = False) -> Iterator[logging.Handler]:
    """Append package log records to the task's log file while the block runs.

    Args:
        log_file: Path to the task log file
        name: Sanitized task name included in every line
        debug: Also record debug messages

    Yields:
        The attached file handler

    Raises:
        DirectoryPermissionError: If the log file cannot be opened for appending
    """
    try:
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as e:
        raise DirectoryPermissionError(f"Cannot open log file {log_file}: {e}") from e
    handler.setFormatter(TaskLogFormatter(name))
    handler.setLevel(logging.DEBUG if debug else logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.addHandler(handler)
    try:
        yield handler
    finally:
        logger.removeHandler(handler)
        handler.close()
