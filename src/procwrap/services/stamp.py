"""Prefix each line read from stdin with a timestamp and append it to a log file.

Run as ``python -m procwrap.services.stamp`` with the supervised command's
output piped in.
"""

import io
import sys
from pathlib import Path
from typing import TextIO

import typer

from ..logging import format_timestamp


def stamp_lines(source: TextIO, sink: TextIO, name: str) -> int:
    """Copy lines from source to sink with timestamp and task name.

    Returns:
        Number of lines written
    """
    count = 0
    for line in source:
        text = line.rstrip("\n")
        sink.write(f"[{format_timestamp()}]: [{name}] [cmd] {text}\n")
        sink.flush()
        count += 1
    return count


def main(
    name: str = typer.Option(..., "--name", help="Task name to tag lines with"),
    log_file: Path = typer.Option(..., "--log-file", help="Log file to append to"),
) -> None:
    """Timestamp stdin into a task log file."""
    source = io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8", errors="replace")
    with open(log_file, "a", encoding="utf-8") as sink:
        stamp_lines(source, sink, name)


if __name__ == "__main__":
    typer.run(main)
