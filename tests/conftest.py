"""Shared test fixtures for procwrap tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from procwrap.config import RunConfig
from procwrap.services.process_table import ProcessTable


class FakeClock:
    """Clock that advances only when slept on."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeProcessTable(ProcessTable):
    """Process table backed by a dict of pid -> elapsed time string."""

    def __init__(self) -> None:
        self.elapsed: dict[int, str] = {}
        self.terminated: list[int] = []

    def elapsed_time(self, pid: int) -> str:
        return self.elapsed.get(pid, "")

    def terminate(self, pid: int) -> int:
        self.terminated.append(pid)
        if self.elapsed.pop(pid, None) is None:
            return 1
        return 0


class FakeChild:
    """Started command that exits after a number of polls (or never)."""

    def __init__(self, pid: int = 4242, exit_after: int | None = None, returncode: int = 0):
        self.pid = pid
        self.exit_after = exit_after
        self.returncode = returncode
        self.polls = 0
        self.waits = 0

    def poll(self) -> int | None:
        self.polls += 1
        if self.exit_after is not None and self.polls > self.exit_after:
            return self.returncode
        return None

    def wait(self, timeout: float | None = None) -> int:
        self.waits += 1
        return self.returncode


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_clock() -> FakeClock:
    """Clock that never really sleeps."""
    return FakeClock()


@pytest.fixture
def process_table() -> FakeProcessTable:
    """Empty fake process table; add entries via ``.elapsed[pid] = "MM:SS"``."""
    return FakeProcessTable()


@pytest.fixture
def make_child() -> type[FakeChild]:
    """Factory for fake child processes."""
    return FakeChild


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., RunConfig]:
    """Factory for RunConfig with log/temp directories under tmp_path."""
    log_dir = tmp_path / "log"
    temp_dir = tmp_path / "tmp"
    log_dir.mkdir()
    temp_dir.mkdir()

    def _make(**overrides: object) -> RunConfig:
        values: dict[str, object] = {
            "command": "sleep 5",
            "name": "job",
            "log_dir": log_dir,
            "temp_dir": temp_dir,
        }
        values.update(overrides)
        return RunConfig.model_validate(values)

    return _make
