"""Tests for the launcher and active-mode supervision."""

from collections.abc import Callable
from pathlib import Path

import pytest

from procwrap.config import RunConfig
from procwrap.core.launcher import exit_status, launch, supervise, wait_for_exit
from procwrap.core.lock_manager import LockError, read_lock, write_lock


class TestExitStatus:
    """Tests for exit_status function."""

    @pytest.mark.parametrize(("returncode", "expected"), [(0, 0), (3, 3), (-15, 143), (-9, 137)])
    def test_maps_signals_to_shell_codes(self, returncode: int, expected: int) -> None:
        assert exit_status(returncode) == expected


class TestWaitForExit:
    """Tests for wait_for_exit function."""

    def test_returns_code_when_child_exits_early(self, make_child, fake_clock) -> None:
        child = make_child(exit_after=3, returncode=7)
        assert wait_for_exit(child, 10, fake_clock) == 7
        assert fake_clock.now == 3

    def test_returns_none_at_deadline(self, make_child, fake_clock) -> None:
        child = make_child(exit_after=None)
        assert wait_for_exit(child, 5, fake_clock) is None
        assert fake_clock.now == 5
        assert all(s <= 1 for s in fake_clock.sleeps)

    def test_checks_once_more_at_deadline(self, make_child, fake_clock) -> None:
        child = make_child(exit_after=2)
        assert wait_for_exit(child, 2, fake_clock) == 0


class TestSupervise:
    """Tests for supervise function."""

    def test_unbounded_waits_for_exit_and_releases_lock(
        self, make_config: Callable[..., RunConfig], make_child, process_table, fake_clock
    ) -> None:
        config = make_config(active=True, timeout=0)
        child = make_child(returncode=4)
        write_lock(config.temp_dir, config.name, child.pid)

        status = supervise(child, config, process_table, fake_clock, settle=1)

        assert status == 4
        assert child.waits == 1
        assert child.polls == 0
        assert not config.lock_file.exists()
        assert fake_clock.sleeps == [1]

    def test_early_exit_returns_child_status(
        self, make_config: Callable[..., RunConfig], make_child, process_table, fake_clock
    ) -> None:
        config = make_config(active=True, timeout=30)
        child = make_child(exit_after=2, returncode=3)
        write_lock(config.temp_dir, config.name, child.pid)

        status = supervise(child, config, process_table, fake_clock, settle=0)

        assert status == 3
        assert process_table.terminated == []
        assert not config.lock_file.exists()

    def test_timeout_terminates_child(
        self, make_config: Callable[..., RunConfig], make_child, process_table, fake_clock
    ) -> None:
        config = make_config(active=True, timeout=2)
        child = make_child(exit_after=None)
        process_table.elapsed[child.pid] = "00:02"
        write_lock(config.temp_dir, config.name, child.pid)

        status = supervise(child, config, process_table, fake_clock, settle=1)

        assert status == 0
        assert process_table.terminated == [child.pid]
        assert child.waits == 1
        assert not config.lock_file.exists()
        assert fake_clock.now == 3  # 2 seconds polling + 1 settle


class TestLaunch:
    """Tests for launch function."""

    def _spawner(self, child):
        calls: list[tuple[str, str, Path]] = []

        def spawn(command: str, name: str, log_file: Path):
            calls.append((command, name, log_file))
            return child

        return spawn, calls

    def test_passive_launch_leaves_lock(
        self, make_config: Callable[..., RunConfig], make_child, process_table, fake_clock
    ) -> None:
        config = make_config(command="sleep 30")
        child = make_child(pid=777)
        spawn, calls = self._spawner(child)

        status = launch(config, process_table, fake_clock, spawner=spawn)

        assert status == 0
        assert calls == [("sleep 30", "job", config.log_file)]
        assert read_lock(config.temp_dir, config.name).pid == 777  # type: ignore[union-attr]
        assert child.polls == 0

    def test_active_launch_supervises(
        self, make_config: Callable[..., RunConfig], make_child, process_table, fake_clock
    ) -> None:
        config = make_config(active=True, timeout=10)
        child = make_child(pid=777, exit_after=1, returncode=0)
        spawn, _ = self._spawner(child)

        status = launch(config, process_table, fake_clock, spawner=spawn, settle=0)

        assert status == 0
        assert not config.lock_file.exists()

    def test_lost_race_stops_own_child(
        self, make_config: Callable[..., RunConfig], make_child, process_table, fake_clock
    ) -> None:
        config = make_config()
        write_lock(config.temp_dir, config.name, 111)
        child = make_child(pid=777)
        process_table.elapsed[777] = "00:00"
        spawn, _ = self._spawner(child)

        with pytest.raises(LockError):
            launch(config, process_table, fake_clock, spawner=spawn)

        assert process_table.terminated == [777]
        assert read_lock(config.temp_dir, config.name).pid == 111  # type: ignore[union-attr]
