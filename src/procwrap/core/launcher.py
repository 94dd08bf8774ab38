"""Launcher: start the command, lock it, and optionally supervise it.

In passive mode the command is left running and the lock stays behind for
the next invocation to evaluate. In active mode this process blocks until
the command exits or its timeout expires, then releases the lock.
"""

import contextlib
import logging
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from ..config import RunConfig
from ..constants import POLL_INTERVAL, REAP_TIMEOUT, SETTLE_DELAY
from ..services.process_table import ProcessTable
from ..services.spawn import spawn_detached
from .clock import Clock
from .lock_manager import LockError, delete_lock, write_lock

logger = logging.getLogger(__name__)


class Child(Protocol):
    """The subset of ``subprocess.Popen`` used for supervision."""

    pid: int

    def poll(self) -> int | None: ...

    def wait(self, timeout: float | None = None) -> int: ...


def exit_status(returncode: int) -> int:
    """Convert a Popen return code to a shell-style exit status."""
    if returncode < 0:
        return 128 + abs(returncode)
    return returncode


def wait_for_exit(child: Child, timeout: float, clock: Clock) -> int | None:
    """Poll a child until it exits or ``timeout`` seconds pass.

    Returns:
        The child's return code, or None if it is still running at the deadline
    """
    deadline = clock.monotonic() + timeout
    while True:
        returncode = child.poll()
        if returncode is not None:
            return returncode
        remaining = deadline - clock.monotonic()
        if remaining <= 0:
            return None
        clock.sleep(min(POLL_INTERVAL, remaining))


def _reap(child: Child) -> None:
    with contextlib.suppress(subprocess.TimeoutExpired):
        child.wait(timeout=REAP_TIMEOUT)


def supervise(
    child: Child,
    config: RunConfig,
    table: ProcessTable,
    clock: Clock,
    settle: float = SETTLE_DELAY,
) -> int:
    """Block until the child finishes or exceeds the timeout.

    Args:
        child: Started command
        config: Run configuration (timeout 0 waits indefinitely)
        table: Used to deliver the termination signal
        clock: Time source for polling
        settle: Pause after the lock is released

    Returns:
        The child's exit status, or the signal delivery status if it was killed
    """
    if config.timeout == 0:
        returncode: int | None = child.wait()
    else:
        returncode = wait_for_exit(child, config.timeout, clock)

    if returncode is not None:
        status = exit_status(returncode)
        delete_lock(config.temp_dir, config.name)
        logger.info(f"Process finished with code: {status}.")
        clock.sleep(settle)
        return status

    logger.info(f"Run time has exceeded {config.timeout} seconds. Killing {child.pid}.")
    status = table.terminate(child.pid)
    _reap(child)
    delete_lock(config.temp_dir, config.name)
    logger.info(f"Kill result code: {status}.")
    clock.sleep(settle)
    return status


def launch(
    config: RunConfig,
    table: ProcessTable,
    clock: Clock,
    spawner: Callable[[str, str, Path], Child] | None = None,
    settle: float = SETTLE_DELAY,
) -> int:
    """Start the command and record its pid.

    Args:
        config: Run configuration
        table: Process table used for termination
        clock: Time source for active supervision
        spawner: Function starting the command (default: spawn_detached)
        settle: Pause after the lock is released in active mode

    Returns:
        0 in passive mode, otherwise the supervised exit status

    Raises:
        LaunchError: If the command cannot be started
        LockError: If another invocation locked the task first
    """
    logger.info(f"Executing command: {config.command}")
    spawner = spawner or spawn_detached
    child = spawner(config.command, config.name, config.log_file)

    logger.info(f"Locking process id: {child.pid}")
    try:
        write_lock(config.temp_dir, config.name, child.pid)
    except LockError:
        logger.warning(f"Lock taken by another invocation. Stopping {child.pid}.")
        table.terminate(child.pid)
        _reap(child)
        raise

    if not config.active:
        return 0
    return supervise(child, config, table, clock, settle=settle)
