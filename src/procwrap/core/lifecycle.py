"""Lifecycle controller: classify the prior instance of a task.

A lock record alone is not trusted. The recorded pid is looked up in the
process table on every invocation, so a lock left behind by a crashed or
interrupted supervisor is reconciled here.
"""

import logging

from ..config import RunConfig
from ..models import Decision, Evaluation
from ..services.process_table import ProcessTable
from .clock import Clock
from .elapsed import ElapsedTimeParseError, parse_elapsed
from .lock_manager import CorruptLockError, delete_lock, read_lock

logger = logging.getLogger(__name__)


def is_overrun(elapsed_seconds: int, timeout: int) -> bool:
    """Check if a process has run longer than its timeout (0 never overruns)."""
    return timeout > 0 and elapsed_seconds > timeout


def evaluate(config: RunConfig, table: ProcessTable) -> Evaluation:
    """Decide what to do about an existing lock for ``config.name``.

    Stale and corrupt locks are deleted as a side effect. A running prior
    instance within its timeout is a duplicate whether or not the current
    invocation is in active mode. If the prior run time cannot be parsed it
    is also treated as a duplicate rather than assumed safe to replace.

    Args:
        config: Run configuration
        table: Process table to consult

    Returns:
        Evaluation with the decision and the prior pid/run time
    """
    try:
        record = read_lock(config.temp_dir, config.name)
    except CorruptLockError as e:
        logger.warning(f"{e}. Removing lock.")
        delete_lock(config.temp_dir, config.name)
        return Evaluation(decision=Decision.STALE_LOCK_CLEARED)

    if record is None:
        return Evaluation(decision=Decision.NO_PRIOR_PROCESS)

    pid = record.pid
    etime = table.elapsed_time(pid)
    if not etime:
        logger.info(f"Process ({pid}) finished at some point. Removing lock.")
        delete_lock(config.temp_dir, config.name)
        return Evaluation(decision=Decision.STALE_LOCK_CLEARED, pid=pid)

    try:
        elapsed = parse_elapsed(etime)
    except ElapsedTimeParseError as e:
        logger.warning(f"Process ({pid}) run time unknown: {e}")
        return Evaluation(decision=Decision.DUPLICATE_STILL_RUNNING, pid=pid)

    if is_overrun(elapsed, config.timeout):
        return Evaluation(
            decision=Decision.PROCEED_KILLING_STALE, pid=pid, elapsed_seconds=elapsed
        )

    logger.info(f"Process ({pid}) is still running.")
    return Evaluation(
        decision=Decision.DUPLICATE_STILL_RUNNING, pid=pid, elapsed_seconds=elapsed
    )


def kill_overrun(
    evaluation: Evaluation,
    config: RunConfig,
    table: ProcessTable,
    clock: Clock,
    settle: float,
) -> int:
    """Terminate a prior instance that exceeded its timeout and release its lock.

    Returns:
        Signal delivery status (0 on success)
    """
    pid = evaluation.pid
    assert pid is not None
    logger.info(f"Run time has exceeded {config.timeout} seconds. Killing {pid}.")
    status = table.terminate(pid)
    delete_lock(config.temp_dir, config.name)
    logger.info(f"Kill result code: {status}.")
    clock.sleep(settle)
    return status
