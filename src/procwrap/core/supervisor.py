"""Run one supervised invocation of a task from start to finish."""

import logging

from ..config import RunConfig
from ..constants import EXIT_FAILURE, SETTLE_DELAY
from ..models import Decision
from ..services.process_table import ProcessTable
from .clock import Clock, SystemClock
from .launcher import launch
from .lifecycle import evaluate, kill_overrun

logger = logging.getLogger(__name__)


def supervise_task(
    config: RunConfig,
    table: ProcessTable | None = None,
    clock: Clock | None = None,
    settle: float = SETTLE_DELAY,
) -> int:
    """Evaluate any prior instance, resolve it, then launch the command.

    The lock is always read before any kill decision, and a prior instance
    is always resolved before a new lock is written.

    Args:
        config: Run configuration
        table: Process table (default: the OS process table)
        clock: Time source (default: system clock)
        settle: Pause after a lock is released

    Returns:
        Exit code for the invocation: 1 when a duplicate is still running,
        otherwise the launch result
    """
    table = table or ProcessTable()
    clock = clock or SystemClock()

    evaluation = evaluate(config, table)
    logger.debug(f"Prior instance: {evaluation.decision.value} (pid={evaluation.pid})")

    if not evaluation.decision.may_launch:
        return EXIT_FAILURE
    if evaluation.decision is Decision.PROCEED_KILLING_STALE:
        kill_overrun(evaluation, config, table, clock, settle)

    return launch(config, table, clock, settle=settle)
