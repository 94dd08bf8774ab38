"""Core lifecycle logic for procwrap.

- elapsed: ps elapsed-time parsing
- lock_manager: per-task lock file store
- lifecycle: classification of a prior instance
- launcher: command start and active-mode supervision
- supervisor: one full invocation
- clock: injectable time source
"""

from .clock import Clock, SystemClock
from .elapsed import ElapsedTimeParseError, parse_elapsed
from .launcher import exit_status, launch, supervise, wait_for_exit
from .lifecycle import evaluate, is_overrun, kill_overrun
from .lock_manager import CorruptLockError, LockError, delete_lock, read_lock, write_lock
from .supervisor import supervise_task

__all__ = [
    "Clock",
    "CorruptLockError",
    "ElapsedTimeParseError",
    "LockError",
    "SystemClock",
    "delete_lock",
    "evaluate",
    "exit_status",
    "is_overrun",
    "kill_overrun",
    "launch",
    "parse_elapsed",
    "read_lock",
    "supervise",
    "supervise_task",
    "wait_for_exit",
]
