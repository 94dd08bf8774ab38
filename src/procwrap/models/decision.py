"""Lifecycle decision model."""

from enum import Enum

from pydantic import BaseModel, Field


class Decision(str, Enum):
    """Outcome of evaluating an existing lock record."""

    NO_PRIOR_PROCESS = "no_prior_process"
    STALE_LOCK_CLEARED = "stale_lock_cleared"
    PROCEED_KILLING_STALE = "proceed_killing_stale"
    DUPLICATE_STILL_RUNNING = "duplicate_still_running"

    @property
    def may_launch(self) -> bool:
        """Whether a new instance may start after this decision is resolved."""
        return self is not Decision.DUPLICATE_STILL_RUNNING


class Evaluation(BaseModel):
    """Decision plus the facts it was based on.

    Attributes:
        decision: What to do with the prior instance.
        pid: Process ID from the lock record, if one was readable.
        elapsed_seconds: Run time of the prior process, None when unknown.
    """

    decision: Decision
    pid: int | None = Field(default=None, description="Recorded process ID")
    elapsed_seconds: int | None = Field(default=None, description="Prior run time in seconds")
