"""Pydantic data models for procwrap.

- Lock record persisted per task (LockRecord)
- Lifecycle decisions (Decision, Evaluation)
"""

from .decision import Decision, Evaluation
from .lock import LockRecord

__all__ = [
    "Decision",
    "Evaluation",
    "LockRecord",
]
