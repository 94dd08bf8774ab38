"""OS-facing collaborators for procwrap.

- process_table: elapsed-time lookup and signal delivery via ps/kill
- spawn: detached command start with logged output
- stamp: output timestamping process
"""

from .process_table import ProcessTable, ProcessTableError
from .spawn import LaunchError, spawn_detached

__all__ = [
    "LaunchError",
    "ProcessTable",
    "ProcessTableError",
    "spawn_detached",
]
