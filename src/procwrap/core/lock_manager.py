"""Lock store for supervised tasks.

One file per task name under the temp directory holds the process id of the
running instance. Reads are plain; writes use atomic creation
(O_CREAT | O_EXCL) so that a lock written by a concurrent invocation is
never silently overwritten.
"""

import contextlib
import os
from pathlib import Path

from pydantic import ValidationError

from ..config import lock_path
from ..constants import LOCK_FILE_MODE
from ..models import LockRecord


class LockError(Exception):
    """Error acquiring or managing lock."""


class CorruptLockError(LockError):
    """Lock file exists but does not hold a valid process id."""


def read_lock(temp_dir: Path, name: str) -> LockRecord | None:
    """Read the lock record for a task.

    Args:
        temp_dir: Directory holding lock files
        name: Sanitized task name

    Returns:
        LockRecord if a lock file exists, None otherwise

    Raises:
        LockError: If the lock file exists but cannot be read
        CorruptLockError: If the file content is not a positive integer
    """
    path = lock_path(temp_dir, name)
    try:
        content = path.read_text()
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as e:
        raise CorruptLockError(f"Invalid lock file {path}: not text") from e
    except OSError as e:
        raise LockError(f"Cannot read lock file {path}: {e}") from e

    try:
        return LockRecord.from_text(content)
    except (ValueError, ValidationError) as e:
        raise CorruptLockError(f"Invalid lock file {path}: {content.strip()!r}") from e


def write_lock(temp_dir: Path, name: str, pid: int) -> LockRecord:
    """Create the lock record for a task.

    Args:
        temp_dir: Directory holding lock files
        name: Sanitized task name
        pid: Process id to record

    Returns:
        The written LockRecord

    Raises:
        LockError: If a lock file already exists for this task or cannot be created
    """
    record = LockRecord(pid=pid)
    path = lock_path(temp_dir, name)
    try:
        fd = os.open(str(path), os.O_CREAT | os.O_EXCL | os.O_WRONLY, LOCK_FILE_MODE)
    except FileExistsError:
        raise LockError(f"Lock already held: {path}") from None
    except OSError as e:
        raise LockError(f"Cannot create lock file {path}: {e}") from e
    try:
        os.write(fd, record.to_text().encode())
    finally:
        os.close(fd)
    # Creation mode is filtered by umask
    os.chmod(path, LOCK_FILE_MODE)
    return record


def delete_lock(temp_dir: Path, name: str) -> None:
    """Remove the lock record for a task. No-op if absent."""
    with contextlib.suppress(FileNotFoundError):
        lock_path(temp_dir, name).unlink()
