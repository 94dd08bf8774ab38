"""OS process table queries and signal delivery."""

import logging
import os
import signal
import subprocess

from ..constants import PS_TIMEOUT

logger = logging.getLogger(__name__)


class ProcessTableError(Exception):
    """Process table could not be queried."""


class ProcessTable:
    """Look up and signal processes by id.

    Kept as a class so callers can substitute a fake in tests.
    """

    def elapsed_time(self, pid: int) -> str:
        """Get the elapsed running time of a process as reported by ``ps``.

        Args:
            pid: Process id to look up

        Returns:
            Elapsed time string (e.g. ``"01:02:03"``), or "" if no such process

        Raises:
            ProcessTableError: If ``ps`` is unavailable or times out
        """
        try:
            result = subprocess.run(
                ["ps", "-o", "etime=", "-p", str(pid)],
                capture_output=True,
                text=True,
                timeout=PS_TIMEOUT,
            )
        except FileNotFoundError:
            raise ProcessTableError("Command not found: ps") from None
        except subprocess.TimeoutExpired as e:
            raise ProcessTableError(f"ps timed out after {PS_TIMEOUT} seconds") from e

        if result.returncode != 0:
            # ps exits non-zero when the pid is not in the table
            return ""
        return result.stdout.strip()

    def terminate(self, pid: int) -> int:
        """Send SIGTERM to a process.

        Returns:
            0 if the signal was delivered, 1 otherwise
        """
        try:
            os.kill(pid, signal.SIGTERM)
        except OSError as e:
            logger.debug(f"Failed to signal {pid}: {e}")
            return 1
        return 0
