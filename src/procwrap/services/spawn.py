"""Start supervised commands detached from the supervisor."""

import shlex
import subprocess
import sys
from pathlib import Path


class LaunchError(Exception):
    """Error starting the supervised command."""


def _start_stamper(name: str, log_file: Path) -> subprocess.Popen[bytes]:
    """Start the process that timestamps command output into the log file."""
    return subprocess.Popen(
        [
            sys.executable,
            "-m",
            "procwrap.services.stamp",
            "--name",
            name,
            "--log-file",
            str(log_file),
        ],
        stdin=subprocess.PIPE,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )


def spawn_detached(command: str, name: str, log_file: Path) -> subprocess.Popen[bytes]:
    """Run a command in the background with its output logged.

    The command is split like a shell would split it but is not run by a
    shell. It gets its own session, stdin from /dev/null, and combined
    stdout/stderr piped through a timestamping process into ``log_file``.
    Both processes outlive the supervisor.

    Args:
        command: Command line to run
        name: Sanitized task name used to tag log lines
        log_file: Task log file to append output to

    Returns:
        Handle for the started command

    Raises:
        LaunchError: If the command cannot be parsed or started
    """
    try:
        args = shlex.split(command)
    except ValueError as e:
        raise LaunchError(f"Invalid command syntax: {e}") from e
    if not args:
        raise LaunchError("Empty command")

    stamper = _start_stamper(name, log_file)
    assert stamper.stdin is not None
    try:
        return subprocess.Popen(
            args,
            stdin=subprocess.DEVNULL,
            stdout=stamper.stdin,
            stderr=subprocess.STDOUT,
            start_new_session=True,
        )
    except FileNotFoundError:
        raise LaunchError(f"Command not found: {args[0]}") from None
    except OSError as e:
        raise LaunchError(f"Failed to start {args[0]}: {e}") from e
    finally:
        # The child holds its own copy; closing ours lets the stamper see EOF
        stamper.stdin.close()
