"""procwrap CLI: run a command at most once per name."""

import logging
from pathlib import Path
from typing import Annotated

import click
import typer
from rich.markup import escape
from typer.core import TyperCommand

from procwrap import __version__

from .config import (
    ConfigError,
    DirectoryPermissionError,
    build_config,
    ensure_directories,
    load_defaults,
)
from .constants import EXIT_FAILURE, VERSION_EXIT_CODE
from .core import LockError, supervise_task
from .logging import configure_logging, task_log
from .services import LaunchError, ProcessTableError

logger = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"procwrap {__version__}")
        raise typer.Exit(VERSION_EXIT_CODE)


class UsageExitCommand(TyperCommand):
    """Command that reports every usage error with the generic failure code."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = EXIT_FAILURE
            raise


app = typer.Typer(
    name="procwrap",
    help="Run a command in the background, allowing only one instance per name",
    add_completion=False,
)


@app.command(cls=UsageExitCommand)
def main(
    ctx: typer.Context,
    command: Annotated[
        str | None,
        typer.Option(
            "--command",
            "-c",
            help="Command to run (required). Quote it as a single argument.",
        ),
    ] = None,
    name: Annotated[
        str | None,
        typer.Option(
            "--name",
            "-n",
            help="Unique name for this command (required). Used for lock and log file names.",
        ),
    ] = None,
    active: Annotated[
        bool,
        typer.Option(
            "--active",
            "-a",
            help="Stay in the foreground until the command finishes or times out. "
            "Not recommended for scheduled jobs.",
        ),
    ] = False,
    timeout: Annotated[
        int | None,
        typer.Option(
            "--timeout",
            "-t",
            help="Maximum run time in seconds (default: unbounded). "
            "Should exceed the schedule interval.",
        ),
    ] = None,
    log_dir: Annotated[
        str | None,
        typer.Option("--logdir", "-ld", help="Directory for log files (default: /var/log)"),
    ] = None,
    temp_dir: Annotated[
        str | None,
        typer.Option("--tempdir", "-td", help="Directory for pid files (default: /tmp)"),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", "-d", help="Enable verbose logging"),
    ] = False,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="TOML file with a [defaults] table"),
    ] = None,
    no_color: Annotated[
        bool,
        typer.Option("--no-color", help="Disable colored output"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Run COMMAND under NAME unless a previous instance is still running.

    A previous instance that has exceeded the timeout is killed first.
    """
    console = configure_logging(debug=debug, no_color=no_color)

    try:
        defaults = load_defaults(config_file)
        config = build_config(
            command=command,
            name=name,
            active=active,
            timeout=timeout,
            log_dir=log_dir,
            temp_dir=temp_dir,
            debug=debug,
            defaults=defaults,
        )
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        typer.echo(ctx.get_help(), err=True)
        raise typer.Exit(EXIT_FAILURE) from None

    try:
        ensure_directories(config)
        with task_log(config.log_file, config.name, debug=config.debug):
            try:
                status = supervise_task(config)
            except (LaunchError, LockError, ProcessTableError) as e:
                logger.error(str(e))
                raise typer.Exit(EXIT_FAILURE) from None
    except DirectoryPermissionError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(EXIT_FAILURE) from None

    raise typer.Exit(status)
