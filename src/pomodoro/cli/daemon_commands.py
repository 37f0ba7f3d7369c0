"""CLI commands for running the daemon."""

import subprocess
import sys
from typing import Optional

import click

from pomodoro.cli.utils import console, error_console, load_config, resolve_socket_path
from pomodoro.daemon.daemon import DaemonError, PomodoroDaemon
from pomodoro.daemon.ipc import IPCClient
from pomodoro.daemon.platform import get_log_file_path


@click.command()
@click.option(
    "--work",
    "-w",
    "work_minutes",
    type=click.IntRange(min=1),
    help="Time period for work in minutes",
)
@click.option(
    "--rest",
    "-r",
    "rest_minutes",
    type=click.IntRange(min=1),
    help="Time period for rest in minutes",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (default: from config)",
)
@click.pass_context
def daemon(
    ctx: click.Context,
    work_minutes: Optional[int],
    rest_minutes: Optional[int],
    log_level: Optional[str],
) -> None:
    """Run the timer daemon in the foreground.

    The timer starts stopped; use `pomodoro toggle` to begin a work period.

    Example:
        pomodoro daemon --work 50 --rest 10
    """
    config_mgr = load_config(ctx)
    socket_path = resolve_socket_path(ctx, config_mgr)

    if IPCClient(socket_path, timeout=1.0).is_daemon_running():
        error_console.print(f"[red]Error:[/red] Daemon is already running on {socket_path}")
        sys.exit(1)

    try:
        daemon_instance = PomodoroDaemon.from_config(
            config_mgr,
            socket_path=socket_path,
            work_minutes=work_minutes,
            rest_minutes=rest_minutes,
        )
        console.print(f"[cyan]Starting daemon on {socket_path}...[/cyan]")
        daemon_instance.run(log_level=log_level or config_mgr.get("advanced.log_level", "INFO"))
    except KeyboardInterrupt:
        console.print("\n[yellow]Daemon stopped by user[/yellow]")
    except DaemonError as e:
        error_console.print(f"[red]Error starting daemon:[/red] {e}")
        sys.exit(1)


@click.command()
@click.option(
    "--lines", "-n", default=50, type=click.IntRange(min=1), help="Number of log lines to show"
)
@click.option("--follow", "-f", is_flag=True, help="Follow log output")
def logs(lines: int, follow: bool) -> None:
    """View daemon logs."""
    log_file = get_log_file_path()

    if not log_file.exists():
        console.print("[yellow]No log file found[/yellow]")
        return

    if follow:
        try:
            subprocess.run(["tail", "-f", "-n", str(lines), str(log_file)])
        except KeyboardInterrupt:
            pass
    else:
        with open(log_file, "r", encoding="utf-8") as f:
            last_lines = f.readlines()[-lines:]
        console.print("".join(last_lines), end="", highlight=False, markup=False)
