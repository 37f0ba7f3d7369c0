"""Main CLI application."""

import sys
from typing import Optional

import click
from rich.panel import Panel

from pomodoro import __version__
from pomodoro.cli.config_commands import config
from pomodoro.cli.daemon_commands import daemon, logs
from pomodoro.cli.utils import console, error_console, get_client
from pomodoro.core.timer import Period
from pomodoro.daemon.ipc import IPCError

PERIOD_GLYPHS = {
    Period.WORK: "🍅",
    Period.REST: "😋",
    Period.STOPPED: "⏸️",
    Period.UNKNOWN: "❓",
}


def period_glyph(label: str) -> str:
    """Glyph shown in front of the remaining time for a period label."""
    return PERIOD_GLYPHS[Period.from_label(label)]


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--socket-path",
    envvar="SOCKET_PATH",
    type=click.Path(dir_okay=False),
    help="Path to daemon socket",
)
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Config file")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def cli(
    ctx: click.Context,
    socket_path: Optional[str],
    config_path: Optional[str],
    no_color: bool,
) -> None:
    """Pomodoro - work/rest interval timer.

    Run `pomodoro daemon` once, then use `pomodoro toggle` to start or stop
    the timer and `pomodoro get` to show the time left.
    """
    ctx.ensure_object(dict)
    ctx.obj["socket_path"] = socket_path
    ctx.obj["config_path"] = config_path

    if no_color:
        console.no_color = True
        error_console.no_color = True


@cli.command()
@click.pass_context
def get(ctx: click.Context) -> None:
    """Show the current period glyph and remaining time.

    Example:
        pomodoro get
    """
    client = get_client(ctx)

    try:
        status = client.get_status()
    except IPCError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(f"{period_glyph(status.period)} {status.rest_of_time_str}", highlight=False)


@cli.command()
@click.pass_context
def toggle(ctx: click.Context) -> None:
    """Start the timer, or stop it if it is running.

    Example:
        pomodoro toggle
    """
    client = get_client(ctx)

    try:
        status = client.toggle()
    except IPCError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(
        f"Timer toggled. Status: {status.period} {status.rest_of_time_str}", highlight=False
    )


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show detailed timer status.

    Example:
        pomodoro status
    """
    client = get_client(ctx)

    try:
        timer_status = client.get_status()
    except IPCError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        error_console.print("[yellow]Daemon may not be running[/yellow]")
        sys.exit(1)

    status_text = (
        f"{period_glyph(timer_status.period)} {timer_status.period}\n"
        f"  Remaining: {timer_status.rest_of_time_str}\n"
        f"  Socket: {client.socket_path}"
    )
    console.print(Panel(status_text, title="Pomodoro Status"), highlight=False)


cli.add_command(daemon)
cli.add_command(logs)
cli.add_command(config)


if __name__ == "__main__":
    cli(obj={})
