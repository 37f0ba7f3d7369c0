"""Helpers shared by CLI commands."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from pomodoro.core.config import ConfigManager
from pomodoro.daemon.ipc import IPCClient
from pomodoro.daemon.platform import get_ipc_socket_path

console = Console()
error_console = Console(stderr=True)


def load_config(ctx: click.Context) -> ConfigManager:
    """Load the configuration selected on the command line, exiting on errors."""
    config_path: Optional[str] = ctx.obj.get("config_path") if ctx.obj else None
    try:
        return ConfigManager(Path(config_path) if config_path else None)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


def resolve_socket_path(ctx: click.Context, config: Optional[ConfigManager] = None) -> Path:
    """Resolve the socket path.

    Order: --socket-path / $SOCKET_PATH, the daemon.socket_path setting,
    then the platform default.
    """
    socket_path: Optional[str] = ctx.obj.get("socket_path") if ctx.obj else None
    if socket_path:
        return Path(socket_path)

    if config is None:
        config = load_config(ctx)
    return config.socket_path or get_ipc_socket_path()


def get_client(ctx: click.Context) -> IPCClient:
    return IPCClient(resolve_socket_path(ctx))
