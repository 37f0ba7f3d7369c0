"""CLI commands for configuration management."""

import json
import shutil
import sys
from typing import Any

import click
from rich.table import Table

from pomodoro.cli.utils import console, error_console, load_config


@click.group()
def config() -> None:
    """Manage Pomodoro configuration.

    Configuration is stored in ~/.pomodoro/config.yml
    """
    pass


@config.command("show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Show all configuration settings.

    Example:
        pomodoro config show
        pomodoro config show --json
    """
    config_mgr = load_config(ctx)

    if as_json:
        click.echo(json.dumps(config_mgr.to_dict(), indent=2))
        return

    table = Table(title="Pomodoro Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    def add_rows(prefix: str, data: dict[str, Any]) -> None:
        for key, value in data.items():
            full_key = f"{prefix}.{key}" if prefix else key
            if isinstance(value, dict):
                add_rows(full_key, value)
            else:
                table.add_row(full_key, str(value))

    add_rows("", config_mgr.to_dict())
    console.print(table)
    console.print(f"\nConfig file: {config_mgr.config_path}")


@config.command("get")
@click.argument("key")
@click.pass_context
def config_get(ctx: click.Context, key: str) -> None:
    """Get a specific configuration value.

    Example:
        pomodoro config get timer.work_minutes
    """
    config_mgr = load_config(ctx)
    value = config_mgr.get(key)

    if value is None:
        error_console.print(f"[red]Error:[/red] Configuration key '{key}' not found")
        sys.exit(1)

    if isinstance(value, dict):
        console.print(json.dumps(value, indent=2))
    else:
        console.print(str(value))


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Set a configuration value.

    Use 'true'/'false' for booleans, 'null' to clear, numbers for integers.
    Changes take effect the next time the daemon starts.

    Example:
        pomodoro config set timer.work_minutes 50
        pomodoro config set notifications.backend notify-send
    """
    config_mgr = load_config(ctx)

    converted_value: Any = value
    if value.lower() in ("true", "yes"):
        converted_value = True
    elif value.lower() in ("false", "no"):
        converted_value = False
    elif value.lower() == "null":
        converted_value = None
    else:
        try:
            converted_value = int(value)
        except ValueError:
            converted_value = value

    try:
        config_mgr.set(key, converted_value)
        console.print(f"[green]✓[/green] Set {key} = {converted_value}")
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@config.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def config_reset(ctx: click.Context, yes: bool) -> None:
    """Reset configuration to defaults.

    Example:
        pomodoro config reset --yes
    """
    config_mgr = load_config(ctx)

    if not yes:
        console.print("[yellow]Warning:[/yellow] This will reset all configuration to defaults.")
        if not click.confirm("Continue?"):
            console.print("Cancelled")
            return

    backup_path = config_mgr.config_path.with_suffix(".yml.backup")
    if config_mgr.config_path.exists():
        shutil.copy(config_mgr.config_path, backup_path)
        console.print(f"Backed up current config to {backup_path}")

    config_mgr.reset()
    console.print("[green]✓[/green] Configuration reset to defaults")


@config.command("validate")
@click.pass_context
def config_validate(ctx: click.Context) -> None:
    """Validate configuration file."""
    config_mgr = load_config(ctx)

    try:
        config_mgr.validate()
        console.print("[green]✓[/green] Configuration is valid")
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@config.command("path")
@click.pass_context
def config_path(ctx: click.Context) -> None:
    """Show path to configuration file."""
    config_mgr = load_config(ctx)
    console.print(str(config_mgr.config_path), highlight=False, soft_wrap=True)
