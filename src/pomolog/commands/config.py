"""Configuration management commands."""

from typing import Optional

import typer
from rich.prompt import Confirm

from pomolog.commands.decorators import AppError, command_wrapper
from pomolog.services.config_service import SETTINGS, get_config_service
from pomolog.utils.exit_codes import ERROR_INVALID_ARGS
from pomolog.utils.ui.console import get_console
from pomolog.utils.ui.formatters import format_output, format_success

app = typer.Typer(help="Configuration management commands")
console = get_console()


@app.command("view")
@command_wrapper
def view_config(
    output: str = typer.Option("table", "--output", "-o", help="Output format (table, json)"),
) -> None:
    """View current configuration."""
    config_service = get_config_service()
    data = config_service.config.model_dump()
    data["log"]["resolved_path"] = str(config_service.config.log.resolved_path())
    format_output(data, output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.work_minutes)"),
) -> None:
    """Get a configuration value."""
    if key not in SETTINGS:
        raise AppError(f"Configuration key '{key}' not found", ERROR_INVALID_ARGS)
    value = get_config_service().get(key)
    console.print("" if value is None else value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., log.format)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    config_service = get_config_service()
    config_service.set(key, value)
    format_success(f"Configuration '{key}' set to '{config_service.get(key)}'")


@app.command("reset")
@command_wrapper
def reset_config(
    key: Optional[str] = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes:
        target = f"'{key}'" if key else "all settings"
        if not Confirm.ask(f"Reset {target} to defaults?", console=console):
            console.print("[dim]Cancelled.[/dim]")
            return
    get_config_service().reset(key)
    format_success(f"Reset {key or 'configuration'} to defaults")
