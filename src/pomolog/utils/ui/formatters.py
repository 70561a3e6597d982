"""Output formatters for the terminal front end."""

import json
from typing import Any

from rich.table import Table

from pomolog.models.focus.entry import SessionEntry
from pomolog.utils.ui.console import get_console

console = get_console()


def format_output(data: Any, output_format: str = "table") -> None:
    """Format and display a mapping either as JSON or as a key/value table."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
        return
    format_dict_table(data)


def format_dict_table(data: dict[str, Any], prefix: str = "") -> None:
    """Display a (possibly nested) mapping as a two-column table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in _flatten(data, prefix):
        table.add_row(key, "" if value is None else str(value))
    console.print(table)


def _flatten(data: dict[str, Any], prefix: str = "") -> list[tuple[str, Any]]:
    rows: list[tuple[str, Any]] = []
    for key, value in data.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, dict):
            rows.extend(_flatten(value, f"{full_key}."))
        else:
            rows.append((full_key, value))
    return rows


def format_sessions_table(entries: list[SessionEntry], title: str = "Sessions") -> None:
    """Display raw session records, newest last."""
    table = Table(title=f"{title} ({len(entries)})", show_header=True)
    table.add_column("Started", style="cyan")
    table.add_column("Task")
    table.add_column("Notes", justify="right")
    table.add_column("Reflection")

    for entry in entries:
        reflection = entry.reflection if entry.reflection is not None else "[dim]-[/dim]"
        table.add_row(
            entry.start_time.strftime("%Y-%m-%d %H:%M"),
            entry.task[:40],
            str(len(entry.notes)),
            reflection,
        )

    console.print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


