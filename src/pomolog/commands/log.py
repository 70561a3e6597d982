"""Session journal commands."""

import typer

from pomolog.adapters.session_log import create_session_log
from pomolog.commands.decorators import command_wrapper
from pomolog.services.config_service import get_config_service
from pomolog.utils.ui.console import get_console
from pomolog.utils.ui.formatters import format_sessions_table

app = typer.Typer(help="Session journal")
console = get_console()


@app.command("show")
@command_wrapper
def show_log(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of sessions to show"),
) -> None:
    """Show the most recent journal entries."""
    session_log = create_session_log(get_config_service().config.log)
    entries = session_log.read_sessions()
    if not entries:
        console.print(f"[yellow]No sessions in {session_log.location}[/yellow]")
        return
    format_sessions_table(entries[-limit:] if limit > 0 else entries, title="Recent sessions")


@app.command("path")
@command_wrapper
def log_path() -> None:
    """Print where the journal is written."""
    console.print(str(get_config_service().config.log.resolved_path()))
