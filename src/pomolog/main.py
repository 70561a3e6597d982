"""Main entry point for pomolog."""

import typer

from pomolog import __version__
from pomolog.commands import config, focus, log
from pomolog.utils.typer_helpers import SuggestingGroup
from pomolog.utils.ui.console import get_console

app = typer.Typer(
    name="pomolog",
    cls=SuggestingGroup,
    help="A focus timer that keeps a journal of your work sessions",
    invoke_without_command=True,
)

console = get_console()

app.command("run")(focus.run)
app.add_typer(config.app, name="config", help="Configuration management")
app.add_typer(log.app, name="log", help="Session journal")


@app.callback()
def main(ctx: typer.Context) -> None:
    """Start the focus timer when no command is given."""
    if ctx.invoked_subcommand is None:
        focus.run()


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]pomolog[/bold] version [cyan]{__version__}[/cyan]")


if __name__ == "__main__":
    app()
