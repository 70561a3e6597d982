"""Interactive focus timer.

A line-based loop: while idle a line names the task to start, while the
countdown runs a line is a note (or a slash command), and when a work phase
ends a line is the reflection that starts the break.
"""

from __future__ import annotations

from collections.abc import Callable

from rich.console import Console

from pomolog.adapters.session_log import create_session_log
from pomolog.commands.decorators import command_wrapper
from pomolog.models.focus.state import Phase
from pomolog.models.focus.ui import show_status
from pomolog.services.config_service import get_config_service
from pomolog.services.focus_service import FocusService, LogStatus
from pomolog.services.notification_service import ConsoleNotifier
from pomolog.utils.ui.console import get_console

console = get_console()

HELP_TEXT = """[bold]Commands[/bold]
  /pause    pause the countdown
  /resume   resume a paused countdown
  /reset    abandon the current session and go back to idle
  /skip     start the break without a reflection
  /status   show the timer
  /help     show this help
  /quit     leave (the open journal entry stays open)

While working, any other line is saved as a note."""


class FocusShell:
    """Maps input lines onto FocusService calls and reports the outcome."""

    def __init__(self, service: FocusService, console: Console):
        self.service = service
        self.console = console

    def prompt(self) -> str:
        state = self.service.snapshot()
        if state.awaiting_reflection:
            return "What did you accomplish? "
        if state.phase == Phase.IDLE:
            return "What will you work on? "
        if state.paused:
            return f"[yellow]{state.display_time} paused[/yellow] > "
        return f"{state.title} > "

    def handle(self, line: str) -> bool:
        """Handle one input line. Returns False when the loop should end."""
        text = line.strip()
        command = text.lower()

        if command in ("/quit", "/q", "/exit"):
            return False
        if command == "/help":
            self.console.print(HELP_TEXT)
            return True
        if command == "/status":
            show_status(self.service.snapshot(), self.console)
            return True
        if command == "/reset":
            self.service.reset()
            self.console.print("[dim]Timer reset.[/dim]")
            return True

        if command == "/pause":
            if self.service.pause():
                self.console.print("[yellow]Paused.[/yellow]")
            else:
                self.console.print("[dim]Nothing to pause.[/dim]")
            return True
        if command == "/resume":
            if self.service.resume():
                self.console.print("[blue]Resumed.[/blue]")
            else:
                self.console.print("[dim]Nothing to resume.[/dim]")
            return True

        state = self.service.snapshot()
        if state.awaiting_reflection:
            if command.startswith("/") and command != "/skip":
                self._unknown(text)
            else:
                self._reflect(text)
        elif state.phase == Phase.IDLE:
            self._start(text)
        elif command == "/skip":
            self.console.print("[dim]Nothing to skip yet.[/dim]")
        elif command.startswith("/"):
            self._unknown(text)
        elif text:
            self._report(self.service.note(text), "Note saved.")
        return True

    def _unknown(self, text: str) -> None:
        self.console.print(f"[red]Unknown command:[/red] {text} (try /help)")

    def _start(self, task: str) -> None:
        if not task or task.startswith("/"):
            show_status(self.service.snapshot(), self.console)
            return
        status = self.service.start(task)
        minutes = self.service.config.timer.work_minutes
        self.console.print(
            f"[bold green]🍅 Working on:[/bold green] {task} [dim]({minutes} min)[/dim]"
        )
        self._report(status, None)

    def _reflect(self, text: str) -> None:
        if not text or text.lower() == "/skip":
            self.service.skip_reflection()
            self.console.print("[dim]Reflection skipped.[/dim]")
        else:
            self._report(self.service.reflect(text), "Reflection saved.")
        minutes = self.service.config.timer.break_minutes
        self.console.print(f"[bold green]Break started[/bold green] [dim]({minutes} min)[/dim]")

    def _report(self, status: LogStatus, saved_message: str | None) -> None:
        if status == LogStatus.FAILED:
            self.console.print(
                f"[bold yellow]Log not saved:[/bold yellow] {self.service.last_error}"
            )
        elif status == LogStatus.SKIPPED:
            self.console.print("[dim]No open session; nothing was logged.[/dim]")
        elif saved_message:
            self.console.print(f"[dim]{saved_message}[/dim]")

    def loop(self, read_line: Callable[[str], str]) -> None:
        """Read lines until /quit or end of input."""
        self.console.print("[dim]Type /help for commands.[/dim]")
        while True:
            try:
                line = read_line(self.prompt())
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break
            if not self.handle(line):
                break


def build_service(console: Console) -> FocusService:
    """Wire the focus service from the saved settings."""
    config = get_config_service().config
    session_log = create_session_log(config.log)
    console_notifier = ConsoleNotifier(console, break_minutes=config.timer.break_minutes)

    def notify(phase: Phase) -> None:
        console_notifier(phase)
        if phase == Phase.WORKING:
            console.print("[dim]Type what you accomplished, or press Enter to skip.[/dim]")

    return FocusService(config, session_log, notifier=notify)


@command_wrapper
def run() -> None:
    """Run the focus timer in this terminal."""
    service = build_service(console)
    console.print(f"[dim]Journal: {service.session_log.location}[/dim]")
    try:
        FocusShell(service, console).loop(console.input)
    finally:
        service.close()
