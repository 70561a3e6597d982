"""Phase-completion notifications."""

from __future__ import annotations

from rich.console import Console

from pomolog.models.focus.state import Phase
from pomolog.utils.ui.console import get_console


def completion_message(phase: Phase, break_minutes: int = 5) -> tuple[str, str] | None:
    """Title and body announcing the end of *phase*. None for Idle."""
    if phase == Phase.WORKING:
        return "Time's up!", f"Take a {break_minutes}-minute break."
    if phase == Phase.ON_BREAK:
        return "Break over!", "Ready for another session?"
    return None


class ConsoleNotifier:
    """Notification sink that rings the terminal bell and prints a message."""

    def __init__(self, console: Console | None = None, break_minutes: int = 5):
        self.console = console or get_console()
        self.break_minutes = break_minutes

    def __call__(self, phase: Phase) -> None:
        message = completion_message(phase, self.break_minutes)
        if message is None:
            return
        title, body = message
        color = "red" if phase == Phase.WORKING else "green"
        self.console.bell()
        self.console.print(f"\n[bold {color}]{title}[/bold {color}] {body}")
