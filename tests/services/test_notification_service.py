"""Tests for phase-completion notifications."""

from io import StringIO

from rich.console import Console

from pomolog.models.focus.state import Phase
from pomolog.services.notification_service import ConsoleNotifier, completion_message


def test_work_completion_message():
    assert completion_message(Phase.WORKING, break_minutes=10) == (
        "Time's up!",
        "Take a 10-minute break.",
    )


def test_break_completion_message():
    assert completion_message(Phase.ON_BREAK) == ("Break over!", "Ready for another session?")


def test_idle_has_no_message():
    assert completion_message(Phase.IDLE) is None


def _console():
    buffer = StringIO()
    return Console(file=buffer, force_terminal=False, width=80), buffer


def test_console_notifier_prints_message():
    console, buffer = _console()

    ConsoleNotifier(console, break_minutes=5)(Phase.WORKING)

    output = buffer.getvalue()
    assert "Time's up!" in output
    assert "Take a 5-minute break." in output


def test_console_notifier_ignores_idle():
    console, buffer = _console()

    ConsoleNotifier(console)(Phase.IDLE)

    assert buffer.getvalue() == ""
