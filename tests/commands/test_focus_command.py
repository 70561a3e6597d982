"""Unit tests for the interactive focus timer."""

from __future__ import annotations

from io import StringIO

import pytest
from rich.console import Console
from typer.testing import CliRunner

from pomolog.adapters.session_log import MarkdownSessionLog
from pomolog.commands.focus import FocusShell
from pomolog.main import app
from pomolog.models.config_models import AppConfig, LogConfig, TimerConfig
from pomolog.models.exceptions import LogWriteError
from pomolog.models.focus.state import Phase
from pomolog.services.focus_service import FocusService

runner = CliRunner()


# ---------------------------------------------------------------------------
# FocusShell
# ---------------------------------------------------------------------------


@pytest.fixture()
def output() -> StringIO:
    return StringIO()


@pytest.fixture()
def shell(tmp_path, clock, schedulers, output) -> FocusShell:
    config = AppConfig(
        timer=TimerConfig(work_minutes=1, break_minutes=1),
        log=LogConfig(path=str(tmp_path / "journal")),
    )
    service = FocusService(
        config,
        MarkdownSessionLog(tmp_path / "journal", clock=clock),
        scheduler_factory=schedulers,
    )
    return FocusShell(service, Console(file=output, width=120))


def _finish_work(shell, schedulers):
    schedulers.current.fire(shell.service.snapshot().remaining_seconds)


class TestFocusShell:
    def test_idle_line_starts_task(self, shell, output):
        assert shell.handle("write tests") is True

        state = shell.service.snapshot()
        assert state.phase == Phase.WORKING
        assert state.current_task == "write tests"
        assert "Working on:" in output.getvalue()

    def test_line_while_working_is_a_note(self, shell, output, tmp_path):
        shell.handle("write tests")
        shell.handle("found a bug")

        assert "Note saved." in output.getvalue()
        assert "found a bug" in (tmp_path / "journal" / "2026-03-14.md").read_text(
            encoding="utf-8"
        )

    def test_reflection_after_work(self, shell, schedulers, output):
        shell.handle("write tests")
        _finish_work(shell, schedulers)

        assert shell.prompt() == "What did you accomplish? "
        shell.handle("all green")

        assert shell.service.snapshot().phase == Phase.ON_BREAK
        assert "Reflection saved." in output.getvalue()
        assert "Break started" in output.getvalue()

    @pytest.mark.parametrize("line", ["", "/skip", "/SKIP"])
    def test_reflection_can_be_skipped(self, shell, schedulers, output, line):
        shell.handle("write tests")
        _finish_work(shell, schedulers)

        shell.handle(line)

        assert shell.service.snapshot().phase == Phase.ON_BREAK
        assert "Reflection skipped." in output.getvalue()
        assert shell.service.session_log.has_open_session

    @pytest.mark.parametrize("line", ["/pause", "/resume", "/sikp", "/bogus"])
    def test_commands_at_reflection_prompt_are_not_saved(
        self, shell, schedulers, output, tmp_path, line
    ):
        shell.handle("write tests")
        _finish_work(shell, schedulers)

        shell.handle(line)

        state = shell.service.snapshot()
        assert state.phase == Phase.WORKING
        assert state.awaiting_reflection
        assert shell.service.session_log.has_open_session
        assert "### Reflection" not in (tmp_path / "journal" / "2026-03-14.md").read_text(
            encoding="utf-8"
        )

    def test_unknown_command_at_reflection_prompt(self, shell, schedulers, output):
        shell.handle("write tests")
        _finish_work(shell, schedulers)

        shell.handle("/sikp")

        assert "Unknown command:" in output.getvalue()
        assert shell.prompt() == "What did you accomplish? "

    def test_pause_at_reflection_prompt_then_reflect(self, shell, schedulers):
        shell.handle("write tests")
        _finish_work(shell, schedulers)

        shell.handle("/pause")
        shell.handle("all green")

        entry = shell.service.session_log.read_sessions()[0]
        assert entry.reflection == "all green"
        state = shell.service.snapshot()
        assert state.phase == Phase.ON_BREAK
        assert not state.paused

    def test_pause_while_idle(self, shell, output):
        shell.handle("/pause")
        shell.handle("/resume")

        assert "Nothing to pause." in output.getvalue()
        assert "Nothing to resume." in output.getvalue()

    def test_pause_and_resume(self, shell, output):
        shell.handle("write tests")

        shell.handle("/pause")
        assert shell.service.snapshot().paused
        assert "paused" in shell.prompt()

        shell.handle("/resume")
        assert not shell.service.snapshot().paused
        assert "Resumed." in output.getvalue()

    def test_reset(self, shell, output):
        shell.handle("write tests")
        shell.handle("/reset")

        assert shell.service.snapshot().phase == Phase.IDLE
        assert "Timer reset." in output.getvalue()

    def test_skip_while_working(self, shell, output):
        shell.handle("write tests")
        shell.handle("/skip")

        assert shell.service.snapshot().phase == Phase.WORKING
        assert "Nothing to skip yet." in output.getvalue()

    def test_unknown_command(self, shell, output, tmp_path):
        shell.handle("write tests")
        shell.handle("/bogus")

        assert "Unknown command:" in output.getvalue()
        assert "/bogus" not in (tmp_path / "journal" / "2026-03-14.md").read_text(
            encoding="utf-8"
        )

    def test_slash_command_while_idle_does_not_start(self, shell):
        shell.handle("/pause")

        assert shell.service.snapshot().phase == Phase.IDLE

    def test_status_and_help(self, shell, output):
        shell.handle("/status")
        shell.handle("/help")

        text = output.getvalue()
        assert "Ready" in text
        assert "/pause" in text

    @pytest.mark.parametrize("line", ["/quit", "/q", "/exit", "/QUIT"])
    def test_quit(self, shell, line):
        assert shell.handle(line) is False

    def test_prompts(self, shell):
        assert shell.prompt() == "What will you work on? "
        shell.handle("write tests")
        assert shell.prompt() == "🍅 01:00 > "

    def test_failed_write_is_reported(self, shell, output):
        shell.handle("write tests")
        shell.service.session_log.note = _raise_write_error

        shell.handle("a note")

        assert "Log not saved:" in output.getvalue()
        assert shell.service.snapshot().phase == Phase.WORKING

    def test_note_without_open_session_is_reported(self, shell, output):
        shell.handle("write tests")
        shell.service.session_log.done("closed elsewhere")

        shell.handle("late note")

        assert "nothing was logged" in output.getvalue()

    def test_loop_stops_at_end_of_input(self, shell):
        lines = iter(["write tests", "note one"])

        def read_line(prompt):
            try:
                return next(lines)
            except StopIteration:
                raise EOFError from None

        shell.loop(read_line)

        assert shell.service.snapshot().phase == Phase.WORKING

    def test_loop_stops_at_quit(self, shell):
        lines = iter(["/quit", "never read"])

        shell.loop(lambda prompt: next(lines))

        assert next(lines) == "never read"


def _raise_write_error(text):
    raise LogWriteError("disk full")


# ---------------------------------------------------------------------------
# run command
# ---------------------------------------------------------------------------


class TestRunCommand:
    def test_run_session_through_cli(self, config_service, tmp_path):
        result = runner.invoke(
            app, ["run"], input="write tests\nfirst note\n/pause\n/resume\n/quit\n"
        )

        assert result.exit_code == 0
        assert "Working on:" in result.output
        assert "Note saved." in result.output
        journals = list((tmp_path / "journal").glob("*.md"))
        assert len(journals) == 1
        content = journals[0].read_text(encoding="utf-8")
        assert "— write tests\n\n### Notes\n\nfirst note\n\n" in content

    def test_no_command_starts_timer(self, config_service, tmp_path):
        result = runner.invoke(app, [], input="/quit\n")

        assert result.exit_code == 0
        assert "Journal:" in result.output

    def test_end_of_input_exits_cleanly(self, config_service):
        result = runner.invoke(app, ["run"], input="write tests\n")

        assert result.exit_code == 0

    def test_uses_configured_format(self, config_service, tmp_path):
        config_service.set("log.format", "tsv")
        config_service.set("log.path", str(tmp_path / "focus.tsv"))

        result = runner.invoke(app, ["run"], input="write tests\n/quit\n")

        assert result.exit_code == 0
        assert "\tstart\twrite tests" in (tmp_path / "focus.tsv").read_text(encoding="utf-8")
