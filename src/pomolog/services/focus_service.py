"""Focus session service.

Orchestrates:
- TimerEngine state
- session log writes (start before the timer, notes, reflection)
- the notification sink on phase completion
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from pomolog.adapters.session_log import SessionLog
from pomolog.models.config_models import AppConfig
from pomolog.models.exceptions import LogReadError, LogWriteError
from pomolog.models.focus.engine import TimerEngine
from pomolog.models.focus.scheduler import SchedulerFactory, ThreadTickScheduler
from pomolog.models.focus.state import Phase, TimerState
from pomolog.utils.logger import get_logger


class LogStatus(str, Enum):
    """Outcome of a journal write, for the UI to report."""

    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


class FocusService:
    """Runs one focus timer and journals its sessions."""

    def __init__(
        self,
        config: AppConfig,
        session_log: SessionLog,
        notifier: Callable[[Phase], None] | None = None,
        scheduler_factory: SchedulerFactory = ThreadTickScheduler,
    ):
        self.config = config
        self.session_log = session_log
        self.notifier = notifier
        self.last_error: str | None = None
        self._log = get_logger("focus")
        self.engine = TimerEngine(
            durations=config.timer.durations(),
            on_phase_complete=self._on_phase_complete,
            scheduler_factory=scheduler_factory,
        )

    # ----- Public API -----
    def snapshot(self) -> TimerState:
        return self.engine.snapshot()

    def start(self, task: str) -> LogStatus:
        """Journal the start of *task*, then start the work countdown.

        The timer starts even when the journal write fails; the returned
        status tells the caller whether the entry was saved.
        """
        task = task.strip()
        if not task:
            raise ValueError("A task is required to start the timer.")
        if self.engine.phase != Phase.IDLE:
            raise ValueError("A session is already running. Reset it first.")

        def open_entry() -> bool:
            self.session_log.start(task)
            return True

        status = self._write(open_entry, "start")
        self.engine.start(task)
        return status

    def note(self, text: str) -> LogStatus:
        text = text.strip()
        if not text:
            return LogStatus.SKIPPED
        return self._write(lambda: self.session_log.note(text), "note")

    def reflect(self, text: str) -> LogStatus:
        """Save the reflection for the finished work phase and start the break."""
        text = text.strip()
        if not text:
            self.skip_reflection()
            return LogStatus.SKIPPED
        if not self.engine.awaiting_reflection:
            self._log.debug("reflection ignored: no finished work phase")
            return LogStatus.SKIPPED
        status = self._write(lambda: self.session_log.done(text), "reflection")
        self.engine.start_break()
        return status

    def skip_reflection(self) -> bool:
        return self.engine.start_break()

    def pause(self) -> bool:
        return self.engine.pause()

    def resume(self) -> bool:
        return self.engine.resume()

    def reset(self) -> bool:
        return self.engine.reset()

    def reconfigure(self, config: AppConfig, session_log: SessionLog | None = None) -> None:
        """Apply new settings; a running countdown keeps its length."""
        self.config = config
        self.engine.reconfigure(config.timer.durations())
        if session_log is not None:
            self.session_log = session_log

    def close(self) -> None:
        self.engine.close()

    # ----- Internals -----
    def _write(self, action: Callable[[], bool], what: str) -> LogStatus:
        try:
            written = action()
        except (LogWriteError, LogReadError) as e:
            self.last_error = str(e)
            self._log.error("%s not saved: %s", what, e)
            return LogStatus.FAILED
        self.last_error = None
        return LogStatus.WRITTEN if written else LogStatus.SKIPPED

    def _on_phase_complete(self, phase: Phase) -> None:
        self._log.info("phase complete: %s", phase.value)
        if self.notifier is not None:
            self.notifier(phase)
