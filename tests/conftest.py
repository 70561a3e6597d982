"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from the real log directory, the
real settings file and wall-clock time.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from pomolog.models.focus.scheduler import TickScheduler


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_app_log(tmp_path_factory):
    """Send the application log to a temporary directory for every test."""
    import pomolog.utils.logger as logger_mod

    log_dir = tmp_path_factory.mktemp("logs")
    logger_mod._logger = None
    logging.getLogger("pomolog").handlers.clear()
    with patch("pomolog.utils.logger.user_log_dir", return_value=str(log_dir)):
        yield log_dir
    for handler in logging.getLogger("pomolog").handlers:
        handler.close()
    logging.getLogger("pomolog").handlers.clear()
    logger_mod._logger = None


# ---------------------------------------------------------------------------
# Deterministic ticks
# ---------------------------------------------------------------------------


class FakeScheduler(TickScheduler):
    """Scheduler that only ticks when the test calls ``fire()``."""

    def __init__(self, on_tick):
        self.on_tick = on_tick
        self.started = False
        self.stopped = False

    def start(self) -> None:
        if not self.stopped:
            self.started = True

    def stop(self) -> None:
        self.stopped = True

    @property
    def is_active(self) -> bool:
        return self.started and not self.stopped

    def fire(self, times: int = 1) -> None:
        """Deliver ticks the way a real scheduler thread would."""
        for _ in range(times):
            self.on_tick()


class SchedulerRecorder:
    """Factory handed to the engine; remembers every scheduler it built."""

    def __init__(self):
        self.created: list[FakeScheduler] = []

    def __call__(self, on_tick) -> FakeScheduler:
        scheduler = FakeScheduler(on_tick)
        self.created.append(scheduler)
        return scheduler

    @property
    def current(self) -> FakeScheduler | None:
        return self.created[-1] if self.created else None

    @property
    def active(self) -> list[FakeScheduler]:
        return [s for s in self.created if s.is_active]


@pytest.fixture()
def schedulers() -> SchedulerRecorder:
    return SchedulerRecorder()


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Callable clock that advances only when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 14, 9, 30, 0, tzinfo=timezone(timedelta(hours=1))))
