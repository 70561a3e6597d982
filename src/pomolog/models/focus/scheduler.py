"""Tick sources that drive the timer engine once per second."""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable

from pomolog.utils.logger import get_logger

TICK_INTERVAL = 1.0


class TickScheduler(ABC):
    """A repeating tick source the engine starts and stops as a scoped resource."""

    @abstractmethod
    def start(self) -> None:
        """Begin delivering ticks. A scheduler runs at most once; later calls are no-ops."""

    @abstractmethod
    def stop(self) -> None:
        """Stop delivering ticks. Safe to call repeatedly and from the tick callback."""

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """Whether ticks are currently being delivered."""

    def join(self, timeout: float | None = None) -> None:
        """Wait for the tick source to wind down after ``stop()``."""


SchedulerFactory = Callable[[Callable[[], None]], TickScheduler]


class ThreadTickScheduler(TickScheduler):
    """Delivers ticks from a daemon thread sleeping against a monotonic deadline.

    Each deadline is computed from the previous one rather than from "now",
    so a slow tick handler does not make the countdown drift.
    """

    def __init__(
        self,
        on_tick: Callable[[], None],
        interval: float = TICK_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._on_tick = on_tick
        self._interval = interval
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._log = get_logger("scheduler")

    @property
    def is_active(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run, name="pomolog-ticker", daemon=True
        )
        self._thread.start()
        self._log.debug("tick thread started")

    def stop(self) -> None:
        if self._stop_event.is_set():
            return
        self._stop_event.set()
        self._log.debug("tick thread stop requested")

    def join(self, timeout: float | None = None) -> None:
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return
        thread.join(timeout)

    def _run(self) -> None:
        deadline = self._clock() + self._interval
        while not self._stop_event.is_set():
            delay = deadline - self._clock()
            if delay > 0 and self._stop_event.wait(delay):
                break
            if self._stop_event.is_set():
                break
            try:
                self._on_tick()
            except Exception:
                self._log.exception("tick handler failed")
            deadline += self._interval
