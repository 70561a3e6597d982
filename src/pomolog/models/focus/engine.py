"""Work/break countdown state machine."""

from __future__ import annotations

import functools
import threading
from collections.abc import Callable

from pomolog.utils.logger import get_logger

from .scheduler import SchedulerFactory, ThreadTickScheduler, TickScheduler
from .state import Phase, TimerDurations, TimerState

PhaseCompleteHandler = Callable[[Phase], None]


class TimerEngine:
    """
    Countdown engine for one focus timer.

    Transitions return True when applied and False when the call is not valid
    in the current state; invalid calls never raise. Ticks come from a
    scheduler the engine owns while the countdown is running, or from direct
    ``tick()`` calls.

    The completion handler runs synchronously under the engine lock. Any
    transition attempted from inside it is rejected.
    """

    def __init__(
        self,
        durations: TimerDurations | None = None,
        on_phase_complete: PhaseCompleteHandler | None = None,
        scheduler_factory: SchedulerFactory = ThreadTickScheduler,
    ):
        self._durations = durations or TimerDurations()
        self._on_phase_complete = on_phase_complete
        self._scheduler_factory = scheduler_factory
        self._log = get_logger("engine")

        self._lock = threading.RLock()
        self._phase = Phase.IDLE
        self._remaining = self._durations.work_seconds
        self._phase_duration = 0
        self._paused = False
        self._task = ""
        self._awaiting_reflection = False

        self._scheduler: TickScheduler | None = None
        self._run_id = 0
        self._notifying = False

    # ----- State -----
    def snapshot(self) -> TimerState:
        with self._lock:
            return TimerState(
                phase=self._phase,
                remaining_seconds=self._remaining,
                paused=self._paused,
                current_task=self._task,
                awaiting_reflection=self._awaiting_reflection,
                phase_duration=self._phase_duration,
            )

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def current_task(self) -> str:
        return self._task

    @property
    def awaiting_reflection(self) -> bool:
        return self._awaiting_reflection

    @property
    def durations(self) -> TimerDurations:
        return self._durations

    @property
    def progress(self) -> float:
        return self.snapshot().progress

    @property
    def is_ticking(self) -> bool:
        scheduler = self._scheduler
        return scheduler is not None and scheduler.is_active

    # ----- Transitions -----
    def start(self, task: str) -> bool:
        """Begin a work phase for *task*. Only valid while idle."""
        with self._lock:
            if not self._can_transition("start"):
                return False
            if self._phase != Phase.IDLE:
                self._log.debug("start ignored: phase is %s", self._phase.value)
                return False
            self._task = task
            self._enter_phase(Phase.WORKING, self._durations.work_seconds)
            self._log.info("work started: %r (%ss)", task, self._remaining)
            return True

    def pause(self) -> bool:
        with self._lock:
            if not self._can_transition("pause"):
                return False
            if self._phase == Phase.IDLE:
                self._log.debug("pause ignored: idle")
                return False
            if not self._paused:
                self._paused = True
                self._stop_ticking()
                self._log.info("paused at %ss", self._remaining)
            return True

    def resume(self) -> bool:
        with self._lock:
            if not self._can_transition("resume"):
                return False
            if self._phase == Phase.IDLE:
                self._log.debug("resume ignored: idle")
                return False
            if self._paused:
                self._paused = False
                if self._remaining > 0:
                    self._start_ticking()
                self._log.info("resumed at %ss", self._remaining)
            return True

    def start_break(self) -> bool:
        """Leave a finished work phase for a break. Only valid once work hits zero."""
        with self._lock:
            if not self._can_transition("start_break"):
                return False
            work_finished = self._phase == Phase.WORKING and self._remaining == 0
            if not (self._awaiting_reflection or work_finished):
                self._log.debug(
                    "start_break ignored: phase=%s remaining=%s",
                    self._phase.value,
                    self._remaining,
                )
                return False
            self._awaiting_reflection = False
            self._enter_phase(Phase.ON_BREAK, self._durations.break_seconds)
            self._log.info("break started (%ss)", self._remaining)
            return True

    def reset(self) -> bool:
        """Return to idle from any state."""
        with self._lock:
            if not self._can_transition("reset"):
                return False
            self._stop_ticking()
            self._go_idle()
            self._task = ""
            self._log.info("reset")
            return True

    def reconfigure(self, durations: TimerDurations) -> None:
        """Use *durations* from the next phase on; a running countdown is untouched."""
        with self._lock:
            self._durations = durations
            if self._phase == Phase.IDLE:
                self._remaining = durations.work_seconds
            self._log.info(
                "durations set to %ss/%ss",
                durations.work_seconds,
                durations.break_seconds,
            )

    def tick(self) -> bool:
        """
        Advance the countdown by one second.

        Returns True if this tick completed the current phase. Ticks while idle,
        paused or waiting for a reflection are dropped.
        """
        with self._lock:
            return self._tick_locked()

    def close(self) -> None:
        """Stop the tick source and wait for it to wind down."""
        with self._lock:
            scheduler = self._scheduler
            self._stop_ticking()
        if scheduler is not None:
            scheduler.join(timeout=2.0)

    def __enter__(self) -> "TimerEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ----- Internals -----
    def _can_transition(self, name: str) -> bool:
        if self._notifying:
            self._log.warning("%s rejected: called from the completion handler", name)
            return False
        return True

    def _enter_phase(self, phase: Phase, duration: int) -> None:
        self._phase = phase
        self._remaining = duration
        self._phase_duration = duration
        self._paused = False
        self._start_ticking()

    def _go_idle(self) -> None:
        self._phase = Phase.IDLE
        self._remaining = self._durations.work_seconds
        self._phase_duration = 0
        self._paused = False
        self._awaiting_reflection = False

    def _tick_locked(self) -> bool:
        if self._phase == Phase.IDLE or self._paused or self._awaiting_reflection:
            return False
        if self._remaining <= 0:
            return False

        self._remaining -= 1
        if self._remaining > 0:
            return False

        completed = self._phase
        self._stop_ticking()
        self._log.info("%s phase complete", completed.value)
        self._notify(completed)
        if completed == Phase.WORKING:
            self._awaiting_reflection = True
        else:
            self._go_idle()
        return True

    def _notify(self, phase: Phase) -> None:
        if self._on_phase_complete is None:
            return
        self._notifying = True
        try:
            self._on_phase_complete(phase)
        except Exception:
            self._log.exception("phase completion handler failed for %s", phase.value)
        finally:
            self._notifying = False

    def _start_ticking(self) -> None:
        self._stop_ticking()
        self._run_id += 1
        self._scheduler = self._scheduler_factory(
            functools.partial(self._scheduled_tick, self._run_id)
        )
        self._scheduler.start()

    def _stop_ticking(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.stop()
        self._scheduler = None
        self._run_id += 1

    def _scheduled_tick(self, run_id: int) -> None:
        with self._lock:
            # A tick already in flight when its scheduler was stopped is stale.
            if run_id != self._run_id:
                return
            self._tick_locked()
