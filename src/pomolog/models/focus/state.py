"""Timer phase and state snapshot types."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_WORK_SECONDS = 25 * 60
DEFAULT_BREAK_SECONDS = 5 * 60


class Phase(str, Enum):
    """The timer's current mode."""

    IDLE = "idle"
    WORKING = "working"
    ON_BREAK = "on_break"

    @property
    def label(self) -> str:
        """Short human label used by the front end."""
        return _LABELS[self]


_LABELS = {
    Phase.IDLE: "Ready",
    Phase.WORKING: "Work",
    Phase.ON_BREAK: "Break",
}


@dataclass(frozen=True)
class TimerDurations:
    """Work and break lengths, in seconds."""

    work_seconds: int = DEFAULT_WORK_SECONDS
    break_seconds: int = DEFAULT_BREAK_SECONDS

    def __post_init__(self):
        if self.work_seconds <= 0 or self.break_seconds <= 0:
            raise ValueError("Durations must be positive")

    @classmethod
    def from_minutes(cls, work_minutes: int, break_minutes: int) -> "TimerDurations":
        """Build durations from whole minutes."""
        return cls(work_seconds=work_minutes * 60, break_seconds=break_minutes * 60)


@dataclass(frozen=True)
class TimerState:
    """Immutable snapshot of the engine state."""

    phase: Phase
    remaining_seconds: int
    paused: bool
    current_task: str
    awaiting_reflection: bool
    phase_duration: int = 0

    @property
    def is_running(self) -> bool:
        """True while the countdown is progressing."""
        return (
            self.phase != Phase.IDLE
            and not self.paused
            and not self.awaiting_reflection
            and self.remaining_seconds > 0
        )

    @property
    def progress(self) -> float:
        """Fraction of the current phase elapsed, in [0, 1]. Zero while idle."""
        if self.phase == Phase.IDLE or self.phase_duration <= 0:
            return 0.0
        fraction = 1 - self.remaining_seconds / self.phase_duration
        return min(1.0, max(0.0, fraction))

    @property
    def display_time(self) -> str:
        """Remaining time as MM:SS."""
        mins, secs = divmod(self.remaining_seconds, 60)
        return f"{mins:02d}:{secs:02d}"

    @property
    def title(self) -> str:
        """Compact status title: a tomato while idle, tomato and countdown otherwise."""
        if self.phase == Phase.IDLE:
            return "🍅"
        return f"🍅 {self.display_time}"
