"""Focus mode - work/break timer and session journal."""

from .engine import TimerEngine
from .entry import Note, SessionEntry
from .scheduler import ThreadTickScheduler, TickScheduler
from .state import Phase, TimerDurations, TimerState

__all__ = [
    "Phase",
    "TimerState",
    "TimerDurations",
    "TimerEngine",
    "TickScheduler",
    "ThreadTickScheduler",
    "Note",
    "SessionEntry",
]
