"""
Session log interface.

A session log is append-only: ``start`` opens a record, ``note`` and ``done``
add to the open record, and nothing already written is ever rewritten in
meaning. Each concrete format recovers its "open session" from disk when it
is constructed, so a restarted process keeps appending to the same record.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from pomolog.models.exceptions import LogWriteError
from pomolog.models.focus.entry import SessionEntry
from pomolog.utils.logger import get_logger

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current local time with its UTC offset."""
    return datetime.now().astimezone()


class SessionLog(ABC):
    """Abstract base class for session log formats."""

    format_name: str = ""

    def __init__(self, path: Path | str, clock: Clock | None = None):
        self.path = Path(path).expanduser()
        self._clock = clock or local_now
        self._log = get_logger(f"session_log.{self.format_name}")

    @property
    def location(self) -> str:
        """Where the log lives, for display in settings."""
        return str(self.path)

    @property
    @abstractmethod
    def has_open_session(self) -> bool:
        """Whether ``note`` and ``done`` currently have a record to write to."""

    @abstractmethod
    def start(self, task: str) -> None:
        """Open a new session record stamped with the current time."""

    @abstractmethod
    def note(self, text: str) -> bool:
        """Append a note to the open session. Returns False if none is open."""

    @abstractmethod
    def done(self, reflection: str) -> bool:
        """Close the open session with *reflection*. Returns False if none is open."""

    @abstractmethod
    def read_sessions(self) -> list[SessionEntry]:
        """Parse every session recorded so far, oldest first."""

    def _append(self, path: Path, text: str) -> None:
        """Append *text* to *path*, creating the file and its directories if needed."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            self._log.error("append to %s failed: %s", path, e)
            raise LogWriteError(f"Could not write to {path}: {e}", str(path)) from e
