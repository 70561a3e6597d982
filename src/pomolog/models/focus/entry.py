"""Session journal records."""

from dataclasses import dataclass, field
from datetime import datetime


def _parse(value: str | None) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO timestamp, got {value!r}")
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class Note:
    """A note taken during a work session."""

    text: str
    timestamp: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Note":
        """Create from dictionary."""
        if not isinstance(data["text"], str):
            raise TypeError("note text must be a string")
        return cls(text=data["text"], timestamp=_parse(data.get("timestamp")))


@dataclass
class SessionEntry:
    """One work interval: task, notes in insertion order, optional reflection."""

    start_time: datetime
    task: str
    notes: list[Note] = field(default_factory=list)
    reflection: str | None = None
    end_time: datetime | None = None
    closed: bool = False

    @property
    def is_open(self) -> bool:
        """An entry stays open until ``done()`` writes its closing marker."""
        return not self.closed

    def finish(self, reflection: str, end_time: datetime | None = None) -> None:
        """Record the reflection and the closing marker."""
        self.reflection = reflection
        self.end_time = end_time
        self.closed = True

    @property
    def note_texts(self) -> list[str]:
        return [note.text for note in self.notes]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "start_time": self.start_time.isoformat(),
            "task": self.task,
            "notes": [note.to_dict() for note in self.notes],
            "reflection": self.reflection,
            "end_time": self.end_time.isoformat() if self.end_time else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SessionEntry":
        """Create from dictionary."""
        if not isinstance(data.get("start_time"), str):
            raise TypeError("session start_time must be an ISO timestamp")
        if not isinstance(data.get("task"), str):
            raise TypeError("session task must be a string")
        reflection = data.get("reflection")
        if reflection is not None and not isinstance(reflection, str):
            raise TypeError("session reflection must be a string")
        end_time = _parse(data.get("end_time"))
        return cls(
            start_time=_parse(data["start_time"]),
            task=data["task"],
            notes=[Note.from_dict(n) for n in data.get("notes") or []],
            reflection=reflection,
            end_time=end_time,
            closed=end_time is not None,
        )
