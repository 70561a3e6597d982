"""Tab-delimited event log: one ``timestamp<TAB>type<TAB>text`` line per event."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pomolog.models.exceptions import LogReadError
from pomolog.models.focus.entry import Note, SessionEntry

from .base import Clock, SessionLog

EVENT_START = "start"
EVENT_NOTE = "note"
EVENT_DONE = "done"

_ESCAPES = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r"}
_UNESCAPES = {"\\": "\\", "t": "\t", "n": "\n", "r": "\r"}


def escape_field(text: str) -> str:
    """Escape characters that would break the one-line-per-event layout."""
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def unescape_field(text: str) -> str:
    out = []
    chars = iter(text)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, "")
        out.append(_UNESCAPES.get(nxt, "\\" + nxt))
    return "".join(out)


def format_line(timestamp: datetime, event: str, text: str) -> str:
    return f"{timestamp.isoformat(timespec='seconds')}\t{event}\t{escape_field(text)}\n"


def parse_line(line: str) -> tuple[datetime, str, str] | None:
    """Split one log line. Returns None for lines that are not valid events."""
    parts = line.rstrip("\n").split("\t")
    if len(parts) != 3:
        return None
    stamp, event, text = parts
    if event not in (EVENT_START, EVENT_NOTE, EVENT_DONE):
        return None
    try:
        timestamp = datetime.fromisoformat(stamp)
    except ValueError:
        return None
    return timestamp, event, unescape_field(text)


class TsvSessionLog(SessionLog):
    """Streaming log: every call appends one line and never reads the file back."""

    format_name = "tsv"

    def __init__(self, path: Path | str, clock: Clock | None = None):
        super().__init__(path, clock)
        self._open = False
        self._recover()

    @property
    def has_open_session(self) -> bool:
        return self._open

    def start(self, task: str) -> None:
        self._append(self.path, format_line(self._clock(), EVENT_START, task))
        self._open = True

    def note(self, text: str) -> bool:
        if not self._open:
            self._log.debug("note dropped: no open session")
            return False
        self._append(self.path, format_line(self._clock(), EVENT_NOTE, text))
        return True

    def done(self, reflection: str) -> bool:
        if not self._open:
            self._log.debug("reflection dropped: no open session")
            return False
        self._append(self.path, format_line(self._clock(), EVENT_DONE, reflection))
        self._open = False
        return True

    def read_sessions(self) -> list[SessionEntry]:
        if not self.path.exists():
            return []
        try:
            lines = self.path.read_text(encoding="utf-8").split("\n")
        except OSError as e:
            raise LogReadError(f"Could not read {self.path}: {e}") from e
        return self._build_entries(lines)

    def _build_entries(self, lines: list[str]) -> list[SessionEntry]:
        entries: list[SessionEntry] = []
        current: SessionEntry | None = None
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            parsed = parse_line(line)
            if parsed is None:
                self._log.warning("skipping malformed line %d in %s", number, self.path)
                continue
            timestamp, event, text = parsed
            if event == EVENT_START:
                current = SessionEntry(start_time=timestamp, task=text)
                entries.append(current)
            elif current is None or current.closed:
                continue
            elif event == EVENT_NOTE:
                current.notes.append(Note(text=text, timestamp=timestamp))
            else:
                current.finish(text, end_time=timestamp)
        return entries

    def _recover(self) -> None:
        if not self.path.is_file():
            return
        try:
            lines = self.path.read_text(encoding="utf-8").split("\n")
        except OSError as e:
            self._log.warning("could not read %s to recover state: %s", self.path, e)
            return
        entries = self._build_entries(lines)
        self._open = bool(entries) and entries[-1].is_open
        if self._open:
            self._log.info("resuming open session in %s", self.path)
