"""Structured log: the whole history as one JSON array, rewritten atomically."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from pomolog.models.exceptions import LogReadError, LogWriteError
from pomolog.models.focus.entry import Note, SessionEntry

from .base import Clock, SessionLog


class JsonSessionLog(SessionLog):
    """
    Keeps every session in a single JSON array.

    JSON arrays cannot be appended to in place, so every mutation reads the
    array, changes the last element (or appends one), and replaces the file
    through a temporary file in the same directory. The open session is
    always the last element when it has no ``end_time``.

    Content that does not parse as a list of sessions counts as no prior
    entries. Before the first rewrite it is moved aside to
    ``<name>.corrupt-<timestamp>`` so it can still be recovered by hand.
    """

    format_name = "json"

    def __init__(self, path: Path | str, clock: Clock | None = None):
        super().__init__(path, clock)

    @property
    def has_open_session(self) -> bool:
        entries = self._load()
        return bool(entries) and entries[-1].is_open

    def start(self, task: str) -> None:
        entries = self._load(preserve_corrupt=True)
        entries.append(SessionEntry(start_time=self._clock(), task=task))
        self._save(entries)

    def note(self, text: str) -> bool:
        entries = self._load(preserve_corrupt=True)
        if not entries or not entries[-1].is_open:
            self._log.debug("note dropped: no open session")
            return False
        entries[-1].notes.append(Note(text=text, timestamp=self._clock()))
        self._save(entries)
        return True

    def done(self, reflection: str) -> bool:
        entries = self._load(preserve_corrupt=True)
        if not entries or not entries[-1].is_open:
            self._log.debug("reflection dropped: no open session")
            return False
        entries[-1].finish(reflection, end_time=self._clock())
        self._save(entries)
        return True

    def read_sessions(self) -> list[SessionEntry]:
        return self._load()

    def _load(self, preserve_corrupt: bool = False) -> list[SessionEntry]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise LogReadError(f"Could not read {self.path}: {e}") from e

        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError("log root is not a list")
            return [SessionEntry.from_dict(item) for item in data]
        except (json.JSONDecodeError, TypeError, KeyError, ValueError, AttributeError) as e:
            self._log.warning("ignoring malformed log %s: %s", self.path, e)
            if preserve_corrupt:
                self._move_aside()
            return []

    def _move_aside(self) -> None:
        stamp = self._clock().strftime("%Y%m%dT%H%M%S")
        backup = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            os.replace(self.path, backup)
        except OSError as e:
            raise LogWriteError(
                f"Could not move malformed log {self.path} aside: {e}", str(self.path)
            ) from e
        self._log.warning("malformed log preserved as %s", backup)

    def _save(self, entries: list[SessionEntry]) -> None:
        payload = json.dumps(
            [entry.to_dict() for entry in entries], indent=2, ensure_ascii=False
        )
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(payload + "\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            self._log.error("rewrite of %s failed: %s", self.path, e)
            raise LogWriteError(f"Could not write to {self.path}: {e}", str(self.path)) from e
