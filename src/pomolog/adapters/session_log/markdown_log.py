"""Dated Markdown journal: one file per day, one ``##`` section per session."""

from __future__ import annotations

import re
from datetime import date, datetime
from pathlib import Path

from pomolog.models.exceptions import LogReadError
from pomolog.models.focus.entry import Note, SessionEntry

from .base import Clock, SessionLog

SESSION_HEADER = "## {time} — {task}\n\n"
NOTES_HEADER = "### Notes\n\n"
REFLECTION_BLOCK = "### Reflection\n\n{text}\n\n---\n"
CLOSING_LINE = "---"

_HEADER_RE = re.compile(r"^## (\d{2}):(\d{2}) — (.*)$")
_FILE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})\.md$")


def escape_block(text: str) -> str:
    """Backslash-prefix lines that would read back as journal markup."""
    return "\n".join(
        "\\" + line if line.startswith(("#", "\\")) or line == CLOSING_LINE else line
        for line in text.split("\n")
    )


def unescape_line(line: str) -> str:
    return line[1:] if line.startswith("\\") else line


class MarkdownSessionLog(SessionLog):
    """
    Journal kept as ``<directory>/YYYY-MM-DD.md``.

    A session looks like::

        ## 09:30 — draft outline

        ### Notes

        first note

        ### Reflection

        what got done

        ---

    The file of the open session is fixed when it starts, so a session that
    runs past midnight stays in the file it began in.
    """

    format_name = "markdown"

    def __init__(self, directory: Path | str, clock: Clock | None = None):
        super().__init__(directory, clock)
        self._open_file: Path | None = None
        self._notes_header_written = False
        self._recover()

    @property
    def has_open_session(self) -> bool:
        return self._open_file is not None

    def file_for(self, day: date) -> Path:
        return self.path / f"{day.isoformat()}.md"

    def start(self, task: str) -> None:
        now = self._clock()
        target = self.file_for(now.date())
        prefix = "\n" if target.exists() else ""
        self._append(
            target,
            prefix + SESSION_HEADER.format(time=now.strftime("%H:%M"), task=task),
        )
        self._open_file = target
        self._notes_header_written = False

    def note(self, text: str) -> bool:
        if self._open_file is None:
            self._log.debug("note dropped: no open session")
            return False
        block = f"{escape_block(text)}\n\n"
        if not self._notes_header_written:
            block = NOTES_HEADER + block
        self._append(self._open_file, block)
        self._notes_header_written = True
        return True

    def done(self, reflection: str) -> bool:
        if self._open_file is None:
            self._log.debug("reflection dropped: no open session")
            return False
        block = REFLECTION_BLOCK.format(text=escape_block(reflection))
        self._append(self._open_file, block)
        self._open_file = None
        self._notes_header_written = False
        return True

    def read_sessions(self) -> list[SessionEntry]:
        if not self.path.is_dir():
            return []
        entries: list[SessionEntry] = []
        for path in sorted(self.path.iterdir()):
            match = _FILE_RE.match(path.name)
            if not match or not path.is_file():
                continue
            day = date(*(int(part) for part in match.groups()))
            entries.extend(parse_journal(self._read(path), day))
        return entries

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise LogReadError(f"Could not read {path}: {e}") from e

    def _recover(self) -> None:
        """Pick up a session left open in today's file by an earlier run."""
        today = self.file_for(self._clock().date())
        if not today.is_file():
            return
        try:
            lines = today.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            self._log.warning("could not read %s to recover state: %s", today, e)
            return

        last_header = None
        for index, line in enumerate(lines):
            if _HEADER_RE.match(line):
                last_header = index
        if last_header is None:
            return

        tail = lines[last_header + 1 :]
        if CLOSING_LINE in tail:
            return
        self._open_file = today
        self._notes_header_written = NOTES_HEADER.strip() in tail
        self._log.info("resuming open session in %s", today)


def parse_journal(content: str, day: date) -> list[SessionEntry]:
    """Parse one day's journal into entries.

    Notes are paragraphs separated by blank lines, so a note that itself
    contains a blank line reads back as several notes. Lines written through
    ``escape_block`` lose their leading backslash.
    """
    entries: list[SessionEntry] = []
    current: SessionEntry | None = None
    section: str | None = None
    paragraph: list[str] = []

    def flush() -> None:
        if current is None or not paragraph:
            paragraph.clear()
            return
        text = "\n".join(paragraph)
        if section == "notes":
            current.notes.append(Note(text=text))
        elif section == "reflection":
            if current.reflection is None:
                current.reflection = text
            else:
                current.reflection += "\n\n" + text
        paragraph.clear()

    for line in content.splitlines():
        header = _HEADER_RE.match(line)
        if header:
            flush()
            hour, minute, task = header.groups()
            current = SessionEntry(
                start_time=datetime(
                    day.year, day.month, day.day, int(hour), int(minute)
                ).astimezone(),
                task=task,
            )
            entries.append(current)
            section = None
        elif line == NOTES_HEADER.strip():
            flush()
            section = "notes"
        elif line == "### Reflection":
            flush()
            section = "reflection"
        elif line == CLOSING_LINE:
            flush()
            if current is not None:
                if current.reflection is None:
                    current.reflection = ""
                current.closed = True
            section = None
        elif not line.strip():
            flush()
        else:
            paragraph.append(unescape_line(line))
    flush()
    return entries
