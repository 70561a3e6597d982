"""Configuration models.

``AppConfig`` is the explicit configuration value handed to the timer engine
and the session log. It is built from the settings store by
``ConfigService`` and only re-read when the caller asks for it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from pomolog.models.focus.state import TimerDurations

LogFormat = Literal["markdown", "json", "tsv"]

DEFAULT_LOG_DIR = "~/pomodoro"

_DEFAULT_FILENAMES = {
    "json": "pomodoro.json",
    "tsv": "pomodoro.tsv",
}


class TimerConfig(BaseModel):
    """Work and break lengths."""

    work_minutes: int = Field(default=25, gt=0, description="Length of a work phase")
    break_minutes: int = Field(default=5, gt=0, description="Length of a break")

    def durations(self) -> TimerDurations:
        return TimerDurations.from_minutes(self.work_minutes, self.break_minutes)


class LogConfig(BaseModel):
    """Where and how sessions are journaled."""

    format: LogFormat = Field(default="markdown", description="Log encoding")
    path: str | None = Field(
        default=None,
        description="Journal directory (markdown) or log file (json, tsv)",
    )

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str | None) -> str | None:
        """Treat a blank path as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()

    def resolved_path(self) -> Path:
        """The configured path, or the default location for the format."""
        if self.path:
            return Path(self.path).expanduser()
        base = Path(DEFAULT_LOG_DIR).expanduser()
        if self.format == "markdown":
            return base
        return base / _DEFAULT_FILENAMES[self.format]


class AppConfig(BaseModel):
    """Main pomolog configuration"""

    timer: TimerConfig = Field(default_factory=TimerConfig)
    log: LogConfig = Field(default_factory=LogConfig)
