"""Session log formats and the factory that picks one from the config."""

from __future__ import annotations

from pomolog.models.config_models import LogConfig

from .base import Clock, SessionLog, local_now
from .json_log import JsonSessionLog
from .markdown_log import MarkdownSessionLog
from .tsv_log import TsvSessionLog

_FORMATS: dict[str, type[SessionLog]] = {
    "markdown": MarkdownSessionLog,
    "json": JsonSessionLog,
    "tsv": TsvSessionLog,
}


def create_session_log(config: LogConfig, clock: Clock | None = None) -> SessionLog:
    """Build the session log described by *config*."""
    try:
        log_class = _FORMATS[config.format]
    except KeyError:
        raise ValueError(f"Unknown log format: {config.format}") from None
    return log_class(config.resolved_path(), clock=clock)


__all__ = [
    "Clock",
    "SessionLog",
    "MarkdownSessionLog",
    "JsonSessionLog",
    "TsvSessionLog",
    "create_session_log",
    "local_now",
]
