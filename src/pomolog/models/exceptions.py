"""Custom exceptions for pomolog."""


class PomologError(Exception):
    """Base exception for all pomolog errors."""


class LogWriteError(PomologError):
    """Raised when the session log cannot be written (missing dir, permissions, disk full)."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ConfigError(PomologError):
    """Raised when a setting is unknown or its value is invalid."""


class LogReadError(PomologError):
    """Raised when an existing session log cannot be read back."""
