"""Durable key-value settings store."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from json import JSONDecodeError
from pathlib import Path

from pomolog.models.exceptions import ConfigError
from pomolog.utils.logger import get_logger


class SettingsStore(ABC):
    """String and integer settings that survive restarts.

    Getters return None when a key is absent or holds a value of the other
    type; callers apply their own defaults.
    """

    @abstractmethod
    def get_string(self, key: str) -> str | None:
        """Return the string stored under *key*, if any."""

    @abstractmethod
    def set_string(self, key: str, value: str) -> None:
        """Store a string under *key*."""

    @abstractmethod
    def get_int(self, key: str) -> int | None:
        """Return the integer stored under *key*, if any."""

    @abstractmethod
    def set_int(self, key: str, value: int) -> None:
        """Store an integer under *key*."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Forget *key*. Missing keys are ignored."""

    @abstractmethod
    def items(self) -> dict[str, str | int]:
        """All stored settings."""


def _as_string(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _as_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


class MemorySettingsStore(SettingsStore):
    """In-process store, used by tests and as a scratch store."""

    def __init__(self, initial: dict[str, str | int] | None = None):
        self._values: dict[str, str | int] = dict(initial or {})

    def get_string(self, key: str) -> str | None:
        return _as_string(self._values.get(key))

    def set_string(self, key: str, value: str) -> None:
        self._values[key] = str(value)

    def get_int(self, key: str) -> int | None:
        return _as_int(self._values.get(key))

    def set_int(self, key: str, value: int) -> None:
        self._values[key] = int(value)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def items(self) -> dict[str, str | int]:
        return dict(self._values)


class JsonSettingsStore(SettingsStore):
    """Settings kept in a small JSON object on disk.

    The file is re-read on every access so edits made by another process (or
    by hand) are picked up. A corrupt file reads as empty.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._log = get_logger("settings")

    def get_string(self, key: str) -> str | None:
        return _as_string(self._read().get(key))

    def set_string(self, key: str, value: str) -> None:
        self._update(key, str(value))

    def get_int(self, key: str) -> int | None:
        return _as_int(self._read().get(key))

    def set_int(self, key: str, value: int) -> None:
        self._update(key, int(value))

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def items(self) -> dict[str, str | int]:
        return self._read()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (JSONDecodeError, OSError) as e:
            self._log.warning("ignoring unreadable settings file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            self._log.warning("ignoring settings file %s: not an object", self.path)
            return {}
        return data

    def _update(self, key: str, value: str | int) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def _write(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)

            # Set secure permissions
            self.path.chmod(0o600)
        except OSError as e:
            raise ConfigError(f"Failed to save settings: {e}") from e
