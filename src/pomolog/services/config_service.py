"""Configuration service for pomolog.

Bridges the durable settings store and the ``AppConfig`` value that the timer
engine and session log receive at construction. Settings are read once and
cached; components only see new values when the caller reloads.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir
from pydantic import BaseModel, ValidationError

from pomolog.models.config_models import AppConfig, LogConfig, TimerConfig
from pomolog.models.exceptions import ConfigError
from pomolog.services.settings_store import JsonSettingsStore, SettingsStore
from pomolog.utils.logger import get_logger

KEY_LOG_PATH = "log_path"
KEY_LOG_FORMAT = "log_format"
KEY_WORK_MINUTES = "work_minutes"
KEY_BREAK_MINUTES = "break_minutes"

# dotted config key -> (store key, value type, model, field)
SETTINGS: dict[str, tuple[str, type, type[BaseModel], str]] = {
    "timer.work_minutes": (KEY_WORK_MINUTES, int, TimerConfig, "work_minutes"),
    "timer.break_minutes": (KEY_BREAK_MINUTES, int, TimerConfig, "break_minutes"),
    "log.format": (KEY_LOG_FORMAT, str, LogConfig, "format"),
    "log.path": (KEY_LOG_PATH, str, LogConfig, "path"),
}


class ConfigService:
    """Loads, validates and saves pomolog settings."""

    def __init__(self, store: SettingsStore | None = None):
        """Initialize the config service."""
        if store is None:
            self.config_dir = Path(user_config_dir("pomolog"))
            store = JsonSettingsStore(self.config_dir / "settings.json")
        self.store = store
        self._config: AppConfig | None = None
        self._log = get_logger("config")

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Build the configuration from the store.

        A stored value that fails validation is ignored (with a warning) and
        its default is used instead.
        """
        sections: dict[type[BaseModel], dict[str, Any]] = {TimerConfig: {}, LogConfig: {}}
        for dotted, (store_key, value_type, model, field) in SETTINGS.items():
            value = self._read(store_key, value_type)
            if value is None:
                continue
            try:
                model(**{field: value})
            except ValidationError as e:
                self._log.warning(
                    "ignoring invalid setting %s=%r: %s", dotted, value, e.errors()[0]["msg"]
                )
                continue
            sections[model][field] = value

        self._config = AppConfig(
            timer=TimerConfig(**sections[TimerConfig]),
            log=LogConfig(**sections[LogConfig]),
        )
        return self._config

    def reload(self) -> AppConfig:
        """Drop the cached configuration and read the store again."""
        self._config = None
        return self.config

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        value: Any = self.config
        for part in key.split("."):
            if isinstance(value, BaseModel):
                value = getattr(value, part, None)
            else:
                return None
        return value

    def set(self, key: str, value: Any) -> AppConfig:
        """Validate and persist one setting, returning the new configuration."""
        if key not in SETTINGS:
            raise ConfigError(
                f"Unknown setting '{key}'. Known settings: {', '.join(SETTINGS)}"
            )
        store_key, value_type, model, field = SETTINGS[key]
        if value_type is int:
            try:
                value = int(value)
            except (TypeError, ValueError):
                raise ConfigError(f"{key} must be an integer, got {value!r}") from None
        else:
            value = str(value)

        try:
            validated = getattr(model(**{field: value}), field)
        except ValidationError as e:
            raise ConfigError(f"Invalid value for {key}: {e.errors()[0]['msg']}") from e

        if validated is None:
            self.store.delete(store_key)
        elif value_type is int:
            self.store.set_int(store_key, validated)
        else:
            self.store.set_string(store_key, validated)
        self._log.info("setting %s updated", key)
        return self.reload()

    def reset(self, key: str | None = None) -> AppConfig:
        """Reset one setting, or all of them, to defaults."""
        if key is None:
            keys = list(SETTINGS)
        elif key in SETTINGS:
            keys = [key]
        else:
            raise ConfigError(f"Unknown setting '{key}'")
        for dotted in keys:
            self.store.delete(SETTINGS[dotted][0])
        return self.reload()

    def _read(self, store_key: str, value_type: type) -> Any:
        if value_type is int:
            return self.store.get_int(store_key)
        return self.store.get_string(store_key)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
