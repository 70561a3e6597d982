"""Fixtures for command tests: in-memory settings pointing at a temp journal."""

from __future__ import annotations

from contextlib import ExitStack
from unittest.mock import patch

import pytest

from pomolog.services.config_service import ConfigService
from pomolog.services.settings_store import MemorySettingsStore

_CONFIG_SERVICE_USERS = (
    "pomolog.commands.focus.get_config_service",
    "pomolog.commands.config.get_config_service",
    "pomolog.commands.log.get_config_service",
)


@pytest.fixture()
def config_service(tmp_path) -> ConfigService:
    """Settings kept in memory, with the journal under the test's temp dir."""
    service = ConfigService(MemorySettingsStore({"log_path": str(tmp_path / "journal")}))
    with ExitStack() as stack:
        for target in _CONFIG_SERVICE_USERS:
            stack.enter_context(patch(target, return_value=service))
        yield service
