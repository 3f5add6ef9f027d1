"""Shared pytest configuration and fixtures."""

import sqlite3
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from statuspage.config import Settings, get_settings
from statuspage.store.db import get_connection, init_schema


@pytest.fixture(autouse=True)
def _no_dotenv() -> Generator[None]:
    """Block .env loading so a developer's local config never leaks into tests.

    Sets Settings.model_config['env_file'] = None before each test.
    Tests that use mock_settings bypass Settings() entirely, so this is transparent.
    """
    get_settings.cache_clear()
    original = Settings.model_config.get("env_file")
    Settings.model_config["env_file"] = None

    try:
        yield
    finally:
        Settings.model_config["env_file"] = original
        get_settings.cache_clear()


@pytest.fixture
def conn() -> Generator[sqlite3.Connection]:
    """In-memory SQLite connection with schema initialized."""
    connection = get_connection(":memory:")
    init_schema(connection)
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture
def mock_settings(tmp_path: Path) -> Generator[Any]:
    """Provide fake settings backed by a temporary database file.

    Patches get_settings at every import site so cached references are overridden.
    """
    fake_settings = type(
        "FakeSettings",
        (),
        {
            "db_path": str(tmp_path / "status.db"),
            "app_name": "Test Status",
            "app_timezone": "UTC",
            "app_incident_days": 7,
            "api_token": "test-token",
            "style_reds": "",
            "style_blues": "",
            "style_greens": "",
            "style_yellows": "",
            "action_rollover_seconds": 0,
        },
    )()
    with (
        patch("statuspage.config.get_settings", return_value=fake_settings),
        patch("statuspage.store.db.get_settings", return_value=fake_settings),
        patch("statuspage.api.main.get_settings", return_value=fake_settings),
        patch("statuspage.api.auth.get_settings", return_value=fake_settings),
        patch("statuspage.actions.scheduler.get_settings", return_value=fake_settings),
        patch("statuspage.cli.get_settings", return_value=fake_settings),
    ):
        yield fake_settings
