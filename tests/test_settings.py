"""Tests for environment configuration loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.config.settings import Settings, load_settings

_ENV_VARS = (
    "APP_ENV",
    "DEFAULT_TIMEZONE",
    "TIMEZONE_TABLE_PATH",
    "HTTP_HOST",
    "HTTP_PORT",
    "TELEGRAM_BOT_TOKEN",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.app_env == "production"
    assert not settings.is_development
    assert settings.default_timezone == "UTC"
    assert settings.http_port == 3000
    assert settings.timezone_table_path is None
    assert settings.telegram_bot_token is None
    assert settings.log_level == "INFO"


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("DEFAULT_TIMEZONE", "Europe/Amsterdam")
    monkeypatch.setenv("HTTP_PORT", "8080")

    settings = Settings(_env_file=None)

    assert settings.is_development
    assert settings.default_timezone == "Europe/Amsterdam"
    assert settings.http_port == 8080


def test_unknown_reference_timezone_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, DEFAULT_TIMEZONE="Mars/Olympus_Mons")


def test_load_settings_wraps_validation_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTP_PORT", "not-a-port")

    with pytest.raises(RuntimeError, match="Invalid environment configuration"):
        load_settings()
