"""Tests for src.config — settings loading and validation."""

import json
import logging

import pytest

from src.config import Settings, apply_log_level, load_settings, settings_presence
from src.core.errors import ConfigError


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
    monkeypatch.setenv("GOOGLE_SHEETS_ID", "sheet-id")
    monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT", json.dumps({"client_email": "a@b.c"}))
    monkeypatch.delenv("WEBHOOK_URL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    return monkeypatch


def test_loads_required_settings(env):
    settings = load_settings()
    assert settings.TELEGRAM_BOT_TOKEN == "123:abc"
    assert settings.GOOGLE_SHEETS_ID == "sheet-id"
    assert settings.GOOGLE_SERVICE_ACCOUNT == {"client_email": "a@b.c"}
    assert settings.WEBHOOK_URL == ""
    assert settings.LOG_LEVEL == "INFO"


def test_log_level_uppercased(env):
    env.setenv("LOG_LEVEL", "debug")
    assert load_settings().LOG_LEVEL == "DEBUG"


def test_unknown_log_level_is_config_error(env):
    env.setenv("LOG_LEVEL", "VERBOSE")
    with pytest.raises(ConfigError, match="LOG_LEVEL must be one of"):
        load_settings()


def test_apply_log_level_sets_root_logger(env):
    root = logging.getLogger()
    previous = root.level
    env.setenv("LOG_LEVEL", "warning")
    try:
        apply_log_level(load_settings())
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)


@pytest.mark.parametrize("key", ["TELEGRAM_BOT_TOKEN", "GOOGLE_SHEETS_ID", "GOOGLE_SERVICE_ACCOUNT"])
def test_missing_required_setting(env, key):
    env.delenv(key)
    with pytest.raises(ConfigError, match=key):
        load_settings()


def test_placeholder_value_counts_as_missing(env):
    env.setenv("TELEGRAM_BOT_TOKEN", "your-token-here")
    with pytest.raises(ConfigError, match="TELEGRAM_BOT_TOKEN"):
        load_settings()


def test_malformed_service_account(env):
    env.setenv("GOOGLE_SERVICE_ACCOUNT", "{not json")
    with pytest.raises(ConfigError, match="valid JSON"):
        load_settings()


def test_service_account_must_be_object(env):
    env.setenv("GOOGLE_SERVICE_ACCOUNT", "[1, 2]")
    with pytest.raises(ConfigError, match="JSON object"):
        load_settings()


def test_settings_accepts_dict_directly():
    settings = Settings(
        TELEGRAM_BOT_TOKEN="t", GOOGLE_SHEETS_ID="s", GOOGLE_SERVICE_ACCOUNT={"a": 1}
    )
    assert settings.GOOGLE_SERVICE_ACCOUNT == {"a": 1}


def test_settings_presence_hides_values(env):
    env.delenv("GOOGLE_SHEETS_ID")
    assert settings_presence() == {
        "TELEGRAM_BOT_TOKEN": True,
        "GOOGLE_SHEETS_ID": False,
        "GOOGLE_SERVICE_ACCOUNT": True,
    }
