"""
Sheet To-Do Bot — Centralized configuration.

Loads all settings from .env and validates required keys.
The polling entry point treats a ConfigError as fatal; the webhook catches it
per request so Telegram still gets its acknowledgement.
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

from src.core.errors import ConfigError

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

# Load .env from project root (one level up from src/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Telegram
    TELEGRAM_BOT_TOKEN: str

    # Google Sheets
    GOOGLE_SHEETS_ID: str
    GOOGLE_SERVICE_ACCOUNT: dict   # service-account JSON, parsed

    # Webhook deployment (optional): public URL Telegram should POST to
    WEBHOOK_URL: str = ""

    LOG_LEVEL: str = "INFO"

    @field_validator("GOOGLE_SERVICE_ACCOUNT", mode="before")
    @classmethod
    def parse_service_account(cls, v: str | dict) -> dict:
        if isinstance(v, dict):
            return v
        try:
            data = json.loads(v)
        except (TypeError, json.JSONDecodeError) as exc:
            raise ValueError("GOOGLE_SERVICE_ACCOUNT must be valid JSON") from exc
        if not isinstance(data, dict):
            raise ValueError("GOOGLE_SERVICE_ACCOUNT must be a JSON object")
        return data

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def check_level(cls, v: str) -> str:
        level = (v or "INFO").strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return level


_REQUIRED = ("TELEGRAM_BOT_TOKEN", "GOOGLE_SHEETS_ID", "GOOGLE_SERVICE_ACCOUNT")


def load_settings() -> Settings:
    """Load settings from environment, validating required keys.

    Raises ConfigError naming every missing or malformed setting.
    """
    missing = [
        key for key in _REQUIRED
        if not os.getenv(key, "").strip() or os.getenv(key, "").startswith("your-")
    ]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    try:
        return Settings(
            TELEGRAM_BOT_TOKEN=os.environ["TELEGRAM_BOT_TOKEN"],
            GOOGLE_SHEETS_ID=os.environ["GOOGLE_SHEETS_ID"],
            GOOGLE_SERVICE_ACCOUNT=os.environ["GOOGLE_SERVICE_ACCOUNT"],
            WEBHOOK_URL=os.getenv("WEBHOOK_URL", ""),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        )
    except ValidationError as exc:
        problems = "; ".join(err["msg"] for err in exc.errors())
        raise ConfigError(f"Invalid configuration: {problems}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    return load_settings()


def apply_log_level(settings: Settings) -> None:
    """Set the root logger to the configured LOG_LEVEL."""
    logging.getLogger().setLevel(settings.LOG_LEVEL)


def settings_presence() -> dict[str, bool]:
    """Which required settings are present, for diagnostics without leaking values."""
    return {key: bool(os.getenv(key)) for key in _REQUIRED}
