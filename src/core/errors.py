"""User-reportable error types.

Every message is meant to be shown to the chat user as-is.
"""

from __future__ import annotations


class TodoBotError(Exception):
    """Base class for errors surfaced to the user as a reply."""


class ConfigError(TodoBotError):
    """Missing or malformed required settings."""


class UnknownIdentityError(TodoBotError):
    """Requested username/alias is not registered."""

    def __init__(self, message: str, options: list[str] | None = None) -> None:
        super().__init__(message)
        self.options = options or []


class TableLocationError(TodoBotError):
    """The spreadsheet or a person's table could not be located."""
