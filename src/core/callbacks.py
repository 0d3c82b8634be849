"""Inline-button payloads for the "mark as done" flow.

Format: ``mark_done:<username>:<token>`` where token is ``show_list`` or the
decimal absolute row number to mark. Telegram caps callback data at 64 bytes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

MARK_DONE_PREFIX = "mark_done"
SHOW_LIST = "show_list"
MAX_CALLBACK_BYTES = 64

# Used by CallbackQueryHandler(pattern=...)
MARK_DONE_PATTERN = rf"^{MARK_DONE_PREFIX}:"

_ROW_RE = re.compile(r"^\d+$")


@dataclass(frozen=True)
class MarkDoneCallback:
    """Decoded payload. row is None for the show-list branch."""

    username: str
    row: int | None = None

    @property
    def show_list(self) -> bool:
        return self.row is None


def encode_mark_done(username: str, token: int | str = SHOW_LIST) -> str:
    if isinstance(token, int):
        if token < 1:
            raise ValueError(f"row must be >= 1, got {token}")
    elif token != SHOW_LIST:
        raise ValueError(f"invalid mark_done token: {token!r}")
    if ":" in username:
        raise ValueError(f"username may not contain ':': {username!r}")

    data = f"{MARK_DONE_PREFIX}:{username}:{token}"
    if len(data.encode("utf-8")) > MAX_CALLBACK_BYTES:
        raise ValueError(f"callback data too long: {data!r}")
    return data


def decode_mark_done(data: str | None) -> MarkDoneCallback | None:
    """Inverse of encode_mark_done; None for anything that isn't a valid payload."""
    if not data:
        return None
    parts = data.split(":")
    if len(parts) != 3 or parts[0] != MARK_DONE_PREFIX or not parts[1]:
        return None

    _, username, token = parts
    if token == SHOW_LIST:
        return MarkDoneCallback(username=username)
    if _ROW_RE.match(token) and int(token) >= 1:
        return MarkDoneCallback(username=username, row=int(token))
    return None
