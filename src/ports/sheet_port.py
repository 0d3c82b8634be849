"""Sheet port — abstract interface for spreadsheet operations.

Core modules depend on this protocol, never on the Google client directly.
Rows are 1-based, ranges use A1 notation relative to a sheet title.
"""

from __future__ import annotations

from typing import Protocol

from src.data.models import SheetInfo


class SheetError(Exception):
    """Raised when any spreadsheet backend operation fails."""


class SheetPort(Protocol):
    """Abstract spreadsheet interface used by core modules."""

    async def get_leftmost_sheet(self) -> SheetInfo: ...

    async def read_range(self, a1_range: str) -> list[list[str]]: ...

    async def write_range(self, a1_range: str, values: list[list[str]]) -> None: ...

    async def insert_rows(self, sheet_id: int, at_row: int, count: int = 1) -> None: ...
