"""
Sheet To-Do Bot — Data Models.

The spreadsheet is the only persistence layer. These types describe where a
person's table lives and what one row of it looks like once read back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

DONE_STATUS = "done"


@dataclass(frozen=True)
class FixedOffset:
    """Table whose first data row is a known, static row number."""

    start_row: int

    def __post_init__(self) -> None:
        if self.start_row < 1:
            raise ValueError(f"start_row must be >= 1, got {self.start_row}")


@dataclass(frozen=True)
class HeaderSearch:
    """Table found by scanning [start, end] for a Purpose/Goal/Status header."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 1 or self.end < self.start:
            raise ValueError(f"invalid search range {self.start}-{self.end}")


TableLocation = Union[FixedOffset, HeaderSearch]


@dataclass(frozen=True)
class Identity:
    """A registered person: Telegram username, table location and shortcuts."""

    username: str                       # e.g. "hesong07", without "@"
    location: TableLocation
    aliases: tuple[str, ...] = field(default_factory=tuple)   # e.g. ("he",)


@dataclass
class TodoItem:
    """One row of a person's table.

    row_number is the 1-based absolute sheet row, set only when the item
    came from a concrete read.
    """

    purpose: str
    goal: str = ""
    status: str = ""
    row_number: int | None = None

    @property
    def is_done(self) -> bool:
        return self.status.strip().lower() == DONE_STATUS


@dataclass(frozen=True)
class SheetInfo:
    """The leftmost tab of the spreadsheet."""

    title: str
    sheet_id: int


@dataclass(frozen=True)
class TableRange:
    """Located data rows (inclusive) of one person's table."""

    sheet: SheetInfo
    data_start: int
    data_end: int
