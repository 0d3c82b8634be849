"""
Sheet To-Do Bot — Table Locator.

Every person's table lives on the leftmost sheet, one below the other.
Positions are recomputed from sheet content (or static configuration) on
every call so manual edits to the sheet never need a resync.

Column layout: B = Purpose, C = Goal, D = Status. Column A is unused.
"""

from __future__ import annotations

import logging

from src.core.errors import TableLocationError, TodoBotError
from src.core.registry import Registry
from src.data.models import FixedOffset, HeaderSearch, Identity, SheetInfo, TableRange
from src.ports.sheet_port import SheetError, SheetPort

logger = logging.getLogger(__name__)

HEADER_KEYWORDS = ("purpose", "goal", "status")

# Rows scanned past the anchor when no other table follows
TABLE_SAFETY_ROWS = 200
# Gap kept before the next table's anchor row
NEXT_TABLE_BUFFER = 2


def a1_range(sheet: SheetInfo, cells: str) -> str:
    """Qualify an A1 cell range with the (quoted) sheet title."""
    title = sheet.title.replace("'", "''")
    return f"'{title}'!{cells}"


def is_header_row(row: list[str]) -> bool:
    """True if the B, C, D cells contain purpose/goal/status (any case)."""
    if len(row) < len(HEADER_KEYWORDS):
        return False
    return all(
        keyword in str(cell).strip().lower()
        for keyword, cell in zip(HEADER_KEYWORDS, row)
    )


class TableLocator:
    """Finds where each registered person's table starts and ends."""

    def __init__(self, sheets: SheetPort, registry: Registry) -> None:
        self._sheets = sheets
        self._registry = registry

    async def get_leftmost_sheet(self) -> SheetInfo:
        return await self._sheets.get_leftmost_sheet()

    async def find_header_row(self, identity: Identity, sheet: SheetInfo) -> int:
        """Return the absolute row of the Purpose/Goal/Status header.

        Raises TableLocationError naming the searched bounds if none matches.
        """
        location = identity.location
        if not isinstance(location, HeaderSearch):
            raise TableLocationError(f"@{identity.username} has no header search range")

        rows = await self._sheets.read_range(
            a1_range(sheet, f"B{location.start}:D{location.end}")
        )
        for offset, row in enumerate(rows):
            if is_header_row(row):
                header_row = location.start + offset
                logger.debug("Found header row for @%s at row %d", identity.username, header_row)
                return header_row

        raise TableLocationError(
            f"Could not find header row (Purpose/Goal/Status) for @{identity.username} "
            f"in range {location.start}-{location.end}"
        )

    async def anchor_row(self, identity: Identity, sheet: SheetInfo) -> int:
        """Top row of a table: static start row, or the located header row."""
        if isinstance(identity.location, FixedOffset):
            return identity.location.start_row
        return await self.find_header_row(identity, sheet)

    @staticmethod
    def data_start_row(identity: Identity, anchor: int) -> int:
        if isinstance(identity.location, FixedOffset):
            return anchor
        return anchor + 1

    async def table_end_row(self, identity: Identity, sheet: SheetInfo, anchor: int) -> int:
        """Last data row: two rows above the next table's anchor, or anchor + 200."""
        next_anchor: int | None = None
        for other in self._registry.others(identity):
            try:
                other_anchor = await self.anchor_row(other, sheet)
            except (TodoBotError, SheetError) as exc:
                logger.debug("Skipping @%s while bounding table: %s", other.username, exc)
                continue
            if other_anchor > anchor and (next_anchor is None or other_anchor < next_anchor):
                next_anchor = other_anchor

        if next_anchor is None:
            return anchor + TABLE_SAFETY_ROWS
        return next_anchor - NEXT_TABLE_BUFFER

    async def locate_start(self, identity: Identity) -> tuple[SheetInfo, int]:
        """Leftmost sheet and first data row, without computing the table end."""
        sheet = await self.get_leftmost_sheet()
        anchor = await self.anchor_row(identity, sheet)
        return sheet, self.data_start_row(identity, anchor)

    async def locate(self, identity: Identity) -> TableRange:
        sheet = await self.get_leftmost_sheet()
        anchor = await self.anchor_row(identity, sheet)
        data_start = self.data_start_row(identity, anchor)
        data_end = await self.table_end_row(identity, sheet, anchor)
        logger.debug(
            "Located @%s table on '%s': rows %d-%d",
            identity.username, sheet.title, data_start, data_end,
        )
        return TableRange(sheet=sheet, data_start=data_start, data_end=data_end)
