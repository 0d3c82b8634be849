"""
Sheet To-Do Bot — Row Operations.

Insert-at-top, list-pending and mark-done against a located table. The
newest item always occupies the first data row, so sheet order is
newest-first.

Row-mutating calls are serialized through one asyncio.Lock per service
(i.e. per spreadsheet within this process). Another process writing to the
same sheet can still shift rows under a stale row number.
"""

from __future__ import annotations

import asyncio
import logging

from src.core.locator import TableLocator, a1_range
from src.core.parser import ParsedTodo
from src.data.models import DONE_STATUS, Identity, TodoItem
from src.ports.sheet_port import SheetPort

logger = logging.getLogger(__name__)


def _cell(row: list[str], index: int) -> str:
    return str(row[index]).strip() if index < len(row) else ""


def rows_to_todos(rows: list[list[str]], first_row: int) -> list[TodoItem]:
    """Pending TodoItems from raw B:D rows that start at absolute row first_row.

    Rows with a blank purpose are gaps; rows whose status is "done" are
    finished. Both are skipped.
    """
    todos = []
    for offset, row in enumerate(rows):
        purpose = _cell(row, 0)
        if not purpose:
            continue
        item = TodoItem(
            purpose=purpose,
            goal=_cell(row, 1),
            status=_cell(row, 2),
            row_number=first_row + offset,
        )
        if not item.is_done:
            todos.append(item)
    return todos


class TodoService:
    """Reads and writes to-do rows of registered people's tables."""

    def __init__(self, sheets: SheetPort, locator: TableLocator) -> None:
        self._sheets = sheets
        self._locator = locator
        self._write_lock = asyncio.Lock()

    async def add_todo(self, identity: Identity, todo: ParsedTodo) -> TodoItem:
        """Insert a row at the top of the table and fill Purpose and Goal.

        The structural insert and the value write are separate calls; if the
        write fails the blank row stays.
        """
        async with self._write_lock:
            sheet, insert_row = await self._locator.locate_start(identity)
            logger.debug("Inserting todo for @%s at row %d", identity.username, insert_row)

            await self._sheets.insert_rows(sheet.sheet_id, insert_row, 1)
            await self._sheets.write_range(
                a1_range(sheet, f"B{insert_row}:C{insert_row}"),
                [[todo.purpose, todo.goal]],
            )

        logger.info("Added todo for @%s at row %d", identity.username, insert_row)
        return TodoItem(purpose=todo.purpose, goal=todo.goal, row_number=insert_row)

    async def get_todos_with_row_numbers(self, identity: Identity) -> list[TodoItem]:
        """Pending items in sheet order, each carrying its absolute row number."""
        table = await self._locator.locate(identity)
        if table.data_end < table.data_start:
            return []

        rows = await self._sheets.read_range(
            a1_range(table.sheet, f"B{table.data_start}:D{table.data_end}")
        )
        todos = rows_to_todos(rows, table.data_start)
        logger.debug("@%s has %d pending todo(s)", identity.username, len(todos))
        return todos

    async def list_todos(self, identity: Identity) -> list[TodoItem]:
        return await self.get_todos_with_row_numbers(identity)

    async def mark_done(self, identity: Identity, row_number: int) -> None:
        """Overwrite the Status cell of row_number with "done".

        row_number must come from a recent get_todos_with_row_numbers call.
        """
        async with self._write_lock:
            sheet = await self._locator.get_leftmost_sheet()
            await self._sheets.write_range(
                a1_range(sheet, f"D{row_number}"), [[DONE_STATUS]]
            )
        logger.info("Marked row %d as done for @%s", row_number, identity.username)
