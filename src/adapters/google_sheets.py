"""Google Sheets adapter — implements SheetPort for the Sheets API v4.

All Google-specific logic lives here. Core modules never import this directly;
they depend on the SheetPort protocol.
"""

from __future__ import annotations

import asyncio
import logging

from src.core.errors import TableLocationError
from src.data.models import SheetInfo
from src.ports.sheet_port import SheetError

logger = logging.getLogger(__name__)


class GoogleSheetsAdapter:
    """Google Sheets implementation of SheetPort.

    The discovery service is built once at process start and injected here.
    """

    def __init__(self, service, spreadsheet_id: str) -> None:
        self._service = service
        self._spreadsheet_id = spreadsheet_id

    async def get_leftmost_sheet(self) -> SheetInfo:
        try:
            request = self._service.spreadsheets().get(
                spreadsheetId=self._spreadsheet_id, fields="sheets.properties"
            )
            result = await asyncio.to_thread(request.execute)
        except Exception as exc:
            logger.error("Failed to fetch spreadsheet metadata: %s", exc)
            raise SheetError(f"Failed to read spreadsheet: {exc}") from exc

        sheets = result.get("sheets") or []
        if not sheets:
            raise TableLocationError("No sheets found in the spreadsheet")

        props = sheets[0].get("properties") or {}
        title = props.get("title")
        if not title:
            raise TableLocationError("First sheet has no title")

        return SheetInfo(title=title, sheet_id=props.get("sheetId", 0))

    async def read_range(self, a1_range: str) -> list[list[str]]:
        try:
            request = (
                self._service.spreadsheets()
                .values()
                .get(spreadsheetId=self._spreadsheet_id, range=a1_range)
            )
            result = await asyncio.to_thread(request.execute)
        except Exception as exc:
            logger.error("Failed to read range %s: %s", a1_range, exc)
            raise SheetError(f"Failed to read {a1_range}: {exc}") from exc

        rows = result.get("values", [])
        logger.debug("Read %d row(s) from %s", len(rows), a1_range)
        return [[str(cell) for cell in row] for row in rows]

    async def write_range(self, a1_range: str, values: list[list[str]]) -> None:
        try:
            request = self._service.spreadsheets().values().update(
                spreadsheetId=self._spreadsheet_id,
                range=a1_range,
                valueInputOption="RAW",
                body={"values": values},
            )
            await asyncio.to_thread(request.execute)
            logger.info("Wrote %d row(s) to %s", len(values), a1_range)
        except Exception as exc:
            logger.error("Failed to write range %s: %s", a1_range, exc)
            raise SheetError(f"Failed to write {a1_range}: {exc}") from exc

    async def insert_rows(self, sheet_id: int, at_row: int, count: int = 1) -> None:
        request = {
            "insertDimension": {
                "range": {
                    "sheetId": sheet_id,
                    "dimension": "ROWS",
                    "startIndex": at_row - 1,
                    "endIndex": at_row - 1 + count,
                },
                "inheritFromBefore": False,
            }
        }
        try:
            batch = self._service.spreadsheets().batchUpdate(
                spreadsheetId=self._spreadsheet_id,
                body={"requests": [request]},
            )
            await asyncio.to_thread(batch.execute)
            logger.info("Inserted %d row(s) at row %d", count, at_row)
        except Exception as exc:
            logger.error("Failed to insert rows at %d: %s", at_row, exc)
            raise SheetError(f"Failed to insert row {at_row}: {exc}") from exc
