"""Sheet adapter factory — builds the Sheets client once from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.ports.sheet_port import SheetPort

if TYPE_CHECKING:
    from src.config import Settings


def create_sheet_adapter(settings: Settings) -> SheetPort:
    """Return a GoogleSheetsAdapter bound to GOOGLE_SHEETS_ID.

    Raises ConfigError if the service-account bundle is unusable.
    """
    from src.adapters.google_sheets import GoogleSheetsAdapter
    from src.integrations.google_auth import get_sheets_service

    service = get_sheets_service(settings.GOOGLE_SERVICE_ACCOUNT)
    return GoogleSheetsAdapter(service, settings.GOOGLE_SHEETS_ID)
