"""
Sheet To-Do Bot — Google Sheets Authentication.

The bot authenticates as a service account: the spreadsheet must be shared
with the account's client_email. No interactive consent flow is involved.
"""

from __future__ import annotations

import logging

from google.oauth2 import service_account
from googleapiclient.discovery import build

from src.core.errors import ConfigError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def get_sheets_service(service_account_info: dict):
    """Build a Google Sheets API v4 service object from service-account data.

    Raises ConfigError if the credential bundle is unusable.
    """
    try:
        creds = service_account.Credentials.from_service_account_info(
            service_account_info, scopes=SCOPES
        )
    except (ValueError, KeyError) as exc:
        raise ConfigError(f"GOOGLE_SERVICE_ACCOUNT is not a valid service account: {exc}") from exc

    service = build("sheets", "v4", credentials=creds, cache_discovery=False)
    logger.info(
        "Google Sheets service built for %s",
        service_account_info.get("client_email", "(unknown account)"),
    )
    return service

