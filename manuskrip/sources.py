"""Google Sheets API access."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .credentials import CredentialProvider
from .errors import CredentialsError, SheetFetchError
from .utils import READ_RANGE, SPREADSHEET_ID

log = logging.getLogger(__name__)


def build_sheets_service(creds: Any) -> Any:
    """Build a Sheets v4 service object for *creds*."""
    from googleapiclient.discovery import build
    from googleapiclient.errors import Error

    try:
        return build("sheets", "v4", credentials=creds, cache_discovery=False)
    except Error as exc:
        raise SheetFetchError(f"Unable to retrieve Sheets client: {exc}") from exc


def fetch_rows(service: Any, spreadsheet_id: str, read_range: str) -> list[list[Any]]:
    """Fetch *read_range* from *spreadsheet_id* and return its rows.

    Rows are returned as the API hands them out: lists of untyped cell
    values, with trailing empty cells trimmed.
    """
    import httplib2
    from google.auth.exceptions import GoogleAuthError, RefreshError
    from googleapiclient.errors import HttpError

    try:
        response = (
            service.spreadsheets()
            .values()
            .get(spreadsheetId=spreadsheet_id, range=read_range)
            .execute()
        )
    except HttpError as exc:
        status = exc.resp.status if exc.resp is not None else None
        raise SheetFetchError(
            f"Unable to retrieve data from sheet {spreadsheet_id} ({read_range}): "
            f"HTTP {status} {exc.reason}",
            status=int(status) if status is not None else None,
        ) from exc
    except RefreshError as exc:
        raise CredentialsError(f"Unable to refresh OAuth token: {exc}") from exc
    except (httplib2.HttpLib2Error, GoogleAuthError, OSError) as exc:
        raise SheetFetchError(
            f"Unable to retrieve data from sheet {spreadsheet_id} ({read_range}): {exc}"
        ) from exc

    rows = response.get("values", [])
    log.debug("Fetched %s rows from %s", len(rows), read_range)
    return rows


class SheetSource:
    """Fetches the fixed manuscript range using injected credentials."""

    def __init__(
        self,
        provider: CredentialProvider,
        spreadsheet_id: str = SPREADSHEET_ID,
        read_range: str = READ_RANGE,
        *,
        service_factory: Optional[Any] = None,
    ) -> None:
        self.provider = provider
        self.spreadsheet_id = spreadsheet_id
        self.read_range = read_range
        self.service_factory = service_factory or build_sheets_service

    def fetch(self) -> list[list[Any]]:
        creds = self.provider.credentials()
        service = self.service_factory(creds)
        return fetch_rows(service, self.spreadsheet_id, self.read_range)
