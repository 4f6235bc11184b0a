"""Manuscript digitisation dashboard: Google Sheets -> status counts -> HTML.

Public API -- all symbols that tests and external code import live here.
Internally the code is split across focused submodules; this file
re-exports the stable public surface so ``from manuskrip import X`` works.
"""

from .classify import classify_rows, decode_row, is_skipped, normalize_status
from .credentials import CredentialProvider, FileCredentialProvider
from .errors import CredentialsError, DashboardError, SheetFetchError
from .models import (
    BUCKETS,
    STATUS_PHOTOGRAPHY,
    STATUS_POST_PROCESSING,
    STATUS_TRACING,
    STATUS_UPLOADED,
    Manuscript,
    RowDecodeError,
    Summary,
)
from .sources import SheetSource, build_sheets_service, fetch_rows
from .utils import (
    READ_RANGE,
    SCOPES,
    SPREADSHEET_ID,
    first_row_of_range,
    write_snapshot,
)
from .web import create_app, load_summary

__all__ = [
    # Models
    "Manuscript",
    "RowDecodeError",
    "Summary",
    "BUCKETS",
    "STATUS_UPLOADED",
    "STATUS_POST_PROCESSING",
    "STATUS_PHOTOGRAPHY",
    "STATUS_TRACING",
    # Errors
    "DashboardError",
    "CredentialsError",
    "SheetFetchError",
    # Constants
    "SCOPES",
    "SPREADSHEET_ID",
    "READ_RANGE",
    # Utils
    "first_row_of_range",
    "write_snapshot",
    # Credentials
    "CredentialProvider",
    "FileCredentialProvider",
    # Sources
    "build_sheets_service",
    "fetch_rows",
    "SheetSource",
    # Classification
    "is_skipped",
    "decode_row",
    "normalize_status",
    "classify_rows",
    # Web
    "create_app",
    "load_summary",
]
