"""Cross-cutting helpers: constants, range parsing, snapshot I/O."""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .models import Summary

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]
SPREADSHEET_ID = "1EDLv6f8ehprYBno9sRBrXvDXk07N_06KNM2c_VmxoYM"
READ_RANGE = "rekap!A2:L"

CREDENTIALS_FILE_NAME = "credentials.json"
TOKEN_FILE_NAME = "token.json"
TEMPLATE_NAME = "index.html"
STATIC_DIR_NAME = "static"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080

_A1_FIRST_ROW_RE = re.compile(r"^(?:.*!)?\$?[A-Za-z]*\$?(\d+)")


# ---------------------------------------------------------------------------
# Range helpers
# ---------------------------------------------------------------------------


def first_row_of_range(a1_range: str) -> int:
    """Return the sheet row number of the first row in *a1_range*.

    ``"rekap!A2:L"`` -> 2. Ranges without a row number (``"rekap!A:L"``,
    ``"rekap"``) start at row 1.
    """
    match = _A1_FIRST_ROW_RE.match(a1_range.strip())
    if not match:
        return 1
    return int(match.group(1))


# ---------------------------------------------------------------------------
# Snapshot I/O
# ---------------------------------------------------------------------------


def utcnow_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def write_snapshot(path: Path, summary: Summary) -> Path:
    """Write *summary* as JSON to *path* and return the path."""
    payload: dict[str, Any] = {"generated_at": utcnow_iso(), **summary.to_dict()}
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False, default=str)
    return path
