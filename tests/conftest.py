"""Shared fixtures for the dashboard test suite.

No test touches the network: the Sheets service and credentials are fakes.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Configure verbose logging for test debugging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
    force=True,
)
log = logging.getLogger("conftest")

ROOT = Path(__file__).resolve().parent.parent


def make_row(
    call_number: str = "A1",
    status: str = "penelusuran",
    link: str = "https://opac.example/1",
    title: str = "Title A",
) -> list[str]:
    """Build an 11-cell sheet row with the given key fields."""
    return [call_number, title, "B1", "id", "jawi", "manuscript", "10", "20x30", status, "x", link]


class FakeProvider:
    """Credential provider that hands out a sentinel object."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls = 0

    def credentials(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return "fake-creds"


class FakeRequest:
    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error

    def execute(self):
        if self.error is not None:
            raise self.error
        return self.payload


class FakeValues:
    def __init__(self, service):
        self.service = service

    def get(self, spreadsheetId, range):
        self.service.requests.append({"spreadsheetId": spreadsheetId, "range": range})
        return FakeRequest(self.service.payload, self.service.error)


class FakeSpreadsheets:
    def __init__(self, service):
        self.service = service

    def values(self):
        return FakeValues(self.service)


class FakeService:
    """Mimics ``service.spreadsheets().values().get(...).execute()``."""

    def __init__(self, rows=None, *, payload=None, error=None):
        self.payload = payload if payload is not None else {"values": rows or []}
        self.error = error
        self.requests: list[dict] = []

    def spreadsheets(self):
        return FakeSpreadsheets(self)


class FakeSource:
    """Stands in for SheetSource in web tests."""

    read_range = "rekap!A2:L"

    def __init__(self, rows=None, error: Exception | None = None):
        self.rows = rows or []
        self.error = error
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.rows


@pytest.fixture
def sample_rows() -> list[list[str]]:
    """A small sheet covering every bucket plus both skip markers."""
    return [
        make_row("A1", "unggah", "https://opac.example/1"),
        make_row("A2", "sudah unggah ke repositori", "-"),
        make_row("-", "unggah"),
        make_row("A3", "pemotretan"),
        make_row("#REF!", "pemotretan"),
        make_row("A4", "penelusuran"),
        make_row("A5", "dalam antrian"),
        make_row("A6", "post processing"),
    ]


@pytest.fixture
def static_dir() -> Path:
    return ROOT / "static"


@pytest.fixture
def template_dir() -> Path:
    return ROOT
