"""Exception types raised by the credential, fetch and web layers."""

from __future__ import annotations

from typing import Optional


class DashboardError(Exception):
    """Base class for every error the dashboard reports."""


class CredentialsError(DashboardError):
    """Client secret or token could not be read, obtained or saved."""


class SheetFetchError(DashboardError):
    """The Sheets API request failed (network, auth, quota, not found)."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status
