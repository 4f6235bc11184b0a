"""OAuth2 credential provider with token caching.

The provider owns the ``load-or-authorize -> refresh -> persist`` lifecycle
of the user's Sheets token so that the fetch layer only ever asks for
``provider.credentials()``.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

from .errors import CredentialsError
from .utils import SCOPES

log = logging.getLogger(__name__)

AUTH_MODES = ("console", "local-server")
CONSOLE_REDIRECT_URI = "http://localhost"

_SETUP_HINT = (
    "  1. Go to Google Cloud Console -> APIs & Services -> Credentials\n"
    "  2. Create OAuth 2.0 Client ID (Desktop app)\n"
    "  3. Download JSON and save as credentials.json in the working directory"
)


class CredentialProvider(Protocol):
    """Anything that can hand out valid Google credentials."""

    def credentials(self) -> Any:
        ...


class FileCredentialProvider:
    """Credentials backed by ``credentials.json`` and a cached ``token.json``.

    With ``interactive=False`` a missing or unusable token raises
    :class:`CredentialsError` instead of prompting, which is what the web
    server wants once startup authorization is done.
    """

    def __init__(
        self,
        credentials_file: Path,
        token_file: Path,
        *,
        scopes: Optional[list[str]] = None,
        interactive: bool = True,
        auth_mode: str = "console",
        prompt: Callable[[str], str] = input,
    ) -> None:
        if auth_mode not in AUTH_MODES:
            raise ValueError(f"auth_mode must be one of {AUTH_MODES}, got {auth_mode!r}")
        self.credentials_file = Path(credentials_file)
        self.token_file = Path(token_file)
        self.scopes = list(scopes or SCOPES)
        self.interactive = interactive
        self.auth_mode = auth_mode
        self.prompt = prompt
        self._creds: Any = None
        self._lock = threading.Lock()

    def credentials(self) -> Any:
        """Return valid credentials, refreshing or authorizing as needed."""
        with self._lock:
            creds = self._creds if self._creds is not None else self.load()
            if creds is not None and creds.valid:
                self._creds = creds
                return creds

            if creds is not None and creds.refresh_token:
                try:
                    self.refresh(creds)
                except CredentialsError:
                    if not self.interactive:
                        raise
                    log.warning("Token refresh failed; starting a new authorization")
                    creds = self.authorize()
            elif self.interactive:
                creds = self.authorize()
            else:
                raise CredentialsError(
                    f"No usable OAuth token in {self.token_file}. "
                    "Run with --authorize-only to create one."
                )

            self.persist(creds)
            self._creds = creds
            return creds

    def load(self) -> Any:
        """Read the cached token, or return None when absent or malformed."""
        from google.oauth2.credentials import Credentials

        if not self.token_file.exists():
            log.debug("No cached token at %s", self.token_file)
            return None
        try:
            return Credentials.from_authorized_user_file(str(self.token_file), self.scopes)
        except (ValueError, OSError) as exc:
            log.warning("Ignoring unreadable token file %s: %s", self.token_file, exc)
            return None

    def refresh(self, creds: Any) -> Any:
        from google.auth.exceptions import RefreshError, TransportError
        from google.auth.transport.requests import Request

        log.info("Refreshing expired OAuth token")
        try:
            creds.refresh(Request())
        except (RefreshError, TransportError) as exc:
            raise CredentialsError(f"Unable to refresh OAuth token: {exc}") from exc
        return creds

    def authorize(self) -> Any:
        """Run the installed-app authorization flow and return new credentials."""
        from google_auth_oauthlib.flow import InstalledAppFlow
        from oauthlib.oauth2.rfc6749.errors import OAuth2Error

        if not self.credentials_file.exists():
            raise CredentialsError(
                f"Credentials file not found: {self.credentials_file}\n{_SETUP_HINT}"
            )
        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                str(self.credentials_file), self.scopes
            )
        except (ValueError, OSError) as exc:
            raise CredentialsError(
                f"Unable to parse client secret file {self.credentials_file}: {exc}"
            ) from exc

        try:
            if self.auth_mode == "local-server":
                return flow.run_local_server(port=0)
            return self._authorize_console(flow)
        except (OAuth2Error, ValueError, OSError) as exc:
            raise CredentialsError(f"Unable to retrieve token from web: {exc}") from exc

    def _authorize_console(self, flow: Any) -> Any:
        flow.redirect_uri = CONSOLE_REDIRECT_URI
        auth_url, _state = flow.authorization_url(access_type="offline", prompt="consent")
        print(
            "Go to the following link in your browser then type the "
            f"authorization code:\n{auth_url}"
        )
        try:
            code = self.prompt("Authorization code: ").strip()
        except EOFError as exc:
            raise CredentialsError("Unable to read authorization code") from exc
        if not code:
            raise CredentialsError("Unable to read authorization code: empty input")

        flow.fetch_token(code=code)
        return flow.credentials

    def persist(self, creds: Any) -> Path:
        """Write *creds* to the token file (owner read/write only)."""
        try:
            self.token_file.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.token_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(creds.to_json())
            # O_CREAT mode is ignored for an existing file
            os.chmod(self.token_file, 0o600)
        except OSError as exc:
            raise CredentialsError(f"Unable to cache oauth token: {exc}") from exc
        log.info("Saved OAuth token to %s", self.token_file)
        return self.token_file
