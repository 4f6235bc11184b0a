"""Flask application serving the dashboard page and its static assets."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Union

from flask import Flask, render_template

from .classify import classify_rows
from .errors import CredentialsError, DashboardError, SheetFetchError
from .models import Summary
from .utils import STATIC_DIR_NAME, TEMPLATE_NAME, first_row_of_range

log = logging.getLogger(__name__)

SAFE_MESSAGES = {
    CredentialsError: (503, "Dashboard is not authorized to read the spreadsheet."),
    SheetFetchError: (502, "Unable to load manuscript data from the spreadsheet."),
}
GENERIC_ERROR = (500, "Unable to build the dashboard.")


def safe_response(exc: DashboardError) -> tuple[int, str]:
    """Return (status, message) for the closest registered base class of *exc*."""
    for cls in type(exc).__mro__:
        if cls in SAFE_MESSAGES:
            return SAFE_MESSAGES[cls]
    return GENERIC_ERROR


def load_summary(source: Any) -> Summary:
    """Run one fetch -> classify cycle against *source*."""
    rows = source.fetch()
    return classify_rows(rows, first_row=first_row_of_range(source.read_range))


def create_app(
    source: Any,
    template_dir: Union[str, Path] = ".",
    static_dir: Union[str, Path] = STATIC_DIR_NAME,
) -> Flask:
    """Build the app. *source* must provide ``fetch()`` and ``read_range``."""
    app = Flask(
        __name__,
        template_folder=str(Path(template_dir).resolve()),
        static_folder=str(Path(static_dir).resolve()),
        static_url_path="/static",
    )
    app.config["SHEET_SOURCE"] = source

    @app.route("/")
    def index():
        summary = load_summary(app.config["SHEET_SOURCE"])
        log.info(
            "Rendering dashboard: total=%s counts=%s errors=%s",
            summary.total,
            summary.counts(),
            len(summary.errors),
        )
        return render_template(TEMPLATE_NAME, summary=summary)

    @app.errorhandler(DashboardError)
    def dashboard_error(exc: DashboardError):
        status, message = safe_response(exc)
        log.error("Request failed with %s: %s", status, exc, exc_info=exc)
        return message, status, {"Content-Type": "text/plain; charset=utf-8"}

    return app
