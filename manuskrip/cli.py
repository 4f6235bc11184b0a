"""CLI entrypoint for the manuscript digitisation dashboard.

Usage:
    python -m manuskrip
    python -m manuskrip --port 9000 --credentials ./secrets/credentials.json
    python -m manuskrip --authorize-only
    python -m manuskrip --snapshot output/summary.json
    python -m manuskrip --range "rekap!A2:L" --spreadsheet-id <SHEET_ID>
"""

from __future__ import annotations

import argparse
import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path

from .credentials import AUTH_MODES, FileCredentialProvider
from .errors import DashboardError
from .utils import (
    CREDENTIALS_FILE_NAME,
    DEFAULT_HOST,
    DEFAULT_PORT,
    READ_RANGE,
    SPREADSHEET_ID,
    STATIC_DIR_NAME,
    TOKEN_FILE_NAME,
    write_snapshot,
)

log = logging.getLogger(__name__)


def _setup_logging(*, verbose: bool, log_file: Path | None) -> None:
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    root_level = logging.DEBUG if verbose else logging.INFO
    root_logger.setLevel(root_level)

    console_fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    detailed_fmt = (
        "%(asctime)s | %(levelname)-8s | %(name)s | "
        "%(threadName)s | %(filename)s:%(lineno)d | %(message)s"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(root_level)
    console_handler.setFormatter(logging.Formatter(console_fmt, "%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=20 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(detailed_fmt, "%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(file_handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)
    if not verbose:
        logging.getLogger("werkzeug").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Manuscript digitisation dashboard (Google Sheets -> HTML)"
    )
    parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"Interface to listen on (default: {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port to listen on (default: {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--spreadsheet-id",
        default=SPREADSHEET_ID,
        help="Google Sheets spreadsheet ID",
    )
    parser.add_argument(
        "--range",
        dest="read_range",
        default=READ_RANGE,
        help=f"A1 range to read (default: {READ_RANGE})",
    )
    parser.add_argument(
        "--credentials",
        type=Path,
        default=Path(CREDENTIALS_FILE_NAME),
        help=f"Google OAuth2 client secret file (default: {CREDENTIALS_FILE_NAME})",
    )
    parser.add_argument(
        "--token",
        type=Path,
        default=None,
        help=f"Cached OAuth token (default: {TOKEN_FILE_NAME} next to --credentials)",
    )
    parser.add_argument(
        "--auth-mode",
        choices=AUTH_MODES,
        default="console",
        help="Authorization flow: paste a code (console) or local redirect (local-server)",
    )
    parser.add_argument(
        "--template-dir",
        type=Path,
        default=Path("."),
        help="Directory containing index.html (default: .)",
    )
    parser.add_argument(
        "--static-dir",
        type=Path,
        default=Path(STATIC_DIR_NAME),
        help=f"Directory served under /static (default: {STATIC_DIR_NAME}/)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--authorize-only",
        action="store_true",
        help="Authorize, save the token and exit",
    )
    mode.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help="Fetch and classify once, write the summary as JSON to this path and exit",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Optional rotating log file path",
    )
    args = parser.parse_args(argv)
    if args.token is None:
        args.token = args.credentials.parent / TOKEN_FILE_NAME

    return args


def main(argv: list[str] | None = None) -> None:
    """Authorize, then serve the dashboard (or run a one-off mode)."""
    from .sources import SheetSource
    from .web import create_app, load_summary

    args = parse_args(argv)
    _setup_logging(verbose=args.verbose, log_file=args.log_file)

    provider = FileCredentialProvider(
        args.credentials,
        args.token,
        interactive=True,
        auth_mode=args.auth_mode,
    )
    source = SheetSource(provider, args.spreadsheet_id, args.read_range)

    try:
        log.info("Authenticating with Google Sheets...")
        provider.credentials()
        if args.authorize_only:
            log.info("Token ready at %s", args.token)
            return

        if args.snapshot is not None:
            summary = load_summary(source)
            path = write_snapshot(args.snapshot, summary)
            log.info(
                "Snapshot written: %s (total=%s, errors=%s)",
                path,
                summary.total,
                len(summary.errors),
            )
            return
    except DashboardError as exc:
        log.error("%s", exc)
        sys.exit(1)

    # requests must never block on stdin
    provider.interactive = False

    app = create_app(source, template_dir=args.template_dir, static_dir=args.static_dir)
    log.info("Server started at http://%s:%s", args.host, args.port)
    app.run(host=args.host, port=args.port, threaded=True)
