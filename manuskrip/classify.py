"""Row decoding and status classification.

Column layout of the ``rekap`` sheet (0-based)::

    0 call number   1 title   2 BIB ID   3 language   4 script
    5 media   6 pages   7 dimensions   8 status   9 (unused)   10 OPAC link
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any, Union

from .models import (
    STATUS_PHOTOGRAPHY,
    STATUS_POST_PROCESSING,
    STATUS_UPLOADED,
    Manuscript,
    RowDecodeError,
    Summary,
)

log = logging.getLogger(__name__)

SKIP_MARKERS = frozenset({"-", "#REF!"})
LINK_PLACEHOLDER = "-"

# field name -> column index
COLUMNS: dict[str, int] = {
    "call_number": 0,
    "title": 1,
    "bib_id": 2,
    "language": 3,
    "script": 4,
    "media": 5,
    "pages": 6,
    "dimensions": 7,
    "status": 8,
    "catalog_link": 10,
}
MIN_COLUMNS = max(COLUMNS.values()) + 1


def is_skipped(row: Sequence[Any]) -> bool:
    """True for placeholder and broken-reference rows."""
    return bool(row) and row[0] in SKIP_MARKERS


def decode_row(row: Sequence[Any], row_number: int) -> Union[Manuscript, RowDecodeError]:
    """Decode one raw row into a Manuscript with its raw status text.

    Returns a RowDecodeError instead of raising when the row is too short
    or a used cell is not text.
    """
    if len(row) < MIN_COLUMNS:
        return RowDecodeError(
            row_number=row_number,
            message=f"expected at least {MIN_COLUMNS} columns, got {len(row)}",
        )
    values: dict[str, str] = {}
    for name, index in COLUMNS.items():
        value = row[index]
        if not isinstance(value, str):
            return RowDecodeError(
                row_number=row_number,
                column=index,
                message=f"{name} must be text, got {type(value).__name__}",
            )
        values[name] = value
    return Manuscript(**values)


def normalize_status(status: str, catalog_link: str) -> str:
    """Collapse any "unggah" variant, then demote unlinked uploads."""
    if STATUS_UPLOADED in status:
        status = STATUS_UPLOADED
    if status == STATUS_UPLOADED and catalog_link == LINK_PLACEHOLDER:
        # uploaded but not yet published to the catalog
        status = STATUS_POST_PROCESSING
    return status


def classify_rows(rows: Iterable[Sequence[Any]], first_row: int = 1) -> Summary:
    """Classify raw sheet rows into a Summary.

    *first_row* is the sheet row number of the first item in *rows*; it is
    only used to label decode errors.
    """
    records: list[Manuscript] = []
    errors: list[RowDecodeError] = []
    counts = {
        STATUS_UPLOADED: 0,
        STATUS_POST_PROCESSING: 0,
        STATUS_PHOTOGRAPHY: 0,
    }
    tracing = 0
    skipped = 0

    for offset, row in enumerate(rows):
        if is_skipped(row):
            skipped += 1
            continue

        decoded = decode_row(row, first_row + offset)
        if isinstance(decoded, RowDecodeError):
            log.warning("Row %s: %s", decoded.row_number, decoded.message)
            errors.append(decoded)
            continue

        status = normalize_status(decoded.status, decoded.catalog_link)
        if status in counts:
            counts[status] += 1
        else:
            tracing += 1

        if status != decoded.status:
            decoded = Manuscript(**{**decoded.to_dict(), "status": status})
        records.append(decoded)

    if not records and not errors and not skipped:
        log.info("No data found.")

    log.debug(
        "Classified rows: records=%s skipped=%s errors=%s",
        len(records),
        skipped,
        len(errors),
    )
    return Summary(
        records=tuple(records),
        uploaded=counts[STATUS_UPLOADED],
        post_processing=counts[STATUS_POST_PROCESSING],
        photography=counts[STATUS_PHOTOGRAPHY],
        tracing=tracing,
        errors=tuple(errors),
    )
