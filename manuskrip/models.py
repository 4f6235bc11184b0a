"""Shared data models for the dashboard."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

# Status buckets
STATUS_UPLOADED = "unggah"
STATUS_POST_PROCESSING = "post processing"
STATUS_PHOTOGRAPHY = "pemotretan"
STATUS_TRACING = "penelusuran"

BUCKETS = (STATUS_UPLOADED, STATUS_POST_PROCESSING, STATUS_PHOTOGRAPHY, STATUS_TRACING)


@dataclass(frozen=True)
class Manuscript:
    """One classified manuscript-tracking entry from a spreadsheet row."""

    call_number: str
    title: str
    bib_id: str
    language: str
    script: str
    media: str
    pages: str
    dimensions: str
    status: str
    catalog_link: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class RowDecodeError:
    """A spreadsheet row that could not be decoded into a Manuscript."""

    row_number: int
    message: str
    column: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {"row_number": self.row_number, "column": self.column, "message": self.message}


@dataclass(frozen=True)
class Summary:
    """Classified records plus per-bucket counts for one dashboard render.

    Contract invariant: ``uploaded + post_processing + photography + tracing == total``.
    """

    records: tuple[Manuscript, ...] = ()
    uploaded: int = 0
    post_processing: int = 0
    photography: int = 0
    tracing: int = 0
    errors: tuple[RowDecodeError, ...] = field(default=())

    def __post_init__(self) -> None:
        for name in ("uploaded", "post_processing", "photography", "tracing"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if self.uploaded + self.post_processing + self.photography + self.tracing != self.total:
            raise ValueError("bucket counts must add up to the number of records")

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records and not self.errors

    def counts(self) -> dict[str, int]:
        """Return ``{bucket status: count}`` in display order."""
        return {
            STATUS_UPLOADED: self.uploaded,
            STATUS_POST_PROCESSING: self.post_processing,
            STATUS_PHOTOGRAPHY: self.photography,
            STATUS_TRACING: self.tracing,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "counts": self.counts(),
            "records": [r.to_dict() for r in self.records],
            "errors": [e.to_dict() for e in self.errors],
        }
