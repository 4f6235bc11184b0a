"""Tests for row decoding, status normalisation and aggregation."""

from __future__ import annotations

import logging

import pytest

from conftest import make_row
from manuskrip import (
    Manuscript,
    RowDecodeError,
    Summary,
    classify_rows,
    decode_row,
    is_skipped,
    normalize_status,
)


# =========================================================================
# 1. Skip markers
# =========================================================================


class TestIsSkipped:
    @pytest.mark.parametrize("marker", ["-", "#REF!"])
    def test_placeholder_rows_are_skipped(self, marker):
        assert is_skipped(make_row(marker)) is True

    def test_regular_row_is_kept(self):
        assert is_skipped(make_row("A1")) is False

    def test_empty_row_is_not_a_skip(self):
        assert is_skipped([]) is False

    def test_skip_ignores_short_rows(self):
        assert is_skipped(["-"]) is True


# =========================================================================
# 2. Row decoding
# =========================================================================


class TestDecodeRow:
    def test_maps_fixed_columns(self):
        record = decode_row(make_row("A1", "pemotretan", "https://opac.example/1"), 2)
        assert record == Manuscript(
            call_number="A1",
            title="Title A",
            bib_id="B1",
            language="id",
            script="jawi",
            media="manuscript",
            pages="10",
            dimensions="20x30",
            status="pemotretan",
            catalog_link="https://opac.example/1",
        )

    def test_column_nine_is_ignored(self):
        row = make_row()
        row[9] = 12345
        assert isinstance(decode_row(row, 2), Manuscript)

    def test_short_row_is_decode_error(self):
        error = decode_row(["A1", "Title"], 7)
        assert isinstance(error, RowDecodeError)
        assert error.row_number == 7
        assert error.column is None
        assert "got 2" in error.message

    def test_missing_trailing_link_is_decode_error(self):
        error = decode_row(make_row()[:10], 3)
        assert isinstance(error, RowDecodeError)

    def test_non_text_cell_is_decode_error(self):
        row = make_row()
        row[6] = 10
        error = decode_row(row, 4)
        assert isinstance(error, RowDecodeError)
        assert error.column == 6
        assert "pages" in error.message
        assert "int" in error.message

    def test_empty_row_is_decode_error(self):
        assert isinstance(decode_row([], 5), RowDecodeError)


# =========================================================================
# 3. Status normalisation
# =========================================================================


class TestNormalizeStatus:
    @pytest.mark.parametrize(
        "raw", ["unggah", "sudah unggah", "unggah ulang", "proses unggah (batch 2)"]
    )
    def test_unggah_substring_collapses(self, raw):
        assert normalize_status(raw, "https://opac.example/1") == "unggah"

    def test_unlinked_upload_becomes_post_processing(self):
        assert normalize_status("sudah unggah", "-") == "post processing"

    def test_override_only_applies_to_uploads(self):
        assert normalize_status("pemotretan", "-") == "pemotretan"

    def test_empty_link_is_not_the_placeholder(self):
        assert normalize_status("unggah", "") == "unggah"

    def test_match_is_case_sensitive(self):
        assert normalize_status("Unggah", "-") == "Unggah"

    def test_other_values_pass_through(self):
        assert normalize_status("penelusuran", "-") == "penelusuran"


# =========================================================================
# 4. Aggregation
# =========================================================================


class TestClassifyRows:
    def test_end_to_end_unlinked_upload(self):
        row = ["A1", "Title A", "B1", "id", "jawi", "manuscript", "10", "20x30", "unggah", "x", "-"]
        summary = classify_rows([row])
        assert summary.total == 1
        assert summary.post_processing == 1
        assert summary.uploaded == 0
        assert summary.photography == 0
        assert summary.tracing == 0
        assert summary.records[0].status == "post processing"

    def test_end_to_end_skipped_row(self):
        summary = classify_rows([make_row("-", title="Title B")])
        assert summary.total == 0
        assert summary.records == ()
        assert summary.counts() == {
            "unggah": 0,
            "post processing": 0,
            "pemotretan": 0,
            "penelusuran": 0,
        }

    def test_empty_input(self, caplog):
        with caplog.at_level(logging.INFO, logger="manuskrip.classify"):
            summary = classify_rows([])
        assert summary == Summary()
        assert summary.total == 0
        assert summary.is_empty
        assert "No data found." in caplog.text

    def test_linked_upload_counts_as_uploaded(self):
        summary = classify_rows([make_row("A1", "sudah unggah", "https://opac.example/1")])
        assert summary.uploaded == 1
        assert summary.post_processing == 0
        assert summary.records[0].status == "unggah"

    def test_sample_sheet_buckets(self, sample_rows):
        summary = classify_rows(sample_rows)
        assert [r.call_number for r in summary.records] == ["A1", "A2", "A3", "A4", "A5", "A6"]
        assert summary.total == 6
        assert summary.uploaded == 1
        assert summary.post_processing == 2
        assert summary.photography == 1
        assert summary.tracing == 2

    def test_unknown_status_kept_verbatim_but_counted_as_tracing(self, sample_rows):
        summary = classify_rows(sample_rows)
        by_call = {r.call_number: r for r in summary.records}
        assert by_call["A5"].status == "dalam antrian"

    def test_buckets_sum_to_total(self, sample_rows):
        summary = classify_rows(sample_rows * 3)
        assert sum(summary.counts().values()) == summary.total

    def test_duplicates_are_kept_in_order(self):
        rows = [make_row("A1", "pemotretan"), make_row("A1", "penelusuran")]
        summary = classify_rows(rows)
        assert [r.status for r in summary.records] == ["pemotretan", "penelusuran"]

    def test_idempotent(self, sample_rows):
        assert classify_rows(sample_rows) == classify_rows(sample_rows)

    def test_does_not_mutate_input(self, sample_rows):
        before = [list(row) for row in sample_rows]
        classify_rows(sample_rows)
        assert sample_rows == before

    def test_malformed_rows_are_reported_not_counted(self, caplog):
        bad = make_row("A2")
        bad[8] = None
        rows = [make_row("A1", "pemotretan"), bad, ["A3", "short"]]
        with caplog.at_level(logging.WARNING, logger="manuskrip.classify"):
            summary = classify_rows(rows, first_row=2)
        assert summary.total == 1
        assert [e.row_number for e in summary.errors] == [3, 4]
        assert summary.errors[0].column == 8
        assert "Row 3" in caplog.text
        assert not summary.is_empty

    def test_skipped_rows_do_not_get_a_no_data_notice(self, caplog):
        with caplog.at_level(logging.INFO, logger="manuskrip.classify"):
            classify_rows([make_row("#REF!")])
        assert "No data found." not in caplog.text


# =========================================================================
# 5. Summary model
# =========================================================================


class TestSummary:
    def test_rejects_counts_that_do_not_add_up(self):
        with pytest.raises(ValueError):
            Summary(records=(), uploaded=1)

    def test_rejects_negative_counts(self):
        with pytest.raises(ValueError):
            Summary(uploaded=-1, tracing=1)

    def test_to_dict(self, sample_rows):
        data = classify_rows(sample_rows[:2]).to_dict()
        assert data["total"] == 2
        assert data["counts"]["post processing"] == 1
        assert data["records"][1]["call_number"] == "A2"
        assert data["errors"] == []

    def test_is_frozen(self):
        summary = Summary()
        with pytest.raises(AttributeError):
            summary.uploaded = 3
