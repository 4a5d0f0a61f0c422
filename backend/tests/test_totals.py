"""
Tests for core/totals.py — score parsing, per-subject totals and summary rows.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.editing import update_subject_score
from core.records import PeriodScores, ScoringScale, SubjectRecord, records_from_payload
from core.totals import (
    compute_sheet_summary,
    first_semester_total,
    format_total,
    overall_total,
    parse_score,
    record_totals,
    second_semester_total,
)

SMALL = ScoringScale(period_maximum=10, exam_maximum=20, total_maximum=40)


def _record(first=("", "", ""), second=("", "", ""), scale=SMALL, record_id=0):
    return SubjectRecord(
        id=record_id,
        name="Subject",
        first_period_scores=PeriodScores(a=first[0], b=first[1], exam_score=first[2]),
        second_period_scores=PeriodScores(a=second[0], b=second[1], exam_score=second[2]),
        scale=scale,
    )


class TestParseScore:

    @pytest.mark.parametrize("raw, expected", [
        ("34", 34.0),
        (" 12 ", 12.0),
        ("17.5", 17.5),
        ("24,5", 24.5),
        (9, 9.0),
        (14.5, 14.5),
        ("", 0.0),
        (None, 0.0),
        ("abc", 0.0),
        ("nan", 0.0),
        ("inf", 0.0),
        (True, 0.0),
    ])
    def test_parse(self, raw, expected):
        assert parse_score(raw) == expected


class TestRecordTotals:

    def test_first_semester_total(self):
        record = _record(first=("34", "32", "68"))
        assert first_semester_total(record) == 134

    def test_missing_and_non_numeric_count_as_zero(self):
        record = _record(first=("", "32", "abc"))
        assert first_semester_total(record) == 32

    def test_second_semester_and_overall(self):
        record = _record(first=("8", "7", "15"), second=("9", "8", "16"))
        assert second_semester_total(record) == 33
        assert overall_total(record) == 63

    def test_record_without_scale_still_totals(self):
        record = _record(first=("1", "2", "3"), scale=None)
        assert record_totals(record).first_semester == 6

    def test_totals_are_stable(self):
        record = _record(first=("8", "7", "15"), second=("9", "x", "16"))
        assert record_totals(record) == record_totals(record)

    def test_editing_first_semester_leaves_second_total(self):
        records = [_record(first=("8", "7", "15"), second=("9", "8", "16"))]
        before = record_totals(records[0])
        result = update_subject_score(records, 0, "period2", "10")
        after = record_totals(result.records[0])
        assert after.first_semester == before.first_semester + 3
        assert after.second_semester == before.second_semester
        assert after.overall == before.overall + 3


class TestFormatTotal:

    def test_whole_numbers_drop_decimal(self):
        assert format_total(134.0) == "134"

    def test_fractions_are_kept(self):
        assert format_total(24.5) == "24.5"

    def test_float_noise_is_rounded(self):
        assert format_total(0.1 + 0.2) == "0.3"


class TestSheetSummary:

    def test_summary_of_bulletin(self, bulletin_subjects):
        records = records_from_payload(bulletin_subjects)
        summary = compute_sheet_summary(records)

        assert summary["subject_count"] == 4
        # period maxima 10 + 40 + 10 + 20
        assert summary["maxima"]["period1"] == 80
        assert summary["maxima"]["exam1"] == 160
        assert summary["maxima"]["total1"] == 320
        assert summary["maxima"]["overall"] == 640
        # 8 + 34 + 6 + 15
        assert summary["obtained"]["period1"] == 63
        assert summary["obtained"]["total1"] == 30 + 134 + 27 + 61
        assert summary["percentage"]["period1"] == round(63 / 80 * 100, 1)

    def test_unscaled_rows_are_left_out(self):
        records = [_record(first=("5", "5", "10")), _record(first=("9", "9", "9"), scale=None, record_id=1)]
        summary = compute_sheet_summary(records)
        assert summary["subject_count"] == 1
        assert summary["obtained"]["total1"] == 20

    def test_empty_sheet_has_no_percentage(self):
        summary = compute_sheet_summary([])
        assert summary["subject_count"] == 0
        assert summary["maxima"]["overall"] == 0
        assert summary["percentage"]["overall"] is None
