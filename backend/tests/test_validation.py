"""
Tests for core/validation.py
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.grouping import ScaleGroup, group_records
from core.records import PeriodScores, ScoringScale, SubjectRecord, records_from_payload
from core.validation import check_partition, has_critical_issues, validate_sheet

SMALL = ScoringScale(period_maximum=10, exam_maximum=20, total_maximum=40)


def _types(issues):
    return [issue["type"] for issue in issues]


class TestValidateSheet:

    def test_bulletin_has_no_issues(self, bulletin_subjects):
        assert validate_sheet(records_from_payload(bulletin_subjects)) == []

    def test_empty_sheet(self):
        issues = validate_sheet([])
        assert _types(issues) == ["empty_sheet"]
        assert has_critical_issues(issues)

    def test_duplicate_ids(self):
        records = [SubjectRecord(id=1, name="A"), SubjectRecord(id=1, name="B")]
        issues = validate_sheet(records)
        assert "duplicate_ids" in _types(issues)
        assert has_critical_issues(issues)

    def test_missing_name_is_a_warning(self):
        issues = validate_sheet([SubjectRecord(id=0, name="")])
        assert _types(issues) == ["missing_name"]
        assert not has_critical_issues(issues)

    def test_inconsistent_maxima(self):
        odd = ScoringScale(period_maximum=10, exam_maximum=20, total_maximum=50)
        issues = validate_sheet([SubjectRecord(id=0, name="Art", scale=odd)])
        assert _types(issues) == ["inconsistent_maxima"]
        assert "10/20/50" in issues[0]["message"]

    def test_total_above_maximum(self):
        record = SubjectRecord(
            id=0,
            name="Art",
            scale=SMALL,
            first_period_scores=PeriodScores(a="10", b="10", exam_score="25"),
        )
        issues = validate_sheet([record])
        assert _types(issues) == ["total_over_maximum"]
        assert "exceeds maximum 40" in issues[0]["message"]


class TestCheckPartition:

    def test_grouping_output_passes(self, bulletin_subjects):
        records = records_from_payload(bulletin_subjects)
        assert check_partition(records, group_records(records)) == []

    def test_missing_record_is_reported(self):
        records = [SubjectRecord(id=0, name="A", scale=SMALL), SubjectRecord(id=1, name="B", scale=SMALL)]
        groups = [ScaleGroup(scale=SMALL, members=records[:1])]
        assert check_partition(records, groups) == ["Record 1 is in no group"]

    def test_wrong_group_is_reported(self):
        other = ScoringScale(period_maximum=20, exam_maximum=40, total_maximum=80)
        record = SubjectRecord(id=0, name="A", scale=SMALL)
        problems = check_partition([record], [ScaleGroup(scale=other, members=[record])])
        assert len(problems) == 1
        assert "sits in group" in problems[0]
