"""
validation.py — Sanity checks on a grade sheet before it is handed on.
"""

from typing import Dict, List

from core.grouping import ScaleGroup
from core.records import SubjectRecord
from core.totals import first_semester_total, format_total, second_semester_total


def validate_sheet(records: List[SubjectRecord]) -> List[Dict]:
    """
    Validate a flat record list and return a list of issues found.
    """
    issues = []

    if not records:
        issues.append({
            "type": "empty_sheet",
            "severity": "critical",
            "message": "The sheet contains no subjects.",
        })
        return issues

    ids = [r.id for r in records]
    if len(set(ids)) != len(ids):
        issues.append({
            "type": "duplicate_ids",
            "severity": "critical",
            "message": f"{len(ids) - len(set(ids))} subjects share a record id with another subject.",
        })

    checked_scales = set()
    for position, record in enumerate(records, 1):
        label = record.name or f"Subject {position}"
        if not record.name.strip():
            issues.append({
                "type": "missing_name",
                "severity": "warning",
                "message": f"Subject {position} has no name.",
            })

        scale = record.scale
        if scale is None:
            continue

        if scale not in checked_scales:
            checked_scales.add(scale)
            expected = 2 * scale.period_maximum + scale.exam_maximum
            if expected != scale.total_maximum:
                issues.append({
                    "type": "inconsistent_maxima",
                    "severity": "info",
                    "message": (
                        f"Maxima {scale.label()}: total {scale.total_maximum} differs from "
                        f"2 × period + exam = {expected}."
                    ),
                })

        for semester, total in (
            ("first semester", first_semester_total(record)),
            ("second semester", second_semester_total(record)),
        ):
            if scale.total_maximum and total > scale.total_maximum:
                issues.append({
                    "type": "total_over_maximum",
                    "severity": "warning",
                    "message": (
                        f"{label}: {semester} total {format_total(total)} exceeds "
                        f"maximum {scale.total_maximum}."
                    ),
                })

    return issues


def has_critical_issues(issues: List[Dict]) -> bool:
    return any(issue["severity"] == "critical" for issue in issues)


def check_partition(records: List[SubjectRecord], groups: List[ScaleGroup]) -> List[str]:
    """Problems that stop ``groups`` from being a partition of the scaled records.

    An empty list means every scale-bearing record sits in exactly one group,
    the group keyed by its own scale, and groups hold nothing else.
    """
    problems: List[str] = []
    real_groups = [g for g in groups if not g.placeholder]
    scaled = {r.id: r for r in records if r.scale is not None}

    seen: Dict[int, int] = {}
    for idx, group in enumerate(real_groups):
        for member in group.members:
            if member.id in seen:
                problems.append(f"Record {member.id} appears in groups {seen[member.id]} and {idx}")
            seen[member.id] = idx
            if member.id not in scaled:
                problems.append(f"Record {member.id} in group {idx} is not a scaled record")
            elif member.scale != group.scale:
                problems.append(
                    f"Record {member.id} has scale {member.scale.label()} "
                    f"but sits in group {group.scale.label()}"
                )

    for record_id in scaled:
        if record_id not in seen:
            problems.append(f"Record {record_id} is in no group")

    scales = [g.scale for g in real_groups]
    if len(set(scales)) != len(scales):
        problems.append("Two groups share one scale")

    return problems
