"""
normalize.py — Bring extracted bulletin subjects into the canonical shape.

The extraction step does not always spell fields the same way. Handles:
- Subject name under "subject" or "subjectName"
- Semesters under "firstSemester"/"secondSemester" or
  "gradesSemester1"/"gradesSemester2"
- Period marks under "period1".."period4" or "journal1"/"journal2"
- Maxima kept only when present (absent maxima stay absent)
- Normalization report generation
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from core.records import SubjectRecord, assign_record_ids, record_from_payload

logger = logging.getLogger(__name__)

SUBJECT_NAME_ALIASES = ["subject", "subjectName", "subject_name", "name"]

SEMESTER_ALIASES = {
    "firstSemester": ["firstSemester", "gradesSemester1", "first_semester"],
    "secondSemester": ["secondSemester", "gradesSemester2", "second_semester"],
}

# Canonical period key → accepted spellings, per semester.
PERIOD_ALIASES = {
    "firstSemester": {
        "period1": ["period1", "journal1"],
        "period2": ["period2", "journal2"],
        "exam": ["exam", "examen"],
    },
    "secondSemester": {
        "period3": ["period3", "journal1"],
        "period4": ["period4", "journal2"],
        "exam": ["exam", "examen"],
    },
}

LEGACY_KEYS = [
    "subjectName", "subject_name", "gradesSemester1", "gradesSemester2",
    "first_semester", "second_semester",
]

MAXIMA_ALIASES = {
    "periodMaxima": ["periodMaxima", "period_maximum", "periodMax"],
    "examMaxima": ["examMaxima", "exam_maximum", "examMax"],
    "totalMaxima": ["totalMaxima", "total_maximum", "totalMax"],
}


def _first_present(raw: Dict[str, Any], aliases: List[str]) -> Optional[Any]:
    """Value of the first alias present in ``raw`` with a non-null value."""
    for alias in aliases:
        if raw.get(alias) is not None:
            return raw[alias]
    return None


def _normalize_semester(raw: Any, periods: Dict[str, List[str]]) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raw = {}
    semester = {}
    for key, aliases in periods.items():
        value = _first_present(raw, aliases)
        semester[key] = "" if value is None else value
    return semester


def _normalize_maxima(raw: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict):
        return None
    maxima = {key: _first_present(raw, aliases) for key, aliases in MAXIMA_ALIASES.items()}
    if all(v is None for v in maxima.values()):
        return None
    return maxima


def normalize_subject(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Canonical JSON dict for one extracted subject."""
    subject: Dict[str, Any] = {
        "subject": next(
            (str(raw[k]).strip() for k in SUBJECT_NAME_ALIASES if raw.get(k)), ""
        ),
    }
    if isinstance(raw.get("id"), int) and not isinstance(raw.get("id"), bool):
        subject["id"] = raw["id"]
    for key, aliases in SEMESTER_ALIASES.items():
        subject[key] = _normalize_semester(_first_present(raw, aliases), PERIOD_ALIASES[key])
    maxima = _normalize_maxima(raw.get("maxima"))
    if maxima is not None:
        subject["maxima"] = maxima
    sitting = raw.get("secondSitting") or raw.get("nationalExam")
    if isinstance(sitting, dict):
        subject["secondSitting"] = {
            "marks": sitting.get("marks", ""),
            "max": sitting.get("max", ""),
        }
    return subject


def normalize_subjects(raw_subjects: Any) -> Tuple[List[SubjectRecord], Dict[str, Any]]:
    """
    Normalize an extracted ``subjects`` array and return (records, report).
    """
    report: Dict[str, Any] = {
        "original_rows": 0,
        "steps": [],
        "warnings": [],
    }

    if not isinstance(raw_subjects, list):
        report["warnings"].append("Subjects are not a list; nothing to normalize.")
        report["normalized_rows"] = 0
        return [], report

    report["original_rows"] = len(raw_subjects)

    # ── 1. Drop entries that are not objects ──────────────────────
    entries = [s for s in raw_subjects if isinstance(s, dict)]
    dropped = len(raw_subjects) - len(entries)
    if dropped:
        report["warnings"].append(f"Dropped {dropped} entries that are not subject objects.")

    # ── 2. Map aliases onto canonical keys ────────────────────────
    canonical = [normalize_subject(s) for s in entries]
    aliased = sum(1 for s in entries if any(k in s for k in LEGACY_KEYS))
    report["steps"].append(f"Mapped field aliases for {aliased} subject(s).")

    # ── 3. Maxima ─────────────────────────────────────────────────
    without_scale = sum(1 for s in canonical if "maxima" not in s)
    if without_scale:
        report["steps"].append(
            f"{without_scale} subject(s) have no maxima and stay ungrouped."
        )

    # ── 4. Build records and assign ids ───────────────────────────
    records = assign_record_ids([record_from_payload(s) for s in canonical])
    unnamed = sum(1 for r in records if not r.name)
    if unnamed:
        report["warnings"].append(f"{unnamed} subject(s) have no name.")
    report["steps"].append(f"Assigned record ids to {len(records)} subject(s).")

    report["normalized_rows"] = len(records)
    logger.info(
        "Normalized %d of %d extracted subjects (%d warnings)",
        len(records), len(raw_subjects), len(report["warnings"]),
    )
    return records, report


def generate_normalization_report(report: Dict[str, Any]) -> str:
    """Generate a human-readable normalization report text."""
    lines = [
        "═══ Subject Normalization Report ═══",
        f"Original:   {report['original_rows']} subjects",
        f"Normalized: {report['normalized_rows']} subjects",
        "",
        "Steps performed:",
    ]
    for i, step in enumerate(report["steps"], 1):
        lines.append(f"  {i}. {step}")

    if report["warnings"]:
        lines.append("")
        lines.append("⚠ Warnings:")
        for w in report["warnings"]:
            lines.append(f"  • {w}")

    return "\n".join(lines)
