"""
totals.py — Derived values of the grade sheet.

Per subject:
- First semester total  = period1 + period2 + exam1
- Second semester total = period3 + period4 + exam2
- Overall total         = first + second

Per sheet (the MAXIMA / AGGREGATES / PERCENTAGE summary rows):
- Column-wise maxima and obtained sums over every scale-bearing subject
- Percentage obtained / maxima

Nothing here is stored back on a record. Raw scores are the only source of
truth; every total is recomputed on read.
"""

from typing import Any, Dict, NamedTuple, Optional

import numpy as np
import pandas as pd

SUMMARY_COLUMNS = [
    "period1", "period2", "exam1", "total1",
    "period3", "period4", "exam2", "total2",
    "overall",
]


class RecordTotals(NamedTuple):
    first_semester: float
    second_semester: float
    overall: float


# ── Score parsing ───────────────────────────────────────────────────

def parse_score(value: Any) -> float:
    """Parse a raw score cell. Missing or non-numeric input counts as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, np.integer, np.floating)):
        result = float(value)
    else:
        text = str(value).strip()
        # French bulletins write 24,5 for 24.5
        if text.count(",") == 1 and "." not in text:
            text = text.replace(",", ".")
        try:
            result = float(text)
        except ValueError:
            return 0.0
    if not np.isfinite(result):
        return 0.0
    return result


def format_total(value: float) -> str:
    """Display form of a total: 134.0 → "134", 24.5 → "24.5"."""
    rounded = round(float(value), 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return str(rounded)


# ── Per-subject totals ──────────────────────────────────────────────

def first_semester_total(record) -> float:
    scores = record.first_period_scores
    return parse_score(scores.a) + parse_score(scores.b) + parse_score(scores.exam_score)


def second_semester_total(record) -> float:
    scores = record.second_period_scores
    return parse_score(scores.a) + parse_score(scores.b) + parse_score(scores.exam_score)


def overall_total(record) -> float:
    return first_semester_total(record) + second_semester_total(record)


def record_totals(record) -> RecordTotals:
    first = first_semester_total(record)
    second = second_semester_total(record)
    return RecordTotals(first, second, first + second)


# ── Sheet summary ───────────────────────────────────────────────────

def _score_frame(records) -> pd.DataFrame:
    """One row per scale-bearing record with parsed scores and its maxima."""
    rows = []
    for record in records:
        if record.scale is None:
            continue
        first = record.first_period_scores
        second = record.second_period_scores
        rows.append({
            "id": record.id,
            "period1": parse_score(first.a),
            "period2": parse_score(first.b),
            "exam1": parse_score(first.exam_score),
            "period3": parse_score(second.a),
            "period4": parse_score(second.b),
            "exam2": parse_score(second.exam_score),
            "period_max": record.scale.period_maximum,
            "exam_max": record.scale.exam_maximum,
            "total_max": record.scale.total_maximum,
        })
    columns = ["id", "period1", "period2", "exam1", "period3", "period4", "exam2",
               "period_max", "exam_max", "total_max"]
    df = pd.DataFrame(rows, columns=columns)
    df["total1"] = df["period1"] + df["period2"] + df["exam1"]
    df["total2"] = df["period3"] + df["period4"] + df["exam2"]
    df["overall"] = df["total1"] + df["total2"]
    return df


def _percentage(obtained: float, maximum: float) -> Optional[float]:
    if maximum <= 0:
        return None
    return round(obtained / maximum * 100, 1)


def compute_sheet_summary(records) -> Dict[str, Any]:
    """Compute the MAXIMA, AGGREGATES and PERCENTAGE summary rows.

    Only subjects that carry a scale take part; placeholder rows have no
    maxima to be measured against.
    """
    df = _score_frame(records)

    period_max = float(df["period_max"].sum())
    exam_max = float(df["exam_max"].sum())
    total_max = float(df["total_max"].sum())

    maxima: Dict[str, float] = {
        "period1": period_max,
        "period2": period_max,
        "exam1": exam_max,
        "total1": total_max,
        "period3": period_max,
        "period4": period_max,
        "exam2": exam_max,
        "total2": total_max,
        "overall": total_max * 2,
    }
    obtained: Dict[str, float] = {col: float(df[col].sum()) for col in SUMMARY_COLUMNS}
    percentage: Dict[str, Optional[float]] = {
        col: _percentage(obtained[col], maxima[col]) for col in SUMMARY_COLUMNS
    }

    return {
        "subject_count": int(len(df)),
        "columns": list(SUMMARY_COLUMNS),
        "maxima": maxima,
        "obtained": obtained,
        "percentage": percentage,
    }
