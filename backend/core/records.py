"""
records.py — Grade record model for the report-card grade sheet.

A grade sheet is a flat, ordered list of SubjectRecord values. Each record
carries its raw period/exam scores exactly as typed and, optionally, the
scoring scale ("maxima") it is graded on. Records without a scale are
placeholder rows.

Records are identified by a stable integer ``id`` rather than by position
or name: names repeat or stay empty while a sheet is being edited.

JSON shape (as exchanged with the template UI and the document store):

    {
      "id": 3,
      "subject": "Physics",
      "firstSemester":  {"period1": "34", "period2": "32", "exam": "68", "total": "134"},
      "secondSemester": {"period3": "",   "period4": "",   "exam": "",   "total": "0"},
      "overallTotal": "134",
      "maxima": {"periodMaxima": 40, "examMaxima": 80, "totalMaxima": 160},
      "secondSitting": {"marks": "", "max": ""}
    }
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from core.totals import format_total, record_totals

ScoreValue = Union[str, int, float, None]


class ScoringScale(BaseModel):
    """Scoring tier of a subject, e.g. 10/20/40 or 40/80/160."""

    model_config = ConfigDict(frozen=True)

    period_maximum: int
    exam_maximum: int
    total_maximum: int

    def key(self) -> tuple:
        """Full ordering key: total first, then period, then exam."""
        return (self.total_maximum, self.period_maximum, self.exam_maximum)

    def label(self) -> str:
        return f"{self.period_maximum}/{self.exam_maximum}/{self.total_maximum}"

    def to_payload(self) -> Dict[str, int]:
        return {
            "periodMaxima": self.period_maximum,
            "examMaxima": self.exam_maximum,
            "totalMaxima": self.total_maximum,
        }


DEFAULT_SCALE = ScoringScale(period_maximum=20, exam_maximum=40, total_maximum=80)

# Keys of the scale fields, snake_case and their JSON spelling.
SCALE_FIELDS = {
    "period_maximum": "periodMaxima",
    "exam_maximum": "examMaxima",
    "total_maximum": "totalMaxima",
}


class PeriodScores(BaseModel):
    """Raw scores of one semester: two period marks and an exam mark."""

    model_config = ConfigDict(frozen=True)

    a: ScoreValue = ""
    b: ScoreValue = ""
    exam_score: ScoreValue = ""


class SubjectRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    first_period_scores: PeriodScores = PeriodScores()
    second_period_scores: PeriodScores = PeriodScores()
    scale: Optional[ScoringScale] = None
    second_sitting: Optional[Dict[str, Any]] = None

    @property
    def is_visible(self) -> bool:
        """Counted on the sheet: carries a scale or a non-empty name."""
        return self.scale is not None or bool(self.name)


# ── Construction helpers ────────────────────────────────────────────

def blank_record(record_id: int, scale: Optional[ScoringScale] = None) -> SubjectRecord:
    """A new empty subject row, optionally bound to a scale."""
    return SubjectRecord(
        id=record_id,
        scale=scale,
        second_sitting={"marks": "", "max": ""},
    )


def next_record_id(records: Iterable[SubjectRecord]) -> int:
    """Next free id: one past the largest id in use (0 for an empty list)."""
    ids = [r.id for r in records]
    return max(ids) + 1 if ids else 0


def assign_record_ids(records: List[SubjectRecord]) -> List[SubjectRecord]:
    """Give every record a unique id, keeping existing ids where possible.

    Records with a negative id (never assigned) or an id already used by an
    earlier record in the list receive fresh ids, in list order.
    """
    seen = set()
    fresh = max([r.id for r in records if r.id >= 0], default=-1) + 1
    result = []
    for record in records:
        if record.id < 0 or record.id in seen:
            record = record.model_copy(update={"id": fresh})
            fresh += 1
        seen.add(record.id)
        result.append(record)
    return result


# ── JSON conversion ─────────────────────────────────────────────────

def parse_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return 0


def scale_from_payload(raw: Any) -> Optional[ScoringScale]:
    """Build a ScoringScale from a ``maxima`` dict; anything else is no scale."""
    if not isinstance(raw, dict):
        return None
    values = {field: raw.get(alias, raw.get(field)) for field, alias in SCALE_FIELDS.items()}
    if all(v is None for v in values.values()):
        return None
    return ScoringScale(**{field: parse_int(v) for field, v in values.items()})


def score_cell(value: Any) -> ScoreValue:
    """Keep a typed score as is; objects, arrays and booleans become empty."""
    if isinstance(value, bool):
        return ""
    if value is None or isinstance(value, (str, int, float)):
        return value
    return ""


def _scores_from_payload(raw: Any, a_key: str, b_key: str) -> PeriodScores:
    if not isinstance(raw, dict):
        return PeriodScores()
    return PeriodScores(
        a=score_cell(raw.get(a_key, "")),
        b=score_cell(raw.get(b_key, "")),
        exam_score=score_cell(raw.get("exam", "")),
    )


def record_from_payload(raw: Dict[str, Any], record_id: int = -1) -> SubjectRecord:
    """Build one SubjectRecord from its JSON dict.

    Stored ``total`` and ``overallTotal`` values are ignored: totals are
    always recomputed from the raw scores.
    """
    rid = raw.get("id")
    if isinstance(rid, bool) or not isinstance(rid, int):
        rid = record_id
    second_sitting = raw.get("secondSitting")
    return SubjectRecord(
        id=rid,
        name=str(raw.get("subject") or ""),
        first_period_scores=_scores_from_payload(raw.get("firstSemester"), "period1", "period2"),
        second_period_scores=_scores_from_payload(raw.get("secondSemester"), "period3", "period4"),
        scale=scale_from_payload(raw.get("maxima")),
        second_sitting=dict(second_sitting) if isinstance(second_sitting, dict) else None,
    )


def records_from_payload(subjects: Optional[List[Any]]) -> List[SubjectRecord]:
    """Parse the ``subjects`` array of a document into a flat record list."""
    records = [record_from_payload(s) for s in (subjects or []) if isinstance(s, dict)]
    return assign_record_ids(records)


def _raw(value: ScoreValue) -> ScoreValue:
    return "" if value is None else value


def record_to_payload(record: SubjectRecord) -> Dict[str, Any]:
    """JSON-safe dict for one record, with derived totals filled in."""
    totals = record_totals(record)
    first = record.first_period_scores
    second = record.second_period_scores
    payload: Dict[str, Any] = {
        "id": record.id,
        "subject": record.name,
        "firstSemester": {
            "period1": _raw(first.a),
            "period2": _raw(first.b),
            "exam": _raw(first.exam_score),
            "total": format_total(totals.first_semester),
        },
        "secondSemester": {
            "period3": _raw(second.a),
            "period4": _raw(second.b),
            "exam": _raw(second.exam_score),
            "total": format_total(totals.second_semester),
        },
        "overallTotal": format_total(totals.overall),
    }
    if record.scale is not None:
        payload["maxima"] = record.scale.to_payload()
    if record.second_sitting is not None:
        payload["secondSitting"] = dict(record.second_sitting)
    return payload


def records_to_payload(records: Iterable[SubjectRecord]) -> List[Dict[str, Any]]:
    return [record_to_payload(r) for r in records]
