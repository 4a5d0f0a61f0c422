"""
editing.py — Structural edits of the grade sheet.

Every operation takes the flat record list and returns an EditResult with a
new list; the input list and its records are never mutated. An edit either
applies fully or not at all: an invalid target (index out of range,
placeholder group, ambiguous group) yields ``applied=False`` and hands back
the original list untouched.

Destructive operations (remove subject, remove group) assume the user has
already confirmed; prompting is the caller's concern.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from core.grouping import (
    AmbiguousGroupError,
    ScaleGroup,
    find_group_index,
    group_positions,
    group_records,
    resolve_group,
)
from core.records import (
    DEFAULT_SCALE,
    SCALE_FIELDS,
    ScoringScale,
    SubjectRecord,
    blank_record,
    next_record_id,
    parse_int,
    score_cell,
)

logger = logging.getLogger(__name__)

# Editable raw cells: field → (semester attribute, score attribute)
SCORE_FIELDS = {
    "period1": ("first_period_scores", "a"),
    "period2": ("first_period_scores", "b"),
    "exam1": ("first_period_scores", "exam_score"),
    "period3": ("second_period_scores", "a"),
    "period4": ("second_period_scores", "b"),
    "exam2": ("second_period_scores", "exam_score"),
}

# JSON spelling → snake_case for scale fields.
_SCALE_ALIASES = {alias: field for field, alias in SCALE_FIELDS.items()}


@dataclass
class EditResult:
    applied: bool
    records: List[SubjectRecord]
    message: str = ""
    removed_count: int = 0
    record_id: Optional[int] = None


def _refuse(records: List[SubjectRecord], message: str) -> EditResult:
    logger.warning("Edit refused: %s", message)
    return EditResult(applied=False, records=list(records), message=message)


def _applied(records: List[SubjectRecord], message: str, **extra) -> EditResult:
    logger.info("Edit applied: %s", message)
    return EditResult(applied=True, records=records, message=message, **extra)


def _real_group(groups: List[ScaleGroup], index: int):
    """Resolve a group that edits may target, or return a refusal message."""
    if index < 0 or index >= len(groups):
        return None, f"Invalid group index {index} ({len(groups)} groups)."
    try:
        group = resolve_group(groups, index)
    except AmbiguousGroupError as exc:
        return None, str(exc)
    if group.placeholder:
        return None, "The sheet has no scoring-scale groups yet."
    return group, ""


# ── Subjects ────────────────────────────────────────────────────────

def add_subject_to_group(records: List[SubjectRecord], group_index: int) -> EditResult:
    """Append a blank subject carrying the target group's scale.

    On an empty template the single placeholder group stands for the
    default scale.
    """
    groups = group_records(records)
    if group_index < 0 or group_index >= len(groups):
        return _refuse(records, f"Invalid group index {group_index} ({len(groups)} groups).")

    target = groups[group_index]
    # Scales are frozen models, so sharing the instance copies by value.
    scale = DEFAULT_SCALE if target.placeholder else target.scale
    new_record = blank_record(next_record_id(records), scale)
    return _applied(
        list(records) + [new_record],
        f"Added subject {new_record.id} to group {scale.label()}.",
        record_id=new_record.id,
    )


def remove_subject(records: List[SubjectRecord], record_index: int) -> EditResult:
    """Delete the subject at ``record_index`` (already confirmed)."""
    if record_index < 0 or record_index >= len(records):
        return _refuse(records, f"Invalid subject index {record_index} ({len(records)} subjects).")

    doomed = records[record_index]
    remaining = [r for r in records if r.id != doomed.id]
    name = doomed.name or "Unnamed Subject"
    return _applied(
        remaining,
        f'Deleted subject "{name}".',
        removed_count=len(records) - len(remaining),
        record_id=doomed.id,
    )


def update_subject_score(
    records: List[SubjectRecord],
    record_index: int,
    field: str,
    value: Any,
) -> EditResult:
    """Set one raw score cell (or the subject name) of a record.

    Derived totals are not touched: they are recomputed from the raw cells.
    """
    if record_index < 0 or record_index >= len(records):
        return _refuse(records, f"Invalid subject index {record_index} ({len(records)} subjects).")

    record = records[record_index]
    if field in ("subject", "name"):
        updated = record.model_copy(update={"name": "" if value is None else str(value)})
    elif field in SCORE_FIELDS:
        semester_attr, score_attr = SCORE_FIELDS[field]
        semester = getattr(record, semester_attr).model_copy(update={score_attr: score_cell(value)})
        updated = record.model_copy(update={semester_attr: semester})
    else:
        return _refuse(records, f"Unknown subject field '{field}'.")

    new_records = list(records)
    new_records[record_index] = updated
    return _applied(new_records, f"Updated {field} of subject {record.id}.", record_id=record.id)


# ── Groups ──────────────────────────────────────────────────────────

def add_group(records: List[SubjectRecord], scale: Optional[ScoringScale] = None) -> EditResult:
    """Append one blank subject carrying ``scale`` (default 20/40/80).

    The new subject is the first member of the group; if a group with that
    scale already exists the subject simply joins it.
    """
    scale = scale or DEFAULT_SCALE
    if find_group_index(group_records(records), scale) is not None:
        message = f"Group {scale.label()} already exists; added a subject to it."
    else:
        message = f"Added scoring-scale group {scale.label()}."
    new_record = blank_record(next_record_id(records), scale)
    return _applied(
        list(records) + [new_record],
        message,
        record_id=new_record.id,
    )


def add_custom_group(records: List[SubjectRecord], period: Any, exam: Any, total: Any) -> EditResult:
    """Add a group from user-typed maxima.

    Unparseable or zero entries fall back to 20 / 40 / 80; negative ones
    are refused.
    """
    values = []
    for raw, default in ((period, 20), (exam, 40), (total, 80)):
        parsed = parse_int(raw)
        if parsed < 0:
            return _refuse(records, f"Scale values must not be negative (got {raw!r}).")
        values.append(parsed or default)
    scale = ScoringScale(period_maximum=values[0], exam_maximum=values[1], total_maximum=values[2])
    return add_group(records, scale)


def remove_group(records: List[SubjectRecord], group_index: int) -> EditResult:
    """Delete every subject of the group (already confirmed).

    Members are matched by record id, so an unrelated subject that happens
    to share a name or an earlier position is never caught.
    """
    groups = group_records(records)
    group, problem = _real_group(groups, group_index)
    if group is None:
        return _refuse(records, problem)

    doomed = set(group.member_ids)
    remaining = [r for r in records if r.id not in doomed]
    removed = len(records) - len(remaining)
    return _applied(
        remaining,
        f"Deleted group {group.scale.label()} with {removed} subject(s).",
        removed_count=removed,
    )


def update_group_scale(
    records: List[SubjectRecord],
    group_index: int,
    field: str,
    value: Any,
) -> EditResult:
    """Broadcast one maxima field to every member of the group.

    ``field`` is ``period_maximum``, ``exam_maximum`` or ``total_maximum``
    (or their JSON spellings). Empty or non-numeric values become 0.
    """
    field = _SCALE_ALIASES.get(field, field)
    if field not in SCALE_FIELDS:
        return _refuse(records, f"Unknown scale field '{field}'.")

    number = parse_int(value)
    if number < 0:
        return _refuse(records, f"Scale values must not be negative (got {value!r}).")

    groups = group_records(records)
    group, problem = _real_group(groups, group_index)
    if group is None:
        return _refuse(records, problem)

    new_scale = group.scale.model_copy(update={field: number})
    members = set(group.member_ids)
    new_records = [
        r.model_copy(update={"scale": new_scale}) if r.id in members else r
        for r in records
    ]
    return _applied(
        new_records,
        f"Set {field} of group {group.scale.label()} to {number} "
        f"for {len(members)} subject(s).",
    )


def move_group(records: List[SubjectRecord], from_index: int, to_index: int) -> EditResult:
    """Move all members of one group next to another group in the flat list.

    Moving toward the start places the members right before the target
    group's first member; moving toward the end places them right after its
    last member. Members keep their relative order, every other record
    keeps its relative order, and no record is dropped or duplicated.
    """
    groups = group_records(records)
    for index in (from_index, to_index):
        if index < 0 or index >= len(groups):
            return _refuse(records, f"Invalid group index {index} ({len(groups)} groups).")
    if groups[0].placeholder:
        return _refuse(records, "The sheet has no scoring-scale groups yet.")

    try:
        source = resolve_group(groups, from_index)
        target = resolve_group(groups, to_index)
    except AmbiguousGroupError as exc:
        return _refuse(records, str(exc))

    if from_index == to_index:
        return _applied(list(records), f"Group {source.scale.label()} left in place.")

    source_positions = group_positions(records, source)
    target_positions = group_positions(records, target)
    if to_index < from_index:
        insert_at = target_positions[0]
    else:
        insert_at = target_positions[-1] + 1

    moving_ids = set(source.member_ids)
    moving = [r for r in records if r.id in moving_ids]
    staying = [r for r in records if r.id not in moving_ids]
    # Every removed record sitting before the insertion point shifts it left.
    insert_at -= sum(1 for pos in source_positions if pos < insert_at)

    new_records = staying[:insert_at] + moving + staying[insert_at:]
    if len(new_records) != len(records):
        return _refuse(records, "Move would change the number of subjects.")

    return _applied(
        new_records,
        f"Moved group {source.scale.label()} "
        f"{'before' if to_index < from_index else 'after'} group {target.scale.label()}.",
    )
