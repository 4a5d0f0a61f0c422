"""
grouping.py — Partition the flat record list into scoring-scale groups.

A group is the set of subjects sharing one exact scale tuple. Groups are
never stored: they are rebuilt from the flat list on every read, so the
grouped view cannot drift from the records.

Ordering:
- Groups ascend by (total_maximum, period_maximum, exam_maximum)
- Members keep their relative flat-list order
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from core.records import DEFAULT_SCALE, ScoringScale, SubjectRecord

logger = logging.getLogger(__name__)

PLACEHOLDER_ROWS = 10


class AmbiguousGroupError(ValueError):
    """More than one group resolved to the same scale tuple."""


@dataclass
class ScaleGroup:
    scale: ScoringScale
    members: List[SubjectRecord] = field(default_factory=list)
    # True only for the display fallback built when no record has a scale.
    placeholder: bool = False

    @property
    def member_ids(self) -> List[int]:
        return [m.id for m in self.members]

    def __len__(self) -> int:
        return len(self.members)


def group_records(
    records: List[SubjectRecord],
    placeholder_rows: int = PLACEHOLDER_ROWS,
) -> List[ScaleGroup]:
    """Group scale-bearing records by exact scale and sort the groups.

    When no record carries a scale, a single placeholder group with the
    default scale and the first ``placeholder_rows`` raw records is
    returned so an empty template still has rows to show.
    """
    buckets: Dict[ScoringScale, ScaleGroup] = {}
    for record in records:
        if record.scale is None:
            continue
        bucket = buckets.get(record.scale)
        if bucket is None:
            bucket = buckets[record.scale] = ScaleGroup(scale=record.scale)
        bucket.members.append(record)

    if not buckets:
        logger.debug("No scaled subjects among %d records; using placeholder group", len(records))
        return [ScaleGroup(
            scale=DEFAULT_SCALE,
            members=list(records[:max(placeholder_rows, 0)]),
            placeholder=True,
        )]

    # sorted() is stable, and equal keys mean equal scales, so the order
    # is fully determined by the scale tuples.
    groups = sorted(buckets.values(), key=lambda g: g.scale.key())
    logger.debug(
        "Grouped %d records into %d scale groups: %s",
        len(records), len(groups), [g.scale.label() for g in groups],
    )
    return groups


def find_group_index(groups: List[ScaleGroup], scale: ScoringScale) -> Optional[int]:
    """Index of the real (non-placeholder) group with this scale, if any."""
    for idx, group in enumerate(groups):
        if not group.placeholder and group.scale == scale:
            return idx
    return None


def resolve_group(groups: List[ScaleGroup], index: int) -> Optional[ScaleGroup]:
    """Return the group at ``index`` or None when out of range.

    Raises AmbiguousGroupError when another group shares its scale tuple.
    """
    if index < 0 or index >= len(groups):
        return None
    group = groups[index]
    twins = sum(1 for g in groups if g.scale == group.scale and not g.placeholder)
    if twins > 1:
        raise AmbiguousGroupError(
            f"{twins} groups share scale {group.scale.label()}; refusing to guess."
        )
    return group


def group_positions(records: List[SubjectRecord], group: ScaleGroup) -> List[int]:
    """Flat-list positions of the group's members, in ascending order."""
    ids = set(group.member_ids)
    return [pos for pos, record in enumerate(records) if record.id in ids]
