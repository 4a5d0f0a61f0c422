"""
sheet_view.py — The grouped grade sheet as the template UI consumes it.

Combines:
- Ordered scoring-scale groups with their member rows
- Derived per-subject totals
- Table density tier
- MAXIMA / AGGREGATES / PERCENTAGE summary rows
"""

import logging
from typing import Any, Dict, List

from core.grouping import PLACEHOLDER_ROWS, group_records
from core.records import SubjectRecord, record_to_payload
from core.sizing import (
    AUTO,
    Tier,
    count_visible_records,
    density_hints,
    parse_tier_override,
    select_tier,
)
from core.totals import compute_sheet_summary

logger = logging.getLogger(__name__)


def build_sheet_view(
    records: List[SubjectRecord],
    table_size: Any = AUTO,
    placeholder_rows: int = PLACEHOLDER_ROWS,
) -> Dict[str, Any]:
    """Build the render-ready view of a flat record list."""
    positions = {r.id: pos for pos, r in enumerate(records)}
    groups = group_records(records, placeholder_rows=placeholder_rows)

    group_views: List[Dict[str, Any]] = []
    for index, group in enumerate(groups):
        rows = []
        for member in group.members:
            row = record_to_payload(member)
            row["position"] = positions[member.id]
            rows.append(row)
        group_views.append({
            "index": index,
            "maxima": group.scale.to_payload(),
            "label": group.scale.label(),
            "placeholder": group.placeholder,
            "member_count": len(group.members),
            "subjects": rows,
        })

    visible = count_visible_records(records)
    override = parse_tier_override(table_size)
    tier = select_tier(visible, override)
    logger.debug("Sheet view: %d groups, %d visible subjects, tier %s",
                  len(groups), visible, tier.value)

    return {
        "groups": group_views,
        "record_count": len(records),
        "visible_count": visible,
        "table_size": override.value if isinstance(override, Tier) else override,
        "sizing": density_hints(tier),
        "summary": compute_sheet_summary(records),
    }
