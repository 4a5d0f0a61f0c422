"""
sizing.py — Table density tier for the grade sheet.

The template shrinks its table as the number of subjects grows so a full
bulletin still fits on one A4 page:

    visible subjects <= 18       → normal
    19 .. 30                     → compact
    > 30                         → ultra_compact

A manual override stored on the document ("tableSize") wins over the
automatic choice.
"""

from enum import Enum
from typing import Any, Dict, Iterable, Union

AUTO = "auto"

NORMAL_MAX_ROWS = 18
COMPACT_MAX_ROWS = 30


class Tier(str, Enum):
    NORMAL = "normal"
    COMPACT = "compact"
    ULTRA_COMPACT = "ultra_compact"


# Density order, lightest first.
TIER_ORDER = [Tier.NORMAL, Tier.COMPACT, Tier.ULTRA_COMPACT]

# Pixel sizes stored by older documents.
LEGACY_SIZES = {
    "15px": Tier.NORMAL,
    "14px": Tier.NORMAL,
    "13px": Tier.NORMAL,
    "12px": Tier.COMPACT,
    "11px": Tier.ULTRA_COMPACT,
}

DENSITY_HINTS: Dict[Tier, Dict[str, Any]] = {
    Tier.NORMAL: {"font_size_px": 13, "cell_padding": "px-0.5 py-[0.5px]", "compact_mode": False},
    Tier.COMPACT: {"font_size_px": 12, "cell_padding": "px-0.5 py-[0.5px]", "compact_mode": True},
    Tier.ULTRA_COMPACT: {"font_size_px": 11, "cell_padding": "px-0.5 py-0", "compact_mode": True},
}


def count_visible_records(records: Iterable) -> int:
    """Subjects that show on the sheet: a scale or a non-empty name."""
    return sum(1 for r in records if r.is_visible)


def parse_tier_override(value: Any) -> Union[Tier, str]:
    """Read a stored ``tableSize`` value; anything unknown means auto."""
    if isinstance(value, Tier):
        return value
    text = str(value or "").strip().lower()
    if text in LEGACY_SIZES:
        return LEGACY_SIZES[text]
    for tier in Tier:
        if text == tier.value:
            return tier
    return AUTO


def select_tier(visible_record_count: int, manual_override: Union[Tier, str] = AUTO) -> Tier:
    """Pick the density tier for a sheet with ``visible_record_count`` subjects."""
    if manual_override != AUTO:
        override = parse_tier_override(manual_override)
        if override != AUTO:
            return override
    if visible_record_count <= NORMAL_MAX_ROWS:
        return Tier.NORMAL
    if visible_record_count <= COMPACT_MAX_ROWS:
        return Tier.COMPACT
    return Tier.ULTRA_COMPACT


def density_hints(tier: Tier) -> Dict[str, Any]:
    return dict(DENSITY_HINTS[tier], tier=tier.value)
