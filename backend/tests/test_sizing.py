"""
Tests for core/sizing.py — density tier selection.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.records import DEFAULT_SCALE, SubjectRecord
from core.sizing import (
    AUTO,
    TIER_ORDER,
    Tier,
    count_visible_records,
    density_hints,
    parse_tier_override,
    select_tier,
)


class TestSelectTier:

    @pytest.mark.parametrize("count, expected", [
        (0, Tier.NORMAL),
        (18, Tier.NORMAL),
        (19, Tier.COMPACT),
        (25, Tier.COMPACT),
        (30, Tier.COMPACT),
        (31, Tier.ULTRA_COMPACT),
        (120, Tier.ULTRA_COMPACT),
    ])
    def test_automatic_tiers(self, count, expected):
        assert select_tier(count) == expected

    def test_manual_override_wins(self):
        assert select_tier(5, Tier.ULTRA_COMPACT) == Tier.ULTRA_COMPACT
        assert select_tier(40, "normal") == Tier.NORMAL

    @pytest.mark.parametrize("legacy, expected", [
        ("15px", Tier.NORMAL),
        ("13px", Tier.NORMAL),
        ("12px", Tier.COMPACT),
        ("11px", Tier.ULTRA_COMPACT),
    ])
    def test_legacy_pixel_sizes(self, legacy, expected):
        assert select_tier(0, legacy) == expected

    def test_unknown_override_falls_back_to_auto(self):
        assert select_tier(25, "huge") == Tier.COMPACT
        assert select_tier(25, None) == Tier.COMPACT

    def test_density_never_decreases_with_more_rows(self):
        ranks = [TIER_ORDER.index(select_tier(n)) for n in range(0, 80)]
        assert ranks == sorted(ranks)


class TestParseOverride:

    def test_empty_is_auto(self):
        assert parse_tier_override("") == AUTO
        assert parse_tier_override("auto") == AUTO

    def test_case_and_whitespace(self):
        assert parse_tier_override(" Compact ") == Tier.COMPACT


class TestVisibleCount:

    def test_counts_named_or_scaled_records(self):
        records = [
            SubjectRecord(id=0, name="Maths"),
            SubjectRecord(id=1, name="   "),
            SubjectRecord(id=2, name="", scale=DEFAULT_SCALE),
            SubjectRecord(id=3, name=""),
        ]
        assert count_visible_records(records) == 3


class TestDensityHints:

    def test_hints_carry_tier_name(self):
        hints = density_hints(Tier.COMPACT)
        assert hints["tier"] == "compact"
        assert hints["compact_mode"] is True

    def test_font_shrinks_with_density(self):
        sizes = [density_hints(t)["font_size_px"] for t in TIER_ORDER]
        assert sizes == sorted(sizes, reverse=True)
