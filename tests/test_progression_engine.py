"""Unit tests for ProgressionEngine.

Covers session XP/coin formulas, the buddy mood bonus and the level ladder.
"""

import pytest

from custom_components.kidstraining.engines.progression_engine import (
    ProgressionEngine,
)


class TestSessionRewards:
    """Session XP and coin formulas."""

    @pytest.mark.parametrize(
        ("duration", "effort", "expected"),
        [(40, 1, 200), (30, 2, 300), (0, 3, 0), (10, 3, 150)],
    )
    def test_calculate_xp(self, duration: int, effort: int, expected: int) -> None:
        """XP is duration * 5 * effort."""
        assert ProgressionEngine.calculate_xp(duration, effort) == expected

    @pytest.mark.parametrize(
        ("duration", "effort", "expected"),
        [(40, 1, 9), (9, 3, 5), (25, 2, 9), (60, 3, 23)],
    )
    def test_calculate_coins(self, duration: int, effort: int, expected: int) -> None:
        """Coins are 5 plus one step per full 10 minutes, scaled by effort."""
        assert ProgressionEngine.calculate_coins(duration, effort) == expected


class TestMoodBonus:
    """Buddy mood bonus."""

    def test_bonus_at_threshold(self) -> None:
        """Mood 70 or more adds 10% XP and one coin."""
        assert ProgressionEngine.mood_bonus_amounts(200, 70) == (20, 1)
        assert ProgressionEngine.mood_bonus_amounts(200, 100) == (20, 1)

    def test_no_bonus_below_threshold(self) -> None:
        """A grumpy buddy adds nothing."""
        assert ProgressionEngine.mood_bonus_amounts(200, 69) == (0, 0)
        assert ProgressionEngine.mood_bonus(0) == {"xp_multiplier": 1.0, "extra_coins": 0}

    def test_bonus_floors_fractional_xp(self) -> None:
        """Extra XP is floored."""
        assert ProgressionEngine.mood_bonus_amounts(15, 80) == (1, 1)


class TestLevelLadder:
    """Level derivation from cumulative XP."""

    def test_requirements_grow_by_twenty(self) -> None:
        """Level L needs 120 + 20 * (L - 1)."""
        assert ProgressionEngine.xp_required_for_level(1) == 120
        assert ProgressionEngine.xp_required_for_level(2) == 140
        assert ProgressionEngine.xp_required_for_level(10) == 300

    @pytest.mark.parametrize(
        ("total_xp", "level", "into", "needed"),
        [
            (0, 1, 0, 120),
            (119, 1, 119, 120),
            (120, 2, 0, 140),
            (300, 3, 40, 160),
            (1800, 10, 0, 300),
        ],
    )
    def test_level_info(self, total_xp: int, level: int, into: int, needed: int) -> None:
        """Level, in-level XP and the next requirement are derived together."""
        info = ProgressionEngine.level_info(total_xp)
        assert info["level"] == level
        assert info["xp_into_level"] == into
        assert info["xp_for_next_level"] == needed

    def test_progress_fraction(self) -> None:
        """Progress fraction is rounded into [0, 1]."""
        assert ProgressionEngine.level_info(30)["progress_fraction"] == 0.25
        assert ProgressionEngine.level_info(0)["progress_fraction"] == 0.0

    def test_negative_xp_is_level_one(self) -> None:
        """Negative totals are treated as zero."""
        assert ProgressionEngine.level_for_xp(-50) == 1

    def test_levels_gained(self) -> None:
        """Crossing several thresholds at once counts every level."""
        assert ProgressionEngine.levels_gained(0, 300) == 2
        assert ProgressionEngine.levels_gained(300, 0) == 0
        assert ProgressionEngine.levels_gained(100, 110) == 0
