"""Progression Engine - XP/coin formulas, mood bonus and the level ladder.

This engine provides stateless, pure Python functions for:
- Session XP and coin rewards from (duration, effort)
- The buddy mood bonus applied on top of a session's rewards
- The canonical level ladder over cumulative XP

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.

Level ladder:
    Level L requires ``120 + 20 * (L - 1)`` XP. Levels are derived from the
    cumulative total every time they are needed, so the stored XP never has
    to be rewritten when a level is crossed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const
from ..utils.math_utils import progress_fraction

if TYPE_CHECKING:
    from ..type_defs import LevelInfo, MoodBonus


class ProgressionEngine:
    """Pure logic engine for session rewards and levels.

    All methods are static - no instance state.
    """

    # =========================================================================
    # Session Rewards
    # =========================================================================

    @staticmethod
    def calculate_xp(duration_minutes: int, effort_level: int) -> int:
        """Return session XP: ``duration * 5 * effort``."""
        return int(duration_minutes) * const.XP_PER_MINUTE * int(effort_level)

    @staticmethod
    def calculate_coins(duration_minutes: int, effort_level: int) -> int:
        """Return session coins: ``5 + floor(duration / 10) * effort``."""
        steps = int(duration_minutes) // const.COINS_MINUTES_PER_STEP
        return const.COINS_BASE_PER_SESSION + steps * int(effort_level)

    @staticmethod
    def mood_bonus(mood: int) -> MoodBonus:
        """Return the bonus a buddy in a good mood grants to a session."""
        if mood >= const.MOOD_BONUS_THRESHOLD:
            return {
                "xp_multiplier": const.MOOD_BONUS_XP_MULTIPLIER,
                "extra_coins": const.MOOD_BONUS_EXTRA_COINS,
            }
        return {"xp_multiplier": 1.0, "extra_coins": 0}

    @staticmethod
    def mood_bonus_amounts(base_xp: int, mood: int) -> tuple[int, int]:
        """Return ``(extra_xp, extra_coins)`` granted on top of ``base_xp``.

        Extra XP is ``floor(base_xp * multiplier) - base_xp``.
        """
        bonus = ProgressionEngine.mood_bonus(mood)
        boosted = int(base_xp * bonus["xp_multiplier"])
        return max(0, boosted - base_xp), bonus["extra_coins"]

    # =========================================================================
    # Level Ladder
    # =========================================================================

    @staticmethod
    def xp_required_for_level(level: int) -> int:
        """Return the XP needed to climb from ``level`` to ``level + 1``."""
        return const.LEVEL_BASE_REQUIREMENT + const.LEVEL_REQUIREMENT_STEP * (
            max(1, level) - 1
        )

    @staticmethod
    def level_info(total_xp: int) -> LevelInfo:
        """Derive level and in-level progress from cumulative XP.

        Starting at level 1, the current level's requirement is subtracted
        while the remainder still covers it.

        Examples:
            level_info(0)   → level 1, 0/120
            level_info(120) → level 2, 0/140
            level_info(300) → level 3, 40/160
        """
        level = 1
        remaining = max(0, int(total_xp))
        required = ProgressionEngine.xp_required_for_level(level)
        while remaining >= required:
            remaining -= required
            level += 1
            required = ProgressionEngine.xp_required_for_level(level)
        return {
            "level": level,
            "xp_into_level": remaining,
            "xp_for_next_level": required,
            "progress_fraction": progress_fraction(remaining, required),
        }

    @staticmethod
    def level_for_xp(total_xp: int) -> int:
        """Shortcut for ``level_info(total_xp)["level"]``."""
        return ProgressionEngine.level_info(total_xp)["level"]

    @staticmethod
    def levels_gained(xp_before: int, xp_after: int) -> int:
        """Return how many levels were crossed going from one total to another."""
        return max(
            0,
            ProgressionEngine.level_for_xp(xp_after)
            - ProgressionEngine.level_for_xp(xp_before),
        )
