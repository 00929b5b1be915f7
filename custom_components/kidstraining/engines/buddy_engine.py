"""Buddy Engine - the child's companion character.

ARCHITECTURE: Pure logic engine with NO Home Assistant dependencies.

Buddy XP is cumulative and uses the same level ladder as children. Mood sits
in 0..100 and only ever goes up (pet, feed, training). Evolution moves the
stage index forward along a static line once the buddy reaches the line's
``evolve_at_level``; the stage index never decreases.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.math_utils import clamp
from .progression_engine import ProgressionEngine

if TYPE_CHECKING:
    from ..type_defs import BuddyProgress


class BuddyEngine:
    """Pure buddy calculations."""

    @staticmethod
    def default_progress() -> BuddyProgress:
        """Return the progress of a freshly acquired buddy."""
        return {
            "level": 1,
            "xp": 0,
            "stage_index": 0,
            "mood": const.BUDDY_DEFAULT_MOOD,
        }

    @staticmethod
    def normalize(progress: Mapping[str, Any] | None) -> BuddyProgress:
        """Fill missing fields and clamp mood into range."""
        base = BuddyEngine.default_progress()
        if not progress:
            return base
        xp = max(0, int(progress.get(const.DATA_BUDDY_XP, 0)))
        return {
            "level": ProgressionEngine.level_for_xp(xp),
            "xp": xp,
            "stage_index": max(0, int(progress.get(const.DATA_BUDDY_STAGE_INDEX, 0))),
            "mood": clamp(
                int(progress.get(const.DATA_BUDDY_MOOD, const.BUDDY_DEFAULT_MOOD)),
                0,
                const.BUDDY_MOOD_MAX,
            ),
        }

    @staticmethod
    def apply_xp(progress: Mapping[str, Any], xp: int) -> tuple[BuddyProgress, int]:
        """Add XP and return ``(new_progress, levels_gained)``."""
        current = BuddyEngine.normalize(progress)
        total = current["xp"] + max(0, xp)
        gained = ProgressionEngine.levels_gained(current["xp"], total)
        return {
            **current,
            "xp": total,
            "level": ProgressionEngine.level_for_xp(total),
        }, gained

    @staticmethod
    def revert_xp(progress: Mapping[str, Any], xp: int) -> BuddyProgress:
        """Remove XP previously granted, floored at 0. Stage and mood are kept."""
        current = BuddyEngine.normalize(progress)
        total = max(0, current["xp"] - max(0, xp))
        return {**current, "xp": total, "level": ProgressionEngine.level_for_xp(total)}

    @staticmethod
    def _raise_mood(progress: Mapping[str, Any], amount: int) -> BuddyProgress:
        current = BuddyEngine.normalize(progress)
        return {
            **current,
            "mood": min(const.BUDDY_MOOD_MAX, current["mood"] + amount),
        }

    @staticmethod
    def pet(progress: Mapping[str, Any]) -> BuddyProgress:
        """Mood +5, capped at 100."""
        return BuddyEngine._raise_mood(progress, const.BUDDY_MOOD_PET)

    @staticmethod
    def feed(progress: Mapping[str, Any]) -> BuddyProgress:
        """Mood +20, capped at 100. The coin cost is charged by the caller."""
        return BuddyEngine._raise_mood(progress, const.BUDDY_MOOD_FEED)

    @staticmethod
    def after_training(progress: Mapping[str, Any]) -> BuddyProgress:
        """Mood +10, capped at 100."""
        return BuddyEngine._raise_mood(progress, const.BUDDY_MOOD_TRAINING)

    # =========================================================================
    # Evolution
    # =========================================================================

    @staticmethod
    def evolution_line(buddy_key: str) -> Mapping[str, Any] | None:
        """Return the evolution line of a buddy, if it has one."""
        return const.EVOLUTION_LINES.get(buddy_key)

    @staticmethod
    def form_id(buddy_key: str, stage_index: int) -> str:
        """Return the discoverable form id of a buddy at a stage."""
        line = BuddyEngine.evolution_line(buddy_key)
        if not line:
            return buddy_key
        stages = line[const.EVOLUTION_KEY_STAGES]
        return stages[clamp(stage_index, 0, len(stages) - 1)]

    @staticmethod
    def can_evolve(buddy_key: str, progress: Mapping[str, Any]) -> bool:
        """Return True if the buddy has a next stage and enough levels."""
        line = BuddyEngine.evolution_line(buddy_key)
        if not line:
            return False
        current = BuddyEngine.normalize(progress)
        last_stage = len(line[const.EVOLUTION_KEY_STAGES]) - 1
        return (
            current["stage_index"] < last_stage
            and current["level"] >= line[const.EVOLUTION_KEY_EVOLVE_AT_LEVEL]
        )

    @staticmethod
    def evolve(
        buddy_key: str, progress: Mapping[str, Any]
    ) -> tuple[str, BuddyProgress]:
        """Advance the buddy one stage if allowed.

        Returns:
            ``(result, progress)`` where result is ``ok`` or ``not_ready``.
        """
        current = BuddyEngine.normalize(progress)
        if not BuddyEngine.can_evolve(buddy_key, current):
            return const.RESULT_NOT_READY, current
        return const.RESULT_OK, {**current, "stage_index": current["stage_index"] + 1}
