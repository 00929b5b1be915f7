"""Achievement Engine - unlock predicates over aggregate child stats.

ARCHITECTURE: Pure logic engine with NO Home Assistant dependencies.

Predicates are re-evaluated in full after every session; an achievement is
recorded the first time its predicate holds and is never revoked.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from .. import const
from .map_engine import MapEngine

if TYPE_CHECKING:
    from ..type_defs import (
        AchievementStats,
        AchievementView,
        ChildAchievementData,
        MapNodeData,
    )


class AchievementEngine:
    """Pure achievement evaluation."""

    PREDICATES: dict[str, Callable[[AchievementStats], bool]] = {
        const.ACHIEVEMENT_FIRST_SESSION: lambda s: s["session_count"] >= 1,
        const.ACHIEVEMENT_SESSIONS_10: lambda s: s["session_count"] >= 10,
        const.ACHIEVEMENT_TOTAL_MINUTES_100: lambda s: s["total_minutes"] >= 100,
        const.ACHIEVEMENT_STREAK_3: lambda s: s["current_streak"] >= 3,
        const.ACHIEVEMENT_STREAK_7: lambda s: s["current_streak"] >= 7,
        const.ACHIEVEMENT_MAP_NODES_3: lambda s: s["completed_nodes"] >= 3,
        const.ACHIEVEMENT_MAP_STAGE0_COMPLETE: lambda s: s["stage0_complete"],
    }

    @staticmethod
    def build_stats(
        child_id: str,
        sessions: Mapping[str, Mapping[str, Any]],
        nodes: Sequence[MapNodeData],
        current_streak: int,
    ) -> AchievementStats:
        """Aggregate a child's completed sessions and map state."""
        completed = [
            session
            for session in sessions.values()
            if session.get(const.DATA_SESSION_CHILD_ID) == child_id
            and session.get(const.DATA_SESSION_STATUS)
            == const.SESSION_STATUS_COMPLETED
        ]
        return {
            "session_count": len(completed),
            "total_minutes": sum(
                int(session.get(const.DATA_SESSION_DURATION, 0))
                for session in completed
            ),
            "current_streak": current_streak,
            "completed_nodes": MapEngine.completed_count(nodes),
            "stage0_complete": MapEngine.is_stage_complete(nodes, 0),
        }

    @staticmethod
    def check_unlocks(
        child_id: str,
        stats: AchievementStats,
        existing: Mapping[str, ChildAchievementData],
        now_iso: str,
    ) -> list[ChildAchievementData]:
        """Return new unlock records for predicates that now hold.

        Achievements already present in ``existing`` are skipped, so each
        (child, achievement) pair is recorded at most once.
        """
        unlocked: list[ChildAchievementData] = []
        for achievement_id, predicate in AchievementEngine.PREDICATES.items():
            if achievement_id in existing or not predicate(stats):
                continue
            unlocked.append(
                {
                    const.DATA_INTERNAL_ID: f"{child_id}-{achievement_id}",
                    const.DATA_CHILD_ACHIEVEMENT_CHILD_ID: child_id,
                    const.DATA_CHILD_ACHIEVEMENT_ID: achievement_id,
                    const.DATA_CHILD_ACHIEVEMENT_UNLOCKED_AT: now_iso,
                }
            )
        return unlocked

    @staticmethod
    def achievements_for_child(
        existing: Mapping[str, ChildAchievementData],
    ) -> list[AchievementView]:
        """Return every catalog achievement with the child's unlock state."""
        views: list[AchievementView] = []
        for achievement_id, info in const.ACHIEVEMENT_CATALOG.items():
            record = existing.get(achievement_id)
            views.append(
                {
                    "achievement_id": achievement_id,
                    "title": info["title"],
                    "description": info["description"],
                    "icon": info["icon"],
                    "unlocked": record is not None,
                    "unlocked_at": (
                        record[const.DATA_CHILD_ACHIEVEMENT_UNLOCKED_AT]
                        if record
                        else None
                    ),
                }
            )
        return views
