"""Streak Engine - consecutive-day streaks from session date keys.

ARCHITECTURE: Pure logic engine with NO Home Assistant dependencies.

Rules:
- Only distinct local calendar days count; several sessions on one day are
  one day.
- ``best`` is the longest run of calendar-adjacent days.
- ``current`` counts back from today and is 0 when today has no session.
- Results depend only on the set of days, never on input order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils import dt_utils

if TYPE_CHECKING:
    from ..type_defs import StreakInfo


class StreakEngine:
    """Pure streak calculations."""

    @staticmethod
    def empty() -> StreakInfo:
        """Return the streak of a child with no sessions."""
        return {"current": 0, "best": 0, "last_session_date": None}

    @staticmethod
    def compute_streak(date_keys: Iterable[str], today_key: str) -> StreakInfo:
        """Compute current/best streak from a collection of date keys.

        Args:
            date_keys: YYYY-MM-DD keys, any order, duplicates allowed.
            today_key: Today's local date key.
        """
        days = sorted(
            {key for key in date_keys if dt_utils.date_key_to_date(key) is not None}
        )
        if not days:
            return StreakEngine.empty()

        best = 1
        run = 1
        for previous, current in zip(days, days[1:]):
            if dt_utils.days_between(previous, current) == 1:
                run += 1
            else:
                run = 1
            best = max(best, run)

        present = set(days)
        current_streak = 0
        cursor = today_key
        while cursor in present:
            current_streak += 1
            cursor = dt_utils.shift_date_key(cursor, -1)

        return {
            "current": current_streak,
            "best": best,
            "last_session_date": days[-1],
        }

    @staticmethod
    def compute_streaks_for_children(
        sessions: Mapping[str, Mapping[str, Any]],
        child_ids: Iterable[str],
        today_key: str,
    ) -> dict[str, StreakInfo]:
        """Rebuild every child's streak from completed sessions."""
        keys_by_child: dict[str, list[str]] = {child_id: [] for child_id in child_ids}
        for session in sessions.values():
            if session.get(const.DATA_SESSION_STATUS) != const.SESSION_STATUS_COMPLETED:
                continue
            child_id = session.get(const.DATA_SESSION_CHILD_ID)
            if child_id in keys_by_child:
                keys_by_child[child_id].append(session[const.DATA_SESSION_DATE_KEY])
        return {
            child_id: StreakEngine.compute_streak(keys, today_key)
            for child_id, keys in keys_by_child.items()
        }
