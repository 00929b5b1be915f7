"""Session Manager - the training session pipeline.

This manager owns every write that starts from a training session:
- Logging a completed session (the full reward pipeline)
- Planning a session and completing it later
- Deleting a session and reversing what it contributed
- Editing a session note

ARCHITECTURE:
- SessionManager = orchestration over a deep copy of the snapshot (STATEFUL)
- Progression/Map/Streak/Category/Treasure/Buddy/Achievement engines = math
- The finished copy is committed in one swap, then signals are emitted so
  NotificationManager can fire bus events.

Pipeline order for a completed session (fixed):
    1. validate child
    2. base rewards and mood bonus
    3. map advance and node bonus
    4. child XP/coins/minutes and level-ups
    5. streak rebuild, category count and wallet credit
    6. global treasure progress (never auto-opened)
    7. active buddy XP, mood and discovered form
    8. achievement unlocks
    9. commit, schedule save, notify
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .. import const, data_builders as db
from ..engines.achievement_engine import AchievementEngine
from ..engines.buddy_engine import BuddyEngine
from ..engines.category_engine import CategoryEngine
from ..engines.map_engine import MapEngine
from ..engines.progression_engine import ProgressionEngine
from ..engines.streak_engine import StreakEngine
from ..engines.treasure_engine import TreasureEngine
from ..utils.dt_utils import dt_now_iso, dt_today_iso
from ..utils.math_utils import clamp
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import KidsTrainingDataCoordinator
    from ..type_defs import SessionData, SessionResult, Snapshot, StreakInfo


__all__ = ["ChildNotFoundError", "SessionManager"]


class ChildNotFoundError(Exception):
    """Raised when a session is logged for a child that does not exist.

    Attributes:
        child_id: The unknown child id
    """

    def __init__(self, child_id: str) -> None:
        """Initialize ChildNotFoundError."""
        self.child_id = child_id
        super().__init__(f"Child not found: {child_id}")


class SessionManager(BaseManager):
    """Manager for the training session lifecycle.

    Responsibilities:
    - Run the completed-session pipeline
    - Keep per-session deltas so a deletion can reverse them
    - Emit SESSION_LOGGED / LEVEL_UP / ACHIEVEMENT_UNLOCKED / SESSION_DELETED

    NOT responsible for:
    - Shop, gacha and chest operations (EconomyManager)
    - Buddy care actions (BuddyManager)
    """

    def __init__(
        self, hass: HomeAssistant, coordinator: KidsTrainingDataCoordinator
    ) -> None:
        """Initialize the SessionManager."""
        super().__init__(hass, coordinator)

    async def async_setup(self) -> None:
        """Set up the SessionManager. No subscriptions are needed."""
        const.LOGGER.debug("DEBUG: SessionManager set up for %s", self.entry_id)

    # =========================================================================
    # Public operations
    # =========================================================================

    def log_training_session(
        self,
        child_id: str,
        activity_id: str,
        duration_minutes: int,
        effort_level: int,
        note: str | None = None,
        tags: Iterable[str] | None = None,
        date: Any = None,
    ) -> SessionResult:
        """Log a completed session and run the full reward pipeline.

        Raises:
            ChildNotFoundError: If ``child_id`` is unknown. Nothing changes.
            ValueError: If ``date`` is given but cannot be parsed.
        """
        state = self.draft()
        if child_id not in state[const.DATA_CHILDREN]:
            raise ChildNotFoundError(child_id)

        activity = state[const.DATA_ACTIVITIES].get(activity_id)
        session = db.build_session(
            child_id=child_id,
            activity_id=activity_id,
            duration_minutes=max(0, int(duration_minutes)),
            effort_level=clamp(
                int(effort_level), const.EFFORT_LEVEL_MIN, const.EFFORT_LEVEL_MAX
            ),
            skin_category=CategoryEngine.category_for_activity(activity),
            date=date,
            note=note,
            tags=tags,
        )
        result = self._apply_completed_session(state, session)
        self.commit(state)
        self._emit_session_result(result)
        return result

    def plan_training_session(
        self,
        child_id: str,
        activity_id: str,
        date: Any = None,
        note: str | None = None,
        tags: Iterable[str] | None = None,
    ) -> SessionData:
        """Record a planned session with no rewards and no economy effects.

        Raises:
            ChildNotFoundError: If ``child_id`` is unknown.
            ValueError: If ``date`` is given but cannot be parsed.
        """
        state = self.draft()
        if child_id not in state[const.DATA_CHILDREN]:
            raise ChildNotFoundError(child_id)

        activity = state[const.DATA_ACTIVITIES].get(activity_id)
        session = db.build_session(
            child_id=child_id,
            activity_id=activity_id,
            duration_minutes=0,
            effort_level=0,
            skin_category=CategoryEngine.category_for_activity(activity),
            date=date,
            note=note,
            tags=tags,
            status=const.SESSION_STATUS_PLANNED,
        )
        state[const.DATA_SESSIONS][session[const.DATA_INTERNAL_ID]] = session
        self.commit(state)
        const.LOGGER.info(
            "INFO: Planned session %s for child %s on %s",
            session[const.DATA_INTERNAL_ID],
            child_id,
            session[const.DATA_SESSION_DATE_KEY],
        )
        return session

    def complete_planned_session(
        self,
        session_id: str,
        duration_minutes: int,
        effort_level: int,
        note: str | None = None,
        tags: Iterable[str] | None = None,
    ) -> tuple[str, SessionResult | None]:
        """Run the pipeline for a planned session, keeping its id and date.

        Returns:
            ``(result, session_result)``. ``result`` is ``ok``, ``not_found``
            or ``already_completed``; ``session_result`` is set only on ``ok``.
        """
        state = self.draft()
        planned = state[const.DATA_SESSIONS].get(session_id)
        if planned is None:
            return const.RESULT_NOT_FOUND, None
        if planned.get(const.DATA_SESSION_STATUS) != const.SESSION_STATUS_PLANNED:
            return const.RESULT_ALREADY_COMPLETED, None
        child_id = planned[const.DATA_SESSION_CHILD_ID]
        if child_id not in state[const.DATA_CHILDREN]:
            return const.RESULT_NOT_FOUND, None

        session = db.build_session(
            child_id=child_id,
            activity_id=planned[const.DATA_SESSION_ACTIVITY_ID],
            duration_minutes=max(0, int(duration_minutes)),
            effort_level=clamp(
                int(effort_level), const.EFFORT_LEVEL_MIN, const.EFFORT_LEVEL_MAX
            ),
            skin_category=planned.get(
                const.DATA_SESSION_SKIN_CATEGORY, const.SKIN_CATEGORY_STUDY
            ),
            date=planned[const.DATA_SESSION_DATE],
            note=note if note is not None else planned.get(const.DATA_SESSION_NOTE),
            tags=tags if tags is not None else planned.get(const.DATA_SESSION_TAGS),
            session_id=session_id,
        )
        session[const.DATA_CREATED_AT] = planned.get(
            const.DATA_CREATED_AT, session[const.DATA_CREATED_AT]
        )
        result = self._apply_completed_session(state, session)
        self.commit(state)
        self._emit_session_result(result)
        return const.RESULT_OK, result

    def delete_training_session(self, session_id: str) -> str:
        """Delete a session and reverse its recorded contribution.

        Map progress and achievements are monotonic and stay as they are.

        Returns:
            ``ok`` or ``not_found``.
        """
        state = self.draft()
        session = state[const.DATA_SESSIONS].pop(session_id, None)
        if session is None:
            return const.RESULT_NOT_FOUND

        child_id = session.get(const.DATA_SESSION_CHILD_ID)
        if session.get(const.DATA_SESSION_STATUS) == const.SESSION_STATUS_COMPLETED:
            self._reverse_session(state, session)
        self.commit(state)
        self.emit(
            const.SIGNAL_SUFFIX_SESSION_DELETED,
            child_id=child_id,
            session_id=session_id,
        )
        const.LOGGER.info("INFO: Deleted session %s for child %s", session_id, child_id)
        return const.RESULT_OK

    def update_session_note(self, session_id: str, note: str | None) -> str:
        """Replace the note of a session. Returns ``ok`` or ``not_found``."""
        state = self.draft()
        session = state[const.DATA_SESSIONS].get(session_id)
        if session is None:
            return const.RESULT_NOT_FOUND
        session[const.DATA_SESSION_NOTE] = db.normalize_note(note)
        self.commit(state)
        return const.RESULT_OK

    # =========================================================================
    # Streaks
    # =========================================================================

    @staticmethod
    def rebuild_streak(state: Snapshot, child_id: str, today_key: str) -> StreakInfo:
        """Recompute a child's streak and store it on the streak map and child."""
        streak = StreakEngine.compute_streaks_for_children(
            state[const.DATA_SESSIONS], [child_id], today_key
        )[child_id]
        state[const.DATA_STREAKS][child_id] = streak
        child = state[const.DATA_CHILDREN].get(child_id)
        if child is not None:
            child[const.DATA_CHILD_CURRENT_STREAK] = streak[const.DATA_STREAK_CURRENT]
            child[const.DATA_CHILD_BEST_STREAK] = max(
                streak[const.DATA_STREAK_BEST],
                int(child.get(const.DATA_CHILD_BEST_STREAK, 0)),
            )
        return streak

    # =========================================================================
    # Pipeline
    # =========================================================================

    def _apply_completed_session(
        self, state: Snapshot, session: SessionData
    ) -> SessionResult:
        """Apply a completed session to ``state`` in place."""
        now_iso = dt_now_iso()
        today_key = dt_today_iso()
        child_id = session[const.DATA_SESSION_CHILD_ID]
        child = state[const.DATA_CHILDREN][child_id]
        duration = session[const.DATA_SESSION_DURATION]
        effort = session[const.DATA_SESSION_EFFORT]

        # Base rewards and mood bonus
        base_xp = ProgressionEngine.calculate_xp(duration, effort)
        base_coins = ProgressionEngine.calculate_coins(duration, effort)
        buddy_key = self.active_buddy_key(state, child_id)
        buddy_before = BuddyEngine.normalize(
            state[const.DATA_BUDDIES].get(child_id, {}).get(buddy_key)
        )
        mood_xp, mood_coins = ProgressionEngine.mood_bonus_amounts(
            base_xp, buddy_before[const.DATA_BUDDY_MOOD]
        )

        # Map
        advance = MapEngine.advance_map(
            MapEngine.ensure_map(state[const.DATA_MAP_NODES].get(child_id), child_id),
            now_iso,
        )
        state[const.DATA_MAP_NODES][child_id] = advance["nodes"]
        completed_nodes = (
            [advance["completed_node"]] if advance["completed_node"] else []
        )
        bonus_xp = mood_xp + advance["bonus_xp"]
        bonus_coins = mood_coins + advance["bonus_coins"]

        # Child totals
        total_xp = base_xp + bonus_xp
        xp_before = int(child.get(const.DATA_CHILD_XP, 0))
        child[const.DATA_CHILD_XP] = xp_before + total_xp
        child[const.DATA_CHILD_LEVEL] = ProgressionEngine.level_for_xp(
            child[const.DATA_CHILD_XP]
        )
        child[const.DATA_CHILD_COINS] = (
            int(child.get(const.DATA_CHILD_COINS, 0)) + base_coins + bonus_coins
        )
        child[const.DATA_CHILD_TOTAL_MINUTES] = (
            int(child.get(const.DATA_CHILD_TOTAL_MINUTES, 0)) + duration
        )
        level_ups = ProgressionEngine.levels_gained(
            xp_before, child[const.DATA_CHILD_XP]
        )

        session_id = session[const.DATA_INTERNAL_ID]
        session.update(
            {
                const.DATA_SESSION_STATUS: const.SESSION_STATUS_COMPLETED,
                const.DATA_SESSION_XP_GAINED: base_xp,
                const.DATA_SESSION_COINS_GAINED: base_coins,
                const.DATA_SESSION_BONUS_XP: bonus_xp,
                const.DATA_SESSION_BONUS_COINS: bonus_coins,
                const.DATA_SESSION_COMPLETED_NODE_IDS: [
                    node[const.DATA_INTERNAL_ID] for node in completed_nodes
                ],
                const.DATA_SESSION_BUDDY_KEY: buddy_key,
            }
        )
        state[const.DATA_SESSIONS][session_id] = session

        # Streak, category count and wallet
        streak = self.rebuild_streak(state, child_id, today_key)
        category = session[const.DATA_SESSION_SKIN_CATEGORY]
        state[const.DATA_CATEGORY_COUNTS][child_id] = CategoryEngine.increment_count(
            state[const.DATA_CATEGORY_COUNTS].get(
                child_id, CategoryEngine.empty_counts()
            ),
            category,
        )
        wallets = state[const.DATA_WALLETS].setdefault(
            child_id, CategoryEngine.empty_wallets()
        )
        wallets[category], wallet_delta = CategoryEngine.credit_session(
            wallets.get(category)
        )
        session[const.DATA_SESSION_WALLET_COINS_DELTA] = wallet_delta["coins"]
        session[const.DATA_SESSION_WALLET_TICKETS_DELTA] = wallet_delta["tickets"]
        session[const.DATA_SESSION_WALLET_TICKET_PROGRESS_DELTA] = wallet_delta[
            "ticket_progress"
        ]

        # Treasure
        state[const.DATA_TREASURE] = TreasureEngine.add_progress(
            state[const.DATA_TREASURE], 1, category
        )
        session[const.DATA_SESSION_TREASURE_PROGRESS_DELTA] = 1

        # Buddy
        buddy_after, buddy_level_ups = BuddyEngine.apply_xp(buddy_before, total_xp)
        buddy_after = BuddyEngine.after_training(buddy_after)
        state[const.DATA_BUDDIES].setdefault(child_id, {})[buddy_key] = buddy_after
        state[const.DATA_ACTIVE_BUDDY][child_id] = buddy_key
        self.discover_form(
            state,
            child_id,
            BuddyEngine.form_id(buddy_key, buddy_after[const.DATA_BUDDY_STAGE_INDEX]),
        )

        # Achievements
        existing = state[const.DATA_CHILD_ACHIEVEMENTS].setdefault(child_id, {})
        stats = AchievementEngine.build_stats(
            child_id,
            state[const.DATA_SESSIONS],
            state[const.DATA_MAP_NODES][child_id],
            streak[const.DATA_STREAK_CURRENT],
        )
        unlocked = AchievementEngine.check_unlocks(child_id, stats, existing, now_iso)
        for record in unlocked:
            existing[record[const.DATA_CHILD_ACHIEVEMENT_ID]] = record

        const.LOGGER.debug(
            "DEBUG: Session %s for child %s: xp=%s+%s coins=%s+%s level_ups=%s",
            session_id,
            child_id,
            base_xp,
            bonus_xp,
            base_coins,
            bonus_coins,
            level_ups,
        )
        return {
            "session": session,
            "level_ups": level_ups,
            "completed_nodes": completed_nodes,
            "unlocked_achievements": unlocked,
            "bonus_xp": bonus_xp,
            "bonus_coins": bonus_coins,
            "wallet_delta": wallet_delta,
            "tickets_gained": wallet_delta["tickets"],
            "buddy_level_ups": buddy_level_ups,
        }

    def _reverse_session(self, state: Snapshot, session: SessionData) -> None:
        """Reverse the recorded contribution of a completed session in place."""
        child_id = session[const.DATA_SESSION_CHILD_ID]
        child = state[const.DATA_CHILDREN].get(child_id)
        total_xp = int(session.get(const.DATA_SESSION_XP_GAINED, 0)) + int(
            session.get(const.DATA_SESSION_BONUS_XP, 0)
        )
        total_coins = int(session.get(const.DATA_SESSION_COINS_GAINED, 0)) + int(
            session.get(const.DATA_SESSION_BONUS_COINS, 0)
        )

        if child is not None:
            child[const.DATA_CHILD_XP] = max(
                0, int(child.get(const.DATA_CHILD_XP, 0)) - total_xp
            )
            child[const.DATA_CHILD_LEVEL] = ProgressionEngine.level_for_xp(
                child[const.DATA_CHILD_XP]
            )
            child[const.DATA_CHILD_COINS] = max(
                0, int(child.get(const.DATA_CHILD_COINS, 0)) - total_coins
            )
            child[const.DATA_CHILD_TOTAL_MINUTES] = max(
                0,
                int(child.get(const.DATA_CHILD_TOTAL_MINUTES, 0))
                - int(session.get(const.DATA_SESSION_DURATION, 0)),
            )

            category = session.get(
                const.DATA_SESSION_SKIN_CATEGORY, const.SKIN_CATEGORY_STUDY
            )
            state[const.DATA_CATEGORY_COUNTS][child_id] = (
                CategoryEngine.increment_count(
                    state[const.DATA_CATEGORY_COUNTS].get(
                        child_id, CategoryEngine.empty_counts()
                    ),
                    category,
                    -1,
                )
            )
            wallets = state[const.DATA_WALLETS].setdefault(
                child_id, CategoryEngine.empty_wallets()
            )
            wallets[category] = CategoryEngine.revert_session(
                wallets.get(category),
                {
                    "coins": session.get(const.DATA_SESSION_WALLET_COINS_DELTA, 0),
                    "tickets": session.get(const.DATA_SESSION_WALLET_TICKETS_DELTA, 0),
                    "ticket_progress": session.get(
                        const.DATA_SESSION_WALLET_TICKET_PROGRESS_DELTA, 0
                    ),
                },
            )

            buddy_key = session.get(const.DATA_SESSION_BUDDY_KEY) or (
                self.active_buddy_key(state, child_id)
            )
            child_buddies = state[const.DATA_BUDDIES].setdefault(child_id, {})
            if buddy_key in child_buddies:
                child_buddies[buddy_key] = BuddyEngine.revert_xp(
                    child_buddies[buddy_key], total_xp
                )

            self.rebuild_streak(state, child_id, dt_today_iso())

        state[const.DATA_TREASURE] = TreasureEngine.revert_progress(
            state[const.DATA_TREASURE],
            int(session.get(const.DATA_SESSION_TREASURE_PROGRESS_DELTA, 0)),
        )

    def _emit_session_result(self, result: SessionResult) -> None:
        """Emit signals describing a committed session."""
        session = result["session"]
        child_id = session[const.DATA_SESSION_CHILD_ID]
        self.emit(
            const.SIGNAL_SUFFIX_SESSION_LOGGED,
            child_id=child_id,
            session_id=session[const.DATA_INTERNAL_ID],
            xp_gained=session[const.DATA_SESSION_XP_GAINED]
            + session[const.DATA_SESSION_BONUS_XP],
            coins_gained=session[const.DATA_SESSION_COINS_GAINED]
            + session[const.DATA_SESSION_BONUS_COINS],
            completed_node_ids=list(session[const.DATA_SESSION_COMPLETED_NODE_IDS]),
        )
        if result["level_ups"]:
            child = self.coordinator.snapshot[const.DATA_CHILDREN].get(child_id, {})
            self.emit(
                const.SIGNAL_SUFFIX_LEVEL_UP,
                child_id=child_id,
                level=child.get(const.DATA_CHILD_LEVEL, 1),
                levels_gained=result["level_ups"],
            )
        for record in result["unlocked_achievements"]:
            self.emit(
                const.SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED,
                child_id=child_id,
                achievement_id=record[const.DATA_CHILD_ACHIEVEMENT_ID],
            )
