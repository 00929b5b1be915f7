# File: coordinator.py
"""Coordinator for the KidsTraining integration.

Owns the training snapshot and the managers that mutate it, and exposes the
read projections used by sensors, services and diagnostics. Entities are
keyed by internal_id.

Mutation flow:
    manager.draft() → engines → manager.commit() → replace_snapshot()
    → storage save scheduled (not awaited) → entities notified

The snapshot dict is never edited in place once published, so a reader that
holds the previous dict never observes a partial write.
"""

# pylint: disable=too-many-public-methods

import copy
from datetime import timedelta
import random
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import const
from .engines.achievement_engine import AchievementEngine
from .engines.buddy_engine import BuddyEngine
from .engines.category_engine import CategoryEngine
from .engines.map_engine import MapEngine
from .engines.streak_engine import StreakEngine
from .engines.treasure_engine import TreasureEngine
from .managers import (
    BuddyManager,
    ChildNotFoundError,
    EconomyManager,
    NotificationManager,
    SessionManager,
    SystemManager,
)
from .storage_manager import KidsTrainingStorageManager
from .utils.dt_utils import dt_today_iso


class KidsTrainingDataCoordinator(DataUpdateCoordinator):
    """Coordinator for KidsTraining integration.

    Manages data primarily using internal_id for entities.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        storage_manager: KidsTrainingStorageManager,
    ):
        """Initialize the KidsTrainingDataCoordinator."""
        update_interval_minutes = config_entry.options.get(
            const.CONF_UPDATE_INTERVAL, const.DEFAULT_UPDATE_INTERVAL
        )

        super().__init__(
            hass,
            const.LOGGER,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(minutes=update_interval_minutes),
        )
        self.config_entry = config_entry
        self.storage_manager = storage_manager
        self._data: dict[str, Any] = {}
        self.rng = random.Random()

        self.session_manager = SessionManager(hass, self)
        self.economy_manager = EconomyManager(hass, self)
        self.buddy_manager = BuddyManager(hass, self)
        self.system_manager = SystemManager(hass, self)
        self.notification_manager = NotificationManager(hass, self)

    # -------------------------------------------------------------------------------------
    # Periodic + First Refresh
    # -------------------------------------------------------------------------------------

    async def _async_update_data(self):
        """Periodic update: roll streaks over to the current local day."""
        try:
            self._refresh_streaks()
            return self._data
        except (KeyError, TypeError, ValueError) as err:
            raise UpdateFailed(f"Error updating KidsTraining data: {err}") from err

    async def async_config_entry_first_refresh(self):
        """Adopt the loaded snapshot, set up managers and run the first refresh."""
        self._data = self.storage_manager.data
        for manager in (
            self.session_manager,
            self.economy_manager,
            self.buddy_manager,
            self.system_manager,
            self.notification_manager,
        ):
            await manager.async_setup()
        await super().async_config_entry_first_refresh()

    def _refresh_streaks(self) -> None:
        """Recompute streaks so ``current`` drops to 0 on a day without sessions."""
        children = self._data.get(const.DATA_CHILDREN, {})
        if not children:
            return
        streaks = StreakEngine.compute_streaks_for_children(
            self._data.get(const.DATA_SESSIONS, {}), children.keys(), dt_today_iso()
        )
        if streaks == self._data.get(const.DATA_STREAKS):
            return
        new_state = copy.deepcopy(self._data)
        new_state[const.DATA_STREAKS] = streaks
        for child_id, streak in streaks.items():
            child = new_state[const.DATA_CHILDREN][child_id]
            child[const.DATA_CHILD_CURRENT_STREAK] = streak[const.DATA_STREAK_CURRENT]
            child[const.DATA_CHILD_BEST_STREAK] = max(
                streak[const.DATA_STREAK_BEST],
                int(child.get(const.DATA_CHILD_BEST_STREAK, 0)),
            )
        self._data = new_state
        self._persist()

    # -------------------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------------------

    @property
    def snapshot(self) -> dict[str, Any]:
        """Return the current snapshot. Treat it as read-only."""
        return self._data

    def replace_snapshot(self, new_data: dict[str, Any]) -> None:
        """Swap in a new snapshot, schedule the save and notify entities."""
        self._data = new_data
        self._persist()
        self.async_set_updated_data(self._data)

    def _persist(self):
        """Save to persistent storage without waiting for the write."""
        self.storage_manager.set_data(self._data)
        self.storage_manager.async_schedule_save()

    # -------------------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------------------

    @property
    def enable_gacha(self) -> bool:
        """Return whether gacha rolls are allowed."""
        return self.config_entry.options.get(
            const.CONF_ENABLE_GACHA, const.DEFAULT_ENABLE_GACHA
        )

    @property
    def enable_meme_skins(self) -> bool:
        """Return whether meme skins can be bought or drawn."""
        return self.config_entry.options.get(
            const.CONF_ENABLE_MEME_SKINS, const.DEFAULT_ENABLE_MEME_SKINS
        )

    # -------------------------------------------------------------------------------------
    # Properties for Easy Access
    # -------------------------------------------------------------------------------------

    @property
    def children_data(self) -> dict[str, Any]:
        """Return the children data."""
        return self._data.get(const.DATA_CHILDREN, {})

    @property
    def activities_data(self) -> dict[str, Any]:
        """Return the activities data."""
        return self._data.get(const.DATA_ACTIVITIES, {})

    @property
    def sessions_data(self) -> dict[str, Any]:
        """Return the sessions data."""
        return self._data.get(const.DATA_SESSIONS, {})

    # -------------------------------------------------------------------------------------
    # Read API
    # -------------------------------------------------------------------------------------

    def get_child(self, child_id: str) -> dict[str, Any] | None:
        """Return a child record, or None."""
        return self.children_data.get(child_id)

    def get_sessions_for_child(
        self, child_id: str, status: str | None = None
    ) -> list[dict[str, Any]]:
        """Return a child's sessions, newest first."""
        sessions = [
            session
            for session in self.sessions_data.values()
            if session.get(const.DATA_SESSION_CHILD_ID) == child_id
            and (status is None or session.get(const.DATA_SESSION_STATUS) == status)
        ]
        return sorted(
            sessions,
            key=lambda session: (
                session.get(const.DATA_SESSION_DATE, ""),
                session.get(const.DATA_CREATED_AT, ""),
            ),
            reverse=True,
        )

    def get_map_nodes_for_child(self, child_id: str) -> list[dict[str, Any]]:
        """Return a child's map nodes in (stage, node) order."""
        return MapEngine.sorted_nodes(
            self._data.get(const.DATA_MAP_NODES, {}).get(child_id, [])
        )

    def get_current_map_node_for_child(self, child_id: str) -> dict[str, Any] | None:
        """Return the child's first incomplete map node, or None."""
        return MapEngine.current_node(self.get_map_nodes_for_child(child_id))

    def get_achievements_for_child(self, child_id: str) -> list[dict[str, Any]]:
        """Return every catalog achievement with the child's unlock state."""
        return AchievementEngine.achievements_for_child(
            self._data.get(const.DATA_CHILD_ACHIEVEMENTS, {}).get(child_id, {})
        )

    def get_active_buddy_key(self, child_id: str) -> str:
        """Return the child's active buddy key."""
        return self._data.get(const.DATA_ACTIVE_BUDDY, {}).get(
            child_id, const.DEFAULT_BUDDY_KEY
        )

    def get_buddy_for_child(
        self, child_id: str, buddy_key: str | None = None
    ) -> dict[str, Any] | None:
        """Return a buddy's progress (active buddy by default) with its form id."""
        if child_id not in self.children_data:
            return None
        key = buddy_key or self.get_active_buddy_key(child_id)
        progress = BuddyEngine.normalize(
            self._data.get(const.DATA_BUDDIES, {}).get(child_id, {}).get(key)
        )
        return {
            **progress,
            "buddy_key": key,
            "form_id": BuddyEngine.form_id(key, progress[const.DATA_BUDDY_STAGE_INDEX]),
            "can_evolve": BuddyEngine.can_evolve(key, progress),
        }

    def get_wallet(self, child_id: str, category: str) -> dict[str, Any]:
        """Return a child's wallet for a skin category."""
        return CategoryEngine.normalize_wallet(
            self._data.get(const.DATA_WALLETS, {}).get(child_id, {}).get(category)
        )

    def get_category_level(self, child_id: str, category: str) -> dict[str, Any]:
        """Return a child's level info for a skin category."""
        counts = self._data.get(const.DATA_CATEGORY_COUNTS, {}).get(child_id, {})
        return CategoryEngine.category_level_info(counts.get(category, 0))

    def get_treasure(self) -> dict[str, Any]:
        """Return the global treasure state with its kind and openable flag."""
        treasure = TreasureEngine.normalize(self._data.get(const.DATA_TREASURE))
        return {
            **treasure,
            "kind": TreasureEngine.chest_kind(treasure["chest_index"]),
            "openable": TreasureEngine.is_openable(treasure),
        }

    def get_owned_skins_for_child(self, child_id: str) -> list[str]:
        """Return the skin ids a child owns, default skins included."""
        return SessionManager.owned_skin_ids(self._data, child_id)

    def get_discovered_forms_for_child(self, child_id: str) -> list[str]:
        """Return the form ids a child has discovered."""
        return list(self._data.get(const.DATA_DISCOVERED_FORMS, {}).get(child_id, []))

    # -------------------------------------------------------------------------------------
    # Mutation API
    # -------------------------------------------------------------------------------------

    def log_training_session(self, child_id: str, activity_id: str, **kwargs: Any):
        """Log a completed session. Returns None for an unknown child."""
        try:
            return self.session_manager.log_training_session(
                child_id, activity_id, **kwargs
            )
        except ChildNotFoundError as err:
            const.LOGGER.warning("WARNING: Cannot log session: %s", err)
            return None

    def plan_training_session(self, child_id: str, activity_id: str, **kwargs: Any):
        """Plan a session. Returns the session, or None for an unknown child."""
        try:
            return self.session_manager.plan_training_session(
                child_id, activity_id, **kwargs
            )
        except ChildNotFoundError as err:
            const.LOGGER.warning("WARNING: Cannot plan session: %s", err)
            return None
