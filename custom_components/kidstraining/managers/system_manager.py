# File: managers/system_manager.py
"""System Manager for KidsTraining integration.

Handles the roster and whole-snapshot operations:
- add_child / remove_child / add_activity
- update_settings (config entry options)
- reset_all_data (fresh seed)
- import_state (merge an exported snapshot, existing items win)

Entity cleanup is reactive: remove_child and reset_all_data emit
CHILD_REMOVED, and the handler here scrubs the entity registry for that
child once the snapshot has been swapped.

Signals Emitted:
- SIGNAL_SUFFIX_CHILD_ADDED: sensor platform adds the child's entities
- SIGNAL_SUFFIX_CHILD_REMOVED: registry cleanup
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import callback

from .. import const, data_builders as db
from ..engines.buddy_engine import BuddyEngine
from ..engines.category_engine import CategoryEngine
from ..engines.map_engine import MapEngine
from ..engines.merge_engine import MergeEngine
from ..engines.streak_engine import StreakEngine
from ..helpers.entity_helpers import remove_entities_by_item_id
from ..utils.dt_utils import dt_today_iso
from .base_manager import BaseManager

if TYPE_CHECKING:
    from collections.abc import Mapping

    from homeassistant.core import HomeAssistant

    from ..coordinator import KidsTrainingDataCoordinator
    from ..type_defs import ActivityData, ChildData


# Per-child buckets dropped when a child is removed.
_PER_CHILD_BUCKETS = (
    const.DATA_MAP_NODES,
    const.DATA_CHILD_ACHIEVEMENTS,
    const.DATA_STREAKS,
    const.DATA_CATEGORY_COUNTS,
    const.DATA_WALLETS,
    const.DATA_BUDDIES,
    const.DATA_ACTIVE_BUDDY,
    const.DATA_OWNED_SKINS,
    const.DATA_DISCOVERED_FORMS,
)


class SystemManager(BaseManager):
    """System Manager - roster, settings and whole-snapshot operations."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: KidsTrainingDataCoordinator,
    ) -> None:
        """Initialize system manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator
        """
        super().__init__(hass, coordinator)

    async def async_setup(self) -> None:
        """Subscribe to CHILD_REMOVED for registry cleanup."""
        self.listen(const.SIGNAL_SUFFIX_CHILD_REMOVED, self._handle_child_removed)
        const.LOGGER.debug(
            "DEBUG: SystemManager initialized for entry %s", self.entry_id
        )

    # =========================================================================
    # Signal Handlers
    # =========================================================================

    @callback
    def _handle_child_removed(self, payload: dict[str, Any]) -> None:
        """Scrub registry entities of a removed child.

        Must run in the event loop; entity registry operations require it.
        """
        child_id = payload.get("child_id")
        if not child_id:
            const.LOGGER.warning("WARNING: CHILD_REMOVED signal missing child_id")
            return
        removed = remove_entities_by_item_id(self.hass, self.entry_id, child_id)
        if removed > 0:
            const.LOGGER.debug(
                "DEBUG: SystemManager removed %d entities for child %s",
                removed,
                child_id,
            )

    # =========================================================================
    # Roster
    # =========================================================================

    def add_child(self, name: str, avatar: str | None = None) -> ChildData:
        """Create a child with a starter map, empty wallets and the default buddy."""
        state = self.draft()
        child = db.build_child(name, avatar)
        child_id = child[const.DATA_INTERNAL_ID]
        state[const.DATA_CHILDREN][child_id] = child
        state[const.DATA_MAP_NODES][child_id] = MapEngine.build_starter_map(child_id)
        state[const.DATA_CHILD_ACHIEVEMENTS][child_id] = {}
        state[const.DATA_STREAKS][child_id] = StreakEngine.empty()
        state[const.DATA_CATEGORY_COUNTS][child_id] = CategoryEngine.empty_counts()
        state[const.DATA_WALLETS][child_id] = CategoryEngine.empty_wallets()
        state[const.DATA_BUDDIES][child_id] = {
            const.DEFAULT_BUDDY_KEY: BuddyEngine.default_progress()
        }
        state[const.DATA_ACTIVE_BUDDY][child_id] = const.DEFAULT_BUDDY_KEY
        state[const.DATA_OWNED_SKINS][child_id] = [const.DEFAULT_BUDDY_KEY]
        state[const.DATA_DISCOVERED_FORMS][child_id] = [
            BuddyEngine.form_id(const.DEFAULT_BUDDY_KEY, 0)
        ]
        self.commit(state)
        self.emit(
            const.SIGNAL_SUFFIX_CHILD_ADDED,
            child_id=child_id,
            child_name=child[const.DATA_CHILD_NAME],
        )
        const.LOGGER.info(
            "INFO: Added child '%s' (%s)", child[const.DATA_CHILD_NAME], child_id
        )
        return child

    def remove_child(self, child_id: str) -> str:
        """Drop a child with every per-child bucket and all of its sessions."""
        state = self.draft()
        child = state[const.DATA_CHILDREN].pop(child_id, None)
        if child is None:
            return const.RESULT_NOT_FOUND
        for bucket in _PER_CHILD_BUCKETS:
            state[bucket].pop(child_id, None)
        state[const.DATA_SESSIONS] = {
            session_id: session
            for session_id, session in state[const.DATA_SESSIONS].items()
            if session.get(const.DATA_SESSION_CHILD_ID) != child_id
        }
        self.commit(state)
        self.emit(const.SIGNAL_SUFFIX_CHILD_REMOVED, child_id=child_id)
        const.LOGGER.info(
            "INFO: Removed child '%s' (%s)", child.get(const.DATA_CHILD_NAME), child_id
        )
        return const.RESULT_OK

    def add_activity(
        self,
        name: str,
        category: str = const.ACTIVITY_CATEGORY_OTHER,
        icon: str | None = None,
    ) -> ActivityData:
        """Create an activity."""
        state = self.draft()
        activity = db.build_activity(name, category, icon)
        state[const.DATA_ACTIVITIES][activity[const.DATA_INTERNAL_ID]] = activity
        self.commit(state)
        return activity

    # =========================================================================
    # Settings
    # =========================================================================

    def update_settings(
        self,
        enable_gacha: bool | None = None,
        enable_meme_skins: bool | None = None,
        update_interval: int | None = None,
    ) -> dict[str, Any]:
        """Write the given settings to the config entry options."""
        entry = self.coordinator.config_entry
        options = dict(entry.options)
        if enable_gacha is not None:
            options[const.CONF_ENABLE_GACHA] = enable_gacha
        if enable_meme_skins is not None:
            options[const.CONF_ENABLE_MEME_SKINS] = enable_meme_skins
        if update_interval is not None:
            options[const.CONF_UPDATE_INTERVAL] = update_interval
        self.hass.config_entries.async_update_entry(entry, options=options)
        const.LOGGER.debug("DEBUG: Settings updated: %s", options)
        return options

    # =========================================================================
    # Whole-snapshot operations
    # =========================================================================

    def reset_all_data(self) -> None:
        """Replace the snapshot with a fresh seed."""
        child_ids = list(self.coordinator.snapshot[const.DATA_CHILDREN])
        self.commit(db.build_seed_state())
        for child_id in child_ids:
            self.emit(const.SIGNAL_SUFFIX_CHILD_REMOVED, child_id=child_id)
        const.LOGGER.warning(
            "WARNING: All KidsTraining data was reset (%d children removed)",
            len(child_ids),
        )

    def import_state(self, incoming: Mapping[str, Any]) -> dict[str, int]:
        """Merge an exported snapshot or envelope into the current snapshot.

        Returns:
            Counts of children and sessions the import added.
        """
        if const.DATA_ENVELOPE_STATE in incoming and isinstance(
            incoming[const.DATA_ENVELOPE_STATE], dict
        ):
            incoming = incoming[const.DATA_ENVELOPE_STATE]

        current = self.coordinator.snapshot
        known_children = set(current[const.DATA_CHILDREN])
        added_sessions = MergeEngine.added_session_ids(current, incoming)
        merged = db.ensure_state_shape(
            MergeEngine.merge(current, incoming, dt_today_iso())
        )
        new_children = [
            child_id
            for child_id in merged[const.DATA_CHILDREN]
            if child_id not in known_children
        ]
        self.commit(merged)
        for child_id in new_children:
            self.emit(
                const.SIGNAL_SUFFIX_CHILD_ADDED,
                child_id=child_id,
                child_name=merged[const.DATA_CHILDREN][child_id].get(
                    const.DATA_CHILD_NAME
                ),
            )
        const.LOGGER.info(
            "INFO: Imported %d children and %d sessions",
            len(new_children),
            len(added_sessions),
        )
        return {
            "children_added": len(new_children),
            "sessions_added": len(added_sessions),
        }
