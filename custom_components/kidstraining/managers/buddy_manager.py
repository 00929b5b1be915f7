"""Buddy Manager - care actions for a child's companion.

Pet and feed raise mood, evolve advances the stage along the buddy's
evolution line, and set_active_buddy chooses which owned skin receives
training XP. Every operation acts on the child's active buddy unless a skin
is named.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.buddy_engine import BuddyEngine
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import KidsTrainingDataCoordinator


class BuddyManager(BaseManager):
    """Manager for buddy care and evolution."""

    def __init__(
        self, hass: HomeAssistant, coordinator: KidsTrainingDataCoordinator
    ) -> None:
        """Initialize the BuddyManager."""
        super().__init__(hass, coordinator)

    async def async_setup(self) -> None:
        """Set up the BuddyManager. No subscriptions are needed."""
        const.LOGGER.debug("DEBUG: BuddyManager set up for %s", self.entry_id)

    def pet_buddy(self, child_id: str) -> str:
        """Raise the active buddy's mood by 5. Returns ``ok`` or ``not_found``."""
        state = self.draft()
        if child_id not in state[const.DATA_CHILDREN]:
            return const.RESULT_NOT_FOUND
        buddy_key = self.active_buddy_key(state, child_id)
        child_buddies = state[const.DATA_BUDDIES].setdefault(child_id, {})
        child_buddies[buddy_key] = BuddyEngine.pet(child_buddies.get(buddy_key))
        state[const.DATA_ACTIVE_BUDDY][child_id] = buddy_key
        self.commit(state)
        return const.RESULT_OK

    def feed_buddy(self, child_id: str) -> str:
        """Spend 10 child coins to raise the active buddy's mood by 20.

        Returns:
            ``ok``, ``not_found`` or ``not_enough_coins``.
        """
        state = self.draft()
        child = state[const.DATA_CHILDREN].get(child_id)
        if child is None:
            return const.RESULT_NOT_FOUND
        coins = int(child.get(const.DATA_CHILD_COINS, 0))
        if coins < const.BUDDY_FEED_COST:
            const.LOGGER.debug(
                "DEBUG: Child %s has %s coins, feeding needs %s",
                child_id,
                coins,
                const.BUDDY_FEED_COST,
            )
            return const.RESULT_NOT_ENOUGH_COINS

        child[const.DATA_CHILD_COINS] = coins - const.BUDDY_FEED_COST
        buddy_key = self.active_buddy_key(state, child_id)
        child_buddies = state[const.DATA_BUDDIES].setdefault(child_id, {})
        child_buddies[buddy_key] = BuddyEngine.feed(child_buddies.get(buddy_key))
        state[const.DATA_ACTIVE_BUDDY][child_id] = buddy_key
        self.commit(state)
        return const.RESULT_OK

    def evolve_buddy(self, child_id: str) -> dict[str, Any]:
        """Advance the active buddy one stage along its evolution line.

        Returns:
            ``{"result": "ok", "form_id": ...}`` on success, otherwise
            ``not_found`` (unknown child, or no further stage) or
            ``not_ready`` (level too low).
        """
        state = self.draft()
        if child_id not in state[const.DATA_CHILDREN]:
            return {"result": const.RESULT_NOT_FOUND}

        buddy_key = self.active_buddy_key(state, child_id)
        child_buddies = state[const.DATA_BUDDIES].setdefault(child_id, {})
        progress = BuddyEngine.normalize(child_buddies.get(buddy_key))
        line = BuddyEngine.evolution_line(buddy_key)
        if (
            line is None
            or progress[const.DATA_BUDDY_STAGE_INDEX]
            >= len(line[const.EVOLUTION_KEY_STAGES]) - 1
        ):
            return {"result": const.RESULT_NOT_FOUND}

        result, evolved = BuddyEngine.evolve(buddy_key, progress)
        if result != const.RESULT_OK:
            return {"result": result}

        child_buddies[buddy_key] = evolved
        form_id = BuddyEngine.form_id(buddy_key, evolved[const.DATA_BUDDY_STAGE_INDEX])
        self.discover_form(state, child_id, form_id)
        self.commit(state)
        const.LOGGER.info(
            "INFO: Buddy %s of child %s evolved into %s", buddy_key, child_id, form_id
        )
        return {"result": const.RESULT_OK, "form_id": form_id}

    def set_active_buddy(self, child_id: str, skin_id: str) -> str:
        """Make an owned skin the child's active buddy.

        Returns:
            ``ok``, ``not_found`` (unknown child or skin) or ``not_available``
            (skin not owned).
        """
        state = self.draft()
        if child_id not in state[const.DATA_CHILDREN] or (
            skin_id not in const.SKIN_CATALOG
        ):
            return const.RESULT_NOT_FOUND
        if skin_id not in self.owned_skin_ids(state, child_id):
            return const.RESULT_NOT_AVAILABLE

        child_buddies = state[const.DATA_BUDDIES].setdefault(child_id, {})
        progress = BuddyEngine.normalize(child_buddies.get(skin_id))
        child_buddies[skin_id] = progress
        state[const.DATA_ACTIVE_BUDDY][child_id] = skin_id
        self.discover_form(state, child_id, BuddyEngine.form_id(skin_id, 0))
        self.discover_form(
            state,
            child_id,
            BuddyEngine.form_id(skin_id, progress[const.DATA_BUDDY_STAGE_INDEX]),
        )
        self.commit(state)
        return const.RESULT_OK
