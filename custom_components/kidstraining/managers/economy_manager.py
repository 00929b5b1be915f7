"""Economy Manager - shop purchases, gacha rolls and treasure chests.

All three spend or grant category wallet currency, so they share one manager.
Each operation validates against a deep copy of the snapshot and only commits
when the result is ``ok``. Expected failures come back as result tags and are
logged at DEBUG.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const
from ..engines.buddy_engine import BuddyEngine
from ..engines.category_engine import CategoryEngine
from ..engines.gacha_engine import GachaEngine
from ..engines.treasure_engine import TreasureEngine
from ..utils.dt_utils import dt_now_iso
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import KidsTrainingDataCoordinator
    from ..type_defs import ChestOpening, GachaOutcome, Snapshot


class EconomyManager(BaseManager):
    """Manager for category wallet spending and rewards."""

    def __init__(
        self, hass: HomeAssistant, coordinator: KidsTrainingDataCoordinator
    ) -> None:
        """Initialize the EconomyManager."""
        super().__init__(hass, coordinator)

    async def async_setup(self) -> None:
        """Set up the EconomyManager. No subscriptions are needed."""
        const.LOGGER.debug("DEBUG: EconomyManager set up for %s", self.entry_id)

    @staticmethod
    def category_level(state: Snapshot, child_id: str, category: str) -> int:
        """Return a child's level in a skin category."""
        counts = state[const.DATA_CATEGORY_COUNTS].get(child_id, {})
        return CategoryEngine.category_level_info(counts.get(category, 0))["level"]

    # =========================================================================
    # Shop
    # =========================================================================

    def purchase_skin(self, child_id: str, skin_id: str) -> str:
        """Buy a shop skin with coins from the skin's category wallet.

        Returns:
            ``ok``, ``not_found``, ``not_available``, ``already_owned``,
            ``locked`` or ``not_enough_coins``.
        """
        state = self.draft()
        skin = const.SKIN_CATALOG.get(skin_id)
        if skin is None or child_id not in state[const.DATA_CHILDREN]:
            return const.RESULT_NOT_FOUND
        if (
            skin.get(const.SKIN_KEY_UNLOCK_METHOD) != const.UNLOCK_METHOD_SHOP
            or skin.get(const.SKIN_KEY_SHOP_COST) is None
            or skin.get(const.SKIN_KEY_CATEGORY) not in const.SKIN_CATEGORIES
        ):
            return const.RESULT_NOT_AVAILABLE
        if skin.get(const.SKIN_KEY_IS_MEME) and not self.coordinator.enable_meme_skins:
            return const.RESULT_NOT_AVAILABLE
        if skin_id in self.owned_skin_ids(state, child_id):
            return const.RESULT_ALREADY_OWNED

        category = skin[const.SKIN_KEY_CATEGORY]
        if skin.get(const.SKIN_KEY_MIN_LEVEL, 0) > self.category_level(
            state, child_id, category
        ):
            return const.RESULT_LOCKED

        wallets = state[const.DATA_WALLETS].setdefault(
            child_id, CategoryEngine.empty_wallets()
        )
        debited = CategoryEngine.debit_coins(
            wallets.get(category), skin[const.SKIN_KEY_SHOP_COST]
        )
        if debited is None:
            const.LOGGER.debug(
                "DEBUG: Child %s cannot afford skin %s", child_id, skin_id
            )
            return const.RESULT_NOT_ENOUGH_COINS

        wallets[category] = debited
        self.grant_skin(state, child_id, skin_id)
        self.commit(state)
        const.LOGGER.info("INFO: Child %s bought skin %s", child_id, skin_id)
        return const.RESULT_OK

    # =========================================================================
    # Gacha
    # =========================================================================

    def roll_skin_gacha(self, child_id: str, category: str) -> GachaOutcome:
        """Spend one category ticket on a weighted skin draw."""
        state = self.draft()
        if child_id not in state[const.DATA_CHILDREN]:
            return {"result": const.RESULT_NOT_FOUND}
        if category not in const.SKIN_CATEGORIES:
            return {"result": const.RESULT_NOT_AVAILABLE}

        wallets = state[const.DATA_WALLETS].setdefault(
            child_id, CategoryEngine.empty_wallets()
        )
        outcome = GachaEngine.roll(
            wallets.get(category),
            category,  # type: ignore[arg-type]
            self.category_level(state, child_id, category),
            self.owned_skin_ids(state, child_id),
            enabled=self.coordinator.enable_gacha,
            include_meme=self.coordinator.enable_meme_skins,
            rng=self.coordinator.rng,
        )
        if outcome["result"] != const.RESULT_OK:
            const.LOGGER.debug(
                "DEBUG: Gacha roll for child %s in %s refused: %s",
                child_id,
                category,
                outcome["result"],
            )
            return outcome

        wallets[category] = outcome["wallet"]
        if outcome["is_new"]:
            self.grant_skin(state, child_id, outcome["skin_id"])
        self.commit(state)
        const.LOGGER.info(
            "INFO: Child %s rolled %s (new=%s, pity_triggered=%s)",
            child_id,
            outcome["skin_id"],
            outcome["is_new"],
            outcome["pity_triggered"],
        )
        return outcome

    # =========================================================================
    # Treasure
    # =========================================================================

    def open_treasure_chest(self, child_id: str) -> ChestOpening:
        """Open the global chest and pay its rewards to ``child_id``.

        Coins and tickets go to the child's wallet for the reward category;
        buddy XP goes to the child's active buddy.
        """
        state = self.draft()
        if child_id not in state[const.DATA_CHILDREN]:
            return {"result": const.RESULT_NOT_FOUND}

        treasure, opening = TreasureEngine.open_chest(
            state[const.DATA_TREASURE], self.coordinator.rng, dt_now_iso()
        )
        if opening["result"] != const.RESULT_OK:
            const.LOGGER.debug("DEBUG: Treasure chest is not ready yet")
            return opening
        state[const.DATA_TREASURE] = treasure

        wallets = state[const.DATA_WALLETS].setdefault(
            child_id, CategoryEngine.empty_wallets()
        )
        buddy_key = self.active_buddy_key(state, child_id)
        child_buddies = state[const.DATA_BUDDIES].setdefault(child_id, {})
        for reward in opening["rewards"]:
            amount = reward[const.DATA_REWARD_AMOUNT]
            if reward[const.DATA_REWARD_TYPE] == const.REWARD_TYPE_BUDDY_XP:
                child_buddies[buddy_key], _ = BuddyEngine.apply_xp(
                    child_buddies.get(buddy_key), amount
                )
                continue
            category = reward.get(
                const.DATA_REWARD_CATEGORY, const.SKIN_CATEGORY_STUDY
            )
            if reward[const.DATA_REWARD_TYPE] == const.REWARD_TYPE_COINS:
                wallets[category] = CategoryEngine.add_rewards(
                    wallets.get(category), coins=amount
                )
            elif reward[const.DATA_REWARD_TYPE] == const.REWARD_TYPE_TICKETS:
                wallets[category] = CategoryEngine.add_rewards(
                    wallets.get(category), tickets=amount
                )
        state[const.DATA_ACTIVE_BUDDY][child_id] = buddy_key

        self.commit(state)
        const.LOGGER.info(
            "INFO: Child %s opened %s chest #%s",
            child_id,
            opening["kind"],
            opening["index"],
        )
        return opening
