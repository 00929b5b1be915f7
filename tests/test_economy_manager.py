"""Integration tests for EconomyManager: shop, gacha and treasure chests."""

# pylint: disable=redefined-outer-name

from unittest.mock import PropertyMock, patch

from homeassistant.core import HomeAssistant

from custom_components.kidstraining import const
from custom_components.kidstraining.coordinator import KidsTrainingDataCoordinator
from tests.conftest import log_sessions, patch_snapshot

SKIN_BONBAL = "bonbal_sd_pixel"
SKIN_CHINPANZINI = "chinpanzini_sd_pixel"
STUDY_GACHA_POOL = {"owl_scholar_pixel", "book_dragon_pixel"}


def _set_wallet_coins(
    coordinator: KidsTrainingDataCoordinator, child_id: str, category: str, coins: int
) -> None:
    def mutate(state):
        state[const.DATA_WALLETS][child_id][category]["coins"] = coins

    patch_snapshot(coordinator, mutate)


# ============================================================================
# Shop
# ============================================================================


async def test_purchase_refusals(
    hass: HomeAssistant, coordinator: KidsTrainingDataCoordinator, child_id: str
) -> None:
    """Refusals come back as tags and leave the wallet alone."""
    economy = coordinator.economy_manager

    assert economy.purchase_skin(child_id, "no_such_skin") == const.RESULT_NOT_FOUND
    assert economy.purchase_skin("ghost", const.SKIN_ID_LULILOLI) == const.RESULT_NOT_FOUND
    assert economy.purchase_skin(child_id, const.SKIN_ID_BONECA) == const.RESULT_NOT_AVAILABLE
    assert economy.purchase_skin(child_id, SKIN_CHINPANZINI) == const.RESULT_NOT_AVAILABLE
    assert (
        economy.purchase_skin(child_id, const.SKIN_ID_LULILOLI)
        == const.RESULT_NOT_ENOUGH_COINS
    )

    _set_wallet_coins(coordinator, child_id, const.SKIN_CATEGORY_EXERCISE, 500)
    assert economy.purchase_skin(child_id, SKIN_BONBAL) == const.RESULT_LOCKED
    assert coordinator.get_wallet(child_id, const.SKIN_CATEGORY_EXERCISE)["coins"] == 500


async def test_purchase_debits_category_wallet(
    hass: HomeAssistant, coordinator: KidsTrainingDataCoordinator, child_id: str
) -> None:
    """A purchase spends wallet coins, grants the skin and seeds its buddy."""
    _set_wallet_coins(coordinator, child_id, const.SKIN_CATEGORY_STUDY, 100)
    child_coins = coordinator.get_child(child_id)[const.DATA_CHILD_COINS]

    assert (
        coordinator.economy_manager.purchase_skin(child_id, const.SKIN_ID_LULILOLI)
        == const.RESULT_OK
    )

    assert coordinator.get_wallet(child_id, const.SKIN_CATEGORY_STUDY)["coins"] == 20
    assert coordinator.get_child(child_id)[const.DATA_CHILD_COINS] == child_coins
    assert const.SKIN_ID_LULILOLI in coordinator.get_owned_skins_for_child(child_id)
    assert const.SKIN_ID_LULILOLI in coordinator.get_discovered_forms_for_child(child_id)
    assert coordinator.get_buddy_for_child(child_id, const.SKIN_ID_LULILOLI)["xp"] == 0

    assert (
        coordinator.economy_manager.purchase_skin(child_id, const.SKIN_ID_LULILOLI)
        == const.RESULT_ALREADY_OWNED
    )


async def test_level_locked_skin_unlocks(
    hass: HomeAssistant,
    coordinator: KidsTrainingDataCoordinator,
    child_id: str,
    soccer_id: str,
) -> None:
    """A level-locked skin becomes buyable once the category level is reached."""
    log_sessions(coordinator, child_id, soccer_id, 3)
    _set_wallet_coins(coordinator, child_id, const.SKIN_CATEGORY_EXERCISE, 150)

    assert coordinator.economy_manager.purchase_skin(child_id, SKIN_BONBAL) == const.RESULT_OK
    assert coordinator.get_wallet(child_id, const.SKIN_CATEGORY_EXERCISE)["coins"] == 0


# ============================================================================
# Gacha
# ============================================================================


async def test_gacha_requires_level_and_tickets(
    hass: HomeAssistant,
    coordinator: KidsTrainingDataCoordinator,
    child_id: str,
    homework_id: str,
) -> None:
    """Rolling needs category level 2 and a ticket."""
    economy = coordinator.economy_manager

    assert economy.roll_skin_gacha(child_id, const.SKIN_CATEGORY_STUDY) == {
        "result": const.RESULT_NOT_AVAILABLE
    }
    assert economy.roll_skin_gacha(child_id, "music") == {
        "result": const.RESULT_NOT_AVAILABLE
    }
    assert economy.roll_skin_gacha("ghost", const.SKIN_CATEGORY_STUDY) == {
        "result": const.RESULT_NOT_FOUND
    }

    log_sessions(coordinator, child_id, homework_id, 3)
    outcome = economy.roll_skin_gacha(child_id, const.SKIN_CATEGORY_STUDY)

    assert outcome["result"] == const.RESULT_OK
    assert outcome["skin_id"] in STUDY_GACHA_POOL
    assert outcome["is_new"] is True
    assert outcome["duplicate_coins"] == 0
    wallet = coordinator.get_wallet(child_id, const.SKIN_CATEGORY_STUDY)
    assert wallet["tickets"] == 0
    assert wallet["coins"] == 30
    assert outcome["skin_id"] in coordinator.get_owned_skins_for_child(child_id)

    assert economy.roll_skin_gacha(child_id, const.SKIN_CATEGORY_STUDY) == {
        "result": const.RESULT_NOT_ENOUGH_TICKETS
    }


async def test_gacha_disabled(
    hass: HomeAssistant,
    coordinator: KidsTrainingDataCoordinator,
    child_id: str,
    homework_id: str,
) -> None:
    """With gacha switched off nothing is spent."""
    log_sessions(coordinator, child_id, homework_id, 3)

    with patch.object(
        type(coordinator), "enable_gacha", new_callable=PropertyMock, return_value=False
    ):
        outcome = coordinator.economy_manager.roll_skin_gacha(
            child_id, const.SKIN_CATEGORY_STUDY
        )

    assert outcome == {"result": const.RESULT_GACHA_DISABLED}
    assert coordinator.get_wallet(child_id, const.SKIN_CATEGORY_STUDY)["tickets"] == 1


# ============================================================================
# Treasure
# ============================================================================


async def test_open_treasure_chest(
    hass: HomeAssistant,
    coordinator: KidsTrainingDataCoordinator,
    child_id: str,
    homework_id: str,
) -> None:
    """A full chest pays the opener and moves to the next chest."""
    economy = coordinator.economy_manager
    assert economy.open_treasure_chest(child_id) == {"result": const.RESULT_NOT_READY}

    log_sessions(coordinator, child_id, homework_id, 3)
    buddy_xp_before = coordinator.get_buddy_for_child(child_id)["xp"]

    assert economy.open_treasure_chest("ghost") == {"result": const.RESULT_NOT_FOUND}
    opening = economy.open_treasure_chest(child_id)

    assert opening["result"] == const.RESULT_OK
    assert opening["index"] == 0
    assert opening["kind"] == const.CHEST_KIND_SMALL
    rewards = {reward["type"]: reward for reward in opening["rewards"]}
    assert const.REWARD_TYPE_TICKETS not in rewards
    coins = rewards[const.REWARD_TYPE_COINS]
    assert coins["category"] == const.SKIN_CATEGORY_STUDY
    assert 80 <= coins["amount"] <= 120

    wallet = coordinator.get_wallet(child_id, const.SKIN_CATEGORY_STUDY)
    assert wallet["coins"] == 30 + coins["amount"]
    assert (
        coordinator.get_buddy_for_child(child_id)["xp"]
        == buddy_xp_before + rewards[const.REWARD_TYPE_BUDDY_XP]["amount"]
    )

    treasure = coordinator.get_treasure()
    assert treasure["chest_index"] == 1
    assert treasure["progress"] == 0
    assert treasure["target"] == 3
    assert len(treasure["history"]) == 1

    assert economy.open_treasure_chest(child_id) == {"result": const.RESULT_NOT_READY}
