"""Unit tests for GachaEngine draws, pity and duplicates."""

import random

from custom_components.kidstraining import const
from custom_components.kidstraining.engines.gacha_engine import GachaEngine


def _skin(rarity: str, weight: int = 1, **extra) -> dict:
    return {
        const.SKIN_KEY_RARITY: rarity,
        const.SKIN_KEY_CATEGORY: const.SKIN_CATEGORY_STUDY,
        const.SKIN_KEY_UNLOCK_METHOD: const.UNLOCK_METHOD_GACHA,
        const.SKIN_KEY_GACHA_WEIGHT: weight,
        **extra,
    }


COMMON_ONLY = {"pebble": _skin(const.RARITY_COMMON)}
MIXED = {
    "pebble": _skin(const.RARITY_COMMON, weight=1000),
    "gem": _skin(const.RARITY_RARE),
}


def _wallet(tickets: int = 1, pity: int = 0, coins: int = 0) -> dict:
    return {"coins": coins, "tickets": tickets, "ticket_progress": 0, "pity": pity}


def _roll(wallet, owned=(), level=2, enabled=True, catalog=None, include_meme=True):
    return GachaEngine.roll(
        wallet,
        const.SKIN_CATEGORY_STUDY,
        level,
        owned,
        enabled=enabled,
        include_meme=include_meme,
        rng=random.Random(7),
        catalog=catalog,
    )


def test_refusals_in_order() -> None:
    """Disabled beats level, level beats tickets, tickets beat the pool."""
    assert _roll(_wallet(0), level=1, enabled=False)["result"] == const.RESULT_GACHA_DISABLED
    assert _roll(_wallet(0), level=1)["result"] == const.RESULT_NOT_AVAILABLE
    assert _roll(_wallet(0))["result"] == const.RESULT_NOT_ENOUGH_TICKETS
    assert _roll(_wallet(1), catalog={})["result"] == const.RESULT_NOT_AVAILABLE


def test_new_skin_spends_ticket_and_raises_pity() -> None:
    """A first draw is new, costs one ticket and adds one pity."""
    outcome = _roll(_wallet(tickets=2), catalog=COMMON_ONLY)

    assert outcome["result"] == const.RESULT_OK
    assert outcome["skin_id"] == "pebble"
    assert outcome["is_new"] is True
    assert outcome["duplicate_coins"] == 0
    assert outcome["wallet"]["tickets"] == 1
    assert outcome["wallet"]["pity"] == 1


def test_duplicate_pays_coins() -> None:
    """Drawing an owned common skin pays 30 coins."""
    outcome = _roll(_wallet(coins=5), owned=["pebble"], catalog=COMMON_ONLY)

    assert outcome["is_new"] is False
    assert outcome["duplicate_coins"] == const.GACHA_DUPLICATE_COINS_COMMON
    assert outcome["wallet"]["coins"] == 35


def test_pity_forces_rare_and_resets() -> None:
    """At the threshold the pick comes from the rare pool."""
    outcome = _roll(_wallet(pity=const.GACHA_PITY_THRESHOLD - 1), catalog=MIXED)

    assert outcome["pity_triggered"] is True
    assert outcome["skin_id"] == "gem"
    assert outcome["wallet"]["pity"] == 0


def test_rare_guaranteed_within_threshold_rolls() -> None:
    """From zero pity a rare skin arrives by the tenth roll at the latest."""
    catalog = {
        "pebble": _skin(const.RARITY_COMMON, weight=1_000_000),
        "gem": _skin(const.RARITY_RARE),
    }
    rng = random.Random(3)
    wallet = _wallet(tickets=const.GACHA_PITY_THRESHOLD)
    picks = []

    for _ in range(const.GACHA_PITY_THRESHOLD):
        outcome = GachaEngine.roll(
            wallet,
            const.SKIN_CATEGORY_STUDY,
            2,
            (),
            enabled=True,
            include_meme=True,
            rng=rng,
            catalog=catalog,
        )
        assert outcome["result"] == const.RESULT_OK
        wallet = outcome["wallet"]
        picks.append(outcome["skin_id"])
        if outcome["skin_id"] == "gem":
            break
        assert wallet["pity"] == len(picks)

    assert picks[-1] == "gem"
    assert len(picks) <= const.GACHA_PITY_THRESHOLD
    assert wallet["pity"] == 0


def test_pity_caps_without_rare_pool() -> None:
    """With no rare skin available pity stays at the threshold."""
    outcome = _roll(_wallet(pity=const.GACHA_PITY_THRESHOLD), catalog=COMMON_ONLY)

    assert outcome["pity_triggered"] is False
    assert outcome["wallet"]["pity"] == const.GACHA_PITY_THRESHOLD


def test_eligible_pool_filters() -> None:
    """Pool respects category, min level and the meme switch."""
    catalog = {
        "low": _skin(const.RARITY_COMMON),
        "high": _skin(const.RARITY_EPIC, **{const.SKIN_KEY_MIN_LEVEL: 3}),
        "meme": _skin(const.RARITY_COMMON, **{const.SKIN_KEY_IS_MEME: True}),
        "shop": {**_skin(const.RARITY_COMMON), const.SKIN_KEY_UNLOCK_METHOD: "shop"},
    }

    assert GachaEngine.eligible_pool(
        const.SKIN_CATEGORY_STUDY, 2, False, catalog
    ) == ["low"]
    assert set(
        GachaEngine.eligible_pool(const.SKIN_CATEGORY_STUDY, 3, True, catalog)
    ) == {"low", "high", "meme"}
    assert GachaEngine.eligible_pool(const.SKIN_CATEGORY_EXERCISE, 3, True, catalog) == []


def test_default_catalog_study_pool() -> None:
    """The shipped catalog offers study gacha skins at level 2."""
    pool = GachaEngine.eligible_pool(const.SKIN_CATEGORY_STUDY, 2, True)
    assert "owl_scholar_pixel" in pool
    assert "cosmic_sage_pixel" not in pool
