"""Gacha Engine - ticket-gated skin draws with a pity guarantee.

ARCHITECTURE: Pure logic engine with NO Home Assistant dependencies.
Randomness comes from an injected ``random.Random`` so draws are
reproducible in tests.

Roll order (first failing check wins):
    1. gacha switched off            → gacha_disabled
    2. category level below 2        → not_available
    3. no ticket                     → not_enough_tickets
    4. no eligible skin in the pool  → not_available

A successful roll spends one ticket and raises pity by one. When pity reaches
the threshold the pick is forced from the rare-or-better part of the pool and
pity resets; a natural rare-or-better pick resets it as well. Duplicates pay
out coins to the category wallet instead of adding ownership.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
import random
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.math_utils import weighted_choice
from .category_engine import CategoryEngine

if TYPE_CHECKING:
    from ..type_defs import GachaOutcome, SkinCategory


class GachaEngine:
    """Pure gacha calculations."""

    @staticmethod
    def is_rare_or_better(skin: Mapping[str, Any]) -> bool:
        """Return True for rare and epic skins."""
        rank = const.RARITY_RANK.get(skin.get(const.SKIN_KEY_RARITY, ""), 0)
        return rank >= const.RARITY_RANK[const.RARITY_RARE]

    @staticmethod
    def duplicate_coins(skin: Mapping[str, Any]) -> int:
        """Return the coin compensation for drawing an owned skin."""
        if GachaEngine.is_rare_or_better(skin):
            return const.GACHA_DUPLICATE_COINS_RARE
        return const.GACHA_DUPLICATE_COINS_COMMON

    @staticmethod
    def eligible_pool(
        category: SkinCategory,
        category_level: int,
        include_meme: bool,
        catalog: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> list[str]:
        """Return gacha skin ids of ``category`` unlocked at ``category_level``."""
        skins = const.SKIN_CATALOG if catalog is None else catalog
        return [
            skin_id
            for skin_id, skin in skins.items()
            if skin.get(const.SKIN_KEY_UNLOCK_METHOD) == const.UNLOCK_METHOD_GACHA
            and skin.get(const.SKIN_KEY_CATEGORY) == category
            and skin.get(const.SKIN_KEY_MIN_LEVEL, 0) <= category_level
            and (include_meme or not skin.get(const.SKIN_KEY_IS_MEME, False))
        ]

    @staticmethod
    def roll(
        wallet: Mapping[str, Any],
        category: SkinCategory,
        category_level: int,
        owned: Collection[str],
        *,
        enabled: bool,
        include_meme: bool,
        rng: random.Random,
        catalog: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> GachaOutcome:
        """Perform one gacha roll against a category wallet.

        Args:
            wallet: The category wallet (not mutated).
            category: Skin category being rolled.
            category_level: Current level of that category.
            owned: Skin ids the child already owns (defaults included).
            enabled: Whether gacha is switched on.
            include_meme: Whether meme skins may be drawn.
            rng: Random source.
            catalog: Skin catalog override (defaults to const.SKIN_CATALOG).

        Returns:
            GachaOutcome. On ``ok`` it carries the picked skin, whether it is
            new, the duplicate payout and the updated wallet.
        """
        skins = const.SKIN_CATALOG if catalog is None else catalog

        if not enabled:
            return {"result": const.RESULT_GACHA_DISABLED}
        if category_level < const.GACHA_UNLOCK_LEVEL:
            return {"result": const.RESULT_NOT_AVAILABLE}
        current = CategoryEngine.normalize_wallet(wallet)
        if current[const.DATA_WALLET_TICKETS] < 1:
            return {"result": const.RESULT_NOT_ENOUGH_TICKETS}
        pool = GachaEngine.eligible_pool(category, category_level, include_meme, skins)
        if not pool:
            return {"result": const.RESULT_NOT_AVAILABLE}

        pity = current[const.DATA_WALLET_PITY] + 1
        rare_pool = [
            skin_id
            for skin_id in pool
            if GachaEngine.is_rare_or_better(skins[skin_id])
        ]
        pity_triggered = pity >= const.GACHA_PITY_THRESHOLD and bool(rare_pool)
        candidates = rare_pool if pity_triggered else pool
        weights = [
            skins[skin_id].get(const.SKIN_KEY_GACHA_WEIGHT, 1) for skin_id in candidates
        ]
        picked = weighted_choice(candidates, weights, rng)
        if GachaEngine.is_rare_or_better(skins[picked]):
            pity = 0
        else:
            pity = min(pity, const.GACHA_PITY_THRESHOLD)

        is_new = picked not in owned
        payout = 0 if is_new else GachaEngine.duplicate_coins(skins[picked])
        new_wallet = {
            **current,
            const.DATA_WALLET_TICKETS: current[const.DATA_WALLET_TICKETS] - 1,
            const.DATA_WALLET_COINS: current[const.DATA_WALLET_COINS] + payout,
            const.DATA_WALLET_PITY: pity,
        }
        return {
            "result": const.RESULT_OK,
            "skin_id": picked,
            "is_new": is_new,
            "duplicate_coins": payout,
            "category": category,
            "pity_triggered": pity_triggered,
            "wallet": new_wallet,  # type: ignore[typeddict-item]
        }
