"""Category Engine - study/exercise counters, category levels and wallets.

ARCHITECTURE: Pure logic engine with NO Home Assistant dependencies.
Wallet operations return new wallet dicts; inputs are never mutated.

Category level ramp:
    Level L needs ``L + 2`` sessions beyond what lower levels consumed, so
    level 2 is reached after 3 sessions, level 3 after 7, level 4 after 12.

Wallet:
    Each completed session adds 10 coins and one ticket-progress point. Three
    progress points roll over into one gacha ticket.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .. import const

if TYPE_CHECKING:
    from ..type_defs import (
        CategoryCounts,
        CategoryLevelInfo,
        SkinCategory,
        WalletData,
        WalletDelta,
    )


class CategoryEngine:
    """Pure category economy calculations."""

    # =========================================================================
    # Categories and Levels
    # =========================================================================

    @staticmethod
    def category_for_activity(activity: Mapping[str, Any] | None) -> SkinCategory:
        """Map an activity to its skin category.

        ``sports`` activities feed ``exercise``; everything else, including a
        missing activity, feeds ``study``.
        """
        if activity and activity.get(const.DATA_ACTIVITY_CATEGORY) == (
            const.ACTIVITY_CATEGORY_SPORTS
        ):
            return const.SKIN_CATEGORY_EXERCISE  # type: ignore[return-value]
        return const.SKIN_CATEGORY_STUDY  # type: ignore[return-value]

    @staticmethod
    def category_level_info(count: float) -> CategoryLevelInfo:
        """Derive the category level from a training counter."""
        remaining = max(0, int(count))
        level = 1
        required = level + const.CATEGORY_LEVEL_REQUIREMENT_OFFSET
        while remaining >= required:
            remaining -= required
            level += 1
            required = level + const.CATEGORY_LEVEL_REQUIREMENT_OFFSET
        return {
            "level": level,
            "progress": remaining,
            "required": required,
            "remaining": max(0, required - remaining),
        }

    @staticmethod
    def empty_counts() -> CategoryCounts:
        """Return zeroed category counters."""
        return {"study": 0, "exercise": 0}

    @staticmethod
    def increment_count(
        counts: Mapping[str, int], category: SkinCategory, amount: int = 1
    ) -> CategoryCounts:
        """Return counters with ``category`` moved by ``amount`` (floored at 0)."""
        updated = {**CategoryEngine.empty_counts(), **counts}
        updated[category] = max(0, int(updated.get(category, 0)) + amount)
        return updated  # type: ignore[return-value]

    # =========================================================================
    # Wallets
    # =========================================================================

    @staticmethod
    def empty_wallet() -> WalletData:
        """Return an empty category wallet."""
        return {"coins": 0, "tickets": 0, "ticket_progress": 0, "pity": 0}

    @staticmethod
    def empty_wallets() -> dict[str, WalletData]:
        """Return empty wallets for every skin category."""
        return {
            category: CategoryEngine.empty_wallet()
            for category in const.SKIN_CATEGORIES
        }

    @staticmethod
    def normalize_wallet(wallet: Mapping[str, Any] | None) -> WalletData:
        """Fill missing wallet fields and clamp negatives to 0."""
        base = CategoryEngine.empty_wallet()
        for key in base:
            value = int((wallet or {}).get(key, 0))
            base[key] = max(0, value)  # type: ignore[literal-required]
        return base

    @staticmethod
    def credit_session(wallet: Mapping[str, Any]) -> tuple[WalletData, WalletDelta]:
        """Credit one completed session to a wallet.

        Returns:
            The new wallet and the exact delta applied, which the session
            record keeps so a deletion can reverse it.
        """
        before = CategoryEngine.normalize_wallet(wallet)
        next_progress = before[const.DATA_WALLET_TICKET_PROGRESS] + 1
        tickets_gained = next_progress // const.WALLET_TICKET_PROGRESS_PER_TICKET
        after: WalletData = {
            **before,
            const.DATA_WALLET_COINS: before[const.DATA_WALLET_COINS]
            + const.WALLET_COINS_PER_SESSION,
            const.DATA_WALLET_TICKETS: before[const.DATA_WALLET_TICKETS]
            + tickets_gained,
            const.DATA_WALLET_TICKET_PROGRESS: next_progress
            % const.WALLET_TICKET_PROGRESS_PER_TICKET,
        }  # type: ignore[misc]
        delta: WalletDelta = {
            "coins": after["coins"] - before["coins"],
            "tickets": after["tickets"] - before["tickets"],
            "ticket_progress": after["ticket_progress"] - before["ticket_progress"],
        }
        return after, delta

    @staticmethod
    def revert_session(
        wallet: Mapping[str, Any], delta: Mapping[str, int]
    ) -> WalletData:
        """Reverse a recorded session delta, never going below zero."""
        before = CategoryEngine.normalize_wallet(wallet)
        progress = before["ticket_progress"] - int(delta.get("ticket_progress", 0))
        tickets = before["tickets"] - int(delta.get("tickets", 0))
        return {
            **before,
            "coins": max(0, before["coins"] - int(delta.get("coins", 0))),
            "tickets": max(0, tickets),
            "ticket_progress": min(
                const.WALLET_TICKET_PROGRESS_PER_TICKET - 1, max(0, progress)
            ),
        }  # type: ignore[typeddict-item]

    @staticmethod
    def replay_session(
        wallet: Mapping[str, Any], delta: Mapping[str, int]
    ) -> WalletData:
        """Apply a recorded session delta again, rolling progress into tickets.

        Progress past the ticket threshold becomes whole tickets, so the
        result always keeps ``ticket_progress`` below the threshold.
        """
        before = CategoryEngine.normalize_wallet(wallet)
        progress = max(
            0, before["ticket_progress"] + int(delta.get("ticket_progress", 0))
        )
        tickets = before["tickets"] + int(delta.get("tickets", 0))
        tickets += progress // const.WALLET_TICKET_PROGRESS_PER_TICKET
        return {
            **before,
            "coins": max(0, before["coins"] + int(delta.get("coins", 0))),
            "tickets": max(0, tickets),
            "ticket_progress": progress % const.WALLET_TICKET_PROGRESS_PER_TICKET,
        }  # type: ignore[typeddict-item]

    @staticmethod
    def add_rewards(
        wallet: Mapping[str, Any], coins: int = 0, tickets: int = 0
    ) -> WalletData:
        """Return a wallet with extra coins and tickets."""
        before = CategoryEngine.normalize_wallet(wallet)
        return {
            **before,
            "coins": before["coins"] + max(0, coins),
            "tickets": before["tickets"] + max(0, tickets),
        }  # type: ignore[typeddict-item]

    @staticmethod
    def debit_coins(wallet: Mapping[str, Any], amount: int) -> WalletData | None:
        """Return a wallet with ``amount`` coins removed, or None if short."""
        before = CategoryEngine.normalize_wallet(wallet)
        if before["coins"] < amount:
            return None
        after = {**before, "coins": before["coins"] - amount}
        return after  # type: ignore[return-value]
