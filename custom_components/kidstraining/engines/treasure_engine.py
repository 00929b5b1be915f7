"""Treasure Engine - the global chest cadence.

ARCHITECTURE: Pure logic engine with NO Home Assistant dependencies.

Every completed session adds one point of chest progress, whichever child
logged it. Chest kinds cycle small, small, medium, medium, large with targets
3, 4 and 6. A chest is openable once progress reaches its target; it is
never opened automatically.

Post-open policy: progress carries over, ``max(0, progress - target)``, so
sessions logged while a full chest waits are not lost.
"""

from __future__ import annotations

from collections.abc import Mapping
import random
from typing import TYPE_CHECKING, Any

from .. import const

if TYPE_CHECKING:
    from ..type_defs import (
        ChestKind,
        ChestOpening,
        SkinCategory,
        TreasureHistoryItem,
        TreasureReward,
        TreasureState,
    )


class TreasureEngine:
    """Pure chest cadence calculations."""

    @staticmethod
    def chest_kind(index: int) -> ChestKind:
        """Return the chest kind at ``index`` (period 5)."""
        kind = const.CHEST_CYCLE[index % len(const.CHEST_CYCLE)]
        return kind  # type: ignore[return-value]

    @staticmethod
    def chest_target(kind: str) -> int:
        """Return the sessions needed to fill a chest of ``kind``."""
        return const.CHEST_TARGETS[kind]

    @staticmethod
    def target_for_index(index: int) -> int:
        """Return the target of the chest at ``index``."""
        return TreasureEngine.chest_target(TreasureEngine.chest_kind(index))

    @staticmethod
    def initial_state() -> TreasureState:
        """Return the cadence state of a fresh install."""
        return {
            const.DATA_TREASURE_CHEST_INDEX: 0,
            const.DATA_TREASURE_PROGRESS: 0,
            const.DATA_TREASURE_TARGET: TreasureEngine.target_for_index(0),
            const.DATA_TREASURE_HISTORY: [],
            const.DATA_TREASURE_LAST_CATEGORY: None,
        }  # type: ignore[misc]

    @staticmethod
    def normalize(state: Mapping[str, Any] | None) -> TreasureState:
        """Fill missing fields and re-derive the target from the index."""
        base = TreasureEngine.initial_state()
        if not state:
            return base
        chest_index = max(0, int(state.get(const.DATA_TREASURE_CHEST_INDEX, 0)))
        progress = max(0, int(state.get(const.DATA_TREASURE_PROGRESS, 0)))
        history = list(state.get(const.DATA_TREASURE_HISTORY, []))
        last_category = state.get(const.DATA_TREASURE_LAST_CATEGORY)
        return {
            const.DATA_TREASURE_CHEST_INDEX: chest_index,
            const.DATA_TREASURE_PROGRESS: progress,
            const.DATA_TREASURE_TARGET: TreasureEngine.target_for_index(chest_index),
            const.DATA_TREASURE_HISTORY: history,
            const.DATA_TREASURE_LAST_CATEGORY: last_category,
        }  # type: ignore[misc]

    @staticmethod
    def add_progress(
        state: Mapping[str, Any],
        amount: int = 1,
        category: SkinCategory | None = None,
    ) -> TreasureState:
        """Return state with ``amount`` more progress and the last category."""
        current = TreasureEngine.normalize(state)
        current["progress"] = current["progress"] + amount
        if category is not None:
            current["last_category"] = category
        return current

    @staticmethod
    def revert_progress(state: Mapping[str, Any], amount: int) -> TreasureState:
        """Return state with ``amount`` progress removed, floored at 0."""
        current = TreasureEngine.normalize(state)
        current["progress"] = max(0, current["progress"] - max(0, amount))
        return current

    @staticmethod
    def is_openable(state: Mapping[str, Any]) -> bool:
        """Return True if progress has reached the target."""
        current = TreasureEngine.normalize(state)
        return current["progress"] >= current["target"]

    @staticmethod
    def roll_rewards(
        kind: ChestKind, category: SkinCategory, rng: random.Random
    ) -> list[TreasureReward]:
        """Draw the reward bundle for a chest of ``kind``."""
        low, high = const.CHEST_COIN_RANGES[kind]
        coins = rng.randint(low, high)
        if kind == const.CHEST_KIND_LARGE:
            tickets = 1
        elif kind == const.CHEST_KIND_MEDIUM:
            tickets = 1 if rng.random() < const.CHEST_MEDIUM_TICKET_CHANCE else 0
        else:
            tickets = 0
        buddy_xp = rng.randint(*const.CHEST_BUDDY_XP_RANGE)

        rewards: list[TreasureReward] = [
            {
                const.DATA_REWARD_TYPE: const.REWARD_TYPE_COINS,
                const.DATA_REWARD_CATEGORY: category,
                const.DATA_REWARD_AMOUNT: coins,
            }  # type: ignore[misc]
        ]
        if tickets:
            rewards.append(
                {
                    const.DATA_REWARD_TYPE: const.REWARD_TYPE_TICKETS,
                    const.DATA_REWARD_CATEGORY: category,
                    const.DATA_REWARD_AMOUNT: tickets,
                }  # type: ignore[misc]
            )
        rewards.append(
            {
                const.DATA_REWARD_TYPE: const.REWARD_TYPE_BUDDY_XP,
                const.DATA_REWARD_AMOUNT: buddy_xp,
            }  # type: ignore[misc]
        )
        return rewards

    @staticmethod
    def open_chest(
        state: Mapping[str, Any], rng: random.Random, now_iso: str
    ) -> tuple[TreasureState, ChestOpening]:
        """Open the current chest if it is full.

        Returns:
            ``(new_state, opening)``. When the chest is not full the state is
            returned unchanged with a ``not_ready`` opening.
        """
        current = TreasureEngine.normalize(state)
        if current["progress"] < current["target"]:
            return current, {"result": const.RESULT_NOT_READY}

        index = current["chest_index"]
        kind = TreasureEngine.chest_kind(index)
        category: SkinCategory = (
            current["last_category"] or const.SKIN_CATEGORY_STUDY
        )  # type: ignore[assignment]
        rewards = TreasureEngine.roll_rewards(kind, category, rng)
        history_item: TreasureHistoryItem = {
            const.DATA_TREASURE_HISTORY_INDEX: index,
            const.DATA_TREASURE_HISTORY_OPENED_AT: now_iso,
            const.DATA_TREASURE_HISTORY_KIND: kind,
            const.DATA_TREASURE_HISTORY_REWARDS: rewards,
        }  # type: ignore[misc]
        next_index = index + 1
        carry_over = max(0, current["progress"] - current["target"])
        new_state: TreasureState = {
            const.DATA_TREASURE_CHEST_INDEX: next_index,
            const.DATA_TREASURE_PROGRESS: carry_over,
            const.DATA_TREASURE_TARGET: TreasureEngine.target_for_index(next_index),
            const.DATA_TREASURE_HISTORY: [*current["history"], history_item],
            const.DATA_TREASURE_LAST_CATEGORY: current["last_category"],
        }  # type: ignore[misc]
        return new_state, {
            "result": const.RESULT_OK,
            "index": index,
            "kind": kind,
            "rewards": rewards,
        }
