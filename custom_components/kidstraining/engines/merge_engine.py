"""Merge Engine - merge an imported snapshot into the current one.

ARCHITECTURE: Pure logic engine with NO Home Assistant dependencies.

Merge rules:
- Entity collections (children, activities, sessions) merge by id and the
  existing item always wins.
- Per-child maps (map nodes, active buddy, wallets, counters) are taken from
  the import only for children the current snapshot does not have.
- Buddies and achievements merge per child by key; existing entries win.
- Owned skins and discovered forms are unioned per child.
- Every newly added completed session replays its recorded
  treasure delta. Wallet and category-count deltas are replayed only for
  children that already existed. All streaks are recomputed at the end.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .. import const
from .category_engine import CategoryEngine
from .streak_engine import StreakEngine
from .treasure_engine import TreasureEngine

if TYPE_CHECKING:
    from ..type_defs import Snapshot


class MergeEngine:
    """Pure snapshot merge."""

    @staticmethod
    def _merge_by_id(
        base: Mapping[str, Any], incoming: Mapping[str, Any]
    ) -> dict[str, Any]:
        merged = dict(base)
        for item_id, item in incoming.items():
            merged.setdefault(item_id, item)
        return merged

    @staticmethod
    def _merge_nested(
        base: Mapping[str, Mapping[str, Any]], incoming: Mapping[str, Mapping[str, Any]]
    ) -> dict[str, dict[str, Any]]:
        merged = {child_id: dict(items) for child_id, items in base.items()}
        for child_id, items in incoming.items():
            target = merged.setdefault(child_id, {})
            for item_id, item in items.items():
                target.setdefault(item_id, item)
        return merged

    @staticmethod
    def _union_lists(
        base: Mapping[str, list[str]], incoming: Mapping[str, list[str]]
    ) -> dict[str, list[str]]:
        merged = {child_id: list(values) for child_id, values in base.items()}
        for child_id, values in incoming.items():
            target = merged.setdefault(child_id, [])
            for value in values:
                if value not in target:
                    target.append(value)
        return merged

    @staticmethod
    def added_session_ids(current: Snapshot, incoming: Mapping[str, Any]) -> list[str]:
        """Return ids of incoming sessions the current snapshot lacks."""
        existing = current.get(const.DATA_SESSIONS, {})
        return [
            session_id
            for session_id in incoming.get(const.DATA_SESSIONS, {})
            if session_id not in existing
        ]

    @staticmethod
    def merge(
        current: Snapshot, incoming: Mapping[str, Any], today_key: str
    ) -> Snapshot:
        """Return a new snapshot with ``incoming`` merged into ``current``."""
        merged: Snapshot = copy.deepcopy(dict(current))
        incoming = copy.deepcopy(dict(incoming))

        added = MergeEngine.added_session_ids(merged, incoming)
        known_children = set(merged.get(const.DATA_CHILDREN, {}))

        for key in (const.DATA_CHILDREN, const.DATA_ACTIVITIES, const.DATA_SESSIONS):
            merged[key] = MergeEngine._merge_by_id(
                merged.get(key, {}), incoming.get(key, {})
            )

        for key in (
            const.DATA_MAP_NODES,
            const.DATA_ACTIVE_BUDDY,
            const.DATA_WALLETS,
            const.DATA_CATEGORY_COUNTS,
        ):
            merged[key] = MergeEngine._merge_by_id(
                merged.get(key, {}), incoming.get(key, {})
            )

        for key in (const.DATA_BUDDIES, const.DATA_CHILD_ACHIEVEMENTS):
            merged[key] = MergeEngine._merge_nested(
                merged.get(key, {}), incoming.get(key, {})
            )

        for key in (const.DATA_OWNED_SKINS, const.DATA_DISCOVERED_FORMS):
            merged[key] = MergeEngine._union_lists(
                merged.get(key, {}), incoming.get(key, {})
            )

        children = merged[const.DATA_CHILDREN]
        treasure = TreasureEngine.normalize(merged.get(const.DATA_TREASURE))
        for session_id in added:
            session = merged[const.DATA_SESSIONS][session_id]
            if session.get(const.DATA_SESSION_STATUS) != const.SESSION_STATUS_COMPLETED:
                continue
            child_id = session.get(const.DATA_SESSION_CHILD_ID)
            category = session.get(const.DATA_SESSION_SKIN_CATEGORY)
            # Wallets and counters of newly imported children already include
            # their own sessions.
            if child_id in known_children and category in const.SKIN_CATEGORIES:
                counts = merged[const.DATA_CATEGORY_COUNTS].get(
                    child_id, CategoryEngine.empty_counts()
                )
                merged[const.DATA_CATEGORY_COUNTS][child_id] = (
                    CategoryEngine.increment_count(counts, category)
                )
                wallets = merged[const.DATA_WALLETS].setdefault(
                    child_id, CategoryEngine.empty_wallets()
                )
                wallets[category] = CategoryEngine.replay_session(
                    wallets.get(category),
                    {
                        "coins": session.get(const.DATA_SESSION_WALLET_COINS_DELTA, 0),
                        "tickets": session.get(
                            const.DATA_SESSION_WALLET_TICKETS_DELTA, 0
                        ),
                        "ticket_progress": session.get(
                            const.DATA_SESSION_WALLET_TICKET_PROGRESS_DELTA, 0
                        ),
                    },
                )
            treasure = TreasureEngine.add_progress(
                treasure,
                int(session.get(const.DATA_SESSION_TREASURE_PROGRESS_DELTA, 0)),
            )
        merged[const.DATA_TREASURE] = treasure

        streaks = StreakEngine.compute_streaks_for_children(
            merged[const.DATA_SESSIONS], children.keys(), today_key
        )
        merged[const.DATA_STREAKS] = streaks
        for child_id, streak in streaks.items():
            child = children[child_id]
            child[const.DATA_CHILD_CURRENT_STREAK] = streak[const.DATA_STREAK_CURRENT]
            child[const.DATA_CHILD_BEST_STREAK] = max(
                streak[const.DATA_STREAK_BEST],
                int(child.get(const.DATA_CHILD_BEST_STREAK, 0)),
            )
        return merged
