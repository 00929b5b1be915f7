"""Entity record builders.

This module is the single place where stored records are created:
- Children, activities and sessions get a fresh ``internal_id`` (uuid4 hex)
  and a ``created_at`` timestamp.
- Field defaults are applied here, so managers never hand-assemble dicts.
- ``build_seed_state`` returns the snapshot of a fresh install.

Consumers:
- storage_manager.py (seed state)
- managers/session_manager.py (sessions)
- managers/system_manager.py (children, activities, reset)
"""

from __future__ import annotations

from typing import Any
import uuid

from . import const
from .engines.treasure_engine import TreasureEngine
from .type_defs import ActivityData, ChildData, SessionData, Snapshot
from .utils.dt_utils import dt_now_iso, dt_parse, to_date_key
from .utils.tag_utils import normalize_tags

# ==============================================================================
# HELPERS
# ==============================================================================


def new_internal_id() -> str:
    """Return a new internal id."""
    return uuid.uuid4().hex


def normalize_note(note: Any) -> str | None:
    """Return a stripped note, or None if empty."""
    if note is None:
        return None
    text = str(note).strip()
    return text or None


# ==============================================================================
# CHILDREN / ACTIVITIES
# ==============================================================================


def build_child(name: str, avatar: str | None = None) -> ChildData:
    """Build a new child record with zeroed progression."""
    return {
        const.DATA_INTERNAL_ID: new_internal_id(),
        const.DATA_CHILD_NAME: name.strip(),
        const.DATA_CHILD_AVATAR: avatar or "mdi:account-child",
        const.DATA_CHILD_XP: 0,
        const.DATA_CHILD_LEVEL: 1,
        const.DATA_CHILD_COINS: 0,
        const.DATA_CHILD_CURRENT_STREAK: 0,
        const.DATA_CHILD_BEST_STREAK: 0,
        const.DATA_CHILD_TOTAL_MINUTES: 0,
        const.DATA_CREATED_AT: dt_now_iso(),
    }  # type: ignore[return-value]


def build_activity(
    name: str, category: str = const.ACTIVITY_CATEGORY_OTHER, icon: str | None = None
) -> ActivityData:
    """Build a new activity record.

    Unknown categories fall back to ``other``.
    """
    if category not in const.ACTIVITY_CATEGORIES:
        const.LOGGER.debug(
            "DEBUG: Unknown activity category '%s', using '%s'",
            category,
            const.ACTIVITY_CATEGORY_OTHER,
        )
        category = const.ACTIVITY_CATEGORY_OTHER
    return {
        const.DATA_INTERNAL_ID: new_internal_id(),
        const.DATA_ACTIVITY_NAME: name.strip(),
        const.DATA_ACTIVITY_CATEGORY: category,
        const.DATA_ACTIVITY_ICON: icon or "mdi:run",
    }  # type: ignore[return-value]


# ==============================================================================
# SESSIONS
# ==============================================================================


def build_session(
    *,
    child_id: str,
    activity_id: str,
    duration_minutes: int,
    effort_level: int,
    skin_category: str,
    date: Any = None,
    note: Any = None,
    tags: Any = None,
    status: str = const.SESSION_STATUS_COMPLETED,
    session_id: str | None = None,
) -> SessionData:
    """Build a session record with zeroed rewards and deltas.

    The session logger fills in rewards and deltas as its pipeline runs.
    ``date`` accepts anything ``dt_parse`` understands and defaults to now.

    Raises:
        ValueError: If ``date`` is given but cannot be parsed.
    """
    if date:
        when = dt_parse(date)
        if when is None:
            raise ValueError(f"Invalid session date '{date}'")
        date_iso = when.isoformat()
    else:
        date_iso = dt_now_iso()
    return {
        const.DATA_INTERNAL_ID: session_id or new_internal_id(),
        const.DATA_SESSION_CHILD_ID: child_id,
        const.DATA_SESSION_ACTIVITY_ID: activity_id,
        const.DATA_SESSION_DATE: date_iso,
        const.DATA_SESSION_DATE_KEY: to_date_key(date_iso),
        const.DATA_SESSION_DURATION: int(duration_minutes),
        const.DATA_SESSION_EFFORT: int(effort_level),
        const.DATA_SESSION_XP_GAINED: 0,
        const.DATA_SESSION_COINS_GAINED: 0,
        const.DATA_SESSION_BONUS_XP: 0,
        const.DATA_SESSION_BONUS_COINS: 0,
        const.DATA_SESSION_NOTE: normalize_note(note),
        const.DATA_SESSION_TAGS: normalize_tags(tags),
        const.DATA_SESSION_STATUS: status,
        const.DATA_SESSION_SKIN_CATEGORY: skin_category,
        const.DATA_SESSION_WALLET_COINS_DELTA: 0,
        const.DATA_SESSION_WALLET_TICKETS_DELTA: 0,
        const.DATA_SESSION_WALLET_TICKET_PROGRESS_DELTA: 0,
        const.DATA_SESSION_TREASURE_PROGRESS_DELTA: 0,
        const.DATA_SESSION_COMPLETED_NODE_IDS: [],
        const.DATA_SESSION_BUDDY_KEY: None,
        const.DATA_CREATED_AT: dt_now_iso(),
    }  # type: ignore[return-value]


# ==============================================================================
# SNAPSHOT
# ==============================================================================


def build_empty_state() -> Snapshot:
    """Return a snapshot with every bucket present and empty."""
    return {
        const.DATA_CHILDREN: {},
        const.DATA_ACTIVITIES: {},
        const.DATA_SESSIONS: {},
        const.DATA_MAP_NODES: {},
        const.DATA_CHILD_ACHIEVEMENTS: {},
        const.DATA_STREAKS: {},
        const.DATA_CATEGORY_COUNTS: {},
        const.DATA_WALLETS: {},
        const.DATA_BUDDIES: {},
        const.DATA_ACTIVE_BUDDY: {},
        const.DATA_OWNED_SKINS: {},
        const.DATA_DISCOVERED_FORMS: {},
        const.DATA_TREASURE: TreasureEngine.initial_state(),
    }


def build_seed_state() -> Snapshot:
    """Return the snapshot of a fresh install: no children, default activities."""
    state = build_empty_state()
    for name, category, icon in const.DEFAULT_ACTIVITIES:
        activity = build_activity(name, category, icon)
        state[const.DATA_ACTIVITIES][activity[const.DATA_INTERNAL_ID]] = activity
    return state


def ensure_state_shape(state: Snapshot) -> Snapshot:
    """Return ``state`` with any missing bucket filled from the empty state."""
    shaped = build_empty_state()
    shaped.update(state)
    shaped[const.DATA_TREASURE] = TreasureEngine.normalize(
        shaped.get(const.DATA_TREASURE)
    )
    return shaped
