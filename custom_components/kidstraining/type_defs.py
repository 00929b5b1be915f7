"""Type definitions for KidsTraining data structures.

TypedDict is used for every structure whose keys are fixed at design time
(stored entities, engine results, service responses). Per-child buckets whose
keys are runtime ids stay as plain ``dict[str, ...]`` containers of these types.

IMPORTANT: This file must NOT import from coordinator.py or any manager to
avoid circular dependencies. Only typing machinery is imported here.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime validation of service input
happens in services.py (voluptuous) and defensive ``.get()`` reads in managers.
"""

from typing import Any, Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ChildId = str  # UUID hex string
ActivityId = str  # UUID hex string
SessionId = str  # UUID hex string
SkinId = str  # Key of const.SKIN_CATALOG
ISODatetime = str  # "2026-01-18T12:30:00+00:00"
DateKey = str  # Local calendar day "2026-01-18"

SkinCategory = Literal["study", "exercise"]
ChestKind = Literal["small", "medium", "large"]


# =============================================================================
# Stored Entity Types
# =============================================================================


class ChildData(TypedDict):
    """A tracked child. ``xp`` is cumulative; ``level`` is derived from it."""

    internal_id: str
    name: str
    avatar: str
    xp: int
    level: int
    coins: int
    current_streak: int
    best_streak: int
    total_minutes: int
    created_at: ISODatetime


class ActivityData(TypedDict):
    """A kind of activity a session can be logged against."""

    internal_id: str
    name: str
    category: str  # sports | study | music | other
    icon: str


class SessionData(TypedDict):
    """One completed or planned training session.

    The wallet/treasure deltas record exactly what the session contributed so
    that deleting it can reverse the contribution.
    """

    internal_id: str
    child_id: ChildId
    activity_id: ActivityId
    date: ISODatetime
    date_key: DateKey
    duration_minutes: int
    effort_level: int
    xp_gained: int
    coins_gained: int
    bonus_xp: int
    bonus_coins: int
    note: str | None
    tags: list[str]
    status: str  # completed | planned
    skin_category: SkinCategory
    wallet_coins_delta: int
    wallet_tickets_delta: int
    wallet_ticket_progress_delta: int
    treasure_progress_delta: int
    completed_node_ids: list[str]
    buddy_key: str | None
    created_at: ISODatetime


class MapNodeData(TypedDict):
    """One quest node of a child's map."""

    internal_id: str
    child_id: ChildId
    stage_index: int
    node_index: int
    type: str  # normal | treasure | boss
    required_sessions: int
    progress: int
    is_completed: bool
    reward_xp: int
    reward_coins: int
    completed_at: NotRequired[ISODatetime | None]


class ChildAchievementData(TypedDict):
    """Permanent unlock record; at most one per (child, achievement)."""

    internal_id: str
    child_id: ChildId
    achievement_id: str
    unlocked_at: ISODatetime


class StreakInfo(TypedDict):
    """Consecutive-day streak summary for one child."""

    current: int
    best: int
    last_session_date: DateKey | None


class CategoryCounts(TypedDict):
    """Completed-session counters per skin category."""

    study: int
    exercise: int


class WalletData(TypedDict):
    """Category wallet: coins, gacha tickets, ticket progress and pity."""

    coins: int
    tickets: int
    ticket_progress: int
    pity: int


class BuddyProgress(TypedDict):
    """Per-buddy progression. ``xp`` is cumulative on the canonical ladder."""

    level: int
    xp: int
    stage_index: int
    mood: int


class TreasureReward(TypedDict):
    """One item of a chest reward bundle."""

    type: str  # coins | tickets | buddy_xp
    category: NotRequired[SkinCategory]
    amount: int


class TreasureHistoryItem(TypedDict):
    """Append-only record of an opened chest."""

    index: int
    opened_at: ISODatetime
    kind: ChestKind
    rewards: list[TreasureReward]


class TreasureState(TypedDict):
    """Global chest cadence state."""

    chest_index: int
    progress: int
    target: int
    history: list[TreasureHistoryItem]
    last_category: SkinCategory | None


# =============================================================================
# Engine Result Types
# =============================================================================


class LevelInfo(TypedDict):
    """Level derived from cumulative XP."""

    level: int
    xp_into_level: int
    xp_for_next_level: int
    progress_fraction: float


class MoodBonus(TypedDict):
    """Session bonus granted by a happy buddy."""

    xp_multiplier: float
    extra_coins: int


class CategoryLevelInfo(TypedDict):
    """Category level derived from a training counter (never persisted)."""

    level: int
    progress: int
    required: int
    remaining: int


class WalletDelta(TypedDict):
    """What a single session added to a category wallet."""

    coins: int
    tickets: int
    ticket_progress: int


class MapAdvance(TypedDict):
    """Result of advancing a child's map by one session."""

    nodes: list[MapNodeData]
    completed_node: MapNodeData | None
    bonus_xp: int
    bonus_coins: int


class AchievementStats(TypedDict):
    """Aggregate stats achievement predicates are evaluated against."""

    session_count: int
    total_minutes: int
    current_streak: int
    completed_nodes: int
    stage0_complete: bool


class AchievementView(TypedDict):
    """Catalog row merged with a child's unlock state."""

    achievement_id: str
    title: str
    description: str
    icon: str
    unlocked: bool
    unlocked_at: ISODatetime | None


class GachaOutcome(TypedDict):
    """Result of a gacha roll. Only ``result`` is set on failures."""

    result: str
    skin_id: NotRequired[SkinId]
    is_new: NotRequired[bool]
    duplicate_coins: NotRequired[int]
    category: NotRequired[SkinCategory]
    pity_triggered: NotRequired[bool]
    wallet: NotRequired[WalletData]


class ChestOpening(TypedDict):
    """Result of opening a treasure chest. Only ``result`` is set on failures."""

    result: str
    index: NotRequired[int]
    kind: NotRequired[ChestKind]
    rewards: NotRequired[list[TreasureReward]]


class SessionResult(TypedDict):
    """Consolidated result of the session-logging pipeline."""

    session: SessionData
    level_ups: int
    completed_nodes: list[MapNodeData]
    unlocked_achievements: list[ChildAchievementData]
    bonus_xp: int
    bonus_coins: int
    wallet_delta: WalletDelta
    tickets_gained: int
    buddy_level_ups: int


# =============================================================================
# Snapshot Container
# =============================================================================

# Whole-state snapshot. Keys are const.DATA_* buckets; values are dicts keyed
# by internal_id or child_id, so the container itself stays dynamic.
Snapshot = dict[str, Any]
