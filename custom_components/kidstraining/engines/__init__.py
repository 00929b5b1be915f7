"""Engine modules for KidsTraining integration.

Contains pure computation engines:
- progression_engine: XP/coin formulas, mood bonus and the level ladder
- streak_engine: Consecutive-day streaks
- map_engine: Per-child quest map progression
- achievement_engine: Achievement unlock predicates
- category_engine: Category counters, levels and wallets
- gacha_engine: Ticket-gated skin draws with pity
- treasure_engine: Global treasure chest cadence
- buddy_engine: Buddy XP, mood and evolution
- merge_engine: Snapshot import merge
"""

from .achievement_engine import AchievementEngine
from .buddy_engine import BuddyEngine
from .category_engine import CategoryEngine
from .gacha_engine import GachaEngine
from .map_engine import MapEngine
from .merge_engine import MergeEngine
from .progression_engine import ProgressionEngine
from .streak_engine import StreakEngine
from .treasure_engine import TreasureEngine

__all__ = [
    "AchievementEngine",
    "BuddyEngine",
    "CategoryEngine",
    "GachaEngine",
    "MapEngine",
    "MergeEngine",
    "ProgressionEngine",
    "StreakEngine",
    "TreasureEngine",
]
