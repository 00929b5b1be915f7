"""Constants for the KidsTraining integration.

This file centralizes configuration keys, defaults, storage keys, static
catalogs (achievements, skins, evolution lines, map layout, chest cycle),
service names and event names for consistency across the integration.
"""

import logging

import homeassistant.util.dt as dt_util
from homeassistant.const import Platform

from .utils import dt_utils


def set_default_timezone(hass):
    """Set the default timezone based on the Home Assistant configuration."""
    global DEFAULT_TIME_ZONE
    DEFAULT_TIME_ZONE = dt_util.get_time_zone(hass.config.time_zone)
    if DEFAULT_TIME_ZONE is not None:
        dt_utils.set_default_timezone(DEFAULT_TIME_ZONE)


# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
KIDSTRAINING_TITLE = "KidsTraining"

DOMAIN = "kidstraining"

LOGGER = logging.getLogger(__package__)

PLATFORMS = [
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORAGE_MANAGER = "storage_manager"
STORAGE_KEY = "kidstraining_data"
STORAGE_VERSION = 1

# Snapshot envelope version. A stored snapshot with any other version is
# discarded and replaced by a fresh seed (no migration path).
APP_STATE_VERSION = 1

# Default timezone: initially None, to be set once hass is available.
DEFAULT_TIME_ZONE = None


# ------------------------------------------------------------------------------------------------
# Configuration Keys (config entry options)
# ------------------------------------------------------------------------------------------------
CONF_ENABLE_GACHA = "enable_gacha"
CONF_ENABLE_MEME_SKINS = "enable_meme_skins"
CONF_UPDATE_INTERVAL = "update_interval"

DEFAULT_ENABLE_GACHA = True
DEFAULT_ENABLE_MEME_SKINS = True
DEFAULT_UPDATE_INTERVAL = 5

CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"

TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"


# ------------------------------------------------------------------------------------------------
# Data Keys (snapshot buckets)
# ------------------------------------------------------------------------------------------------
DATA_ENVELOPE_VERSION = "version"
DATA_ENVELOPE_SAVED_AT = "saved_at"
DATA_ENVELOPE_STATE = "state"

DATA_CHILDREN = "children"
DATA_ACTIVITIES = "activities"
DATA_SESSIONS = "sessions"
DATA_MAP_NODES = "map_nodes"
DATA_CHILD_ACHIEVEMENTS = "child_achievements"
DATA_STREAKS = "streaks"
DATA_CATEGORY_COUNTS = "category_counts"
DATA_WALLETS = "wallets"
DATA_BUDDIES = "buddies"
DATA_ACTIVE_BUDDY = "active_buddy"
DATA_OWNED_SKINS = "owned_skins"
DATA_DISCOVERED_FORMS = "discovered_forms"
DATA_TREASURE = "treasure"

# Common
DATA_INTERNAL_ID = "internal_id"
DATA_CREATED_AT = "created_at"

# Child
DATA_CHILD_NAME = "name"
DATA_CHILD_AVATAR = "avatar"
DATA_CHILD_XP = "xp"
DATA_CHILD_LEVEL = "level"
DATA_CHILD_COINS = "coins"
DATA_CHILD_CURRENT_STREAK = "current_streak"
DATA_CHILD_BEST_STREAK = "best_streak"
DATA_CHILD_TOTAL_MINUTES = "total_minutes"

# Activity
DATA_ACTIVITY_NAME = "name"
DATA_ACTIVITY_CATEGORY = "category"
DATA_ACTIVITY_ICON = "icon"

ACTIVITY_CATEGORY_SPORTS = "sports"
ACTIVITY_CATEGORY_STUDY = "study"
ACTIVITY_CATEGORY_MUSIC = "music"
ACTIVITY_CATEGORY_OTHER = "other"
ACTIVITY_CATEGORIES = [
    ACTIVITY_CATEGORY_SPORTS,
    ACTIVITY_CATEGORY_STUDY,
    ACTIVITY_CATEGORY_MUSIC,
    ACTIVITY_CATEGORY_OTHER,
]

# Session
DATA_SESSION_CHILD_ID = "child_id"
DATA_SESSION_ACTIVITY_ID = "activity_id"
DATA_SESSION_DATE = "date"
DATA_SESSION_DATE_KEY = "date_key"
DATA_SESSION_DURATION = "duration_minutes"
DATA_SESSION_EFFORT = "effort_level"
DATA_SESSION_XP_GAINED = "xp_gained"
DATA_SESSION_COINS_GAINED = "coins_gained"
DATA_SESSION_BONUS_XP = "bonus_xp"
DATA_SESSION_BONUS_COINS = "bonus_coins"
DATA_SESSION_NOTE = "note"
DATA_SESSION_TAGS = "tags"
DATA_SESSION_STATUS = "status"
DATA_SESSION_SKIN_CATEGORY = "skin_category"
DATA_SESSION_WALLET_COINS_DELTA = "wallet_coins_delta"
DATA_SESSION_WALLET_TICKETS_DELTA = "wallet_tickets_delta"
DATA_SESSION_WALLET_TICKET_PROGRESS_DELTA = "wallet_ticket_progress_delta"
DATA_SESSION_TREASURE_PROGRESS_DELTA = "treasure_progress_delta"
DATA_SESSION_COMPLETED_NODE_IDS = "completed_node_ids"
DATA_SESSION_BUDDY_KEY = "buddy_key"

SESSION_STATUS_COMPLETED = "completed"
SESSION_STATUS_PLANNED = "planned"

EFFORT_LEVEL_MIN = 1
EFFORT_LEVEL_MAX = 3

# Map node
DATA_NODE_CHILD_ID = "child_id"
DATA_NODE_STAGE_INDEX = "stage_index"
DATA_NODE_NODE_INDEX = "node_index"
DATA_NODE_TYPE = "type"
DATA_NODE_REQUIRED_SESSIONS = "required_sessions"
DATA_NODE_PROGRESS = "progress"
DATA_NODE_IS_COMPLETED = "is_completed"
DATA_NODE_REWARD_XP = "reward_xp"
DATA_NODE_REWARD_COINS = "reward_coins"
DATA_NODE_COMPLETED_AT = "completed_at"

NODE_TYPE_NORMAL = "normal"
NODE_TYPE_TREASURE = "treasure"
NODE_TYPE_BOSS = "boss"

# Child achievement
DATA_CHILD_ACHIEVEMENT_CHILD_ID = "child_id"
DATA_CHILD_ACHIEVEMENT_ID = "achievement_id"
DATA_CHILD_ACHIEVEMENT_UNLOCKED_AT = "unlocked_at"

# Streak
DATA_STREAK_CURRENT = "current"
DATA_STREAK_BEST = "best"
DATA_STREAK_LAST_SESSION_DATE = "last_session_date"

# Wallet
DATA_WALLET_COINS = "coins"
DATA_WALLET_TICKETS = "tickets"
DATA_WALLET_TICKET_PROGRESS = "ticket_progress"
DATA_WALLET_PITY = "pity"

SKIN_CATEGORY_STUDY = "study"
SKIN_CATEGORY_EXERCISE = "exercise"
SKIN_CATEGORIES = [SKIN_CATEGORY_STUDY, SKIN_CATEGORY_EXERCISE]
SKIN_CATEGORY_DEFAULT = "default"

# Buddy
DATA_BUDDY_LEVEL = "level"
DATA_BUDDY_XP = "xp"
DATA_BUDDY_STAGE_INDEX = "stage_index"
DATA_BUDDY_MOOD = "mood"

# Treasure
DATA_TREASURE_CHEST_INDEX = "chest_index"
DATA_TREASURE_PROGRESS = "progress"
DATA_TREASURE_TARGET = "target"
DATA_TREASURE_HISTORY = "history"
DATA_TREASURE_LAST_CATEGORY = "last_category"

DATA_TREASURE_HISTORY_INDEX = "index"
DATA_TREASURE_HISTORY_OPENED_AT = "opened_at"
DATA_TREASURE_HISTORY_KIND = "kind"
DATA_TREASURE_HISTORY_REWARDS = "rewards"

DATA_REWARD_TYPE = "type"
DATA_REWARD_CATEGORY = "category"
DATA_REWARD_AMOUNT = "amount"

REWARD_TYPE_COINS = "coins"
REWARD_TYPE_TICKETS = "tickets"
REWARD_TYPE_BUDDY_XP = "buddy_xp"


# ------------------------------------------------------------------------------------------------
# Result Tags
# ------------------------------------------------------------------------------------------------
RESULT_OK = "ok"
RESULT_NOT_FOUND = "not_found"
RESULT_NOT_READY = "not_ready"
RESULT_NOT_ENOUGH_COINS = "not_enough_coins"
RESULT_NOT_ENOUGH_TICKETS = "not_enough_tickets"
RESULT_ALREADY_OWNED = "already_owned"
RESULT_ALREADY_COMPLETED = "already_completed"
RESULT_LOCKED = "locked"
RESULT_NOT_AVAILABLE = "not_available"
RESULT_GACHA_DISABLED = "gacha_disabled"


# ------------------------------------------------------------------------------------------------
# Progression Rules
# ------------------------------------------------------------------------------------------------
XP_PER_MINUTE = 5
COINS_BASE_PER_SESSION = 5
COINS_MINUTES_PER_STEP = 10

LEVEL_BASE_REQUIREMENT = 120
LEVEL_REQUIREMENT_STEP = 20

MOOD_BONUS_THRESHOLD = 70
MOOD_BONUS_XP_MULTIPLIER = 1.1
MOOD_BONUS_EXTRA_COINS = 1


# ------------------------------------------------------------------------------------------------
# Category Economy / Gacha Rules
# ------------------------------------------------------------------------------------------------
CATEGORY_LEVEL_REQUIREMENT_OFFSET = 2

WALLET_COINS_PER_SESSION = 10
WALLET_TICKET_PROGRESS_PER_TICKET = 3

GACHA_UNLOCK_LEVEL = 2
GACHA_PITY_THRESHOLD = 10
GACHA_DUPLICATE_COINS_COMMON = 30
GACHA_DUPLICATE_COINS_RARE = 60

RARITY_COMMON = "common"
RARITY_RARE = "rare"
RARITY_EPIC = "epic"
RARITY_RANK = {RARITY_COMMON: 0, RARITY_RARE: 1, RARITY_EPIC: 2}

UNLOCK_METHOD_DEFAULT = "default"
UNLOCK_METHOD_SHOP = "shop"
UNLOCK_METHOD_GACHA = "gacha"


# ------------------------------------------------------------------------------------------------
# Buddy Rules
# ------------------------------------------------------------------------------------------------
BUDDY_DEFAULT_MOOD = 80
BUDDY_MOOD_MAX = 100
BUDDY_MOOD_PET = 5
BUDDY_MOOD_FEED = 20
BUDDY_MOOD_TRAINING = 10
BUDDY_FEED_COST = 10


# ------------------------------------------------------------------------------------------------
# Treasure Chest Rules
# ------------------------------------------------------------------------------------------------
CHEST_KIND_SMALL = "small"
CHEST_KIND_MEDIUM = "medium"
CHEST_KIND_LARGE = "large"

CHEST_CYCLE = [
    CHEST_KIND_SMALL,
    CHEST_KIND_SMALL,
    CHEST_KIND_MEDIUM,
    CHEST_KIND_MEDIUM,
    CHEST_KIND_LARGE,
]
CHEST_TARGETS = {
    CHEST_KIND_SMALL: 3,
    CHEST_KIND_MEDIUM: 4,
    CHEST_KIND_LARGE: 6,
}
CHEST_COIN_RANGES = {
    CHEST_KIND_SMALL: (80, 120),
    CHEST_KIND_MEDIUM: (120, 180),
    CHEST_KIND_LARGE: (150, 250),
}
CHEST_MEDIUM_TICKET_CHANCE = 0.5
CHEST_BUDDY_XP_RANGE = (20, 50)


# ------------------------------------------------------------------------------------------------
# Static Catalogs
# ------------------------------------------------------------------------------------------------
ACHIEVEMENT_FIRST_SESSION = "first_session"
ACHIEVEMENT_SESSIONS_10 = "sessions_10"
ACHIEVEMENT_TOTAL_MINUTES_100 = "total_minutes_100"
ACHIEVEMENT_STREAK_3 = "streak_3"
ACHIEVEMENT_STREAK_7 = "streak_7"
ACHIEVEMENT_MAP_NODES_3 = "map_nodes_3"
ACHIEVEMENT_MAP_STAGE0_COMPLETE = "map_stage0_complete"

ACHIEVEMENT_CATALOG: dict[str, dict[str, str]] = {
    ACHIEVEMENT_FIRST_SESSION: {
        "title": "First Step",
        "description": "Log your very first training session.",
        "icon": "mdi:shoe-print",
    },
    ACHIEVEMENT_SESSIONS_10: {
        "title": "Ten Sessions",
        "description": "Log 10 training sessions.",
        "icon": "mdi:numeric-10-circle",
    },
    ACHIEVEMENT_TOTAL_MINUTES_100: {
        "title": "Hundred Minutes",
        "description": "Train for 100 minutes in total.",
        "icon": "mdi:timer-sand",
    },
    ACHIEVEMENT_STREAK_3: {
        "title": "Three in a Row",
        "description": "Train three days in a row.",
        "icon": "mdi:fire",
    },
    ACHIEVEMENT_STREAK_7: {
        "title": "Full Week",
        "description": "Train seven days in a row.",
        "icon": "mdi:calendar-star",
    },
    ACHIEVEMENT_MAP_NODES_3: {
        "title": "Explorer",
        "description": "Clear three map nodes.",
        "icon": "mdi:map-marker-check",
    },
    ACHIEVEMENT_MAP_STAGE0_COMPLETE: {
        "title": "Stage Clear",
        "description": "Clear every node of the first stage.",
        "icon": "mdi:flag-checkered",
    },
}

MAP_STAGE_NAMES = [
    "Starting Meadow",
    "Whispering Forest",
    "Crystal Cave",
    "Sky Bridge",
    "Summit Castle",
]

# (type, required_sessions, reward_xp, reward_coins) for stage 0.
MAP_STARTER_LAYOUT = [
    (NODE_TYPE_NORMAL, 2, 10, 3),
    (NODE_TYPE_NORMAL, 1, 10, 3),
    (NODE_TYPE_NORMAL, 2, 20, 5),
    (NODE_TYPE_TREASURE, 2, 40, 10),
    (NODE_TYPE_BOSS, 3, 60, 15),
]

SKIN_ID_BONECA = "boneca_sd_pixel_v2"
SKIN_ID_LULILOLI = "luliloli_sd_pixel"
DEFAULT_BUDDY_KEY = SKIN_ID_BONECA

SKIN_KEY_NAME = "name"
SKIN_KEY_RARITY = "rarity"
SKIN_KEY_CATEGORY = "category"
SKIN_KEY_UNLOCK_METHOD = "unlock_method"
SKIN_KEY_SHOP_COST = "shop_cost"
SKIN_KEY_GACHA_WEIGHT = "gacha_weight"
SKIN_KEY_MIN_LEVEL = "min_level"
SKIN_KEY_IS_MEME = "is_meme"

SKIN_CATALOG: dict[str, dict] = {
    SKIN_ID_BONECA: {
        SKIN_KEY_NAME: "Boneca",
        SKIN_KEY_RARITY: RARITY_COMMON,
        SKIN_KEY_CATEGORY: SKIN_CATEGORY_DEFAULT,
        SKIN_KEY_UNLOCK_METHOD: UNLOCK_METHOD_DEFAULT,
        SKIN_KEY_IS_MEME: False,
    },
    SKIN_ID_LULILOLI: {
        SKIN_KEY_NAME: "Luliloli",
        SKIN_KEY_RARITY: RARITY_COMMON,
        SKIN_KEY_CATEGORY: SKIN_CATEGORY_STUDY,
        SKIN_KEY_UNLOCK_METHOD: UNLOCK_METHOD_SHOP,
        SKIN_KEY_SHOP_COST: 80,
        SKIN_KEY_IS_MEME: False,
    },
    "bonbal_sd_pixel": {
        SKIN_KEY_NAME: "Bonbal",
        SKIN_KEY_RARITY: RARITY_RARE,
        SKIN_KEY_CATEGORY: SKIN_CATEGORY_EXERCISE,
        SKIN_KEY_UNLOCK_METHOD: UNLOCK_METHOD_SHOP,
        SKIN_KEY_SHOP_COST: 150,
        SKIN_KEY_MIN_LEVEL: 2,
        SKIN_KEY_IS_MEME: False,
    },
    "owl_scholar_pixel": {
        SKIN_KEY_NAME: "Scholar Owl",
        SKIN_KEY_RARITY: RARITY_COMMON,
        SKIN_KEY_CATEGORY: SKIN_CATEGORY_STUDY,
        SKIN_KEY_UNLOCK_METHOD: UNLOCK_METHOD_GACHA,
        SKIN_KEY_GACHA_WEIGHT: 6,
        SKIN_KEY_IS_MEME: False,
    },
    "book_dragon_pixel": {
        SKIN_KEY_NAME: "Book Dragon",
        SKIN_KEY_RARITY: RARITY_RARE,
        SKIN_KEY_CATEGORY: SKIN_CATEGORY_STUDY,
        SKIN_KEY_UNLOCK_METHOD: UNLOCK_METHOD_GACHA,
        SKIN_KEY_GACHA_WEIGHT: 3,
        SKIN_KEY_IS_MEME: False,
    },
    "cosmic_sage_pixel": {
        SKIN_KEY_NAME: "Cosmic Sage",
        SKIN_KEY_RARITY: RARITY_EPIC,
        SKIN_KEY_CATEGORY: SKIN_CATEGORY_STUDY,
        SKIN_KEY_UNLOCK_METHOD: UNLOCK_METHOD_GACHA,
        SKIN_KEY_GACHA_WEIGHT: 1,
        SKIN_KEY_MIN_LEVEL: 3,
        SKIN_KEY_IS_MEME: False,
    },
    "sprint_fox_pixel": {
        SKIN_KEY_NAME: "Sprint Fox",
        SKIN_KEY_RARITY: RARITY_COMMON,
        SKIN_KEY_CATEGORY: SKIN_CATEGORY_EXERCISE,
        SKIN_KEY_UNLOCK_METHOD: UNLOCK_METHOD_GACHA,
        SKIN_KEY_GACHA_WEIGHT: 6,
        SKIN_KEY_IS_MEME: False,
    },
    "iron_turtle_pixel": {
        SKIN_KEY_NAME: "Iron Turtle",
        SKIN_KEY_RARITY: RARITY_RARE,
        SKIN_KEY_CATEGORY: SKIN_CATEGORY_EXERCISE,
        SKIN_KEY_UNLOCK_METHOD: UNLOCK_METHOD_GACHA,
        SKIN_KEY_GACHA_WEIGHT: 3,
        SKIN_KEY_IS_MEME: False,
    },
    "chinpanzini_sd_pixel": {
        SKIN_KEY_NAME: "Chinpanzini",
        SKIN_KEY_RARITY: RARITY_EPIC,
        SKIN_KEY_CATEGORY: SKIN_CATEGORY_EXERCISE,
        SKIN_KEY_UNLOCK_METHOD: UNLOCK_METHOD_GACHA,
        SKIN_KEY_GACHA_WEIGHT: 1,
        SKIN_KEY_IS_MEME: True,
    },
}

# Evolution lines keyed by buddy key; each stage is a discoverable form id.
EVOLUTION_KEY_EVOLVE_AT_LEVEL = "evolve_at_level"
EVOLUTION_KEY_STAGES = "stages"

EVOLUTION_LINES: dict[str, dict] = {
    SKIN_ID_BONECA: {
        EVOLUTION_KEY_EVOLVE_AT_LEVEL: 10,
        EVOLUTION_KEY_STAGES: [SKIN_ID_BONECA, f"{SKIN_ID_BONECA}_evo2"],
    },
    SKIN_ID_LULILOLI: {
        EVOLUTION_KEY_EVOLVE_AT_LEVEL: 10,
        EVOLUTION_KEY_STAGES: [SKIN_ID_LULILOLI, f"{SKIN_ID_LULILOLI}_evo2"],
    },
}

# (name, category, icon) seeded on a fresh install.
DEFAULT_ACTIVITIES = [
    ("Soccer", ACTIVITY_CATEGORY_SPORTS, "mdi:soccer"),
    ("Core Training", ACTIVITY_CATEGORY_SPORTS, "mdi:human-handsup"),
    ("Homework", ACTIVITY_CATEGORY_STUDY, "mdi:book-open-variant"),
    ("Piano", ACTIVITY_CATEGORY_MUSIC, "mdi:piano"),
]


# ------------------------------------------------------------------------------------------------
# Events / Signals
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_SESSION_LOGGED = "session_logged"
SIGNAL_SUFFIX_SESSION_DELETED = "session_deleted"
SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
SIGNAL_SUFFIX_LEVEL_UP = "level_up"
SIGNAL_SUFFIX_CHILD_ADDED = "child_added"
SIGNAL_SUFFIX_CHILD_REMOVED = "child_removed"

EVENT_SESSION_LOGGED = f"{DOMAIN}_session_logged"
EVENT_ACHIEVEMENT_UNLOCKED = f"{DOMAIN}_achievement_unlocked"
EVENT_LEVEL_UP = f"{DOMAIN}_level_up"


# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_LOG_TRAINING_SESSION = "log_training_session"
SERVICE_PLAN_TRAINING_SESSION = "plan_training_session"
SERVICE_COMPLETE_PLANNED_SESSION = "complete_planned_session"
SERVICE_DELETE_TRAINING_SESSION = "delete_training_session"
SERVICE_UPDATE_SESSION_NOTE = "update_session_note"
SERVICE_PURCHASE_SKIN = "purchase_skin"
SERVICE_ROLL_SKIN_GACHA = "roll_skin_gacha"
SERVICE_OPEN_TREASURE_CHEST = "open_treasure_chest"
SERVICE_PET_BUDDY = "pet_buddy"
SERVICE_FEED_BUDDY = "feed_buddy"
SERVICE_EVOLVE_BUDDY = "evolve_buddy"
SERVICE_SET_ACTIVE_BUDDY = "set_active_buddy"
SERVICE_ADD_CHILD = "add_child"
SERVICE_REMOVE_CHILD = "remove_child"
SERVICE_ADD_ACTIVITY = "add_activity"
SERVICE_UPDATE_SETTINGS = "update_settings"
SERVICE_RESET_ALL_DATA = "reset_all_data"
SERVICE_IMPORT_STATE = "import_state"

FIELD_CHILD_ID = "child_id"
FIELD_ACTIVITY_ID = "activity_id"
FIELD_SESSION_ID = "session_id"
FIELD_DURATION_MINUTES = "duration_minutes"
FIELD_EFFORT_LEVEL = "effort_level"
FIELD_NOTE = "note"
FIELD_TAGS = "tags"
FIELD_DATE = "date"
FIELD_SKIN_ID = "skin_id"
FIELD_CATEGORY = "category"
FIELD_NAME = "name"
FIELD_AVATAR = "avatar"
FIELD_ICON = "icon"
FIELD_STATE = "state"


# ------------------------------------------------------------------------------------------------
# Sensors
# ------------------------------------------------------------------------------------------------
SENSOR_UID_SUFFIX_LEVEL = "_level"
SENSOR_UID_SUFFIX_COINS = "_coins"
SENSOR_UID_SUFFIX_STREAK = "_streak"
SENSOR_UID_SUFFIX_BUDDY = "_buddy"
SENSOR_UID_SUFFIX_WALLET = "_wallet_"
SENSOR_UID_SUFFIX_TREASURE = "_treasure"

ATTR_CHILD_NAME = "child_name"
ATTR_XP = "xp"
ATTR_XP_INTO_LEVEL = "xp_into_level"
ATTR_XP_FOR_NEXT_LEVEL = "xp_for_next_level"
ATTR_PROGRESS_FRACTION = "progress_fraction"
ATTR_BEST_STREAK = "best_streak"
ATTR_LAST_SESSION_DATE = "last_session_date"
ATTR_TOTAL_MINUTES = "total_minutes"
ATTR_BUDDY_KEY = "buddy_key"
ATTR_LEVEL = "level"
ATTR_STAGE_INDEX = "stage_index"
ATTR_TICKETS = "tickets"
ATTR_TICKET_PROGRESS = "ticket_progress"
ATTR_PITY = "pity"
ATTR_CATEGORY_LEVEL = "category_level"
ATTR_CHEST_INDEX = "chest_index"
ATTR_CHEST_KIND = "chest_kind"
ATTR_TARGET = "target"
ATTR_OPENABLE = "openable"
ATTR_UNLOCKED_ACHIEVEMENTS = "unlocked_achievements"
ATTR_CURRENT_NODE = "current_node"
