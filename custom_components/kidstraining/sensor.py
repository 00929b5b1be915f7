# File: sensor.py
"""Sensors for the KidsTraining integration.

Sensors Defined in This File (6):

# Child-Specific Sensors (5)
01. ChildLevelSensor
02. ChildCoinsSensor
03. ChildStreakSensor
04. ChildBuddySensor
05. ChildWalletSensor (one per skin category)

# System-Level Sensors (1)
06. SystemTreasureSensor

Sensors for children added after setup are created when the CHILD_ADDED
signal arrives; entities of removed children are scrubbed by SystemManager.
"""

from typing import Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect

from . import const
from .coordinator import KidsTrainingDataCoordinator
from .engines.progression_engine import ProgressionEngine
from .entity import KidsTrainingCoordinatorEntity
from .helpers.device_helpers import create_child_device_info, create_system_device_info
from .helpers.entity_helpers import get_event_signal


def _build_child_sensors(
    coordinator: KidsTrainingDataCoordinator,
    entry: ConfigEntry,
    child_id: str,
    child_name: str,
) -> list[SensorEntity]:
    """Return every per-child sensor."""
    entities: list[SensorEntity] = [
        ChildLevelSensor(coordinator, entry, child_id, child_name),
        ChildCoinsSensor(coordinator, entry, child_id, child_name),
        ChildStreakSensor(coordinator, entry, child_id, child_name),
        ChildBuddySensor(coordinator, entry, child_id, child_name),
    ]
    for category in const.SKIN_CATEGORIES:
        entities.append(
            ChildWalletSensor(coordinator, entry, child_id, child_name, category)
        )
    return entities


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities
):
    """Set up sensors for KidsTraining integration."""
    data = hass.data[const.DOMAIN][entry.entry_id]
    coordinator: KidsTrainingDataCoordinator = data[const.COORDINATOR]

    entities: list[SensorEntity] = [SystemTreasureSensor(coordinator, entry)]
    for child_id, child_info in coordinator.children_data.items():
        child_name = child_info.get(const.DATA_CHILD_NAME)
        if not child_name:
            const.LOGGER.error(
                "ERROR: Child %s has no name, skipping sensors", child_id
            )
            continue
        entities.extend(_build_child_sensors(coordinator, entry, child_id, child_name))

    async_add_entities(entities)

    @callback
    def _on_child_added(payload: dict[str, Any]) -> None:
        child_id = payload.get("child_id")
        child_name = payload.get("child_name")
        if not child_id or not child_name:
            return
        const.LOGGER.debug("DEBUG: Adding sensors for new child %s", child_id)
        async_add_entities(
            _build_child_sensors(coordinator, entry, child_id, child_name)
        )

    entry.async_on_unload(
        async_dispatcher_connect(
            hass,
            get_event_signal(entry.entry_id, const.SIGNAL_SUFFIX_CHILD_ADDED),
            _on_child_added,
        )
    )


# ------------------------------------------------------------------------------------------
class ChildSensorBase(KidsTrainingCoordinatorEntity, SensorEntity):
    """Shared setup of per-child sensors."""

    _attr_has_entity_name = True
    _uid_suffix = ""

    def __init__(
        self,
        coordinator: KidsTrainingDataCoordinator,
        entry: ConfigEntry,
        child_id: str,
        child_name: str,
    ):
        """Initialize the sensor.

        Args:
            coordinator: KidsTrainingDataCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            child_id: Internal id of the child.
            child_name: Display name of the child.
        """
        super().__init__(coordinator)
        self._child_id = child_id
        self._child_name = child_name
        self._attr_unique_id = f"{entry.entry_id}_{child_id}{self._uid_suffix}"
        self._attr_device_info = create_child_device_info(child_id, child_name, entry)

    @property
    def _child(self) -> dict[str, Any]:
        return self.coordinator.get_child(self._child_id) or {}

    @property
    def available(self) -> bool:
        """Unavailable once the child is gone."""
        child = self.coordinator.get_child(self._child_id)
        return super().available and child is not None


# ------------------------------------------------------------------------------------------
class ChildLevelSensor(ChildSensorBase):
    """A child's level, with XP progress toward the next level."""

    _attr_name = "Level"
    _attr_icon = "mdi:star-circle"
    _attr_state_class = SensorStateClass.MEASUREMENT
    _uid_suffix = const.SENSOR_UID_SUFFIX_LEVEL

    @property
    def native_value(self) -> int:
        """Return the level derived from cumulative XP."""
        return ProgressionEngine.level_for_xp(self._child.get(const.DATA_CHILD_XP, 0))

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose XP and in-level progress."""
        info = ProgressionEngine.level_info(self._child.get(const.DATA_CHILD_XP, 0))
        return {
            const.ATTR_CHILD_NAME: self._child_name,
            const.ATTR_XP: self._child.get(const.DATA_CHILD_XP, 0),
            const.ATTR_XP_INTO_LEVEL: info["xp_into_level"],
            const.ATTR_XP_FOR_NEXT_LEVEL: info["xp_for_next_level"],
            const.ATTR_PROGRESS_FRACTION: info["progress_fraction"],
            const.ATTR_TOTAL_MINUTES: self._child.get(
                const.DATA_CHILD_TOTAL_MINUTES, 0
            ),
        }


# ------------------------------------------------------------------------------------------
class ChildCoinsSensor(ChildSensorBase):
    """A child's coin balance."""

    _attr_name = "Coins"
    _attr_icon = "mdi:cash-multiple"
    _attr_native_unit_of_measurement = "coins"
    _attr_state_class = SensorStateClass.MEASUREMENT
    _uid_suffix = const.SENSOR_UID_SUFFIX_COINS

    @property
    def native_value(self) -> int:
        """Return the child's coins."""
        return self._child.get(const.DATA_CHILD_COINS, 0)


# ------------------------------------------------------------------------------------------
class ChildStreakSensor(ChildSensorBase):
    """A child's current streak in days."""

    _attr_name = "Streak"
    _attr_icon = "mdi:fire"
    _attr_native_unit_of_measurement = "days"
    _uid_suffix = const.SENSOR_UID_SUFFIX_STREAK

    @property
    def native_value(self) -> int:
        """Return the current streak."""
        return self._child.get(const.DATA_CHILD_CURRENT_STREAK, 0)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose best streak, last session day and the map position."""
        streak = self.coordinator.snapshot.get(const.DATA_STREAKS, {}).get(
            self._child_id, {}
        )
        node = self.coordinator.get_current_map_node_for_child(self._child_id)
        achievements = self.coordinator.get_achievements_for_child(self._child_id)
        return {
            const.ATTR_CHILD_NAME: self._child_name,
            const.ATTR_BEST_STREAK: self._child.get(const.DATA_CHILD_BEST_STREAK, 0),
            const.ATTR_LAST_SESSION_DATE: streak.get(
                const.DATA_STREAK_LAST_SESSION_DATE
            ),
            const.ATTR_CURRENT_NODE: node[const.DATA_INTERNAL_ID] if node else None,
            const.ATTR_UNLOCKED_ACHIEVEMENTS: [
                view["achievement_id"] for view in achievements if view["unlocked"]
            ],
        }


# ------------------------------------------------------------------------------------------
class ChildBuddySensor(ChildSensorBase):
    """The mood of a child's active buddy."""

    _attr_name = "Buddy mood"
    _attr_icon = "mdi:emoticon-happy-outline"
    _attr_native_unit_of_measurement = "%"
    _uid_suffix = const.SENSOR_UID_SUFFIX_BUDDY

    @property
    def native_value(self) -> int | None:
        """Return the active buddy's mood."""
        buddy = self.coordinator.get_buddy_for_child(self._child_id)
        return buddy[const.DATA_BUDDY_MOOD] if buddy else None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose the buddy key, level and stage."""
        buddy = self.coordinator.get_buddy_for_child(self._child_id) or {}
        return {
            const.ATTR_CHILD_NAME: self._child_name,
            const.ATTR_BUDDY_KEY: buddy.get("buddy_key"),
            const.ATTR_LEVEL: buddy.get(const.DATA_BUDDY_LEVEL),
            const.ATTR_XP: buddy.get(const.DATA_BUDDY_XP),
            const.ATTR_STAGE_INDEX: buddy.get(const.DATA_BUDDY_STAGE_INDEX),
            "form_id": buddy.get("form_id"),
            "can_evolve": buddy.get("can_evolve", False),
        }


# ------------------------------------------------------------------------------------------
class ChildWalletSensor(ChildSensorBase):
    """A child's coins in one skin-category wallet."""

    _attr_icon = "mdi:wallet"
    _attr_native_unit_of_measurement = "coins"
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(
        self,
        coordinator: KidsTrainingDataCoordinator,
        entry: ConfigEntry,
        child_id: str,
        child_name: str,
        category: str,
    ):
        """Initialize the wallet sensor for ``category``."""
        self._category = category
        self._uid_suffix = f"{const.SENSOR_UID_SUFFIX_WALLET}{category}"
        super().__init__(coordinator, entry, child_id, child_name)
        self._attr_name = f"{category.capitalize()} wallet"

    @property
    def native_value(self) -> int:
        """Return the wallet's coins."""
        return self.coordinator.get_wallet(self._child_id, self._category)[
            const.DATA_WALLET_COINS
        ]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose tickets, pity and category level."""
        wallet = self.coordinator.get_wallet(self._child_id, self._category)
        level = self.coordinator.get_category_level(self._child_id, self._category)
        return {
            const.ATTR_CHILD_NAME: self._child_name,
            const.ATTR_TICKETS: wallet[const.DATA_WALLET_TICKETS],
            const.ATTR_TICKET_PROGRESS: wallet[const.DATA_WALLET_TICKET_PROGRESS],
            const.ATTR_PITY: wallet[const.DATA_WALLET_PITY],
            const.ATTR_CATEGORY_LEVEL: level["level"],
        }


# ------------------------------------------------------------------------------------------
class SystemTreasureSensor(KidsTrainingCoordinatorEntity, SensorEntity):
    """Progress toward the shared treasure chest."""

    _attr_has_entity_name = True
    _attr_name = "Treasure progress"
    _attr_icon = "mdi:treasure-chest"

    def __init__(self, coordinator: KidsTrainingDataCoordinator, entry: ConfigEntry):
        """Initialize the treasure sensor."""
        super().__init__(coordinator)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_TREASURE}"
        self._attr_device_info = create_system_device_info(entry)

    @property
    def native_value(self) -> int:
        """Return sessions counted toward the current chest."""
        return self.coordinator.get_treasure()[const.DATA_TREASURE_PROGRESS]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose target, kind and whether the chest can be opened."""
        treasure = self.coordinator.get_treasure()
        return {
            const.ATTR_CHEST_INDEX: treasure[const.DATA_TREASURE_CHEST_INDEX],
            const.ATTR_CHEST_KIND: treasure["kind"],
            const.ATTR_TARGET: treasure[const.DATA_TREASURE_TARGET],
            const.ATTR_OPENABLE: treasure["openable"],
        }
