# File: services.py
"""Defines custom services for the KidsTraining integration.

These services allow direct actions through scripts or automations. Services
that produce a result return it as service response data.

Error translation:
- Unknown child or session: ServiceValidationError
- Any other non-ok result tag: HomeAssistantError carrying the tag
"""

from typing import Any

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall, SupportsResponse
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from homeassistant.helpers import config_validation as cv

from . import const
from .coordinator import KidsTrainingDataCoordinator
from .helpers.entity_helpers import get_first_kidstraining_entry
from .utils.dt_utils import dt_parse

# --- Service Schemas ---
_EFFORT = vol.All(
    vol.Coerce(int), vol.Range(min=const.EFFORT_LEVEL_MIN, max=const.EFFORT_LEVEL_MAX)
)
_DURATION = vol.All(vol.Coerce(int), vol.Range(min=1))
_TAGS = vol.All(cv.ensure_list, [cv.string])
_CATEGORY = vol.In(const.SKIN_CATEGORIES)


def _session_date(value: Any) -> str:
    """Validate a session date string that dt_parse can read."""
    value = cv.string(value)
    if dt_parse(value) is None:
        raise vol.Invalid(f"Invalid session date: {value}")
    return value


LOG_TRAINING_SESSION_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CHILD_ID): cv.string,
        vol.Required(const.FIELD_ACTIVITY_ID): cv.string,
        vol.Required(const.FIELD_DURATION_MINUTES): _DURATION,
        vol.Required(const.FIELD_EFFORT_LEVEL): _EFFORT,
        vol.Optional(const.FIELD_NOTE): cv.string,
        vol.Optional(const.FIELD_TAGS): _TAGS,
        vol.Optional(const.FIELD_DATE): _session_date,
    }
)

PLAN_TRAINING_SESSION_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CHILD_ID): cv.string,
        vol.Required(const.FIELD_ACTIVITY_ID): cv.string,
        vol.Optional(const.FIELD_DATE): _session_date,
        vol.Optional(const.FIELD_NOTE): cv.string,
        vol.Optional(const.FIELD_TAGS): _TAGS,
    }
)

COMPLETE_PLANNED_SESSION_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_SESSION_ID): cv.string,
        vol.Required(const.FIELD_DURATION_MINUTES): _DURATION,
        vol.Required(const.FIELD_EFFORT_LEVEL): _EFFORT,
        vol.Optional(const.FIELD_NOTE): cv.string,
        vol.Optional(const.FIELD_TAGS): _TAGS,
    }
)

DELETE_TRAINING_SESSION_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_SESSION_ID): cv.string}
)

UPDATE_SESSION_NOTE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_SESSION_ID): cv.string,
        vol.Optional(const.FIELD_NOTE, default=""): cv.string,
    }
)

PURCHASE_SKIN_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CHILD_ID): cv.string,
        vol.Required(const.FIELD_SKIN_ID): cv.string,
    }
)

ROLL_SKIN_GACHA_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CHILD_ID): cv.string,
        vol.Required(const.FIELD_CATEGORY): _CATEGORY,
    }
)

CHILD_ONLY_SCHEMA = vol.Schema({vol.Required(const.FIELD_CHILD_ID): cv.string})

SET_ACTIVE_BUDDY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CHILD_ID): cv.string,
        vol.Required(const.FIELD_SKIN_ID): cv.string,
    }
)

ADD_CHILD_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_NAME): vol.All(cv.string, vol.Length(min=1)),
        vol.Optional(const.FIELD_AVATAR): cv.string,
    }
)

ADD_ACTIVITY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_NAME): vol.All(cv.string, vol.Length(min=1)),
        vol.Optional(
            const.FIELD_CATEGORY, default=const.ACTIVITY_CATEGORY_OTHER
        ): vol.In(const.ACTIVITY_CATEGORIES),
        vol.Optional(const.FIELD_ICON): cv.icon,
    }
)

UPDATE_SETTINGS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.CONF_ENABLE_GACHA): cv.boolean,
        vol.Optional(const.CONF_ENABLE_MEME_SKINS): cv.boolean,
        vol.Optional(const.CONF_UPDATE_INTERVAL): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
    }
)

RESET_ALL_DATA_SCHEMA = vol.Schema({})

IMPORT_STATE_SCHEMA = vol.Schema({vol.Required(const.FIELD_STATE): dict})


# --- Helpers ---


def _get_coordinator(hass: HomeAssistant, service: str) -> KidsTrainingDataCoordinator:
    """Return the coordinator of the loaded entry or raise."""
    entry_id = get_first_kidstraining_entry(hass)
    if not entry_id:
        const.LOGGER.warning("WARNING: %s: No KidsTraining entry found", service)
        raise HomeAssistantError("No KidsTraining entry found")
    return hass.data[const.DOMAIN][entry_id][const.COORDINATOR]


def _resolve_child_id(coordinator: KidsTrainingDataCoordinator, value: str) -> str:
    """Map a child id or child name to the child's internal id."""
    if value in coordinator.children_data:
        return value
    for child_id, child in coordinator.children_data.items():
        if str(child.get(const.DATA_CHILD_NAME, "")).casefold() == value.casefold():
            return child_id
    raise ServiceValidationError(f"Child '{value}' not found")


def _raise_for_result(service: str, result: str) -> None:
    """Raise HomeAssistantError for any result tag other than ok."""
    if result == const.RESULT_OK:
        return
    const.LOGGER.info("INFO: %s refused: %s", service, result)
    raise HomeAssistantError(f"{service} failed: {result}")


def _session_response(result: dict[str, Any]) -> dict[str, Any]:
    session = result["session"]
    return {
        "session_id": session[const.DATA_INTERNAL_ID],
        "xp_gained": session[const.DATA_SESSION_XP_GAINED],
        "coins_gained": session[const.DATA_SESSION_COINS_GAINED],
        "bonus_xp": result["bonus_xp"],
        "bonus_coins": result["bonus_coins"],
        "level_ups": result["level_ups"],
        "completed_node_ids": list(session[const.DATA_SESSION_COMPLETED_NODE_IDS]),
        "unlocked_achievements": [
            record[const.DATA_CHILD_ACHIEVEMENT_ID]
            for record in result["unlocked_achievements"]
        ],
        "tickets_gained": result["tickets_gained"],
        "buddy_level_ups": result["buddy_level_ups"],
    }


def async_setup_services(hass: HomeAssistant):
    """Register KidsTraining services."""

    # --- Sessions ---

    async def handle_log_training_session(call: ServiceCall):
        """Handle logging a completed session."""
        coordinator = _get_coordinator(hass, const.SERVICE_LOG_TRAINING_SESSION)
        child_id = _resolve_child_id(coordinator, call.data[const.FIELD_CHILD_ID])
        result = coordinator.log_training_session(
            child_id,
            call.data[const.FIELD_ACTIVITY_ID],
            duration_minutes=call.data[const.FIELD_DURATION_MINUTES],
            effort_level=call.data[const.FIELD_EFFORT_LEVEL],
            note=call.data.get(const.FIELD_NOTE),
            tags=call.data.get(const.FIELD_TAGS),
            date=call.data.get(const.FIELD_DATE),
        )
        if result is None:
            raise ServiceValidationError(f"Child '{child_id}' not found")
        return _session_response(result)

    async def handle_plan_training_session(call: ServiceCall):
        """Handle planning a session."""
        coordinator = _get_coordinator(hass, const.SERVICE_PLAN_TRAINING_SESSION)
        child_id = _resolve_child_id(coordinator, call.data[const.FIELD_CHILD_ID])
        session = coordinator.plan_training_session(
            child_id,
            call.data[const.FIELD_ACTIVITY_ID],
            date=call.data.get(const.FIELD_DATE),
            note=call.data.get(const.FIELD_NOTE),
            tags=call.data.get(const.FIELD_TAGS),
        )
        if session is None:
            raise ServiceValidationError(f"Child '{child_id}' not found")
        return {
            "session_id": session[const.DATA_INTERNAL_ID],
            "date_key": session[const.DATA_SESSION_DATE_KEY],
        }

    async def handle_complete_planned_session(call: ServiceCall):
        """Handle completing a planned session."""
        coordinator = _get_coordinator(hass, const.SERVICE_COMPLETE_PLANNED_SESSION)
        session_id = call.data[const.FIELD_SESSION_ID]
        tag, result = coordinator.session_manager.complete_planned_session(
            session_id,
            call.data[const.FIELD_DURATION_MINUTES],
            call.data[const.FIELD_EFFORT_LEVEL],
            note=call.data.get(const.FIELD_NOTE),
            tags=call.data.get(const.FIELD_TAGS),
        )
        if tag == const.RESULT_NOT_FOUND:
            raise ServiceValidationError(f"Session '{session_id}' not found")
        _raise_for_result(const.SERVICE_COMPLETE_PLANNED_SESSION, tag)
        return _session_response(result)

    async def handle_delete_training_session(call: ServiceCall):
        """Handle deleting a session."""
        coordinator = _get_coordinator(hass, const.SERVICE_DELETE_TRAINING_SESSION)
        session_id = call.data[const.FIELD_SESSION_ID]
        if (
            coordinator.session_manager.delete_training_session(session_id)
            == const.RESULT_NOT_FOUND
        ):
            raise ServiceValidationError(f"Session '{session_id}' not found")

    async def handle_update_session_note(call: ServiceCall):
        """Handle editing a session note."""
        coordinator = _get_coordinator(hass, const.SERVICE_UPDATE_SESSION_NOTE)
        session_id = call.data[const.FIELD_SESSION_ID]
        if (
            coordinator.session_manager.update_session_note(
                session_id, call.data.get(const.FIELD_NOTE)
            )
            == const.RESULT_NOT_FOUND
        ):
            raise ServiceValidationError(f"Session '{session_id}' not found")

    # --- Economy ---

    async def handle_purchase_skin(call: ServiceCall):
        """Handle buying a shop skin."""
        coordinator = _get_coordinator(hass, const.SERVICE_PURCHASE_SKIN)
        child_id = _resolve_child_id(coordinator, call.data[const.FIELD_CHILD_ID])
        skin_id = call.data[const.FIELD_SKIN_ID]
        result = coordinator.economy_manager.purchase_skin(child_id, skin_id)
        _raise_for_result(const.SERVICE_PURCHASE_SKIN, result)
        return {"result": result, "skin_id": skin_id}

    async def handle_roll_skin_gacha(call: ServiceCall):
        """Handle a gacha roll."""
        coordinator = _get_coordinator(hass, const.SERVICE_ROLL_SKIN_GACHA)
        child_id = _resolve_child_id(coordinator, call.data[const.FIELD_CHILD_ID])
        outcome = coordinator.economy_manager.roll_skin_gacha(
            child_id, call.data[const.FIELD_CATEGORY]
        )
        _raise_for_result(const.SERVICE_ROLL_SKIN_GACHA, outcome["result"])
        return {key: value for key, value in outcome.items() if key != "wallet"}

    async def handle_open_treasure_chest(call: ServiceCall):
        """Handle opening the treasure chest."""
        coordinator = _get_coordinator(hass, const.SERVICE_OPEN_TREASURE_CHEST)
        child_id = _resolve_child_id(coordinator, call.data[const.FIELD_CHILD_ID])
        opening = coordinator.economy_manager.open_treasure_chest(child_id)
        _raise_for_result(const.SERVICE_OPEN_TREASURE_CHEST, opening["result"])
        return dict(opening)

    # --- Buddy ---

    async def handle_pet_buddy(call: ServiceCall):
        """Handle petting the active buddy."""
        coordinator = _get_coordinator(hass, const.SERVICE_PET_BUDDY)
        child_id = _resolve_child_id(coordinator, call.data[const.FIELD_CHILD_ID])
        _raise_for_result(
            const.SERVICE_PET_BUDDY, coordinator.buddy_manager.pet_buddy(child_id)
        )

    async def handle_feed_buddy(call: ServiceCall):
        """Handle feeding the active buddy."""
        coordinator = _get_coordinator(hass, const.SERVICE_FEED_BUDDY)
        child_id = _resolve_child_id(coordinator, call.data[const.FIELD_CHILD_ID])
        _raise_for_result(
            const.SERVICE_FEED_BUDDY, coordinator.buddy_manager.feed_buddy(child_id)
        )

    async def handle_evolve_buddy(call: ServiceCall):
        """Handle evolving the active buddy."""
        coordinator = _get_coordinator(hass, const.SERVICE_EVOLVE_BUDDY)
        child_id = _resolve_child_id(coordinator, call.data[const.FIELD_CHILD_ID])
        outcome = coordinator.buddy_manager.evolve_buddy(child_id)
        _raise_for_result(const.SERVICE_EVOLVE_BUDDY, outcome["result"])
        return outcome

    async def handle_set_active_buddy(call: ServiceCall):
        """Handle choosing the active buddy."""
        coordinator = _get_coordinator(hass, const.SERVICE_SET_ACTIVE_BUDDY)
        child_id = _resolve_child_id(coordinator, call.data[const.FIELD_CHILD_ID])
        _raise_for_result(
            const.SERVICE_SET_ACTIVE_BUDDY,
            coordinator.buddy_manager.set_active_buddy(
                child_id, call.data[const.FIELD_SKIN_ID]
            ),
        )

    # --- System ---

    async def handle_add_child(call: ServiceCall):
        """Handle adding a child."""
        coordinator = _get_coordinator(hass, const.SERVICE_ADD_CHILD)
        child = coordinator.system_manager.add_child(
            call.data[const.FIELD_NAME], call.data.get(const.FIELD_AVATAR)
        )
        return {
            "child_id": child[const.DATA_INTERNAL_ID],
            "name": child[const.DATA_CHILD_NAME],
        }

    async def handle_remove_child(call: ServiceCall):
        """Handle removing a child."""
        coordinator = _get_coordinator(hass, const.SERVICE_REMOVE_CHILD)
        child_id = _resolve_child_id(coordinator, call.data[const.FIELD_CHILD_ID])
        _raise_for_result(
            const.SERVICE_REMOVE_CHILD,
            coordinator.system_manager.remove_child(child_id),
        )

    async def handle_add_activity(call: ServiceCall):
        """Handle adding an activity."""
        coordinator = _get_coordinator(hass, const.SERVICE_ADD_ACTIVITY)
        activity = coordinator.system_manager.add_activity(
            call.data[const.FIELD_NAME],
            call.data[const.FIELD_CATEGORY],
            call.data.get(const.FIELD_ICON),
        )
        return {
            "activity_id": activity[const.DATA_INTERNAL_ID],
            "name": activity[const.DATA_ACTIVITY_NAME],
            "category": activity[const.DATA_ACTIVITY_CATEGORY],
        }

    async def handle_update_settings(call: ServiceCall):
        """Handle updating the application settings."""
        coordinator = _get_coordinator(hass, const.SERVICE_UPDATE_SETTINGS)
        return coordinator.system_manager.update_settings(
            enable_gacha=call.data.get(const.CONF_ENABLE_GACHA),
            enable_meme_skins=call.data.get(const.CONF_ENABLE_MEME_SKINS),
            update_interval=call.data.get(const.CONF_UPDATE_INTERVAL),
        )

    async def handle_reset_all_data(call: ServiceCall):
        """Handle resetting all data to a fresh seed."""
        coordinator = _get_coordinator(hass, const.SERVICE_RESET_ALL_DATA)
        coordinator.system_manager.reset_all_data()

    async def handle_import_state(call: ServiceCall):
        """Handle merging an exported snapshot."""
        coordinator = _get_coordinator(hass, const.SERVICE_IMPORT_STATE)
        return coordinator.system_manager.import_state(call.data[const.FIELD_STATE])

    registrations = [
        (
            const.SERVICE_LOG_TRAINING_SESSION,
            handle_log_training_session,
            LOG_TRAINING_SESSION_SCHEMA,
            True,
        ),
        (
            const.SERVICE_PLAN_TRAINING_SESSION,
            handle_plan_training_session,
            PLAN_TRAINING_SESSION_SCHEMA,
            True,
        ),
        (
            const.SERVICE_COMPLETE_PLANNED_SESSION,
            handle_complete_planned_session,
            COMPLETE_PLANNED_SESSION_SCHEMA,
            True,
        ),
        (
            const.SERVICE_DELETE_TRAINING_SESSION,
            handle_delete_training_session,
            DELETE_TRAINING_SESSION_SCHEMA,
            False,
        ),
        (
            const.SERVICE_UPDATE_SESSION_NOTE,
            handle_update_session_note,
            UPDATE_SESSION_NOTE_SCHEMA,
            False,
        ),
        (
            const.SERVICE_PURCHASE_SKIN,
            handle_purchase_skin,
            PURCHASE_SKIN_SCHEMA,
            True,
        ),
        (
            const.SERVICE_ROLL_SKIN_GACHA,
            handle_roll_skin_gacha,
            ROLL_SKIN_GACHA_SCHEMA,
            True,
        ),
        (
            const.SERVICE_OPEN_TREASURE_CHEST,
            handle_open_treasure_chest,
            CHILD_ONLY_SCHEMA,
            True,
        ),
        (
            const.SERVICE_PET_BUDDY,
            handle_pet_buddy,
            CHILD_ONLY_SCHEMA,
            False,
        ),
        (
            const.SERVICE_FEED_BUDDY,
            handle_feed_buddy,
            CHILD_ONLY_SCHEMA,
            False,
        ),
        (
            const.SERVICE_EVOLVE_BUDDY,
            handle_evolve_buddy,
            CHILD_ONLY_SCHEMA,
            True,
        ),
        (
            const.SERVICE_SET_ACTIVE_BUDDY,
            handle_set_active_buddy,
            SET_ACTIVE_BUDDY_SCHEMA,
            False,
        ),
        (
            const.SERVICE_ADD_CHILD,
            handle_add_child,
            ADD_CHILD_SCHEMA,
            True,
        ),
        (
            const.SERVICE_REMOVE_CHILD,
            handle_remove_child,
            CHILD_ONLY_SCHEMA,
            False,
        ),
        (
            const.SERVICE_ADD_ACTIVITY,
            handle_add_activity,
            ADD_ACTIVITY_SCHEMA,
            True,
        ),
        (
            const.SERVICE_UPDATE_SETTINGS,
            handle_update_settings,
            UPDATE_SETTINGS_SCHEMA,
            True,
        ),
        (
            const.SERVICE_RESET_ALL_DATA,
            handle_reset_all_data,
            RESET_ALL_DATA_SCHEMA,
            False,
        ),
        (
            const.SERVICE_IMPORT_STATE,
            handle_import_state,
            IMPORT_STATE_SCHEMA,
            True,
        ),
    ]

    for service, handler, schema, has_response in registrations:
        hass.services.async_register(
            const.DOMAIN,
            service,
            handler,
            schema=schema,
            supports_response=(
                SupportsResponse.OPTIONAL if has_response else SupportsResponse.NONE
            ),
        )

    const.LOGGER.info("INFO: KidsTraining services have been registered successfully")


async def async_unload_services(hass: HomeAssistant):
    """Unregister KidsTraining services when unloading the integration."""
    services = [
        const.SERVICE_LOG_TRAINING_SESSION,
        const.SERVICE_PLAN_TRAINING_SESSION,
        const.SERVICE_COMPLETE_PLANNED_SESSION,
        const.SERVICE_DELETE_TRAINING_SESSION,
        const.SERVICE_UPDATE_SESSION_NOTE,
        const.SERVICE_PURCHASE_SKIN,
        const.SERVICE_ROLL_SKIN_GACHA,
        const.SERVICE_OPEN_TREASURE_CHEST,
        const.SERVICE_PET_BUDDY,
        const.SERVICE_FEED_BUDDY,
        const.SERVICE_EVOLVE_BUDDY,
        const.SERVICE_SET_ACTIVE_BUDDY,
        const.SERVICE_ADD_CHILD,
        const.SERVICE_REMOVE_CHILD,
        const.SERVICE_ADD_ACTIVITY,
        const.SERVICE_UPDATE_SETTINGS,
        const.SERVICE_RESET_ALL_DATA,
        const.SERVICE_IMPORT_STATE,
    ]

    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: KidsTraining services have been unregistered")
