"""Service-layer tests: schemas, child name resolution, responses and errors."""

# pylint: disable=redefined-outer-name

from typing import Any

import pytest
import voluptuous as vol
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError

from custom_components.kidstraining import const
from custom_components.kidstraining.coordinator import KidsTrainingDataCoordinator
from tests.conftest import log_sessions, patch_snapshot


async def _call(
    hass: HomeAssistant, service: str, data: dict[str, Any], response: bool = True
) -> dict[str, Any] | None:
    return await hass.services.async_call(
        const.DOMAIN, service, data, blocking=True, return_response=response
    )


async def test_services_registered(hass: HomeAssistant, init_integration) -> None:
    """Every service is registered once the entry is loaded."""
    for service in (
        const.SERVICE_LOG_TRAINING_SESSION,
        const.SERVICE_PURCHASE_SKIN,
        const.SERVICE_ROLL_SKIN_GACHA,
        const.SERVICE_OPEN_TREASURE_CHEST,
        const.SERVICE_EVOLVE_BUDDY,
        const.SERVICE_IMPORT_STATE,
    ):
        assert hass.services.has_service(const.DOMAIN, service)


async def test_log_session_by_child_name(
    hass: HomeAssistant,
    coordinator: KidsTrainingDataCoordinator,
    child_id: str,
    homework_id: str,
) -> None:
    """The child can be named case-insensitively; the response carries rewards."""
    response = await _call(
        hass,
        const.SERVICE_LOG_TRAINING_SESSION,
        {
            const.FIELD_CHILD_ID: "alice",
            const.FIELD_ACTIVITY_ID: homework_id,
            const.FIELD_DURATION_MINUTES: 40,
            const.FIELD_EFFORT_LEVEL: 1,
            const.FIELD_TAGS: "#Math",
        },
    )

    assert response["xp_gained"] == 200
    assert response["coins_gained"] == 9
    assert response["bonus_xp"] == 20
    assert response["bonus_coins"] == 1
    assert response["level_ups"] == 1
    assert response["completed_node_ids"] == []
    assert response["unlocked_achievements"] == [const.ACHIEVEMENT_FIRST_SESSION]
    session = coordinator.sessions_data[response["session_id"]]
    assert session[const.DATA_SESSION_CHILD_ID] == child_id
    assert session[const.DATA_SESSION_TAGS] == ["math"]


async def test_log_session_rejects_bad_input(
    hass: HomeAssistant,
    coordinator: KidsTrainingDataCoordinator,
    child_id: str,
    homework_id: str,
) -> None:
    """Unknown children, out-of-range effort and bad dates change nothing."""
    with pytest.raises(ServiceValidationError):
        await _call(
            hass,
            const.SERVICE_LOG_TRAINING_SESSION,
            {
                const.FIELD_CHILD_ID: "Nobody",
                const.FIELD_ACTIVITY_ID: homework_id,
                const.FIELD_DURATION_MINUTES: 30,
                const.FIELD_EFFORT_LEVEL: 2,
            },
        )

    with pytest.raises(vol.Invalid):
        await _call(
            hass,
            const.SERVICE_LOG_TRAINING_SESSION,
            {
                const.FIELD_CHILD_ID: child_id,
                const.FIELD_ACTIVITY_ID: homework_id,
                const.FIELD_DURATION_MINUTES: 30,
                const.FIELD_EFFORT_LEVEL: 4,
            },
        )

    with pytest.raises(vol.Invalid):
        await _call(
            hass,
            const.SERVICE_LOG_TRAINING_SESSION,
            {
                const.FIELD_CHILD_ID: child_id,
                const.FIELD_ACTIVITY_ID: homework_id,
                const.FIELD_DURATION_MINUTES: 30,
                const.FIELD_EFFORT_LEVEL: 2,
                const.FIELD_DATE: "2025-13-45",
            },
        )

    with pytest.raises(vol.Invalid):
        await _call(
            hass,
            const.SERVICE_PLAN_TRAINING_SESSION,
            {
                const.FIELD_CHILD_ID: child_id,
                const.FIELD_ACTIVITY_ID: homework_id,
                const.FIELD_DATE: "not-a-date",
            },
        )

    assert coordinator.sessions_data == {}


async def test_plan_and_complete_services(
    hass: HomeAssistant,
    coordinator: KidsTrainingDataCoordinator,
    child_id: str,
    soccer_id: str,
) -> None:
    """Planning returns the id and day; completing twice is refused."""
    planned = await _call(
        hass,
        const.SERVICE_PLAN_TRAINING_SESSION,
        {
            const.FIELD_CHILD_ID: child_id,
            const.FIELD_ACTIVITY_ID: soccer_id,
            const.FIELD_DATE: "2030-06-01",
        },
    )
    assert planned["date_key"] == "2030-06-01"

    completed = await _call(
        hass,
        const.SERVICE_COMPLETE_PLANNED_SESSION,
        {
            const.FIELD_SESSION_ID: planned["session_id"],
            const.FIELD_DURATION_MINUTES: 30,
            const.FIELD_EFFORT_LEVEL: 2,
        },
    )
    assert completed["session_id"] == planned["session_id"]
    assert completed["xp_gained"] == 300

    with pytest.raises(HomeAssistantError, match=const.RESULT_ALREADY_COMPLETED):
        await _call(
            hass,
            const.SERVICE_COMPLETE_PLANNED_SESSION,
            {
                const.FIELD_SESSION_ID: planned["session_id"],
                const.FIELD_DURATION_MINUTES: 30,
                const.FIELD_EFFORT_LEVEL: 2,
            },
        )

    with pytest.raises(ServiceValidationError):
        await _call(
            hass,
            const.SERVICE_COMPLETE_PLANNED_SESSION,
            {
                const.FIELD_SESSION_ID: "missing",
                const.FIELD_DURATION_MINUTES: 30,
                const.FIELD_EFFORT_LEVEL: 2,
            },
        )


async def test_delete_and_note_services(
    hass: HomeAssistant,
    coordinator: KidsTrainingDataCoordinator,
    child_id: str,
    homework_id: str,
) -> None:
    """Note edits and deletions act on existing sessions only."""
    (result,) = log_sessions(coordinator, child_id, homework_id, 1)
    session_id = result["session"][const.DATA_INTERNAL_ID]

    await _call(
        hass,
        const.SERVICE_UPDATE_SESSION_NOTE,
        {const.FIELD_SESSION_ID: session_id, const.FIELD_NOTE: "well done"},
        response=False,
    )
    assert coordinator.sessions_data[session_id][const.DATA_SESSION_NOTE] == "well done"

    await _call(
        hass,
        const.SERVICE_DELETE_TRAINING_SESSION,
        {const.FIELD_SESSION_ID: session_id},
        response=False,
    )
    assert session_id not in coordinator.sessions_data

    with pytest.raises(ServiceValidationError):
        await _call(
            hass,
            const.SERVICE_DELETE_TRAINING_SESSION,
            {const.FIELD_SESSION_ID: session_id},
            response=False,
        )


async def test_purchase_service_errors_carry_tag(
    hass: HomeAssistant, coordinator: KidsTrainingDataCoordinator, child_id: str
) -> None:
    """A refused purchase raises with its result tag; a good one responds."""
    with pytest.raises(HomeAssistantError, match=const.RESULT_NOT_ENOUGH_COINS):
        await _call(
            hass,
            const.SERVICE_PURCHASE_SKIN,
            {const.FIELD_CHILD_ID: child_id, const.FIELD_SKIN_ID: const.SKIN_ID_LULILOLI},
        )

    def fund(state):
        state[const.DATA_WALLETS][child_id][const.SKIN_CATEGORY_STUDY]["coins"] = 80

    patch_snapshot(coordinator, fund)
    response = await _call(
        hass,
        const.SERVICE_PURCHASE_SKIN,
        {const.FIELD_CHILD_ID: "Alice", const.FIELD_SKIN_ID: const.SKIN_ID_LULILOLI},
    )
    assert response == {"result": const.RESULT_OK, "skin_id": const.SKIN_ID_LULILOLI}


async def test_gacha_and_chest_services(
    hass: HomeAssistant,
    coordinator: KidsTrainingDataCoordinator,
    child_id: str,
    homework_id: str,
) -> None:
    """Roll and chest responses expose the outcome without wallet internals."""
    log_sessions(coordinator, child_id, homework_id, 3)

    rolled = await _call(
        hass,
        const.SERVICE_ROLL_SKIN_GACHA,
        {const.FIELD_CHILD_ID: child_id, const.FIELD_CATEGORY: const.SKIN_CATEGORY_STUDY},
    )
    assert rolled["result"] == const.RESULT_OK
    assert "wallet" not in rolled

    opened = await _call(
        hass, const.SERVICE_OPEN_TREASURE_CHEST, {const.FIELD_CHILD_ID: child_id}
    )
    assert opened["kind"] == const.CHEST_KIND_SMALL

    with pytest.raises(HomeAssistantError, match=const.RESULT_NOT_READY):
        await _call(
            hass, const.SERVICE_OPEN_TREASURE_CHEST, {const.FIELD_CHILD_ID: child_id}
        )

    with pytest.raises(vol.Invalid):
        await _call(
            hass,
            const.SERVICE_ROLL_SKIN_GACHA,
            {const.FIELD_CHILD_ID: child_id, const.FIELD_CATEGORY: "music"},
        )


async def test_buddy_services(
    hass: HomeAssistant, coordinator: KidsTrainingDataCoordinator, child_id: str
) -> None:
    """Pet succeeds silently; feed and evolve refusals raise."""
    await _call(
        hass, const.SERVICE_PET_BUDDY, {const.FIELD_CHILD_ID: child_id}, response=False
    )
    assert coordinator.get_buddy_for_child(child_id)[const.DATA_BUDDY_MOOD] == 85

    with pytest.raises(HomeAssistantError, match=const.RESULT_NOT_ENOUGH_COINS):
        await _call(
            hass, const.SERVICE_FEED_BUDDY, {const.FIELD_CHILD_ID: child_id}, response=False
        )
    with pytest.raises(HomeAssistantError, match=const.RESULT_NOT_READY):
        await _call(hass, const.SERVICE_EVOLVE_BUDDY, {const.FIELD_CHILD_ID: child_id})
    with pytest.raises(HomeAssistantError, match=const.RESULT_NOT_AVAILABLE):
        await _call(
            hass,
            const.SERVICE_SET_ACTIVE_BUDDY,
            {const.FIELD_CHILD_ID: child_id, const.FIELD_SKIN_ID: const.SKIN_ID_LULILOLI},
            response=False,
        )


async def test_roster_services(
    hass: HomeAssistant, coordinator: KidsTrainingDataCoordinator
) -> None:
    """Children and activities can be managed through services."""
    added = await _call(hass, const.SERVICE_ADD_CHILD, {const.FIELD_NAME: "Dana"})
    await hass.async_block_till_done()
    assert added["name"] == "Dana"
    assert hass.states.get("sensor.dana_kidstraining_level") is not None

    activity = await _call(
        hass,
        const.SERVICE_ADD_ACTIVITY,
        {const.FIELD_NAME: "Violin", const.FIELD_CATEGORY: const.ACTIVITY_CATEGORY_MUSIC},
    )
    assert activity["category"] == const.ACTIVITY_CATEGORY_MUSIC
    assert activity["activity_id"] in coordinator.activities_data

    await _call(
        hass, const.SERVICE_REMOVE_CHILD, {const.FIELD_CHILD_ID: "dana"}, response=False
    )
    await hass.async_block_till_done()
    assert coordinator.get_child(added["child_id"]) is None


async def test_settings_reset_and_import_services(
    hass: HomeAssistant,
    coordinator: KidsTrainingDataCoordinator,
    child_id: str,
) -> None:
    """Settings land in the entry options; reset and import replace data."""
    options = await _call(
        hass, const.SERVICE_UPDATE_SETTINGS, {const.CONF_ENABLE_MEME_SKINS: False}
    )
    assert options[const.CONF_ENABLE_MEME_SKINS] is False
    assert coordinator.enable_meme_skins is False

    exported = {const.DATA_CHILDREN: dict(coordinator.children_data)}
    await _call(hass, const.SERVICE_RESET_ALL_DATA, {}, response=False)
    await hass.async_block_till_done()
    assert coordinator.children_data == {}

    counts = await _call(
        hass, const.SERVICE_IMPORT_STATE, {const.FIELD_STATE: exported}
    )
    await hass.async_block_till_done()
    assert counts == {"children_added": 1, "sessions_added": 0}
    assert coordinator.get_child(child_id)[const.DATA_CHILD_NAME] == "Alice"


async def test_services_removed_on_unload(hass: HomeAssistant, init_integration) -> None:
    """Unloading the entry removes the services."""
    assert await hass.config_entries.async_unload(init_integration.entry_id)
    await hass.async_block_till_done()

    assert not hass.services.has_service(const.DOMAIN, const.SERVICE_LOG_TRAINING_SESSION)
    assert const.DOMAIN in hass.data
    assert init_integration.entry_id not in hass.data[const.DOMAIN]
