"""Shared fixtures for KidsTraining tests."""

import copy
from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.kidstraining import const
from custom_components.kidstraining.coordinator import KidsTrainingDataCoordinator
from custom_components.kidstraining.flow_helpers import default_options

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.KIDSTRAINING_TITLE,
        data={},
        options=default_options(),
        entry_id="test_entry_id",
    )


@pytest.fixture
def mock_storage_data() -> dict[str, Any] | None:
    """Return what the Store loads on setup. None means a fresh install."""
    return None


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],  # pylint: disable=unused-argument
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any] | None,  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the KidsTraining integration for testing with mocked storage."""
    mock_config_entry.add_to_hass(hass)

    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    return mock_config_entry


@pytest.fixture
def coordinator(
    hass: HomeAssistant,
    init_integration: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> KidsTrainingDataCoordinator:
    """Return the coordinator of the loaded entry."""
    return hass.data[const.DOMAIN][init_integration.entry_id][const.COORDINATOR]


@pytest.fixture
async def child_id(
    hass: HomeAssistant,
    coordinator: KidsTrainingDataCoordinator,  # pylint: disable=redefined-outer-name
) -> str:
    """Add a child named Alice and return her id."""
    child = coordinator.system_manager.add_child("Alice")
    await hass.async_block_till_done()
    return child[const.DATA_INTERNAL_ID]


def activity_id_by_name(coordinator: KidsTrainingDataCoordinator, name: str) -> str:
    """Return the id of a seeded activity."""
    for activity_id, activity in coordinator.activities_data.items():
        if activity[const.DATA_ACTIVITY_NAME] == name:
            return activity_id
    raise KeyError(name)


@pytest.fixture
def homework_id(coordinator: KidsTrainingDataCoordinator) -> str:  # pylint: disable=redefined-outer-name
    """Return the id of the seeded Homework (study) activity."""
    return activity_id_by_name(coordinator, "Homework")


@pytest.fixture
def soccer_id(coordinator: KidsTrainingDataCoordinator) -> str:  # pylint: disable=redefined-outer-name
    """Return the id of the seeded Soccer (sports) activity."""
    return activity_id_by_name(coordinator, "Soccer")


def patch_snapshot(coordinator: KidsTrainingDataCoordinator, mutate) -> None:
    """Apply ``mutate`` to a copy of the snapshot and swap it in."""
    state = copy.deepcopy(coordinator.snapshot)
    mutate(state)
    coordinator.replace_snapshot(state)


def log_sessions(
    coordinator: KidsTrainingDataCoordinator,
    child: str,
    activity: str,
    count: int,
    duration: int = 40,
    effort: int = 1,
) -> list[dict[str, Any]]:
    """Log ``count`` identical sessions today and return their results."""
    return [
        coordinator.session_manager.log_training_session(
            child, activity, duration, effort
        )
        for _ in range(count)
    ]
