"""Diagnostics support for KidsTraining integration.

The config entry diagnostics return the raw snapshot, which is the same
``state`` object that import_state accepts, so a diagnostics download can be
pasted back during data recovery.
"""

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.device_registry import DeviceEntry

from . import const
from .coordinator import KidsTrainingDataCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: KidsTrainingDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    return {
        const.DATA_ENVELOPE_VERSION: const.APP_STATE_VERSION,
        const.DATA_ENVELOPE_STATE: coordinator.snapshot,
    }


async def async_get_device_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry, device: DeviceEntry
) -> dict[str, Any]:
    """Return a child-specific view of the snapshot."""
    coordinator: KidsTrainingDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    child_id = None
    for identifier in device.identifiers:
        if identifier[0] == const.DOMAIN:
            child_id = identifier[1]
            break

    if not child_id:
        return {"error": "Could not determine child_id from device identifiers"}

    child = coordinator.get_child(child_id)
    if not child:
        return {"error": f"Child data not found for child_id: {child_id}"}

    return {
        "child_id": child_id,
        "child": child,
        "sessions": coordinator.get_sessions_for_child(child_id),
        "map_nodes": coordinator.get_map_nodes_for_child(child_id),
        "buddy": coordinator.get_buddy_for_child(child_id),
        "wallets": {
            category: coordinator.get_wallet(child_id, category)
            for category in const.SKIN_CATEGORIES
        },
        "owned_skins": coordinator.get_owned_skins_for_child(child_id),
        "discovered_forms": coordinator.get_discovered_forms_for_child(child_id),
    }
