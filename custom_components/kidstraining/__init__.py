# File: __init__.py
"""Initialization file for the KidsTraining integration.

Handles setting up the integration, including loading the stored snapshot,
preparing the coordinator and its managers, and registering services.

Key Features:
- Config entry setup and unload support.
- Coordinator initialization for data synchronization.
- Storage management for persistent data handling.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from . import const
from .coordinator import KidsTrainingDataCoordinator
from .services import async_setup_services, async_unload_services
from .storage_manager import KidsTrainingStorageManager


def _log_save_failure(success: bool) -> None:
    if not success:
        const.LOGGER.warning(
            "WARNING: Snapshot could not be saved; in-memory data is still current"
        )


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for KidsTraining entry: %s", entry.entry_id)

    # Must run before anything computes local date keys
    const.set_default_timezone(hass)

    storage_manager = KidsTrainingStorageManager(
        hass, const.STORAGE_KEY, on_save=_log_save_failure
    )
    await storage_manager.async_initialize()

    coordinator = KidsTrainingDataCoordinator(hass, entry, storage_manager)

    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise ConfigEntryNotReady from e

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORAGE_MANAGER: storage_manager,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    const.LOGGER.info("INFO: KidsTraining setup complete for entry: %s", entry.entry_id)
    return True


async def async_unload_entry(hass, entry):
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading KidsTraining entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        entry_data = hass.data[const.DOMAIN].pop(entry.entry_id)
        # Flush the write-behind save before the entry goes away
        await entry_data[const.STORAGE_MANAGER].async_save()
        await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing KidsTraining entry: %s", entry.entry_id)

    if const.DOMAIN in hass.data and entry.entry_id in hass.data[const.DOMAIN]:
        storage_manager: KidsTrainingStorageManager = hass.data[const.DOMAIN][
            entry.entry_id
        ][const.STORAGE_MANAGER]
    else:
        storage_manager = KidsTrainingStorageManager(hass, const.STORAGE_KEY)
    await storage_manager.async_delete_storage()

    const.LOGGER.info("INFO: KidsTraining entry data cleared: %s", entry.entry_id)
