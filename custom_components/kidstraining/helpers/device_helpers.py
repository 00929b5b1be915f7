"""DeviceInfo construction for KidsTraining entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo

from .. import const

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


def create_child_device_info(
    child_id: str, child_name: str, config_entry: ConfigEntry
) -> DeviceInfo:
    """Create device info for a child profile."""
    return DeviceInfo(
        identifiers={(const.DOMAIN, child_id)},
        name=f"{child_name} ({config_entry.title})",
        manufacturer=const.KIDSTRAINING_TITLE,
        model="Child Profile",
    )


def create_system_device_info(config_entry: ConfigEntry) -> DeviceInfo:
    """Create device info for global entities such as the treasure chest."""
    return DeviceInfo(
        identifiers={(const.DOMAIN, f"{config_entry.entry_id}_system")},
        name=f"System ({config_entry.title})",
        manufacturer=const.KIDSTRAINING_TITLE,
        model="System",
        entry_type=DeviceEntryType.SERVICE,
    )
