# File: helpers/entity_helpers.py
"""Entity registry and signal helper functions for KidsTraining.

All functions here require a `hass` object or build names that are only
meaningful inside Home Assistant.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.config_entries import ConfigEntryState
from homeassistant.helpers.entity_registry import (
    async_entries_for_config_entry,
    async_get as async_get_entity_registry,
)

from .. import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


# ==============================================================================
# Event Signal Helpers (Manager Communication)
# ==============================================================================


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Format: 'kidstraining_{entry_id}_{suffix}'

    Each config entry gets its own signal namespace, so managers of two
    instances never see each other's events.

    Args:
        entry_id: ConfigEntry.entry_id from coordinator
        suffix: Signal suffix constant from const.py (e.g., SIGNAL_SUFFIX_LEVEL_UP)

    Returns:
        Signal name string
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


# ==============================================================================
# Entry Lookup
# ==============================================================================


def get_first_kidstraining_entry(hass: HomeAssistant) -> str | None:
    """Get the entry_id of the first loaded KidsTraining config entry."""
    for entry in hass.config_entries.async_entries(const.DOMAIN):
        if entry.state is ConfigEntryState.LOADED:
            return entry.entry_id
    return None


# ==============================================================================
# Entity Cleanup
# ==============================================================================


def remove_entities_by_item_id(
    hass: HomeAssistant,
    entry_id: str,
    item_id: str,
) -> int:
    """Remove all entities whose unique_id references the given item_id.

    Called when a child is removed. Uses delimiter matching so that
    ``child_1`` never matches ``child_10``.

    Returns:
        Count of removed entities.
    """
    ent_reg = async_get_entity_registry(hass)
    prefix = f"{entry_id}_"
    removed_count = 0

    for entity_entry in async_entries_for_config_entry(ent_reg, entry_id):
        unique_id = str(entity_entry.unique_id)
        if not unique_id.startswith(prefix):
            continue
        if f"_{item_id}_" in unique_id or unique_id.endswith(f"_{item_id}"):
            ent_reg.async_remove(entity_entry.entity_id)
            removed_count += 1
            const.LOGGER.debug(
                "DEBUG: Removed entity %s (uid: %s) for deleted item %s",
                entity_entry.entity_id,
                unique_id,
                item_id,
            )

    if removed_count:
        const.LOGGER.info(
            "INFO: Removed %d entities for deleted item %s", removed_count, item_id
        )
    return removed_count
