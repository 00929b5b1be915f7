# File: storage_manager.py
"""Handles persistent data storage for the KidsTraining integration.

Uses Home Assistant's Storage helper to save and load the whole training
snapshot as one versioned envelope::

    {"version": APP_STATE_VERSION, "saved_at": "<iso>", "state": {...}}

A stored envelope with any other version, or one that is malformed, is
discarded and replaced by a fresh seed state. There is no migration path.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store

from . import const, data_builders as db
from .utils.dt_utils import dt_now_utc


class KidsTrainingStorageManager:
    """Manages loading, saving, and accessing the snapshot in HA storage.

    The in-memory snapshot is authoritative. Saves are write-behind: callers
    replace the snapshot with ``set_data`` and then either await
    ``async_save`` or fire ``async_schedule_save``.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        storage_key: str = const.STORAGE_KEY,
        on_save: Callable[[bool], None] | None = None,
    ) -> None:
        """Initialize the storage manager.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).
            on_save: Optional callback invoked with the outcome of every save.
        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}
        self._on_save = on_save

    def get_default_structure(self) -> dict[str, Any]:
        """Return the seed state: default activities and no children."""
        return db.build_seed_state()

    def _unwrap(self, stored: Any) -> dict[str, Any] | None:
        """Return the state inside a stored envelope, or None if unusable."""
        if not isinstance(stored, dict):
            const.LOGGER.warning(
                "WARNING: Stored snapshot is not an object, discarding"
            )
            return None
        version = stored.get(const.DATA_ENVELOPE_VERSION)
        if version != const.APP_STATE_VERSION:
            const.LOGGER.warning(
                "WARNING: Stored snapshot version %s does not match %s, discarding",
                version,
                const.APP_STATE_VERSION,
            )
            return None
        state = stored.get(const.DATA_ENVELOPE_STATE)
        if not isinstance(state, dict):
            const.LOGGER.warning("WARNING: Stored snapshot has no state, discarding")
            return None
        return state

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        Falls back to the seed state when nothing is stored, when the stored
        envelope is unusable, or when reading fails.
        """
        const.LOGGER.debug(
            "DEBUG: KidsTrainingStorageManager: Loading data from storage"
        )
        try:
            stored = await self._store.async_load()
        except (OSError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Failed to read storage %s: %s. Starting from a fresh state",
                self._storage_key,
                err,
            )
            stored = None

        if stored is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = self.get_default_structure()
            return

        state = self._unwrap(stored)
        if state is None:
            self._data = self.get_default_structure()
            return

        self._data = db.ensure_state_shape(state)
        const.LOGGER.debug(
            "DEBUG: Loaded existing data from storage: %s",
            {
                "children": len(self._data.get(const.DATA_CHILDREN, {})),
                "activities": len(self._data.get(const.DATA_ACTIVITIES, {})),
                "sessions": len(self._data.get(const.DATA_SESSIONS, {})),
            },
        )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory snapshot."""
        return self._data

    def set_data(self, new_data: dict[str, Any]) -> None:
        """Replace the entire in-memory snapshot."""
        const.LOGGER.debug(
            "DEBUG: Storage manager set_data called with %s children, %s sessions",
            len(new_data.get(const.DATA_CHILDREN, {})),
            len(new_data.get(const.DATA_SESSIONS, {})),
        )
        self._data = new_data

    def _envelope(self) -> dict[str, Any]:
        return {
            const.DATA_ENVELOPE_VERSION: const.APP_STATE_VERSION,
            const.DATA_ENVELOPE_SAVED_AT: dt_now_utc().isoformat(),
            const.DATA_ENVELOPE_STATE: self._data,
        }

    def _notify(self, success: bool) -> None:
        if self._on_save is not None:
            self._on_save(success)

    async def async_save(self) -> bool:
        """Save the current snapshot to storage.

        Errors are logged and swallowed; the in-memory snapshot stays
        authoritative and no retry is attempted.

        Returns:
            True if the write succeeded.
        """
        try:
            await self._store.async_save(self._envelope())
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s. "
                "Data contains types that cannot be converted to JSON",
                err,
            )
        except ValueError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data format: %s. "
                "Data structure may be corrupted",
                err,
            )
        else:
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
            self._notify(True)
            return True
        self._notify(False)
        return False

    def async_schedule_save(self) -> None:
        """Schedule a save without waiting for it."""
        self.hass.async_create_task(self.async_save())

    async def async_clear_data(self) -> None:
        """Reset to the seed state and save it."""
        const.LOGGER.warning(
            "WARNING: Clearing all KidsTraining data and resetting storage"
        )
        self._data = self.get_default_structure()
        await self.async_save()

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely.

        Used when the integration is removed. Clears in-memory data first, then
        removes the file through the Store API.
        """
        await self.async_clear_data()

        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s",
                self._store.path,
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
