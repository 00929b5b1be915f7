"""Base manager class for KidsTraining managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
import copy
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import (
    async_dispatcher_connect,
    async_dispatcher_send,
)

from .. import const
from ..engines.buddy_engine import BuddyEngine
from ..helpers.entity_helpers import get_event_signal

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.core import HomeAssistant

    from ..coordinator import KidsTrainingDataCoordinator
    from ..type_defs import Snapshot


class BaseManager(ABC):
    """Base class for all KidsTraining managers with scoped event support.

    Provides:
    - Instance-scoped event emitting (emit)
    - Instance-scoped event listening (listen)
    - Automatic cleanup via coordinator's config_entry.async_on_unload
    - Copy-on-write access to the coordinator snapshot

    Data Persistence:
    - Mutations work on ``draft()`` and hand the finished copy to
      ``commit()``, which swaps it in wholesale, schedules the save and
      notifies entities.

    Subclasses must implement:
    - async_setup(): Subscribe to events, initialize state
    """

    def __init__(
        self, hass: HomeAssistant, coordinator: KidsTrainingDataCoordinator
    ) -> None:
        """Initialize manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator managing this integration instance
        """
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id

    def draft(self) -> Snapshot:
        """Return a deep copy of the current snapshot to mutate."""
        return copy.deepcopy(self.coordinator.snapshot)

    def commit(self, new_state: Snapshot) -> None:
        """Replace the coordinator snapshot with ``new_state``."""
        self.coordinator.replace_snapshot(new_state)

    # =========================================================================
    # Snapshot helpers shared by managers
    # =========================================================================

    @staticmethod
    def active_buddy_key(state: Snapshot, child_id: str) -> str:
        """Return the child's active buddy key (default buddy if unset)."""
        return state[const.DATA_ACTIVE_BUDDY].get(child_id, const.DEFAULT_BUDDY_KEY)

    @staticmethod
    def owned_skin_ids(state: Snapshot, child_id: str) -> list[str]:
        """Return the skins a child owns, default skins first."""
        owned = [
            skin_id
            for skin_id, skin in const.SKIN_CATALOG.items()
            if skin.get(const.SKIN_KEY_UNLOCK_METHOD) == const.UNLOCK_METHOD_DEFAULT
        ]
        for skin_id in state[const.DATA_OWNED_SKINS].get(child_id, []):
            if skin_id not in owned:
                owned.append(skin_id)
        return owned

    @staticmethod
    def discover_form(state: Snapshot, child_id: str, form_id: str) -> None:
        """Add ``form_id`` to the child's discovered forms if new."""
        forms = state[const.DATA_DISCOVERED_FORMS].setdefault(child_id, [])
        if form_id not in forms:
            forms.append(form_id)

    @staticmethod
    def grant_skin(state: Snapshot, child_id: str, skin_id: str) -> None:
        """Record ownership of a skin, discover its base form and seed its buddy."""
        owned = state[const.DATA_OWNED_SKINS].setdefault(child_id, [])
        if skin_id not in owned:
            owned.append(skin_id)
        BaseManager.discover_form(state, child_id, BuddyEngine.form_id(skin_id, 0))
        state[const.DATA_BUDDIES].setdefault(child_id, {}).setdefault(
            skin_id, BuddyEngine.default_progress()
        )

    # =========================================================================
    # Events
    # =========================================================================

    def emit(self, suffix: str, **payload: Any) -> None:
        """Emit instance-scoped event to other managers.

        Args:
            suffix: Signal suffix constant (e.g., const.SIGNAL_SUFFIX_LEVEL_UP)
            **payload: Event data dict passed to listeners (must be JSON-serializable)
        """
        signal = get_event_signal(self.entry_id, suffix)
        const.LOGGER.debug(
            "DEBUG: Emitting event '%s' for instance %s with payload keys: %s",
            suffix,
            self.entry_id,
            list(payload.keys()),
        )
        # Dispatcher only supports *args, so the payload travels as one dict
        async_dispatcher_send(self.hass, signal, payload)

    def listen(self, suffix: str, callback: Callable[..., Any]) -> None:
        """Subscribe to instance-scoped event with automatic cleanup.

        The subscription is removed when the config entry is unloaded.

        Args:
            suffix: Signal suffix constant to listen for
            callback: Function called with the payload dict
        """
        signal = get_event_signal(self.entry_id, suffix)
        unsub = async_dispatcher_connect(self.hass, signal, callback)
        self.coordinator.config_entry.async_on_unload(unsub)
        const.LOGGER.debug(
            "DEBUG: Manager %s listening to event '%s' for instance %s",
            self.__class__.__name__,
            suffix,
            self.entry_id,
        )

    @abstractmethod
    async def async_setup(self) -> None:
        """Set up the manager (subscribe to events, initialize state).

        Called once during coordinator initialization.
        """
