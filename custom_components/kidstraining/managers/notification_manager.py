# File: notification_manager.py
"""Notification Manager for KidsTraining integration.

Bridges instance-scoped manager signals to Home Assistant bus events so
automations can react to training progress:

- SESSION_LOGGED        → kidstraining_session_logged
- LEVEL_UP              → kidstraining_level_up
- ACHIEVEMENT_UNLOCKED  → kidstraining_achievement_unlocked

Managers emit signals after their snapshot swap, so event handlers that read
the coordinator always see the committed state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import callback

from .. import const
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import KidsTrainingDataCoordinator


class NotificationManager(BaseManager):
    """Signal → bus event bridge."""

    def __init__(
        self, hass: HomeAssistant, coordinator: KidsTrainingDataCoordinator
    ) -> None:
        """Initialize the NotificationManager."""
        super().__init__(hass, coordinator)

    async def async_setup(self) -> None:
        """Subscribe to the progress signals."""
        self.listen(const.SIGNAL_SUFFIX_SESSION_LOGGED, self._on_session_logged)
        self.listen(const.SIGNAL_SUFFIX_LEVEL_UP, self._on_level_up)
        self.listen(
            const.SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED, self._on_achievement_unlocked
        )

    def _child_name(self, child_id: str | None) -> str | None:
        child = self.coordinator.snapshot[const.DATA_CHILDREN].get(child_id or "")
        return child.get(const.DATA_CHILD_NAME) if child else None

    def _fire(self, event_type: str, payload: dict[str, Any]) -> None:
        data = {
            **payload,
            const.ATTR_CHILD_NAME: self._child_name(payload.get("child_id")),
        }
        const.LOGGER.debug(
            "DEBUG: Firing %s for child %s", event_type, data.get("child_id")
        )
        self.hass.bus.async_fire(event_type, data)

    @callback
    def _on_session_logged(self, payload: dict[str, Any]) -> None:
        self._fire(const.EVENT_SESSION_LOGGED, payload)

    @callback
    def _on_level_up(self, payload: dict[str, Any]) -> None:
        self._fire(const.EVENT_LEVEL_UP, payload)

    @callback
    def _on_achievement_unlocked(self, payload: dict[str, Any]) -> None:
        info = const.ACHIEVEMENT_CATALOG.get(payload.get("achievement_id", ""), {})
        self._fire(
            const.EVENT_ACHIEVEMENT_UNLOCKED,
            {**payload, "title": info.get("title")},
        )
