"""Base entity classes for KidsTraining integration."""

from __future__ import annotations

from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .coordinator import KidsTrainingDataCoordinator


class KidsTrainingCoordinatorEntity(CoordinatorEntity[KidsTrainingDataCoordinator]):
    """Base entity class for KidsTraining sensors with typed coordinator access.

    Sensors inheriting from this class get proper type hints for
    self.coordinator without boilerplate code.
    """

    @property
    def coordinator(self) -> KidsTrainingDataCoordinator:
        """Return typed coordinator.

        Uses object.__getattribute__ to access the private _coordinator attribute
        set by the parent CoordinatorEntity class.
        """
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: KidsTrainingDataCoordinator) -> None:
        """Set coordinator with proper typing.

        Args:
            value: The KidsTrainingDataCoordinator instance to set.
        """
        object.__setattr__(self, "_coordinator", value)
