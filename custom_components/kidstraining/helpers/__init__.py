"""Home Assistant-bound helper functions for KidsTraining.

This module contains functions that REQUIRE Home Assistant dependencies.
These helpers interact with the HA entity registry, device registry and
config entries.

NOTE: Functions that need `hass` object belong here, NOT in utils/.

Submodules:
    - entity_helpers: Dispatcher signal names, entry lookup, entity cleanup
    - device_helpers: DeviceInfo construction
"""

from . import device_helpers, entity_helpers

__all__ = ["device_helpers", "entity_helpers"]
