# File: config_flow.py
"""Config flow for the KidsTraining integration.

A single instance with no setup fields. Children and activities are managed
through services; application settings live in the options flow.
"""

from typing import Any, Optional

from homeassistant import config_entries
from homeassistant.core import callback

from . import const
from . import flow_helpers as fh
from .options_flow import KidsTrainingOptionsFlowHandler

# pylint: disable=abstract-method


class KidsTrainingConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for KidsTraining."""

    VERSION = 1

    async def async_step_user(self, user_input: Optional[dict[str, Any]] = None):
        """Create the entry, refusing a second instance."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        if user_input is None:
            return self.async_show_form(step_id=const.CONFIG_FLOW_STEP_USER)

        const.LOGGER.debug("DEBUG: Creating %s entry", const.KIDSTRAINING_TITLE)
        return self.async_create_entry(
            title=const.KIDSTRAINING_TITLE,
            data={},
            options=fh.default_options(),
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return KidsTrainingOptionsFlowHandler(config_entry)
