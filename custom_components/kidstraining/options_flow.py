# File: options_flow.py
"""Options Flow for the KidsTraining integration.

Edits the application settings stored in the config entry options. Settings
are read live by the coordinator, so no reload is needed; a new update
interval is applied to the running coordinator directly.
"""

from datetime import timedelta

from homeassistant import config_entries

from . import const
from . import flow_helpers as fh


class KidsTrainingOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for the gacha switches and the update interval."""

    def __init__(self, _config_entry: config_entries.ConfigEntry):
        """Initialize the options flow."""
        self._entry_options: dict = {}

    def _get_coordinator(self):
        """Get the coordinator from hass.data, if the entry is loaded."""
        entry_data = self.hass.data.get(const.DOMAIN, {}).get(
            self.config_entry.entry_id
        )
        return entry_data[const.COORDINATOR] if entry_data else None

    async def async_step_init(self, user_input=None):
        """Show and save the general options."""
        self._entry_options = dict(self.config_entry.options)

        if user_input is not None:
            self._entry_options[const.CONF_ENABLE_GACHA] = user_input.get(
                const.CONF_ENABLE_GACHA, const.DEFAULT_ENABLE_GACHA
            )
            self._entry_options[const.CONF_ENABLE_MEME_SKINS] = user_input.get(
                const.CONF_ENABLE_MEME_SKINS, const.DEFAULT_ENABLE_MEME_SKINS
            )
            self._entry_options[const.CONF_UPDATE_INTERVAL] = int(
                user_input.get(
                    const.CONF_UPDATE_INTERVAL, const.DEFAULT_UPDATE_INTERVAL
                )
            )
            const.LOGGER.debug(
                "DEBUG: General Options Updated: Gacha=%s, Meme Skins=%s, "
                "Update Interval=%s",
                self._entry_options[const.CONF_ENABLE_GACHA],
                self._entry_options[const.CONF_ENABLE_MEME_SKINS],
                self._entry_options[const.CONF_UPDATE_INTERVAL],
            )
            coordinator = self._get_coordinator()
            if coordinator is not None:
                coordinator.update_interval = timedelta(
                    minutes=self._entry_options[const.CONF_UPDATE_INTERVAL]
                )
            return self.async_create_entry(title="", data=self._entry_options)

        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=fh.build_general_options_schema(self._entry_options),
        )
