# File: flow_helpers.py
"""Schema builders shared by the config and options flows."""

from typing import Optional

import voluptuous as vol
from homeassistant.helpers import selector

from . import const


def default_options() -> dict:
    """Return the options of a freshly created entry."""
    return {
        const.CONF_ENABLE_GACHA: const.DEFAULT_ENABLE_GACHA,
        const.CONF_ENABLE_MEME_SKINS: const.DEFAULT_ENABLE_MEME_SKINS,
        const.CONF_UPDATE_INTERVAL: const.DEFAULT_UPDATE_INTERVAL,
    }


def build_general_options_schema(default: Optional[dict] = None) -> vol.Schema:
    """Build schema for the gacha switches and the update interval."""
    default = {**default_options(), **(default or {})}

    return vol.Schema(
        {
            vol.Required(
                const.CONF_ENABLE_GACHA, default=default[const.CONF_ENABLE_GACHA]
            ): selector.BooleanSelector(),
            vol.Required(
                const.CONF_ENABLE_MEME_SKINS,
                default=default[const.CONF_ENABLE_MEME_SKINS],
            ): selector.BooleanSelector(),
            vol.Required(
                const.CONF_UPDATE_INTERVAL, default=default[const.CONF_UPDATE_INTERVAL]
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    mode=selector.NumberSelectorMode.BOX,
                    min=1,
                    step=1,
                )
            ),
        }
    )
