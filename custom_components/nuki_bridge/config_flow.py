"""Config flow for the Nuki bridge integration."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp
import voluptuous as vol

from homeassistant.components import webhook
from homeassistant.config_entries import (
    ConfigEntry,
    ConfigFlow,
    ConfigFlowResult,
    OptionsFlow,
)
from homeassistant.const import CONF_HOST, CONF_PORT, CONF_SCAN_INTERVAL, CONF_TOKEN
from homeassistant.core import callback
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.selector import selector

from .api import NukiApiError, NukiAuthError, NukiBridgeApi, NukiWebApi
from .const import (
    CONF_BRIDGE_WEBHOOK_ID,
    CONF_CALLBACK_BASE_URL,
    CONF_DEVICE_WEBHOOK_ID,
    CONF_WEB_TOKEN,
    DEFAULT_PORT,
    DEFAULT_SCAN_INTERVAL,
    DOMAIN,
)

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): cv.string,
        vol.Required(CONF_PORT, default=DEFAULT_PORT): cv.port,
        vol.Required(CONF_TOKEN): selector({"text": {"type": "password"}}),
        vol.Optional(CONF_WEB_TOKEN): selector({"text": {"type": "password"}}),
        vol.Optional(CONF_CALLBACK_BASE_URL): cv.url,
    }
)


class NukiBridgeConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for a Nuki bridge."""

    VERSION = 1
    MINOR_VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}
        if user_input is not None:
            host = user_input[CONF_HOST]
            port = user_input[CONF_PORT]
            self._async_abort_entries_match({CONF_HOST: host, CONF_PORT: port})
            session = async_get_clientsession(self.hass)
            api = NukiBridgeApi(session, host, port, user_input[CONF_TOKEN])
            info: dict[str, Any] = {}
            try:
                devices = await api.list_devices()
                info = await api.info() or {}
                web_token = user_input.get(CONF_WEB_TOKEN)
                if web_token:
                    await NukiWebApi(session, web_token).smartlocks()
            except NukiAuthError:
                errors["base"] = "invalid_auth"
            except (NukiApiError, aiohttp.ClientError, asyncio.TimeoutError):
                errors["base"] = "cannot_connect"
            else:
                _LOGGER.debug("Bridge %s reports %s devices", host, len(devices))

            if not errors:
                server_id = (info.get("ids") or {}).get("serverId")
                await self.async_set_unique_id(str(server_id) if server_id else f"{host}:{port}")
                self._abort_if_unique_id_configured(updates={CONF_HOST: host, CONF_PORT: port})
                data = {
                    **user_input,
                    CONF_DEVICE_WEBHOOK_ID: webhook.async_generate_id(),
                    CONF_BRIDGE_WEBHOOK_ID: webhook.async_generate_id(),
                }
                return self.async_create_entry(title=f"Nuki Bridge {host}", data=data)

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: ConfigEntry) -> OptionsFlow:
        return NukiBridgeOptionsFlow()


class NukiBridgeOptionsFlow(OptionsFlow):
    """Poll interval option."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        if user_input is not None:
            return self.async_create_entry(data=user_input)
        current = self.config_entry.options.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL)
        schema = vol.Schema(
            {
                vol.Required(CONF_SCAN_INTERVAL, default=current): vol.All(
                    vol.Coerce(int), vol.Range(min=5, max=3600)
                ),
            }
        )
        return self.async_show_form(step_id="init", data_schema=schema)
