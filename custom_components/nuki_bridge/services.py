"""Service for sending {topic, payload} messages to a lock or the bridge."""

from __future__ import annotations

from typing import Any

import voluptuous as vol

from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from .const import (
    ATTR_DEVICE_ID,
    ATTR_ENTRY_ID,
    ATTR_PAYLOAD,
    ATTR_TOPIC,
    DATA_HUB,
    DOMAIN,
    SERVICE_SEND_MESSAGE,
)
from .hub import NukiHub


SEND_MESSAGE_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_TOPIC): cv.string,
        vol.Optional(ATTR_PAYLOAD): vol.Any(dict, list, str, int, float, bool, None),
        vol.Optional(ATTR_DEVICE_ID): vol.Coerce(str),
        vol.Optional(ATTR_ENTRY_ID): cv.string,
    }
)


def async_setup_services(hass: HomeAssistant) -> None:
    """Register the integration services once."""
    if hass.services.has_service(DOMAIN, SERVICE_SEND_MESSAGE):
        return

    async def _async_send_message(call: ServiceCall) -> ServiceResponse:
        hub = _resolve_hub(hass, call.data.get(ATTR_ENTRY_ID), call.data.get(ATTR_DEVICE_ID))
        result = await hub.async_send_message(
            call.data[ATTR_TOPIC],
            call.data.get(ATTR_PAYLOAD),
            call.data.get(ATTR_DEVICE_ID),
        )
        response: dict[str, Any] = {"ok": result.ok}
        if result.ok:
            response["payload"] = result.data
        else:
            response["error"] = str(result.error)
        return response

    hass.services.async_register(
        DOMAIN,
        SERVICE_SEND_MESSAGE,
        _async_send_message,
        schema=SEND_MESSAGE_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )


def _resolve_hub(hass: HomeAssistant, entry_id: str | None, device_id: str | None) -> NukiHub:
    entries: dict[str, dict[str, Any]] = hass.data.get(DOMAIN, {})
    if entry_id is not None:
        data = entries.get(entry_id)
        if data is None:
            raise HomeAssistantError(f"Unknown bridge entry {entry_id}")
        return data[DATA_HUB]
    hubs: list[NukiHub] = [data[DATA_HUB] for data in entries.values() if DATA_HUB in data]
    if device_id is not None:
        for hub in hubs:
            if hub.get_device(str(device_id)) is not None:
                return hub
        raise HomeAssistantError(f"Device {device_id} is not known to any bridge")
    if len(hubs) != 1:
        raise HomeAssistantError("Several bridges are configured; pass entry_id")
    return hubs[0]
