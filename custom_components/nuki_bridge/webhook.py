"""Webhook receivers for bridge callbacks."""

from __future__ import annotations

import logging

from aiohttp import web

from nuki_lib import ObservationSource, decode_device_callback, decode_json_body

from homeassistant.components import webhook
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import CONF_BRIDGE_WEBHOOK_ID, CONF_DEVICE_WEBHOOK_ID, DOMAIN
from .coordinator import NukiDataUpdateCoordinator
from .hub import NukiHub

_LOGGER = logging.getLogger(__name__)


def async_register_webhooks(
    hass: HomeAssistant,
    entry: ConfigEntry,
    hub: NukiHub,
    coordinator: NukiDataUpdateCoordinator,
) -> None:
    """Register the device route and the bridge-wide route for an entry."""

    async def _async_handle_device(
        hass: HomeAssistant, webhook_id: str, request: web.Request
    ) -> web.Response:
        body = await request.read()
        try:
            device_id, observation = decode_device_callback(body)
        except ValueError as err:
            _LOGGER.debug("Rejected device webhook body: %s", err)
            return web.Response(status=400)

        async def _process() -> None:
            await hub.bridge.dispatcher.ingest_observation(
                device_id, observation, ObservationSource.WEBHOOK
            )
            coordinator.push_snapshot()

        hass.async_create_task(_process())
        return web.Response(status=200)

    async def _async_handle_bridge(
        hass: HomeAssistant, webhook_id: str, request: web.Request
    ) -> web.Response:
        body = await request.read()
        try:
            payload = decode_json_body(body)
        except ValueError as err:
            _LOGGER.debug("Rejected bridge webhook body: %s", err)
            return web.Response(status=400)

        async def _process() -> None:
            await hub.bridge.dispatcher.ingest_bridge_event(payload)
            coordinator.push_snapshot()

        hass.async_create_task(_process())
        return web.Response(status=200)

    webhook.async_register(
        hass,
        DOMAIN,
        f"{entry.title} device callback",
        entry.data[CONF_DEVICE_WEBHOOK_ID],
        _async_handle_device,
        local_only=True,
        allowed_methods=["POST"],
    )
    webhook.async_register(
        hass,
        DOMAIN,
        f"{entry.title} bridge callback",
        entry.data[CONF_BRIDGE_WEBHOOK_ID],
        _async_handle_bridge,
        local_only=True,
        allowed_methods=["POST"],
    )


def async_unregister_webhooks(hass: HomeAssistant, entry: ConfigEntry) -> None:
    webhook.async_unregister(hass, entry.data[CONF_DEVICE_WEBHOOK_ID])
    webhook.async_unregister(hass, entry.data[CONF_BRIDGE_WEBHOOK_ID])
