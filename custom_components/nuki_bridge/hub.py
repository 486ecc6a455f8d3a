"""Hub wrapper for the Nuki bridge lifecycle."""

from __future__ import annotations

import logging
from typing import Any

from nuki_lib import BridgeConfig, Device, LockAction, NukiBridge, Result
from nuki_lib.handles import Subscriber

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST, CONF_PORT, CONF_SCAN_INTERVAL, CONF_TOKEN
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady, HomeAssistantError
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import NukiBridgeApi, NukiWebApi
from .const import (
    CONF_BRIDGE_WEBHOOK_ID,
    CONF_CALLBACK_BASE_URL,
    CONF_DEVICE_WEBHOOK_ID,
    CONF_WEB_TOKEN,
    DEFAULT_PORT,
    DEFAULT_SCAN_INTERVAL,
)

_LOGGER = logging.getLogger(__name__)


def build_bridge_config(entry: ConfigEntry) -> BridgeConfig:
    """Translate a config entry into the core bridge configuration."""
    data = entry.data
    return BridgeConfig(
        host=data[CONF_HOST],
        port=int(data.get(CONF_PORT, DEFAULT_PORT)),
        token=data.get(CONF_TOKEN, ""),
        web_token=data.get(CONF_WEB_TOKEN) or None,
        callback_base_url=data.get(CONF_CALLBACK_BASE_URL) or None,
        device_callback_path=f"/api/webhook/{data.get(CONF_DEVICE_WEBHOOK_ID, '')}",
        bridge_callback_path=f"/api/webhook/{data.get(CONF_BRIDGE_WEBHOOK_ID, '')}",
        poll_interval_s=float(entry.options.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL)),
    )


class NukiHub:
    """Manage a single bridge and the subscribers of its entities."""

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry) -> None:
        """Initialize the hub wrapper."""
        self._hass = hass
        self._entry = entry
        self.config = build_bridge_config(entry)
        session = async_get_clientsession(hass)
        self.api = NukiBridgeApi(session, self.config.host, self.config.port, self.config.token)
        self.web = NukiWebApi(session, self.config.web_token) if self.config.web_token else None
        self.bridge = NukiBridge(
            self.config,
            self.api,
            web=self.web,
            logger=logging.getLogger(f"{__package__}.core"),
        )
        self._device_subscribers: dict[str, Subscriber] = {}
        self._bridge_subscriber: Subscriber | None = None

    @property
    def bridge_id(self) -> str:
        return self._entry.unique_id or self.config.bridge_id

    @property
    def is_ready(self) -> bool:
        return self.bridge.is_ready

    @property
    def devices(self) -> list[Device]:
        return self.bridge.devices

    def get_device(self, device_id: str) -> Device | None:
        return self.bridge.registry.find_device(device_id)

    async def async_connect(self) -> None:
        """Load the device roster and register the device webhook on the bridge."""
        result = await self.bridge.async_load_devices()
        if not result.ok:
            raise ConfigEntryNotReady(str(result.error)) from result.error
        url = self.bridge.callbacks.device_callback_url()
        if url is None:
            _LOGGER.debug("No callback base URL configured; relying on polling")
            return
        registered = await self.bridge.callbacks.ensure_callback(self.api, url)
        if not registered.ok:
            _LOGGER.warning("Could not register bridge callback: %s", registered.error)

    async def async_reload_devices(self) -> bool:
        result = await self.bridge.async_load_devices()
        return result.ok

    async def async_disconnect(self) -> None:
        """Drain every subscriber and forget cached state."""
        self._device_subscribers.clear()
        self._bridge_subscriber = None
        await self.bridge.async_shutdown()

    # --- subscribers ---

    def add_device_subscriber(self, device_id: str, subscriber: Subscriber) -> None:
        self._device_subscribers[device_id] = subscriber
        self.bridge.register_device_subscriber(device_id, subscriber)

    def remove_device_subscriber(self, device_id: str, subscriber: Subscriber) -> None:
        if self._device_subscribers.get(device_id) is subscriber:
            del self._device_subscribers[device_id]
        self.bridge.deregister_device_subscriber(subscriber)

    def set_bridge_subscriber(self, subscriber: Subscriber | None) -> None:
        if self._bridge_subscriber is not None:
            self.bridge.deregister_bridge_subscriber(self._bridge_subscriber)
        self._bridge_subscriber = subscriber
        if subscriber is not None:
            self.bridge.register_bridge_subscriber(subscriber)

    # --- commands ---

    async def async_lock_action(
        self,
        device_id: str,
        action: LockAction,
        origin: Subscriber | None = None,
    ) -> Any:
        """Run a guarded lock action; failures surface as HomeAssistantError."""
        result = await self.bridge.dispatcher.submit_action(device_id, action, origin=origin)
        if not result.ok:
            _LOGGER.warning("Lock action %s failed for %s: %s", action.name, device_id, result.error)
            raise HomeAssistantError(str(result.error)) from result.error
        return result.data

    async def async_send_message(
        self,
        topic: str,
        payload: Any = None,
        device_id: str | None = None,
    ) -> Result[Any]:
        """Route a {topic, payload} message through the entity that owns the target."""
        message = {"topic": topic, "payload": payload}
        if device_id is not None:
            subscriber = self._device_subscribers.get(str(device_id))
            if subscriber is None:
                raise HomeAssistantError(f"No lock entity is subscribed to device {device_id}")
            return await self.bridge.dispatcher.handle_device_message(subscriber, message)
        if self._bridge_subscriber is None:
            raise HomeAssistantError("The bridge sensor is not loaded")
        return await self.bridge.dispatcher.handle_bridge_message(self._bridge_subscriber, message)
