"""Shared entity helpers for the Nuki bridge integration."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.device_registry import DeviceInfo

from nuki_lib import Device

from .const import DEVICE_TYPE_MODELS, DOMAIN, EVENT_MESSAGE, MANUFACTURER
from .hub import NukiHub


class HassSubscriber:
    """
    Core subscriber owned by an entity.

    Every message is handed to the entity and re-emitted on the event bus so
    automations can react to replies and state changes.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        handler_id: str,
        name: str,
        on_message: Callable[[dict[str, Any]], None] | None = None,
    ) -> None:
        self._hass = hass
        self.handler_id = handler_id
        self.name = name
        self._on_message = on_message

    def send(self, message: dict[str, Any]) -> None:
        if self._on_message is not None:
            self._on_message(message)
        self._hass.bus.async_fire(EVENT_MESSAGE, {**message, "handler_id": self.handler_id})


def bridge_device_info(hub: NukiHub, entry: ConfigEntry) -> DeviceInfo:
    """Device info for the bridge itself."""
    return DeviceInfo(
        identifiers={(DOMAIN, hub.bridge_id)},
        name=entry.title,
        manufacturer=MANUFACTURER,
        model="Bridge",
    )


def lock_device_info(hub: NukiHub, device: Device) -> DeviceInfo:
    """Device info for a lock reached through the bridge."""
    return DeviceInfo(
        identifiers={(DOMAIN, f"{hub.bridge_id}:{device.device_id}")},
        name=device.name,
        manufacturer=MANUFACTURER,
        model=DEVICE_TYPE_MODELS.get(device.device_type or 0, "Smart Lock"),
        via_device=(DOMAIN, hub.bridge_id),
    )


def build_unique_id(base: str, domain: str, item_id: int | str) -> str:
    """Build a stable unique ID in <bridge>:<domain>:<id> format."""
    return f"{base}:{domain}:{item_id}"
