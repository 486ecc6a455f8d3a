"""Diagnostics support for the Nuki bridge."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, is_dataclass
import enum
from typing import Any

from nuki_lib import redact_for_diagnostics

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import DATA_HUB, DOMAIN
from .hub import NukiHub


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    data = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    hub: NukiHub | None = data.get(DATA_HUB) if data else None
    devices = hub.devices if hub is not None else []
    cache = hub.bridge.cache.snapshot() if hub is not None else {}

    return {
        "entry_id": entry.entry_id,
        "data": redact_for_diagnostics(dict(entry.data)),
        "options": redact_for_diagnostics(dict(entry.options)),
        "bridge_ready": hub.is_ready if hub is not None else False,
        "subscriber_count": hub.bridge.registry.subscriber_count() if hub is not None else 0,
        "devices": [
            {
                "device_id": device.device_id,
                "name": device.name,
                "device_type": device.device_type,
            }
            for device in devices
        ],
        "cache": redact_for_diagnostics(_to_jsonable(cache)),
    }


def _to_jsonable(value: Any) -> Any:
    """Normalize cached state to JSON-safe types."""
    if value is None:
        return None
    if is_dataclass(value) and not isinstance(value, type):
        return {
            field.name: _to_jsonable(getattr(value, field.name))
            for field in fields(value)
        }
    if isinstance(value, Mapping):
        return {str(key): _to_jsonable(val) for key, val in value.items()}
    if isinstance(value, list | tuple):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
