"""Set up the Nuki bridge integration."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_VENDOR_PATH = Path(__file__).resolve().parent / "vendor" / "nukibridge"
if _VENDOR_PATH.exists() and str(_VENDOR_PATH) not in sys.path:
    sys.path.insert(0, str(_VENDOR_PATH))

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.typing import ConfigType

from .const import DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import NukiDataUpdateCoordinator
from .http import NukiDeviceListView
from .hub import NukiHub
from .services import async_setup_services
from .webhook import async_register_webhooks, async_unregister_webhooks

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [
    Platform.LOCK,
    Platform.SENSOR,
]

CONFIG_SCHEMA = cv.config_entry_only_config_schema(DOMAIN)


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Register the listing view and the services once per instance."""
    hass.data.setdefault(DOMAIN, {})
    hass.http.register_view(NukiDeviceListView())
    async_setup_services(hass)
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up a Nuki bridge from a config entry."""
    hub = NukiHub(hass, entry)
    await hub.async_connect()
    _LOGGER.debug("Bridge %s ready with %s devices", hub.config.host, len(hub.devices))

    coordinator = NukiDataUpdateCoordinator(hass, hub, entry)
    await coordinator.async_config_entry_first_refresh()
    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        DATA_HUB: hub,
        DATA_COORDINATOR: coordinator,
    }
    async_register_webhooks(hass, entry, hub, coordinator)
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a Nuki bridge config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    async_unregister_webhooks(hass, entry)
    data = hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
    if data is not None:
        hub: NukiHub | None = data.get(DATA_HUB)
        if hub is not None:
            await hub.async_disconnect()
    return unload_ok


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    await hass.config_entries.async_reload(entry.entry_id)
