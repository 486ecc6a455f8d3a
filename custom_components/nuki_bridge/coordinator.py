"""Data update coordinator for the Nuki bridge integration."""

from __future__ import annotations

import asyncio
from datetime import timedelta
import logging
from typing import Any, TypeAlias

from nuki_lib import CachedState, Observation, ObservationSource

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .const import DOMAIN
from .hub import NukiHub

_LOGGER = logging.getLogger(__name__)

StateSnapshot: TypeAlias = dict[str, CachedState]


class NukiDataUpdateCoordinator(DataUpdateCoordinator[StateSnapshot]):
    """Poll every lock and feed the samples into the dispatcher."""

    def __init__(self, hass: HomeAssistant, hub: NukiHub, entry: ConfigEntry) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            name=DOMAIN,
            config_entry=entry,
            update_interval=timedelta(seconds=hub.config.poll_interval_s),
        )
        self._hub = hub

    async def _async_update_data(self) -> StateSnapshot:
        if not self._hub.is_ready and not await self._hub.async_reload_devices():
            raise UpdateFailed("bridge not connected")
        devices = self._hub.devices
        results = await asyncio.gather(
            *(self._async_poll_device(device.device_id, device.handle) for device in devices),
            return_exceptions=True,
        )
        failures = 0
        for device, result in zip(devices, results, strict=True):
            if isinstance(result, Exception):
                failures += 1
                _LOGGER.debug("Poll failed for %s: %s", device.device_id, result)
        if devices and failures == len(devices):
            raise UpdateFailed("no lock answered the poll")
        return self._hub.bridge.cache.snapshot()

    async def _async_poll_device(self, device_id: str, handle: Any) -> None:
        dispatcher = self._hub.bridge.dispatcher
        raw_state = await handle.current_state()
        await dispatcher.ingest_observation(device_id, Observation.from_payload(raw_state), ObservationSource.POLL)
        web = self._hub.web
        if web is None:
            return
        try:
            web_state = await web.web_state(device_id)
        except Exception as err:  # noqa: BLE001
            _LOGGER.debug("Web state poll failed for %s: %s", device_id, err)
            return
        await dispatcher.ingest_observation(
            device_id, Observation.from_web_payload(web_state), ObservationSource.POLL
        )

    def push_snapshot(self) -> None:
        """Publish the cache after a webhook delivery."""
        self.async_set_updated_data(self._hub.bridge.cache.snapshot())
