"""Lock entities for Nuki devices behind the bridge."""

from __future__ import annotations

import logging
from typing import Any

from nuki_lib import LockAction, LockState

from homeassistant.components.lock import LockEntity, LockEntityFeature
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import NukiDataUpdateCoordinator
from .entity import HassSubscriber, build_unique_id, lock_device_info
from .hub import NukiHub

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up Nuki locks from a config entry."""
    data = hass.data[DOMAIN][entry.entry_id]
    hub: NukiHub = data[DATA_HUB]
    coordinator: NukiDataUpdateCoordinator = data[DATA_COORDINATOR]
    known_ids: set[str] = set()

    def _async_add_locks() -> None:
        entities: list[NukiLock] = []
        for device in hub.devices:
            if device.device_id in known_ids:
                continue
            known_ids.add(device.device_id)
            entities.append(NukiLock(coordinator, hub, device.device_id))
        if entities:
            _LOGGER.debug("Adding %s lock entities", len(entities))
            async_add_entities(entities)

    _async_add_locks()
    entry.async_on_unload(coordinator.async_add_listener(_async_add_locks))


class NukiLock(CoordinatorEntity[NukiDataUpdateCoordinator], LockEntity):
    """A Nuki lock; registered as the device subscriber for its lock."""

    _attr_has_entity_name = True
    _attr_name = None
    _attr_supported_features = LockEntityFeature.OPEN

    def __init__(
        self,
        coordinator: NukiDataUpdateCoordinator,
        hub: NukiHub,
        device_id: str,
    ) -> None:
        """Initialize the lock."""
        super().__init__(coordinator)
        self._hub = hub
        self._device_id = device_id
        device = hub.get_device(device_id)
        self._attr_unique_id = build_unique_id(hub.bridge_id, "lock", device_id)
        if device is not None:
            self._attr_device_info = lock_device_info(hub, device)
        self._subscriber = HassSubscriber(
            coordinator.hass,
            self._attr_unique_id,
            device.name if device is not None else device_id,
            self._handle_message,
        )
        self._last_message: dict[str, Any] | None = None

    async def async_added_to_hass(self) -> None:
        """Register as device subscriber once the entity is live."""
        await super().async_added_to_hass()
        self._hub.add_device_subscriber(self._device_id, self._subscriber)

    async def async_will_remove_from_hass(self) -> None:
        """Deregister; in-flight results for this entity are dropped."""
        self._hub.remove_device_subscriber(self._device_id, self._subscriber)
        await super().async_will_remove_from_hass()

    @callback
    def _handle_message(self, message: dict[str, Any]) -> None:
        self._last_message = message
        if self.hass is not None:
            self.async_write_ha_state()

    @property
    def _lock_state(self) -> LockState | None:
        device = self._hub.get_device(self._device_id)
        return device.last_lock_state if device is not None else None

    @property
    def available(self) -> bool:
        return self._hub.is_ready and self._hub.get_device(self._device_id) is not None

    @property
    def is_locked(self) -> bool | None:
        state = self._lock_state
        if state is None:
            return None
        return state is LockState.LOCKED

    @property
    def is_locking(self) -> bool | None:
        return self._lock_state is LockState.LOCKING

    @property
    def is_unlocking(self) -> bool | None:
        return self._lock_state in (LockState.UNLOCKING, LockState.UNLATCHING)

    @property
    def is_open(self) -> bool | None:
        return self._lock_state is LockState.UNLATCHED

    @property
    def is_jammed(self) -> bool | None:
        return self._lock_state is LockState.MOTOR_BLOCKED

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        device = self._hub.get_device(self._device_id)
        attributes: dict[str, Any] = {"nuki_id": self._device_id}
        if device is None:
            return attributes
        state = device.last_lock_state
        attributes["lock_state"] = state.name if state is not None else None
        attributes["device_type"] = device.device_type
        if self._last_message is not None:
            attributes["last_topic"] = self._last_message.get("topic")
        return attributes

    async def async_lock(self, **kwargs: Any) -> None:
        await self._async_action(LockAction.LOCK)

    async def async_unlock(self, **kwargs: Any) -> None:
        await self._async_action(LockAction.UNLOCK)

    async def async_open(self, **kwargs: Any) -> None:
        await self._async_action(LockAction.UNLATCH)

    async def _async_action(self, action: LockAction) -> None:
        await self._hub.async_lock_action(self._device_id, action, origin=self._subscriber)
        self.async_write_ha_state()
