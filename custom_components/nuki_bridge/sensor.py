"""Diagnostic sensors for the Nuki bridge."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import NukiDataUpdateCoordinator
from .entity import HassSubscriber, bridge_device_info, build_unique_id
from .hub import NukiHub


@dataclass(frozen=True, slots=True, kw_only=True)
class NukiSensorDescription(SensorEntityDescription):
    """Describe a bridge sensor."""

    key: str
    value_fn: Callable[[NukiHub], Any]


SENSORS: tuple[NukiSensorDescription, ...] = (
    NukiSensorDescription(
        key="bridge_status",
        translation_key="bridge_status",
        device_class=SensorDeviceClass.ENUM,
        options=["connected", "disconnected"],
        value_fn=lambda hub: "connected" if hub.is_ready else "disconnected",
    ),
    NukiSensorDescription(
        key="device_count",
        translation_key="device_count",
        value_fn=lambda hub: len(hub.devices),
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up bridge sensors from a config entry."""
    data = hass.data[DOMAIN][entry.entry_id]
    hub: NukiHub = data[DATA_HUB]
    coordinator: NukiDataUpdateCoordinator = data[DATA_COORDINATOR]
    entities: list[SensorEntity] = [
        NukiBridgeSensor(coordinator, hub, entry, description) for description in SENSORS
    ]
    entities.append(NukiBridgeMessageSensor(coordinator, hub, entry))
    async_add_entities(entities)


class NukiBridgeSensor(CoordinatorEntity[NukiDataUpdateCoordinator], SensorEntity):
    """Representation of a bridge diagnostic value."""

    _attr_entity_category = EntityCategory.DIAGNOSTIC
    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: NukiDataUpdateCoordinator,
        hub: NukiHub,
        entry: ConfigEntry,
        description: NukiSensorDescription,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._hub = hub
        self.entity_description = description
        self._attr_unique_id = build_unique_id(hub.bridge_id, "bridge", description.key)
        self._attr_device_info = bridge_device_info(hub, entry)

    @property
    def native_value(self) -> Any:
        """Return the current value."""
        return self.entity_description.value_fn(self._hub)


class NukiBridgeMessageSensor(CoordinatorEntity[NukiDataUpdateCoordinator], SensorEntity):
    """Last bridge message; this entity is the bridge subscriber of the entry."""

    _attr_entity_category = EntityCategory.DIAGNOSTIC
    _attr_has_entity_name = True
    _attr_translation_key = "last_bridge_message"

    def __init__(
        self,
        coordinator: NukiDataUpdateCoordinator,
        hub: NukiHub,
        entry: ConfigEntry,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._hub = hub
        self._attr_unique_id = build_unique_id(hub.bridge_id, "bridge", "last_message")
        self._attr_device_info = bridge_device_info(hub, entry)
        self._subscriber = HassSubscriber(
            coordinator.hass, self._attr_unique_id, entry.title, self._handle_message
        )
        self._last_message: dict[str, Any] | None = None

    async def async_added_to_hass(self) -> None:
        """Register as the bridge subscriber."""
        await super().async_added_to_hass()
        self._hub.set_bridge_subscriber(self._subscriber)

    async def async_will_remove_from_hass(self) -> None:
        """Deregister the bridge subscriber."""
        self._hub.set_bridge_subscriber(None)
        await super().async_will_remove_from_hass()

    @callback
    def _handle_message(self, message: dict[str, Any]) -> None:
        self._last_message = message
        if self.hass is not None:
            self.async_write_ha_state()

    @property
    def native_value(self) -> str | None:
        if self._last_message is None:
            return None
        return self._last_message.get("topic")

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        message = self._last_message or {}
        return {
            "bridge": message.get("bridge"),
            "payload": message.get("payload"),
            "error": message.get("error"),
        }
