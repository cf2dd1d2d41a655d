"""Binary sensors for UCWA contact presence."""

from __future__ import annotations

import logging
from typing import Any

from ucwa_lib import Presence

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DATA_COORDINATOR, DATA_HUB, DOMAIN, ONLINE_AVAILABILITY
from .coordinator import UcwaDataUpdateCoordinator
from .entity import build_unique_id, device_info_for_entry, unique_base
from .hub import UcwaHub

_LOGGER = logging.getLogger(__name__)

_ICON_BY_AVAILABILITY = {
    "Online": "mdi:account-check",
    "IdleOnline": "mdi:account-clock",
    "Busy": "mdi:account-alert",
    "IdleBusy": "mdi:account-alert-outline",
    "DoNotDisturb": "mdi:account-cancel",
    "BeRightBack": "mdi:account-arrow-right",
    "Away": "mdi:account-clock-outline",
    "Offline": "mdi:account-off",
}


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up UCWA presence binary sensors from a config entry."""
    data = hass.data[DOMAIN][entry.entry_id]
    hub: UcwaHub = data[DATA_HUB]
    coordinator: UcwaDataUpdateCoordinator = data[DATA_COORDINATOR]
    entities = [
        UcwaPresenceBinarySensor(coordinator, hub, entry, contact)
        for contact in hub.contacts
    ]
    _LOGGER.debug("Adding %s presence entities", len(entities))
    if entities:
        async_add_entities(entities)


class UcwaPresenceBinarySensor(
    CoordinatorEntity[UcwaDataUpdateCoordinator], BinarySensorEntity
):
    """Whether a contact is online."""

    _attr_device_class = BinarySensorDeviceClass.PRESENCE
    _attr_has_entity_name = True
    _attr_translation_key = "presence"

    def __init__(
        self,
        coordinator: UcwaDataUpdateCoordinator,
        hub: UcwaHub,
        entry: ConfigEntry,
        contact: str,
    ) -> None:
        """Initialize the presence entity."""
        super().__init__(coordinator)
        self._hub = hub
        self._contact = contact
        self._attr_name = _contact_name(contact)
        self._attr_unique_id = build_unique_id(
            unique_base(hub, entry),
            "presence",
            contact.lower(),
        )
        self._attr_device_info = device_info_for_entry(hub, entry)

    @property
    def is_on(self) -> bool | None:
        """Return if the contact is online."""
        presence = self._presence()
        if presence is None or presence.availability is None:
            return None
        return presence.availability == ONLINE_AVAILABILITY

    @property
    def icon(self) -> str | None:
        presence = self._presence()
        if presence is None:
            return None
        return _ICON_BY_AVAILABILITY.get(presence.availability or "")

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return additional state attributes."""
        presence = self._presence()
        if presence is None:
            return {"uri": self._contact}
        return {
            "uri": self._contact,
            "availability": presence.availability,
            "activity": presence.activity,
        }

    @property
    def available(self) -> bool:
        """Return if the entity is available."""
        return self._hub.is_ready

    def _presence(self) -> Presence | None:
        snapshot = self.coordinator.data
        if not snapshot:
            return None
        return snapshot.get(self._contact.lower())


def _contact_name(contact: str) -> str:
    """Return the user part of a sip: uri."""
    address = contact[4:] if contact.lower().startswith("sip:") else contact
    return address.split("@", 1)[0]
