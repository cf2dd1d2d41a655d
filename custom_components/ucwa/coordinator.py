"""Data update coordinator for the UCWA integration."""

from __future__ import annotations

from collections.abc import Callable
import logging

from ucwa_lib import Presence

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from .const import DOMAIN
from .hub import UcwaHub

_LOGGER = logging.getLogger(__name__)

type PresenceSnapshot = dict[str, Presence]


class UcwaDataUpdateCoordinator(DataUpdateCoordinator[PresenceSnapshot]):
    """Push presence snapshots from the hub to entities."""

    def __init__(self, hass: HomeAssistant, hub: UcwaHub, entry: ConfigEntry) -> None:
        """Initialize the coordinator."""
        super().__init__(hass, _LOGGER, name=DOMAIN, config_entry=entry)
        self._hub = hub
        self._unsubscribe: Callable[[], None] | None = None

    async def async_start(self) -> None:
        """Subscribe to hub changes and seed snapshot data."""
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._unsubscribe = self._hub.subscribe(self._handle_update)
        self._set_snapshot()

    async def async_stop(self) -> None:
        """Stop receiving hub changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle_update(self) -> None:
        """Handle hub changes on the Home Assistant event loop."""
        self.hass.loop.call_soon_threadsafe(self._process_update)

    @callback
    def _process_update(self) -> None:
        self._set_snapshot()

    def _set_snapshot(self) -> None:
        self.async_set_updated_data(self._hub.presence)
