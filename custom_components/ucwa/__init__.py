"""Set up the UCWA integration."""

from __future__ import annotations

import contextlib
import logging
import sys
from pathlib import Path

_VENDOR_PATH = Path(__file__).resolve().parent / "vendor" / "ucwa"
if _VENDOR_PATH.exists() and str(_VENDOR_PATH) not in sys.path:
    sys.path.insert(0, str(_VENDOR_PATH))

from ucwa_lib.errors import (
    AuthenticationError,
    InvalidArgument,
    UcwaError,
)

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME, Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed, ConfigEntryNotReady

from .const import CONF_CONTACTS, DATA_COORDINATOR, DATA_HUB, DOMAIN
from .coordinator import UcwaDataUpdateCoordinator
from .hub import UcwaHub

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [
    Platform.BINARY_SENSOR,
]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up UCWA from a config entry."""
    username = entry.data[CONF_USERNAME]
    password = entry.data.get(CONF_PASSWORD)
    if not password:
        raise ConfigEntryAuthFailed("Password is missing; reauthentication required")
    hub = UcwaHub(hass, username, password, entry.data.get(CONF_CONTACTS) or [])
    try:
        await hub.async_connect()
    except (AuthenticationError, InvalidArgument) as err:
        raise ConfigEntryAuthFailed(
            "Sign-in was rejected; reauthentication required"
        ) from err
    except UcwaError as err:
        _LOGGER.exception("Failed to sign in as %s", username)
        with contextlib.suppress(Exception):
            await hub.async_disconnect()
        raise ConfigEntryNotReady(
            "The UCWA service could not be reached; check the sign-in address"
        ) from err

    coordinator = UcwaDataUpdateCoordinator(hass, hub, entry)
    await coordinator.async_start()
    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        DATA_HUB: hub,
        DATA_COORDINATOR: coordinator,
    }
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a UCWA config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    data = hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
    if data is not None:
        coordinator: UcwaDataUpdateCoordinator | None = data.get(DATA_COORDINATOR)
        hub: UcwaHub | None = data.get(DATA_HUB)
        if coordinator is not None:
            await coordinator.async_stop()
        if hub is not None:
            await hub.async_disconnect()
    return unload_ok
