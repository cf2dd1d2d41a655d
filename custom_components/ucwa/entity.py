"""Shared entity helpers for the UCWA integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo

from .const import DOMAIN, MANUFACTURER, MODEL
from .hub import UcwaHub


def device_info_for_entry(hub: UcwaHub, entry: ConfigEntry) -> DeviceInfo:
    """Build device info for the signed-in account."""
    return DeviceInfo(
        identifiers={(DOMAIN, unique_base(hub, entry))},
        name=entry.title or hub.username,
        manufacturer=MANUFACTURER,
        model=MODEL,
        entry_type=DeviceEntryType.SERVICE,
    )


def unique_base(hub: UcwaHub, entry: ConfigEntry) -> str:
    """Return the stable unique ID base for this config entry."""
    if entry.unique_id:
        return entry.unique_id
    return hub.username.lower()


def build_unique_id(base: str, domain: str, key: str) -> str:
    """Build a stable unique ID in <account>:<domain>:<key> format."""
    return f"{base}:{domain}:{key}"
