"""Hub wrapper for the UCWA client lifecycle."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
import contextlib
import logging

from ucwa_lib import ClientConfig, HttpConduit, Presence, UcwaClient
from ucwa_lib.errors import AuthenticationError, UcwaError

from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .const import RECONNECT_MAX_DELAY

_LOGGER = logging.getLogger(__name__)


def normalize_contact(contact: str) -> str:
    """Return contact as a sip: uri."""
    contact = contact.strip()
    if not contact:
        return contact
    return contact if contact.lower().startswith("sip:") else f"sip:{contact}"


def parse_contacts(value: str | Iterable[str] | None) -> list[str]:
    """Split a comma separated contact list into unique sip: uris."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else list(value)
    contacts: list[str] = []
    for item in items:
        contact = normalize_contact(str(item))
        if contact and contact not in contacts:
            contacts.append(contact)
    return contacts


class UcwaHub:
    """Manage a single signed-in UCWA client."""

    def __init__(
        self,
        hass: HomeAssistant,
        username: str,
        password: str,
        contacts: Iterable[str],
    ) -> None:
        """Initialize the hub wrapper."""
        self._hass = hass
        self._username = username
        self._password = password
        self._contacts = parse_contacts(list(contacts))
        self._client: UcwaClient | None = None
        self._presence: dict[str, Presence] = {}
        self._callbacks: list[Callable[[], None]] = []
        self._presence_unsubscribe: Callable[[], None] | None = None
        self._connect_lock = asyncio.Lock()
        self._reconnect_task: asyncio.Task[None] | None = None
        self._reconnect_attempts = 0
        self._stopping = False
        self._unavailable_logged = False

    @property
    def client(self) -> UcwaClient | None:
        """Return the underlying client."""
        return self._client

    @property
    def username(self) -> str:
        return self._username

    @property
    def contacts(self) -> list[str]:
        return list(self._contacts)

    @property
    def is_ready(self) -> bool:
        """Return if the client is signed in and receiving events."""
        client = self._client
        return client is not None and client.is_authenticated and client.events.active

    @property
    def presence(self) -> dict[str, Presence]:
        """Return the latest presence by contact uri."""
        return dict(self._presence)

    async def async_connect(self) -> None:
        """Sign in and subscribe to contact presence."""
        self._stopping = False
        await self._async_connect()

    async def _async_connect(self) -> None:
        async with self._connect_lock:
            await self._async_disconnect()
            client = _create_client(self._hass)
            self._client = client
            try:
                result = await client.async_sign_in(self._username, self._password)
                result.unwrap()
                self._presence_unsubscribe = client.subscribe_presence(
                    self._handle_presence
                )
                if self._contacts:
                    subscription = await client.async_subscribe_presence(self._contacts)
                    subscription.unwrap()
                client.events.on_stopped = self._handle_events_stopped
                if self._unavailable_logged:
                    _LOGGER.info("UCWA connection restored")
                    self._unavailable_logged = False
            except Exception:
                with contextlib.suppress(Exception):
                    await client.async_close()
                self._client = None
                raise
        self._notify()

    async def async_disconnect(self) -> None:
        """Sign out and release the client."""
        self._stopping = True
        if self._reconnect_task is not None:
            self._reconnect_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._reconnect_task
            self._reconnect_task = None
        await self._async_disconnect(sign_out=True)

    async def _async_disconnect(self, *, sign_out: bool = False) -> None:
        client = self._client
        self._client = None
        if self._presence_unsubscribe is not None:
            self._presence_unsubscribe()
            self._presence_unsubscribe = None
        if client is None:
            return
        client.events.on_stopped = None
        if sign_out and client.is_authenticated:
            result = await client.async_sign_out()
            if not result.ok:
                _LOGGER.debug("Sign out failed: %s", result.error)
        await client.async_close()
        self._log_unavailable()

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a callback for presence and availability changes."""
        self._callbacks.append(callback)

        def _unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return _unsubscribe

    def _handle_presence(self, presence: Presence) -> None:
        """Handle a presence update from the client."""
        if presence.uri is None:
            return
        _LOGGER.debug("Presence for %s: %s", presence.uri, presence.availability)
        self._store_presence(presence)
        self._notify()

    def _store_presence(self, presence: Presence) -> None:
        if presence.uri is not None:
            self._presence[presence.uri.lower()] = presence

    def _notify(self) -> None:
        for cb in list(self._callbacks):
            try:
                cb()
            except Exception:
                _LOGGER.exception("Error in hub callback")

    def _handle_events_stopped(self) -> None:
        """Event polling ended on its own; sign in again."""
        self._log_unavailable()
        self._notify()
        self._hass.loop.call_soon_threadsafe(self._schedule_reconnect)

    @callback
    def _schedule_reconnect(self) -> None:
        if self._stopping:
            return
        if self._reconnect_task is not None and not self._reconnect_task.done():
            return
        _LOGGER.debug("Creating reconnect task")
        self._reconnect_task = self._hass.async_create_task(
            self._async_reconnect_loop()
        )

    def _log_unavailable(self) -> None:
        if self._unavailable_logged:
            return
        _LOGGER.info("UCWA connection lost")
        self._unavailable_logged = True

    async def _async_reconnect_loop(self) -> None:
        """Sign in again with exponential backoff until successful or stopped."""
        while not self._stopping:
            _LOGGER.debug("Reconnect attempt %s starting", self._reconnect_attempts + 1)
            try:
                await self._async_connect()
            except AuthenticationError as err:
                _LOGGER.error("Reconnect aborted: %s", err)
                return
            except UcwaError as err:
                _LOGGER.debug("Reconnect attempt failed: %s", err)
            else:
                self._reconnect_attempts = 0
                return
            self._reconnect_attempts += 1
            delay = min(RECONNECT_MAX_DELAY, 2**self._reconnect_attempts)
            _LOGGER.debug(
                "Reconnect attempt %s sleeping for %s seconds",
                self._reconnect_attempts,
                delay,
            )
            await asyncio.sleep(delay)


def _create_client(hass: HomeAssistant) -> UcwaClient:
    """Create a client sharing Home Assistant's aiohttp session."""
    config = ClientConfig(user_agent="Home Assistant", logger_name=__name__)
    conduit = HttpConduit(
        session=async_get_clientsession(hass),
        timeout_s=config.request_timeout_s,
    )
    return UcwaClient(config, conduit=conduit)
