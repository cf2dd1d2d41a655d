"""Config flow for the UCWA integration."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from ucwa_lib import ClientConfig, HttpConduit, UcwaClient
from ucwa_lib.errors import (
    AuthenticationError,
    DiscoveryError,
    InvalidArgument,
    TransportError,
    UcwaError,
)
import voluptuous as vol

from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.selector import selector

from .const import CONF_CONTACTS, DOMAIN
from .hub import parse_contacts

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_USERNAME): cv.string,
        vol.Required(CONF_PASSWORD): selector({"text": {"type": "password"}}),
        vol.Optional(CONF_CONTACTS, default=""): cv.string,
    }
)

STEP_REAUTH_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_PASSWORD): selector({"text": {"type": "password"}}),
    }
)


class UcwaConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for UCWA."""

    VERSION = 1
    MINOR_VERSION = 1

    def __init__(self) -> None:
        """Initialize the flow."""
        self._reauth_entry: Any | None = None

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}
        if user_input is not None:
            username = user_input[CONF_USERNAME].strip()
            await self.async_set_unique_id(username.lower())
            self._abort_if_unique_id_configured()
            errors = await self._async_validate(username, user_input[CONF_PASSWORD])
            if not errors:
                return self.async_create_entry(
                    title=username,
                    data={
                        CONF_USERNAME: username,
                        CONF_PASSWORD: user_input[CONF_PASSWORD],
                        CONF_CONTACTS: parse_contacts(user_input.get(CONF_CONTACTS)),
                    },
                )

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )

    async def async_step_reauth(
        self, entry_data: Mapping[str, Any]
    ) -> ConfigFlowResult:
        """Handle a rejected password."""
        entry_id = self.context.get("entry_id")
        self._reauth_entry = (
            self.hass.config_entries.async_get_entry(entry_id)
            if entry_id is not None
            else None
        )
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for a new password."""
        errors: dict[str, str] = {}
        if user_input is not None:
            entry = self._reauth_entry
            if entry is None:
                return self.async_abort(reason="missing_context")
            username = entry.data[CONF_USERNAME]
            errors = await self._async_validate(username, user_input[CONF_PASSWORD])
            if not errors:
                self.hass.config_entries.async_update_entry(
                    entry,
                    data={**entry.data, CONF_PASSWORD: user_input[CONF_PASSWORD]},
                )
                await self.hass.config_entries.async_reload(entry.entry_id)
                return self.async_abort(reason="reauth_successful")

        return self.async_show_form(
            step_id="reauth_confirm",
            data_schema=STEP_REAUTH_DATA_SCHEMA,
            errors=errors,
        )

    async def _async_validate(self, username: str, password: str) -> dict[str, str]:
        """Sign in once and sign out again; return form errors."""
        errors: dict[str, str] = {}
        client = _create_client(self.hass)
        try:
            result = await client.async_sign_in(username, password)
            result.unwrap()
        except InvalidArgument:
            errors["base"] = "invalid_username"
        except AuthenticationError:
            errors["base"] = "invalid_auth"
        except (DiscoveryError, TransportError):
            errors["base"] = "cannot_connect"
        except UcwaError:
            _LOGGER.exception("Unexpected error validating %s", username)
            errors["base"] = "unknown"
        finally:
            if client.is_authenticated:
                await client.async_sign_out()
            await client.async_close()
        return errors


def _create_client(hass: Any) -> UcwaClient:
    """Create a configured client instance."""
    config = ClientConfig(user_agent="Home Assistant")
    return UcwaClient(
        config,
        conduit=HttpConduit(
            session=async_get_clientsession(hass),
            timeout_s=config.request_timeout_s,
        ),
    )
