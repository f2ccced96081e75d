"""Configuration for the Bravia remote client.

Configuration arrives as a plain mapping (from a settings file, query string
or UI form) and is validated with a voluptuous schema before a client is
built from it.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import voluptuous as vol

from .api import BraviaConfigurationError
from .const import (
    CONF_HOSTNAME,
    CONF_MODE,
    CONF_POLL_INTERVAL,
    CONF_PSK,
    CONF_STORAGE_PATH,
    CONF_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TIMEOUT,
)
from .models import AuthMode


def _non_empty_str(value: Any) -> str:
    value = vol.Coerce(str)(value).strip()
    if not value:
        error_msg = "value must not be empty"
        raise vol.Invalid(error_msg)
    return value


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOSTNAME): _non_empty_str,
        vol.Optional(CONF_MODE, default=AuthMode.PIN.value): vol.All(
            vol.Lower, vol.In([mode.value for mode in AuthMode]), vol.Coerce(AuthMode)
        ),
        vol.Optional(CONF_PSK, default=None): vol.Any(None, _non_empty_str),
        vol.Optional(CONF_TIMEOUT, default=DEFAULT_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)
        ),
        vol.Optional(CONF_POLL_INTERVAL, default=DEFAULT_POLL_INTERVAL): vol.All(
            vol.Coerce(float), vol.Range(min=0)
        ),
        vol.Optional(CONF_STORAGE_PATH, default=None): vol.Any(None, vol.Coerce(Path)),
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True)
class BraviaConfig:
    """Validated settings for one television."""

    hostname: str
    """LAN hostname or IP address of the television."""
    mode: AuthMode = AuthMode.PIN
    """Pairing mode, fixed for the lifetime of a client."""
    psk: str | None = None
    """Pre-shared key, required when ``mode`` is PSK. Never persisted."""
    timeout: float = DEFAULT_TIMEOUT
    """Request deadline in seconds."""
    poll_interval: float = DEFAULT_POLL_INTERVAL
    """Delay between power-status polls in seconds."""
    storage_path: Path | None = None
    """Optional JSON file used to persist PIN sessions."""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BraviaConfig":
        """Validate a raw mapping and build a config from it.

        Raises:
            BraviaConfigurationError: If the mapping fails validation.

        """
        try:
            validated = CONFIG_SCHEMA(dict(data))
        except vol.Invalid as err:
            error_msg = f"Invalid configuration: {err}"
            raise BraviaConfigurationError(error_msg) from err

        config = cls(**validated)
        config.validate()
        return config

    def validate(self) -> None:
        """Check cross-field constraints.

        Raises:
            BraviaConfigurationError: If PSK mode has no key.

        """
        validate_credentials(self.mode, self.psk)


def coerce_mode(mode: AuthMode | str) -> AuthMode:
    """Return ``mode`` as an ``AuthMode``.

    Raises:
        BraviaConfigurationError: If ``mode`` is not a known pairing mode.

    """
    try:
        return AuthMode(mode)
    except ValueError as err:
        error_msg = f"Unknown auth mode: {mode}"
        raise BraviaConfigurationError(error_msg) from err


def validate_credentials(mode: AuthMode, psk: str | None) -> None:
    """Raise if ``mode`` requires a pre-shared key that is missing."""
    if mode == AuthMode.PSK and not psk:
        error_msg = 'A pre-shared key must be provided when mode is "psk"'
        raise BraviaConfigurationError(error_msg)
