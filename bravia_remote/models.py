"""Data models for the Bravia remote client."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class AuthMode(StrEnum):
    """How the client proves its identity to the television."""

    PIN = "pin"
    PSK = "psk"


class AuthState(StrEnum):
    """Pairing state of a single client instance."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AWAITING_CHALLENGE = "awaiting_challenge"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class ServiceName(StrEnum):
    """Logical JSON-RPC service endpoints under the service root."""

    ACCESS_CONTROL = "accessControl"
    SYSTEM = "system"
    APP_CONTROL = "appControl"


class PowerState(StrEnum):
    """Normalised power state reported by the television."""

    ACTIVE = "active"
    STANDBY = "standby"


class ConnectionState(StrEnum):
    """Liveness reported by the power poller."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass
class Session:
    """Represents a completed PIN pairing with a television."""

    client_id: str
    cookie: str
    label: str

    def as_dict(self) -> dict[str, str]:
        """Return the session as a JSON-serialisable mapping."""
        return {"client_id": self.client_id, "cookie": self.cookie, "label": self.label}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Session":
        """Build a session from a stored mapping.

        Raises:
            KeyError: If ``client_id`` or ``cookie`` is missing.
            ValueError: If ``client_id`` or ``cookie`` is not a non-empty string.

        """
        client_id = data["client_id"]
        cookie = data["cookie"]
        if not isinstance(client_id, str) or not client_id:
            error_msg = f"Invalid stored client id: {client_id!r}"
            raise ValueError(error_msg)
        if not isinstance(cookie, str) or not cookie:
            error_msg = "Invalid stored session cookie"
            raise ValueError(error_msg)
        return cls(
            client_id=client_id,
            cookie=cookie,
            label=str(data.get("label") or ""),
        )


@dataclass(frozen=True)
class DiscoveredDevice:
    """A television found on the LAN by an external discovery service.

    Only ``hostname`` is used by the client.
    """

    id: str
    display_name: str  # Usually "<product> <model>"
    product: str
    model: str
    hostname: str
