"""Pairing and credential management for Bravia televisions.

PIN mode pairs through ``accessControl.actRegister`` and keeps the cookie
the television issues. PSK mode sends a pre-shared key with every request
and never pairs.
"""

from __future__ import annotations

import logging
import secrets
from typing import TYPE_CHECKING, Any

import httpx

from .api import (
    BraviaAuthChallengeError,
    BraviaAuthFailureError,
    BraviaNetworkError,
    HTTP_UNAUTHORIZED,
    build_base_url,
    build_rpc_payload,
    create_credential_headers,
    create_pin_headers,
)
from .config import coerce_mode, validate_credentials
from .const import CLIENT_ID_RANDOM_BYTES, CLIENT_LABEL, CLIENT_NICKNAME, DEFAULT_PIN
from .models import AuthMode, AuthState, ServiceName, Session

if TYPE_CHECKING:
    from .session_store import SessionStore

_LOGGER = logging.getLogger(__name__)

HTTP_OK = 200


def generate_client_id() -> str:
    """Return a fresh client identity, e.g. ``bravimote:1a2b3c4d``."""
    return f"{CLIENT_LABEL}:{secrets.token_hex(CLIENT_ID_RANDOM_BYTES)}"


def create_register_payload(client_id: str) -> dict[str, Any]:
    """Create the ``actRegister`` request body for ``client_id``.

    The request also registers the client for Wake-on-LAN.
    """
    return build_rpc_payload(
        "actRegister",
        [
            {"clientid": client_id, "nickname": CLIENT_NICKNAME, "level": "private"},
            [{"value": "yes", "function": "WOL"}],
        ],
    )


def extract_cookie(response: httpx.Response) -> str | None:
    """Extract the session cookie from the ``Set-Cookie`` headers.

    Attributes such as ``Path`` and ``max-age`` are dropped. Several cookies
    are joined the way a ``Cookie`` request header expects them.
    """
    pairs = []
    for header in response.headers.get_list("set-cookie"):
        pair = header.split(";", 1)[0].strip()
        if "=" in pair:
            pairs.append(pair)
    return "; ".join(pairs) or None


class AuthManager:
    """Drives pairing with one television and hands out credential headers.

    States:
        UNAUTHENTICATED: no working credential yet.
        AUTHENTICATING: a registration request is in flight.
        AWAITING_CHALLENGE: the television wants a PIN. ``client_id`` holds
            the identity to retry with.
        AUTHENTICATED: a cookie or key is ready for use.
        FAILED: pairing failed, or the device rejected the credential.
    """

    def __init__(
        self,
        hostname: str,
        mode: AuthMode | str,
        store: SessionStore,
        session: httpx.AsyncClient,
        psk: str | None = None,
    ) -> None:
        """Initialize the auth manager.

        A PSK client and a PIN client with a stored session start out
        authenticated without contacting the television.

        Raises:
            BraviaConfigurationError: If the mode is unknown or PSK mode has
                no key.

        """
        mode = coerce_mode(mode)
        validate_credentials(mode, psk)

        self._hostname = hostname
        self._mode = mode
        self._psk = psk
        self._store = store
        self._session = session
        self._state = AuthState.UNAUTHENTICATED
        self._client_id: str | None = None
        self._pairing: Session | None = None

        if mode == AuthMode.PSK:
            self._state = AuthState.AUTHENTICATED
            return

        stored = store.load(hostname)
        if stored is not None:
            _LOGGER.info("Reusing stored session for %s", hostname)
            self._pairing = stored
            self._client_id = stored.client_id
            self._state = AuthState.AUTHENTICATED

    @property
    def mode(self) -> AuthMode:
        """Return the pairing mode."""
        return self._mode

    @property
    def state(self) -> AuthState:
        """Return the current pairing state."""
        return self._state

    @property
    def client_id(self) -> str | None:
        """Return the client identity used for pairing, if any."""
        return self._client_id

    @property
    def session(self) -> Session | None:
        """Return the active PIN session, if any."""
        return self._pairing

    @property
    def authenticated(self) -> bool:
        """Return True if a credential is ready for use."""
        return self._state == AuthState.AUTHENTICATED

    def credential_headers(self) -> dict[str, str]:
        """Return the headers that authenticate a request.

        Raises:
            BraviaAuthFailureError: If pairing has not completed.

        """
        if self._state != AuthState.AUTHENTICATED:
            error_msg = f"Not authenticated with {self._hostname} (state: {self._state})"
            raise BraviaAuthFailureError(error_msg)
        cookie = self._pairing.cookie if self._pairing else None
        return create_credential_headers(self._mode, cookie=cookie, psk=self._psk)

    async def async_connect(
        self,
        pin: str | None = None,
        client_id: str | None = None,
    ) -> None:
        """Pair with the television, or confirm an existing credential.

        Call without arguments first. If the television asks for a PIN, a
        ``BraviaAuthChallengeError`` is raised; call again with the PIN shown
        on screen. The identity from the challenge is reused unless
        ``client_id`` says otherwise.

        Args:
            pin: PIN displayed by the television.
            client_id: Identity from a previous challenge.

        Raises:
            BraviaAuthChallengeError: If the television wants a PIN.
            BraviaAuthFailureError: If pairing was rejected.
            BraviaNetworkError: If the television could not be reached.

        """
        if self._mode == AuthMode.PSK:
            _LOGGER.debug("PSK mode needs no pairing with %s", self._hostname)
            return

        if self._state == AuthState.AUTHENTICATED and pin is None:
            _LOGGER.debug("Already paired with %s", self._hostname)
            return

        if client_id is None:
            client_id = (
                self._client_id
                if self._state == AuthState.AWAITING_CHALLENGE and self._client_id
                else generate_client_id()
            )

        await self._async_register(client_id, pin or DEFAULT_PIN)

    async def _async_register(self, client_id: str, pin: str) -> None:
        url = f"{build_base_url(self._hostname)}{ServiceName.ACCESS_CONTROL}"
        self._client_id = client_id
        self._state = AuthState.AUTHENTICATING

        _LOGGER.debug("Registering %s with %s", client_id, self._hostname)
        try:
            response = await self._session.post(
                url,
                headers=create_pin_headers(pin),
                json=create_register_payload(client_id),
            )
        except httpx.RequestError as err:
            self._state = AuthState.FAILED
            error_msg = f"Connection error pairing with {self._hostname}: {err!r}"
            raise BraviaNetworkError(error_msg) from err

        if response.status_code == HTTP_UNAUTHORIZED:
            self._state = AuthState.AWAITING_CHALLENGE
            _LOGGER.info("%s is asking for a PIN", self._hostname)
            raise BraviaAuthChallengeError(client_id)

        if response.status_code != HTTP_OK:
            self._state = AuthState.FAILED
            error_msg = f"Pairing rejected by {self._hostname}: {response.status_code}"
            raise BraviaAuthFailureError(error_msg)

        cookie = extract_cookie(response)
        if cookie is None:
            self._state = AuthState.FAILED
            error_msg = f"Pairing with {self._hostname} returned no session cookie"
            raise BraviaAuthFailureError(error_msg)

        self._pairing = Session(client_id=client_id, cookie=cookie, label=CLIENT_NICKNAME)
        self._store.save(self._hostname, self._pairing)
        self._state = AuthState.AUTHENTICATED
        _LOGGER.info("Paired with %s as %s", self._hostname, client_id)

    def mark_rejected(self, reason: str) -> None:
        """Record that the television rejected the current credential.

        The stored session is kept; call ``reset`` to clear it and pair again.
        """
        _LOGGER.warning("Credential rejected by %s: %s", self._hostname, reason)
        self._state = AuthState.FAILED

    def reset(self) -> None:
        """Forget the stored session so the next connect pairs from scratch."""
        if self._mode == AuthMode.PSK:
            self._state = AuthState.AUTHENTICATED
            return
        self._store.clear(self._hostname)
        self._pairing = None
        self._client_id = None
        self._state = AuthState.UNAUTHENTICATED
        _LOGGER.info("Cleared session for %s", self._hostname)
