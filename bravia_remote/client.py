"""High-level remote control client for a single Bravia television."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from .api import CommandDispatcher, create_session_client
from .auth import AuthManager
from .config import BraviaConfig, coerce_mode, validate_credentials
from .const import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT
from .ircc import IRCCSender, create_ircc_session_client
from .models import AuthMode, AuthState, PowerState
from .poller import PowerPoller
from .session_store import JsonFileStorage, SessionStore

if TYPE_CHECKING:
    import asyncio

    from .ircc_codes import IRCCCode
    from .models import DiscoveredDevice

_LOGGER = logging.getLogger(__name__)


class BraviaRemote:
    """Remote control for one television.

    Connect first, then use the command methods::

        async with BraviaRemote("192.168.1.50", AuthMode.PIN, store=store) as tv:
            try:
                await tv.async_connect()
            except BraviaAuthChallengeError as err:
                await tv.async_connect(input("PIN: "), err.client_id)
            await tv.async_get_power_status()

    HTTP clients created here are closed by ``async_close``. Injected
    clients belong to the caller.
    """

    def __init__(
        self,
        hostname: str,
        mode: AuthMode | str = AuthMode.PIN,
        psk: str | None = None,
        *,
        store: SessionStore | None = None,
        session: httpx.AsyncClient | None = None,
        ircc_session: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        """Initialize the remote.

        Args:
            hostname: LAN hostname or IP address of the television.
            mode: Pairing mode.
            psk: Pre-shared key, required in PSK mode.
            store: Session store. Defaults to an in-memory store.
            session: HTTP client for pairing and JSON-RPC calls.
            ircc_session: HTTP client for IRCC commands. Defaults to
                ``session`` when given, otherwise a retrying client.
            timeout: Request deadline in seconds for created clients.
            poll_interval: Default interval for power pollers.

        Raises:
            BraviaConfigurationError: If the mode is unknown or PSK mode has
                no key.

        """
        mode = coerce_mode(mode)
        validate_credentials(mode, psk)

        self._hostname = hostname
        self._poll_interval = poll_interval
        self._owned_sessions: list[httpx.AsyncClient] = []

        if session is None:
            session = create_session_client(timeout)
            self._owned_sessions.append(session)
        if ircc_session is None:
            if self._owned_sessions:
                ircc_session = create_ircc_session_client(timeout)
                self._owned_sessions.append(ircc_session)
            else:
                ircc_session = session

        self.auth = AuthManager(
            hostname,
            mode,
            store if store is not None else SessionStore(),
            session,
            psk=psk,
        )
        self.dispatcher = CommandDispatcher(hostname, self.auth, session)
        self.ircc = IRCCSender(hostname, self.auth, ircc_session)
        _LOGGER.debug("Created %s remote for %s", self.auth.mode, hostname)

    @classmethod
    def from_config(cls, config: BraviaConfig, **kwargs: Any) -> BraviaRemote:
        """Create a remote from validated configuration.

        A ``storage_path`` in the config backs the session store with a JSON
        file unless a ``store`` is passed explicitly.
        """
        if "store" not in kwargs and config.storage_path is not None:
            kwargs["store"] = SessionStore(JsonFileStorage(config.storage_path))
        return cls(
            config.hostname,
            config.mode,
            config.psk,
            timeout=config.timeout,
            poll_interval=config.poll_interval,
            **kwargs,
        )

    @classmethod
    def from_discovered_device(
        cls,
        device: DiscoveredDevice,
        mode: AuthMode | str = AuthMode.PIN,
        psk: str | None = None,
        **kwargs: Any,
    ) -> BraviaRemote:
        """Create a remote for a television found by LAN discovery."""
        return cls(device.hostname, mode, psk, **kwargs)

    @property
    def hostname(self) -> str:
        """Return the television address."""
        return self._hostname

    @property
    def mode(self) -> AuthMode:
        """Return the pairing mode."""
        return self.auth.mode

    @property
    def state(self) -> AuthState:
        """Return the pairing state."""
        return self.auth.state

    async def async_connect(
        self,
        pin: str | None = None,
        client_id: str | None = None,
    ) -> None:
        """Pair with the television or reuse a stored session.

        See ``AuthManager.async_connect``.
        """
        await self.auth.async_connect(pin, client_id)

    async def async_reset_session(self) -> None:
        """Clear a rejected session so the next connect pairs again."""
        self.auth.reset()

    async def async_get_power_status(self) -> PowerState:
        """Return whether the television is active or in standby."""
        return await self.dispatcher.async_get_power_status()

    async def async_set_power_status(self, on: bool) -> None:
        """Turn the television on or put it into standby."""
        await self.dispatcher.async_set_power_status(on)

    async def async_set_text_input(self, text: str) -> None:
        """Type text into the focused field. The text is sent unencrypted."""
        await self.dispatcher.async_set_text_input(text)

    async def async_send_ircc(self, code: IRCCCode | str) -> bool:
        """Press a remote button and wait for the answer."""
        return await self.ircc.async_send(code)

    def send_ircc(self, code: IRCCCode | str) -> asyncio.Task[bool]:
        """Press a remote button without waiting."""
        return self.ircc.send(code)

    def create_power_poller(self, interval: float | None = None) -> PowerPoller:
        """Create a poller that tracks this television's power state."""
        return PowerPoller(
            self.dispatcher.async_get_power_status,
            interval=self._poll_interval if interval is None else interval,
            name=self._hostname,
        )

    async def async_close(self) -> None:
        """Abandon pending button presses and close owned HTTP clients."""
        self.ircc.cancel_pending()
        for session in self._owned_sessions:
            await session.aclose()
        self._owned_sessions.clear()

    async def __aenter__(self) -> BraviaRemote:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.async_close()
