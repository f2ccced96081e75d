"""Power-status polling for Bravia televisions.

The poller asks for the power status, waits for the answer, sleeps and asks
again, so at most one request is ever in flight. The first failure reports
the television as disconnected and ends polling until ``start`` is called
again.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

from .api import BraviaApiClientError
from .const import DEFAULT_POLL_INTERVAL
from .models import ConnectionState, PowerState

_LOGGER = logging.getLogger(__name__)

PowerListener = Callable[[ConnectionState, PowerState | None], None]


class PowerPoller:
    """Liveness loop that reports connection and power state to listeners."""

    def __init__(
        self,
        get_power_status: Callable[[], Awaitable[PowerState]],
        interval: float = DEFAULT_POLL_INTERVAL,
        name: str = "bravia",
    ) -> None:
        """Initialize the poller.

        Args:
            get_power_status: Coroutine function returning the power state,
                usually ``CommandDispatcher.async_get_power_status``.
            interval: Seconds to wait after an answer before the next poll.
            name: Label used in log messages.

        """
        self._get_power_status = get_power_status
        self._interval = interval
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self._listeners: list[PowerListener] = []
        self._connection_state = ConnectionState.DISCONNECTED
        self._power_state: PowerState | None = None
        self._last_error: Exception | None = None

    @property
    def running(self) -> bool:
        """Return True while the polling task is alive."""
        return self._task is not None and not self._task.done()

    @property
    def connection_state(self) -> ConnectionState:
        """Return the most recently reported connection state."""
        return self._connection_state

    @property
    def power_state(self) -> PowerState | None:
        """Return the most recently reported power state."""
        return self._power_state

    @property
    def last_error(self) -> Exception | None:
        """Return the failure that stopped polling, if any."""
        return self._last_error

    def register_listener(self, callback: PowerListener) -> Callable[[], None]:
        """Register a callback for every poll result.

        Args:
            callback: Called with the connection state and, when connected,
                the power state.

        Returns:
            A function to unregister the callback.

        """
        self._listeners.append(callback)

        def unregister() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unregister

    def start(self) -> asyncio.Task[None]:
        """Start polling. Must be called from a running event loop.

        Starting an already running poller returns the existing task.
        """
        if self.running:
            return self._task
        self._last_error = None
        self._task = asyncio.get_running_loop().create_task(self._async_run())
        _LOGGER.debug("[%s] Power polling started", self._name)
        return self._task

    async def async_stop(self) -> None:
        """Stop polling and wait for the task to finish."""
        task = self._task
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._task = None
        _LOGGER.debug("[%s] Power polling stopped", self._name)

    async def _async_run(self) -> None:
        while True:
            try:
                power_state = await self._get_power_status()
            except BraviaApiClientError as err:
                _LOGGER.warning("[%s] Lost connection: %s", self._name, err)
                self._last_error = err
                self._notify(ConnectionState.DISCONNECTED, None)
                return
            except Exception as err:
                _LOGGER.exception("[%s] Unexpected error polling power status", self._name)
                self._last_error = err
                self._notify(ConnectionState.DISCONNECTED, None)
                return

            self._notify(ConnectionState.CONNECTED, power_state)
            await asyncio.sleep(self._interval)

    def _notify(self, connection_state: ConnectionState, power_state: PowerState | None) -> None:
        self._connection_state = connection_state
        self._power_state = power_state
        for callback in list(self._listeners):
            try:
                callback(connection_state, power_state)
            except Exception:
                _LOGGER.exception("[%s] Error in power listener", self._name)
