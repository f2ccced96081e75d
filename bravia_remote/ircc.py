"""IRCC remote-button commands for Bravia televisions.

IRCC is the legacy SOAP channel that emulates an infrared remote. Button
presses are best-effort: failures are logged and reported as ``False``,
never raised, and they do not affect the pairing state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx
from httpx_retries import Retry, RetryTransport

from .api import BraviaApiClientError, build_base_url, is_http_error
from .const import (
    DEFAULT_TIMEOUT,
    HEADER_SOAP_ACTION,
    IRCC_CONTENT_TYPE,
    IRCC_RETRY_BACKOFF,
    IRCC_RETRY_TOTAL,
    IRCC_SERVICE_URN,
    IRCC_SOAP_ACTION,
    SERVICE_IRCC,
)
from .ircc_codes import IRCCCode, resolve_code

if TYPE_CHECKING:
    from .auth import AuthManager

_LOGGER = logging.getLogger(__name__)

HTTP_SERVICE_UNAVAILABLE = 503

SOAP_ENVELOPE = (
    '<?xml version="1.0"?>'
    '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/"'
    ' s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">'
    "<s:Body>"
    '<u:X_SendIRCC xmlns:u="{urn}">'
    "<IRCCCode>{code}</IRCCCode>"
    "</u:X_SendIRCC>"
    "</s:Body>"
    "</s:Envelope>"
)


def build_soap_envelope(code: IRCCCode) -> str:
    """Wrap an IRCC code in the ``X_SendIRCC`` SOAP envelope."""
    return SOAP_ENVELOPE.format(urn=IRCC_SERVICE_URN, code=code.value)


def create_ircc_headers() -> dict[str, str]:
    """Create the SOAP headers for an IRCC request, without credentials."""
    return {
        "Content-Type": IRCC_CONTENT_TYPE,
        HEADER_SOAP_ACTION: IRCC_SOAP_ACTION,
    }


def create_ircc_session_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """Create an HTTP client with retry logic for IRCC commands.

    Button presses are idempotent, so POSTs are retried on transport errors
    and on 503. JSON-RPC calls must not use this client.

    Args:
        timeout: Request deadline in seconds.

    Returns:
        Configured httpx AsyncClient with retry transport.

    """
    retry = Retry(
        total=IRCC_RETRY_TOTAL,
        backoff_factor=IRCC_RETRY_BACKOFF,
        allowed_methods=["POST"],
        status_forcelist=[HTTP_SERVICE_UNAVAILABLE],
    )
    return httpx.AsyncClient(
        timeout=timeout,
        transport=RetryTransport(retry=retry),
    )


class IRCCSender:
    """Sends IRCC button presses to one television."""

    def __init__(
        self,
        hostname: str,
        auth: AuthManager,
        session: httpx.AsyncClient,
    ) -> None:
        """Initialize the sender.

        Args:
            hostname: LAN hostname or IP address of the television.
            auth: Auth manager that supplies the credential headers.
            session: HTTP client session for the IRCC endpoint.

        """
        self._url = f"{build_base_url(hostname)}{SERVICE_IRCC}"
        self._auth = auth
        self._session = session
        self._tasks: set[asyncio.Task[bool]] = set()

    @property
    def pending(self) -> int:
        """Return the number of fire-and-forget sends still in flight."""
        return len(self._tasks)

    async def async_send(self, code: IRCCCode | str) -> bool:
        """Send one button press and wait for the television to answer.

        Args:
            code: Catalog entry, or its token or name.

        Returns:
            True if the television accepted the command, False otherwise.

        Raises:
            ValueError: If ``code`` is not in the catalog.

        """
        code = resolve_code(code)
        try:
            headers = {**self._auth.credential_headers(), **create_ircc_headers()}
        except BraviaApiClientError as err:
            _LOGGER.warning("Not sending IRCC %s: %s", code.name, err)
            return False

        _LOGGER.debug("Sending IRCC %s", code.name)
        try:
            response = await self._session.post(
                self._url,
                headers=headers,
                content=build_soap_envelope(code),
            )
        except httpx.RequestError as err:
            _LOGGER.warning("IRCC %s failed: %r", code.name, err)
            return False

        if is_http_error(response.status_code):
            _LOGGER.warning(
                "IRCC %s rejected with status %d", code.name, response.status_code
            )
            return False

        return True

    def send(self, code: IRCCCode | str) -> asyncio.Task[bool]:
        """Send one button press without waiting for it.

        Presses may overlap freely. Must be called from a running event loop.

        Raises:
            ValueError: If ``code`` is not in the catalog.

        """
        code = resolve_code(code)
        task = asyncio.get_running_loop().create_task(self.async_send(code))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def async_wait_pending(self) -> None:
        """Wait for all fire-and-forget sends to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def cancel_pending(self) -> None:
        """Abandon all fire-and-forget sends still in flight."""
        for task in list(self._tasks):
            task.cancel()
