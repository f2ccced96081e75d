"""API client for Sony Bravia televisions.

This module provides the JSON-RPC side of the Bravia REST API: the error
taxonomy shared by the whole client, request envelope and header helpers,
response validation, and the command dispatcher used for power and text
input calls.
"""

from __future__ import annotations

import base64
import logging
from typing import TYPE_CHECKING, Any

import httpx

from .const import (
    DEFAULT_TIMEOUT,
    HEADER_AUTHORIZATION,
    HEADER_COOKIE,
    HEADER_PSK,
    POWER_STATUS_ACTIVE,
    RPC_ID,
    RPC_VERSION,
    SERVICE_ROOT,
)
from .models import AuthMode, PowerState, ServiceName

if TYPE_CHECKING:
    from .auth import AuthManager

_LOGGER = logging.getLogger(__name__)

# HTTP status codes
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403


class BraviaApiClientError(Exception):
    """Base exception for Bravia API client errors."""


class BraviaConfigurationError(BraviaApiClientError):
    """Exception raised when a client is constructed with invalid settings."""


class BraviaAuthFailureError(BraviaApiClientError):
    """Exception raised when the television rejects the client's credentials."""


class BraviaAuthChallengeError(BraviaAuthFailureError):
    """Exception raised when pairing needs a PIN shown on the television.

    Attributes:
        client_id: Identity used for the rejected attempt. Retry the pairing
            with this identity and the PIN the user reads off the screen.

    """

    def __init__(self, client_id: str, message: str | None = None) -> None:
        """Initialize the challenge with the retained client identity."""
        super().__init__(message or "PIN required to complete pairing")
        self.client_id = client_id


class BraviaNetworkError(BraviaApiClientError):
    """Exception raised when the television cannot be reached in time."""


class BraviaProtocolError(BraviaApiClientError):
    """Exception raised for non-2xx responses and JSON-RPC errors.

    Attributes:
        status_code: HTTP status code, or the JSON-RPC error code when the
            device answered 2xx with an error body.

    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize the error with an optional status code."""
        super().__init__(message)
        self.status_code = status_code


def build_base_url(hostname: str) -> str:
    """Return the service root URL for a television."""
    return f"http://{hostname}/{SERVICE_ROOT}/"


def build_rpc_payload(
    method: str,
    params: list[Any] | None = None,
    **overrides: Any,
) -> dict[str, Any]:
    """Wrap a method call in the fixed JSON-RPC envelope.

    Args:
        method: Remote method name, e.g. ``getPowerStatus``.
        params: Ordered parameter list. Defaults to an empty list.
        **overrides: Extra envelope fields, applied last.

    Returns:
        Request body ready to be sent as JSON.

    """
    return {
        "id": RPC_ID,
        "version": RPC_VERSION,
        "params": list(params) if params is not None else [],
        "method": method,
        **overrides,
    }


def create_pin_headers(pin: str) -> dict[str, str]:
    """Create the HTTP Basic header carrying a pairing PIN.

    The username is always empty.
    """
    token = base64.b64encode(f":{pin}".encode()).decode("ascii")
    return {HEADER_AUTHORIZATION: f"Basic {token}"}


def create_credential_headers(
    mode: AuthMode,
    cookie: str | None = None,
    psk: str | None = None,
) -> dict[str, str]:
    """Create the credential headers for an authenticated request.

    Args:
        mode: Active pairing mode.
        cookie: Session cookie, used in PIN mode.
        psk: Pre-shared key, used in PSK mode.

    Returns:
        Dictionary containing the credential header, or nothing when the
        credential for ``mode`` is missing.

    """
    if mode == AuthMode.PSK:
        return {HEADER_PSK: psk} if psk else {}
    return {HEADER_COOKIE: cookie} if cookie else {}


def is_http_error(status: int) -> bool:
    """Check if HTTP status code indicates an error."""
    return status >= HTTP_BAD_REQUEST


def is_auth_error(status: int) -> bool:
    """Check if HTTP status code indicates a rejected credential."""
    return status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN)


def is_rpc_error(data: dict[str, Any]) -> bool:
    """Check if a JSON-RPC body carries an ``error`` member."""
    return bool(data.get("error"))


def validate_response(response: httpx.Response) -> dict[str, Any]:
    """Validate an HTTP response and return parsed JSON-RPC data.

    Args:
        response: HTTP response object to validate.

    Returns:
        Parsed JSON data from response.

    Raises:
        BraviaAuthFailureError: If the device rejected the credential.
        BraviaProtocolError: For other HTTP errors, JSON-RPC errors and
            bodies that are not JSON objects.

    """
    _validate_http_status(response)
    try:
        data = response.json()
    except ValueError as err:
        error_msg = "Response body is not valid JSON"
        raise BraviaProtocolError(error_msg, response.status_code) from err
    if not isinstance(data, dict):
        error_msg = "Response body is not a JSON object"
        raise BraviaProtocolError(error_msg, response.status_code)
    _validate_rpc_status(data)
    return data


def _validate_http_status(response: httpx.Response) -> None:
    if not is_http_error(response.status_code):
        return

    if is_auth_error(response.status_code):
        auth_error = f"Credential rejected by device: {response.status_code}"
        raise BraviaAuthFailureError(auth_error)

    client_error = f"Request failed: {response.status_code}"
    raise BraviaProtocolError(client_error, response.status_code)


def _validate_rpc_status(data: dict[str, Any]) -> None:
    if not is_rpc_error(data):
        return

    error = data["error"]
    code = error[0] if isinstance(error, list) and error else None
    message = error[1] if isinstance(error, list) and len(error) > 1 else str(error)
    error_message = f"Device returned error {code}: {message}"

    if code in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
        raise BraviaAuthFailureError(error_message)

    raise BraviaProtocolError(error_message, code if isinstance(code, int) else None)


def extract_power_state(data: dict[str, Any]) -> PowerState:
    """Extract the power state from a ``getPowerStatus`` response.

    An empty or missing result means the device gave no definitive state,
    which is reported as standby.

    Raises:
        BraviaProtocolError: If the result is not a list.

    """
    result = data.get("result") or []
    if not isinstance(result, list):
        error_msg = f"Unexpected power status result: {result!r}"
        raise BraviaProtocolError(error_msg)
    if not result or not isinstance(result[0], dict):
        _LOGGER.debug("Power status result is empty, assuming standby")
        return PowerState.STANDBY
    status = str(result[0].get("status", "")).lower()
    return PowerState.ACTIVE if status == POWER_STATUS_ACTIVE else PowerState.STANDBY


def create_session_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """Create the HTTP client used for pairing and JSON-RPC calls.

    Requests are never retried. Exceeding ``timeout`` surfaces as a
    network error.

    Args:
        timeout: Request deadline in seconds.

    Returns:
        Configured httpx AsyncClient.

    """
    return httpx.AsyncClient(timeout=timeout)


class CommandDispatcher:
    """Sends authenticated JSON-RPC commands to one television."""

    def __init__(
        self,
        hostname: str,
        auth: AuthManager,
        session: httpx.AsyncClient,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            hostname: LAN hostname or IP address of the television.
            auth: Auth manager that supplies the credential headers.
            session: HTTP client session.

        """
        self._base_url = build_base_url(hostname)
        self._auth = auth
        self._session = session

    @property
    def base_url(self) -> str:
        """Return the service root URL."""
        return self._base_url

    async def async_call(
        self,
        service: ServiceName | str,
        method: str,
        params: list[Any] | None = None,
        **overrides: Any,
    ) -> dict[str, Any]:
        """Call a JSON-RPC method on a service endpoint.

        Args:
            service: Service endpoint, e.g. ``system``.
            method: Remote method name.
            params: Ordered parameter list.
            **overrides: Extra envelope fields.

        Returns:
            The validated JSON-RPC response body.

        Raises:
            BraviaAuthFailureError: If the device rejected the credential.
            BraviaNetworkError: If the request could not be completed.
            BraviaProtocolError: For non-2xx responses and JSON-RPC errors.

        """
        url = f"{self._base_url}{service}"
        payload = build_rpc_payload(method, params, **overrides)
        headers = self._auth.credential_headers()

        _LOGGER.debug("Calling %s.%s", service, method)
        try:
            response = await self._session.post(url, headers=headers, json=payload)
        except httpx.RequestError as err:
            error_msg = f"Connection error calling {service}.{method}: {err!r}"
            raise BraviaNetworkError(error_msg) from err

        try:
            data = validate_response(response)
        except BraviaAuthFailureError as err:
            self._auth.mark_rejected(str(err))
            raise

        _LOGGER.debug("Call %s.%s succeeded", service, method)
        return data

    async def async_get_power_status(self) -> PowerState:
        """Return whether the television is active or in standby."""
        data = await self.async_call(ServiceName.SYSTEM, "getPowerStatus")
        return extract_power_state(data)

    async def async_set_power_status(self, on: bool) -> None:
        """Turn the television on or put it into standby."""
        _LOGGER.debug("Setting power status to %s", on)
        await self.async_call(ServiceName.SYSTEM, "setPowerStatus", [{"status": on}])

    async def async_set_text_input(self, text: str) -> None:
        """Fill the text field currently focused on the television.

        The text travels as plaintext over HTTP and is not
        confidentiality-protected. Do not use this for passwords.
        """
        await self.async_call(ServiceName.APP_CONTROL, "setTextForm", [text])
