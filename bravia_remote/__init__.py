"""Remote control client for Sony Bravia televisions."""

from .api import (
    BraviaApiClientError,
    BraviaAuthChallengeError,
    BraviaAuthFailureError,
    BraviaConfigurationError,
    BraviaNetworkError,
    BraviaProtocolError,
    CommandDispatcher,
)
from .auth import AuthManager
from .client import BraviaRemote
from .config import BraviaConfig
from .ircc import IRCCSender
from .ircc_codes import IRCCCode
from .models import (
    AuthMode,
    AuthState,
    ConnectionState,
    DiscoveredDevice,
    PowerState,
    ServiceName,
    Session,
)
from .poller import PowerPoller
from .session_store import JsonFileStorage, KeyValueStorage, MemoryStorage, SessionStore

__all__ = [
    "AuthManager",
    "AuthMode",
    "AuthState",
    "BraviaApiClientError",
    "BraviaAuthChallengeError",
    "BraviaAuthFailureError",
    "BraviaConfig",
    "BraviaConfigurationError",
    "BraviaNetworkError",
    "BraviaProtocolError",
    "BraviaRemote",
    "CommandDispatcher",
    "ConnectionState",
    "DiscoveredDevice",
    "IRCCCode",
    "IRCCSender",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "PowerPoller",
    "PowerState",
    "ServiceName",
    "Session",
    "SessionStore",
]
