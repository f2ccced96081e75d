"""Constants for the Bravia remote client.

This module contains all the constants used throughout the client,
including endpoint paths, protocol headers, pairing identity and defaults.
"""

SERVICE_ROOT = "sony"

SERVICE_IRCC = "IRCC"

RPC_ID = 1
RPC_VERSION = "1.0"

CLIENT_LABEL = "bravimote"
CLIENT_NICKNAME = "Bravimote"
CLIENT_ID_RANDOM_BYTES = 4
DEFAULT_PIN = "0000"

HEADER_AUTHORIZATION = "Authorization"
HEADER_COOKIE = "Cookie"
HEADER_PSK = "X-Auth-PSK"
HEADER_SOAP_ACTION = "SOAPAction"

IRCC_SERVICE_URN = "urn:schemas-sony-com:service:IRCC:1"
IRCC_SOAP_ACTION = f'"{IRCC_SERVICE_URN}#X_SendIRCC"'
IRCC_CONTENT_TYPE = "text/xml; charset=UTF-8"
IRCC_RETRY_TOTAL = 2
IRCC_RETRY_BACKOFF = 0.1

POWER_STATUS_ACTIVE = "active"

DEFAULT_TIMEOUT = 5.0  # seconds
DEFAULT_POLL_INTERVAL = 0.5  # seconds

STORAGE_KEY_PREFIX = "bravia_remote.session."

CONF_HOSTNAME = "hostname"
CONF_MODE = "mode"
CONF_PSK = "psk"
CONF_TIMEOUT = "timeout"
CONF_POLL_INTERVAL = "poll_interval"
CONF_STORAGE_PATH = "storage_path"
