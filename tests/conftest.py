"""Pytest configuration and fixtures for Bravia remote tests."""

import pytest

from bravia_remote.models import Session
from bravia_remote.session_store import MemoryStorage, SessionStore

HOSTNAME = "192.168.1.50"
BASE_URL = f"http://{HOSTNAME}/sony/"
ACCESS_CONTROL_URL = f"{BASE_URL}accessControl"
SYSTEM_URL = f"{BASE_URL}system"
APP_CONTROL_URL = f"{BASE_URL}appControl"
IRCC_URL = f"{BASE_URL}IRCC"
PSK = "0000-secret"


@pytest.fixture
def storage() -> MemoryStorage:
    """Fixture providing empty in-memory storage."""
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> SessionStore:
    """Fixture providing a session store over in-memory storage."""
    return SessionStore(storage)


@pytest.fixture
def sample_session() -> Session:
    """Fixture providing a completed PIN pairing."""
    return Session(client_id="bravimote:0badcafe", cookie="auth=stored", label="Bravimote")


@pytest.fixture
def paired_store(store: SessionStore, sample_session: Session) -> SessionStore:
    """Fixture providing a store that already holds a session for HOSTNAME."""
    store.save(HOSTNAME, sample_session)
    return store


@pytest.fixture
def sample_power_active_response() -> dict:
    """Fixture providing a getPowerStatus response for an active television."""
    return {"id": 1, "result": [{"status": "active"}]}


@pytest.fixture
def sample_power_standby_response() -> dict:
    """Fixture providing a getPowerStatus response for a television in standby."""
    return {"id": 1, "result": [{"status": "standby"}]}


@pytest.fixture
def sample_empty_result_response() -> dict:
    """Fixture providing a response with an empty result list."""
    return {"id": 1, "result": []}
