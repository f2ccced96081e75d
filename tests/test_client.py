"""Tests for the BraviaRemote facade."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import httpx
import pytest
from pytest_httpx import HTTPXMock

from bravia_remote.api import (
    BraviaAuthChallengeError,
    BraviaAuthFailureError,
    BraviaConfigurationError,
)
from bravia_remote.client import BraviaRemote
from bravia_remote.config import BraviaConfig
from bravia_remote.ircc_codes import IRCCCode
from bravia_remote.models import (
    AuthMode,
    AuthState,
    ConnectionState,
    DiscoveredDevice,
    PowerState,
    Session,
)
from bravia_remote.session_store import JsonFileStorage, SessionStore

from .conftest import ACCESS_CONTROL_URL, HOSTNAME, IRCC_URL, PSK, SYSTEM_URL


class TestEndToEnd:
    """Tests covering full pairing and command flows."""

    @pytest.mark.asyncio
    async def test_pin_pairing_then_power_status(
        self,
        httpx_mock: HTTPXMock,
        store: SessionStore,
        sample_power_active_response: dict[str, Any],
    ) -> None:
        """Test 401, PIN retry, cookie, then an authenticated power query."""
        httpx_mock.add_response(url=ACCESS_CONTROL_URL, method="POST", status_code=401)
        httpx_mock.add_response(
            url=ACCESS_CONTROL_URL,
            method="POST",
            match_headers={"Authorization": "Basic OjEyMzQ="},
            headers={"Set-Cookie": "session=abc"},
            json={"id": 1, "result": []},
        )
        httpx_mock.add_response(
            url=SYSTEM_URL,
            method="POST",
            match_headers={"Cookie": "session=abc"},
            json=sample_power_active_response,
        )

        async with httpx.AsyncClient() as session:
            remote = BraviaRemote(HOSTNAME, AuthMode.PIN, store=store, session=session)
            with pytest.raises(BraviaAuthChallengeError) as exc:
                await remote.async_connect()
            assert remote.state is AuthState.AWAITING_CHALLENGE

            await remote.async_connect("1234", exc.value.client_id)
            assert remote.state is AuthState.AUTHENTICATED
            assert await remote.async_get_power_status() is PowerState.ACTIVE

        register, retry, _ = httpx_mock.get_requests()
        registered = json.loads(register.content)["params"][0]["clientid"]
        assert json.loads(retry.content)["params"][0]["clientid"] == registered
        assert store.load(HOSTNAME).cookie == "session=abc"

    @pytest.mark.asyncio
    async def test_stale_session_recovery(
        self,
        httpx_mock: HTTPXMock,
        paired_store: SessionStore,
        sample_power_standby_response: dict[str, Any],
    ) -> None:
        """Test that a rejected stored cookie is cleared and re-paired."""
        httpx_mock.add_response(
            url=SYSTEM_URL,
            method="POST",
            match_headers={"Cookie": "auth=stored"},
            status_code=403,
        )
        httpx_mock.add_response(
            url=ACCESS_CONTROL_URL,
            method="POST",
            headers={"Set-Cookie": "auth=renewed"},
            json={"id": 1, "result": []},
        )
        httpx_mock.add_response(
            url=SYSTEM_URL,
            method="POST",
            match_headers={"Cookie": "auth=renewed"},
            json=sample_power_standby_response,
        )

        async with httpx.AsyncClient() as session:
            remote = BraviaRemote(HOSTNAME, AuthMode.PIN, store=paired_store, session=session)
            await remote.async_connect()
            with pytest.raises(BraviaAuthFailureError):
                await remote.async_get_power_status()
            assert remote.state is AuthState.FAILED

            await remote.async_reset_session()
            assert paired_store.load(HOSTNAME) is None
            await remote.async_connect()
            assert await remote.async_get_power_status() is PowerState.STANDBY

        assert paired_store.load(HOSTNAME).cookie == "auth=renewed"

    @pytest.mark.asyncio
    async def test_psk_commands_and_ircc(
        self,
        httpx_mock: HTTPXMock,
        store: SessionStore,
    ) -> None:
        """Test that PSK mode needs no pairing and keys every request."""
        httpx_mock.add_response(
            url=SYSTEM_URL,
            method="POST",
            match_headers={"X-Auth-PSK": PSK},
            json={"id": 1, "result": []},
        )
        httpx_mock.add_response(
            url=IRCC_URL,
            method="POST",
            match_headers={"X-Auth-PSK": PSK},
        )

        async with httpx.AsyncClient() as session:
            remote = BraviaRemote(HOSTNAME, "psk", PSK, store=store, session=session)
            await remote.async_connect()
            await remote.async_set_power_status(True)
            assert await remote.send_ircc(IRCCCode.POWER) is True

        assert [r.url.path for r in httpx_mock.get_requests()] == ["/sony/system", "/sony/IRCC"]


class TestConstruction:
    """Tests for BraviaRemote construction."""

    def test_from_config_uses_json_file_storage(
        self,
        tmp_path: Path,
        sample_session: Session,
    ) -> None:
        """Test that a storage path backs the session store with a file."""
        path = tmp_path / "sessions.json"
        SessionStore(JsonFileStorage(path)).save(HOSTNAME, sample_session)
        config = BraviaConfig.from_dict({"hostname": HOSTNAME, "storage_path": str(path)})

        remote = BraviaRemote.from_config(config)
        assert remote.state is AuthState.AUTHENTICATED
        assert remote.auth.session == sample_session

    def test_from_config_psk(self) -> None:
        """Test that a PSK config authenticates immediately."""
        config = BraviaConfig.from_dict({"hostname": HOSTNAME, "mode": "psk", "psk": PSK})
        remote = BraviaRemote.from_config(config)
        assert remote.mode is AuthMode.PSK
        assert remote.state is AuthState.AUTHENTICATED

    def test_from_discovered_device_uses_hostname(self) -> None:
        """Test that only the discovered hostname is used."""
        device = DiscoveredDevice(
            id="uuid:1234",
            display_name="BRAVIA KD-55X85J",
            product="TV",
            model="KD-55X85J",
            hostname="192.168.1.77",
        )
        remote = BraviaRemote.from_discovered_device(device)
        assert remote.hostname == "192.168.1.77"
        assert remote.dispatcher.base_url == "http://192.168.1.77/sony/"

    @pytest.mark.parametrize(
        ("mode", "psk"),
        [(AuthMode.PSK, None), ("token", None)],
    )
    def test_invalid_credentials_open_no_clients(
        self,
        mode: AuthMode | str,
        psk: str | None,
    ) -> None:
        """Test that a configuration error is raised before any client is created."""
        with (
            patch("bravia_remote.client.create_session_client") as mock_session,
            patch("bravia_remote.client.create_ircc_session_client") as mock_ircc,
            pytest.raises(BraviaConfigurationError),
        ):
            BraviaRemote(HOSTNAME, mode, psk)
        mock_session.assert_not_called()
        mock_ircc.assert_not_called()

    @pytest.mark.asyncio
    async def test_async_close_closes_owned_clients(self) -> None:
        """Test that clients created by the remote are closed."""
        remote = BraviaRemote(HOSTNAME, AuthMode.PSK, PSK)
        # Accessing private member for testing purposes
        owned = list(remote._owned_sessions)
        assert len(owned) == 2
        async with remote:
            pass
        assert all(client.is_closed for client in owned)

    @pytest.mark.asyncio
    async def test_async_close_leaves_injected_client_open(self) -> None:
        """Test that an injected client belongs to the caller."""
        async with httpx.AsyncClient() as session:
            remote = BraviaRemote(HOSTNAME, AuthMode.PSK, PSK, session=session)
            await remote.async_close()
            assert session.is_closed is False


class TestPowerPollerFactory:
    """Tests for BraviaRemote.create_power_poller."""

    @pytest.mark.asyncio
    async def test_poller_reports_disconnect_on_unreachable_device(
        self,
        httpx_mock: HTTPXMock,
        store: SessionStore,
    ) -> None:
        """Test that the poller stops on the first network failure."""
        httpx_mock.add_response(
            url=SYSTEM_URL, method="POST", json={"id": 1, "result": [{"status": "active"}]}
        )
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"), url=SYSTEM_URL)

        async with httpx.AsyncClient() as session:
            remote = BraviaRemote(HOSTNAME, AuthMode.PSK, PSK, store=store, session=session)
            poller = remote.create_power_poller(interval=0)
            states: list[ConnectionState] = []
            poller.register_listener(lambda state, _power: states.append(state))
            await poller.start()

        assert states == [ConnectionState.CONNECTED, ConnectionState.DISCONNECTED]
        assert len(httpx_mock.get_requests()) == 2
