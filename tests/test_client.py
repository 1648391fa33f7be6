"""Tests for UniFiControllerClient against a mocked aiohttp session."""

from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from unifi_alias_sync.api.client import DEFAULT_HISTORY_HOURS, UniFiControllerClient
from unifi_alias_sync.api.exceptions import (
    APIError,
    ConnectionError,
    InvalidCredentialsError,
    NotFoundError,
    ServerError,
    TimeoutError,
)

BASE_URL = "https://unifi.example.com:8443"


def make_response(status=200, payload=None, headers=None, text=""):
    """Build a mock aiohttp response wrapped in an async context manager."""
    response = MagicMock()
    response.status = status
    response.headers = headers or {}
    response.json = AsyncMock(return_value=payload if payload is not None else {"meta": {"rc": "ok"}, "data": []})
    response.text = AsyncMock(return_value=text)

    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=response)
    ctx.__aexit__ = AsyncMock(return_value=None)
    return ctx


def ok(data=None):
    return {"meta": {"rc": "ok"}, "data": data or []}


def make_session(*responses):
    session = MagicMock()
    session.request = MagicMock(side_effect=list(responses))
    session.close = AsyncMock()
    return session


def call_kwargs(session, index):
    return session.request.call_args_list[index].kwargs


@pytest.fixture
def client():
    return UniFiControllerClient(BASE_URL + "/", "admin", "secret")


class TestLogin:
    """Tests for login and logout."""

    async def test_login_classic(self, client):
        session = make_session(make_response(payload=ok()))
        client._session = session

        await client.login()

        kwargs = call_kwargs(session, 0)
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == f"{BASE_URL}/api/login"
        assert kwargs["json"] == {"username": "admin", "password": "secret"}
        assert client.is_logged_in is True

    async def test_login_rejected(self, client):
        client._session = make_session(make_response(status=400, text='{"meta":{"rc":"error"}}'))

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await client.login()

        assert isinstance(exc_info.value.cause, APIError)
        assert str(exc_info.value) == f"Controller at {BASE_URL} rejected login for 'admin'"
        assert client.is_logged_in is False

    async def test_login_server_error_is_not_credentials(self, client):
        client._session = make_session(make_response(status=502, text="Bad Gateway"))

        with pytest.raises(ServerError) as exc_info:
            await client.login()

        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "Controller server error (502) for POST /api/login"

    async def test_logout_is_idempotent(self, client):
        session = make_session(make_response(payload=ok()), make_response(payload=ok()))
        client._session = session

        await client.login()
        await client.logout()
        await client.logout()

        assert session.request.call_count == 2
        kwargs = call_kwargs(session, 1)
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == f"{BASE_URL}/logout"
        assert client.is_logged_in is False

    async def test_logout_without_login_does_nothing(self, client):
        session = make_session()
        client._session = session

        await client.logout()

        session.request.assert_not_called()

    async def test_logout_failure_is_logged_not_raised(self, client, caplog):
        client._session = make_session(make_response(payload=ok()), make_response(status=500))

        await client.login()
        await client.logout()

        assert "Controller logout failed" in caplog.text


class TestUniFiOS:
    """Tests for the UniFi OS path layout and CSRF handling."""

    @pytest.fixture
    def os_client(self):
        return UniFiControllerClient(BASE_URL, "admin", "secret", unifi_os=True)

    async def test_login_and_prefixed_calls(self, os_client):
        session = make_session(
            make_response(payload=ok(), headers={"X-CSRF-Token": "tok-1"}),
            make_response(payload=ok([{"name": "default"}])),
            make_response(payload=ok()),
        )
        os_client._session = session

        await os_client.login()
        sites = await os_client.list_sites()
        await os_client.logout()

        assert call_kwargs(session, 0)["url"] == f"{BASE_URL}/api/auth/login"
        assert call_kwargs(session, 1)["url"] == f"{BASE_URL}/proxy/network/api/self/sites"
        assert call_kwargs(session, 1)["headers"]["X-CSRF-Token"] == "tok-1"
        assert call_kwargs(session, 2)["method"] == "POST"
        assert call_kwargs(session, 2)["url"] == f"{BASE_URL}/api/auth/logout"
        assert sites == [{"name": "default"}]

    async def test_csrf_token_is_refreshed(self, os_client):
        session = make_session(
            make_response(payload=ok(), headers={"X-CSRF-Token": "tok-1"}),
            make_response(payload=ok(), headers={"X-CSRF-Token": "tok-2"}),
            make_response(payload=ok()),
        )
        os_client._session = session

        await os_client.login()
        await os_client.list_sites()
        await os_client.list_sites()

        assert call_kwargs(session, 2)["headers"]["X-CSRF-Token"] == "tok-2"


class TestControllerOperations:
    """Tests for site-scoped operations."""

    async def test_list_sites(self, client):
        session = make_session(make_response(payload=ok([{"name": "default"}, {"name": "b"}])))
        client._session = session

        sites = await client.list_sites()

        assert [s["name"] for s in sites] == ["default", "b"]
        assert call_kwargs(session, 0)["method"] == "GET"
        assert call_kwargs(session, 0)["url"] == f"{BASE_URL}/api/self/sites"

    async def test_stat_allusers_uses_selected_site(self, client):
        session = make_session(make_response(payload=ok([{"_id": "1", "mac": "aa:bb:cc:dd:ee:01"}])))
        client._session = session
        client.set_site("branch a")

        users = await client.stat_allusers()

        kwargs = call_kwargs(session, 0)
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == f"{BASE_URL}/api/s/branch%20a/stat/alluser"
        assert kwargs["json"] == {"type": "all", "conn": "all", "within": DEFAULT_HISTORY_HOURS}
        assert users[0]["_id"] == "1"

    async def test_meta_error_raises_api_error(self, client):
        client._session = make_session(
            make_response(payload={"meta": {"rc": "error", "msg": "api.err.NoSiteContext"}, "data": []})
        )

        with pytest.raises(APIError, match="api.err.NoSiteContext"):
            await client.list_sites()

        assert client.last_error_message == "api.err.NoSiteContext"

    async def test_missing_data_returns_empty_list(self, client):
        client._session = make_session(make_response(payload={"meta": {"rc": "ok"}}))

        assert await client.list_sites() == []

    async def test_set_sta_name_success(self, client):
        session = make_session(make_response(payload=ok()))
        client._session = session
        client.set_site("default")

        assert await client.set_sta_name("5f1a", "printer") is True

        kwargs = call_kwargs(session, 0)
        assert kwargs["url"] == f"{BASE_URL}/api/s/default/upd/user/5f1a"
        assert kwargs["json"] == {"name": "printer"}

    async def test_set_sta_name_failure_returns_false(self, client):
        client._session = make_session(
            make_response(payload={"meta": {"rc": "error", "msg": "api.err.InvalidObject"}})
        )

        assert await client.set_sta_name("5f1a", "printer") is False
        assert client.last_error_message == "api.err.InvalidObject"

    async def test_connection_error_is_typed(self, client):
        session = MagicMock()
        session.request = MagicMock(side_effect=aiohttp.ClientConnectionError("refused"))
        client._session = session

        with pytest.raises(ConnectionError) as exc_info:
            await client.list_sites()

        assert exc_info.value.message == f"Failed to connect to controller at {BASE_URL}"
        assert client.last_error_message.startswith("Failed to connect")

    async def test_read_timeout_is_a_timeout(self, client):
        session = MagicMock()
        session.request = MagicMock(side_effect=aiohttp.ServerTimeoutError("read"))
        client._session = session

        with pytest.raises(TimeoutError) as exc_info:
            await client.list_sites()

        assert not isinstance(exc_info.value, ConnectionError)
        assert client.last_error_message == "Controller request to /api/self/sites timed out after 60s"

    async def test_missing_site_is_not_found(self, client):
        client._session = make_session(make_response(status=404, text="Not Found"))
        client.set_site("branch")

        with pytest.raises(NotFoundError) as exc_info:
            await client.stat_allusers()

        assert exc_info.value.message == "Site 'branch' not found on the controller"
        assert exc_info.value.status_code == 404

    async def test_missing_client_record_fails_write(self, client):
        client._session = make_session(make_response(status=404, text="Not Found"))

        assert await client.set_sta_name("5f1a", "printer") is False
        assert client.last_error_message == "Client record 5f1a not found on site 'default'"

    async def test_requires_context_manager(self, client):
        with pytest.raises(RuntimeError, match="async context manager"):
            await client.list_sites()


class TestContextManager:
    """Tests for the async context manager protocol."""

    async def test_enter_logs_in_and_exit_logs_out(self):
        session = make_session(make_response(payload=ok()), make_response(payload=ok()))

        with patch("aiohttp.ClientSession", return_value=session), patch("aiohttp.TCPConnector"):
            async with UniFiControllerClient(BASE_URL, "admin", "secret") as controller:
                assert controller.is_logged_in is True

        assert session.request.call_count == 2
        session.close.assert_awaited_once()

    async def test_failed_login_closes_session(self):
        session = make_session(make_response(status=401))

        with patch("aiohttp.ClientSession", return_value=session), patch("aiohttp.TCPConnector"):
            with pytest.raises(InvalidCredentialsError):
                async with UniFiControllerClient(BASE_URL, "admin", "wrong"):
                    pass

        session.close.assert_awaited_once()
