#!/usr/bin/env python3
"""HTTP Client for the UniFi Network controller API.

This module provides the session-based client used to read sites and
clients from a UniFi controller and to write client aliases back:

    - Cookie session login/logout (classic controller or UniFi OS)
    - CSRF token echo for UniFi OS consoles
    - ``meta.rc`` envelope unwrapping with typed exceptions
    - Site context selection for site-scoped endpoints
    - Last error tracking for write operations that report a bool

Design Philosophy:
    This client knows HOW to talk to the controller, but not WHAT an alias
    sync is. Reconciliation logic lives in the sync use cases, which reach
    the controller only through the IInventoryClient port.

Usage:
    async with UniFiControllerClient(url, user, password) as controller:
        sites = await controller.list_sites()
        controller.set_site("default")
        users = await controller.stat_allusers()
        ok = await controller.set_sta_name(users[0]["_id"], "printer")
"""
import asyncio
import logging
from typing import Any, Optional
from urllib.parse import quote, unquote

import aiohttp

from .exceptions import (
    AliasSyncError,
    APIError,
    ConnectionError,
    InvalidCredentialsError,
    NetworkError,
    NotFoundError,
    ServerError,
    TimeoutError,
)

logger = logging.getLogger(__name__)

# Look-back window for stat/alluser: one year of client history
DEFAULT_HISTORY_HOURS = 8760

# Path prefix for network application endpoints on UniFi OS consoles
UNIFI_OS_API_PREFIX = "/proxy/network"


class UniFiControllerClient:
    """Async HTTP client for a UniFi Network controller.

    Designed to be used as an async context manager so the HTTP session
    and the controller login are always released:

        async with UniFiControllerClient(url, user, password) as controller:
            sites = await controller.list_sites()

    Entering the context logs in; leaving it logs out (only if a login
    succeeded) and closes the HTTP session.

    Attributes:
        base_url: Controller URL including protocol and port
        username: Admin username
        verify_ssl: Verify the controller's TLS certificate
        unifi_os: Use the UniFi OS path layout
        debug: Trace every request/response on the module logger
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        verify_ssl: bool = True,
        unifi_os: bool = False,
        history_hours: int = DEFAULT_HISTORY_HOURS,
        debug: bool = False,
        timeout: float = 60.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.username = username
        self._password = password
        self.verify_ssl = verify_ssl
        self.unifi_os = unifi_os
        self.history_hours = history_hours
        self.debug = debug
        self.timeout = timeout

        self.site: str = "default"

        # Session is created in __aenter__, closed in __aexit__
        self._session: Optional[aiohttp.ClientSession] = None
        self._logged_in = False
        self._csrf_token: Optional[str] = None
        self._last_error_message = ""

    # ----------------------------------------
    # Context Manager Protocol
    # ----------------------------------------

    async def __aenter__(self) -> "UniFiControllerClient":
        """Enter async context: create the HTTP session and log in."""
        self._session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(ssl=self.verify_ssl),
            # Controllers are usually addressed by IP; keep their cookies
            cookie_jar=aiohttp.CookieJar(unsafe=True),
            timeout=aiohttp.ClientTimeout(total=self.timeout, connect=10),
        )
        try:
            await self.login()
        except BaseException:
            await self._close_session()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context: log out and close the HTTP session."""
        try:
            await self.logout()
        finally:
            await self._close_session()

    async def _close_session(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    # ----------------------------------------
    # Session
    # ----------------------------------------

    @property
    def is_logged_in(self) -> bool:
        """Whether a controller session is currently established."""
        return self._logged_in

    @property
    def last_error_message(self) -> str:
        """Human-readable reason for the most recent failed request."""
        return self._last_error_message

    @property
    def _api_prefix(self) -> str:
        return UNIFI_OS_API_PREFIX if self.unifi_os else ""

    async def login(self) -> None:
        """Authenticate against the controller.

        Raises:
            InvalidCredentialsError: If the controller rejects the credentials
            NetworkError: If the controller cannot be reached
        """
        path = "/api/auth/login" if self.unifi_os else "/api/login"
        body = {"username": self.username, "password": self._password}

        try:
            await self._request("POST", path, json_body=body, prefixed=False)
        except APIError as e:
            if e.status_code in (400, 401, 403):
                raise InvalidCredentialsError(self.username, self.base_url, cause=e)
            raise

        self._logged_in = True
        logger.debug(f"Logged in to controller at {self.base_url} as '{self.username}'")

    async def logout(self) -> None:
        """End the controller session.

        Safe to call more than once; only the first call after a successful
        login reaches the controller. Failures are logged, not raised, since
        logout runs during teardown.
        """
        if not self._logged_in:
            return

        self._logged_in = False
        try:
            if self.unifi_os:
                await self._request("POST", "/api/auth/logout", prefixed=False)
            else:
                await self._request("GET", "/logout", prefixed=False)
            logger.debug(f"Logged out of controller at {self.base_url}")
        except AliasSyncError as e:
            logger.warning(f"Controller logout failed: {e.message}")
        finally:
            self._csrf_token = None

    # ----------------------------------------
    # Low-Level Request Methods
    # ----------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        json_body: Optional[dict] = None,
        prefixed: bool = True,
    ) -> list[dict[str, Any]]:
        """Make a single controller request and return the ``data`` list.

        Any failure is recorded as the last error message before the typed
        exception propagates.
        """
        try:
            return await self._send(method, path, json_body, prefixed)
        except AliasSyncError as e:
            self._last_error_message = e.message
            raise

    async def _send(
        self,
        method: str,
        path: str,
        json_body: Optional[dict],
        prefixed: bool,
    ) -> list[dict[str, Any]]:
        if not self._session:
            raise RuntimeError(
                "UniFiControllerClient must be used as async context manager: "
                "async with UniFiControllerClient(...) as controller:"
            )

        endpoint = f"{self._api_prefix}{path}" if prefixed else path
        url = f"{self.base_url}{endpoint}"

        headers = {"Accept": "application/json"}
        if self._csrf_token:
            headers["X-CSRF-Token"] = self._csrf_token

        if self.debug:
            logger.debug(f"{method} {url}")

        try:
            async with self._session.request(
                method=method,
                url=url,
                headers=headers,
                json=json_body,
            ) as response:
                csrf_token = response.headers.get("X-CSRF-Token")
                if csrf_token:
                    self._csrf_token = csrf_token

                if response.status >= 400:
                    error_text = await response.text()
                    if self.debug:
                        logger.debug(f"{method} {url} -> {response.status}: {error_text[:500]}")
                    raise self._create_api_error(
                        status=response.status,
                        method=method,
                        endpoint=endpoint,
                        response_body=error_text,
                    )

                payload = await response.json(content_type=None)
                if self.debug:
                    logger.debug(f"{method} {url} -> {response.status}")

        # ServerTimeoutError is also a ClientConnectionError; timeouts first
        except asyncio.TimeoutError as e:
            raise TimeoutError(endpoint, self.timeout, cause=e)

        except aiohttp.ClientConnectionError as e:
            raise ConnectionError(self.base_url, cause=e)

        except aiohttp.ClientError as e:
            raise NetworkError(f"Network error during {method} {endpoint}: {e}", cause=e)

        except ValueError as e:
            raise APIError(
                f"Controller returned invalid JSON for {method} {endpoint}",
                status_code=200,
                endpoint=endpoint,
                method=method,
                cause=e,
            )

        return self._unwrap(payload, method, endpoint)

    def _unwrap(
        self,
        payload: Any,
        method: str,
        endpoint: str,
    ) -> list[dict[str, Any]]:
        """Check the ``meta.rc`` envelope and return its ``data`` list."""
        if not isinstance(payload, dict):
            return []

        meta = payload.get("meta") or {}
        if meta.get("rc") == "error":
            raise APIError(
                meta.get("msg") or f"Controller {method} {endpoint} failed",
                status_code=200,
                endpoint=endpoint,
                method=method,
            )

        data = payload.get("data")
        return data if isinstance(data, list) else []

    def _create_api_error(
        self,
        status: int,
        method: str,
        endpoint: str,
        response_body: str,
    ) -> APIError:
        """Create appropriate APIError subclass based on status code."""
        if status == 404:
            site = self.site if "/api/s/" in endpoint else None
            client_id = None
            if "/upd/user/" in endpoint:
                client_id = unquote(endpoint.rsplit("/", 1)[-1])
            return NotFoundError(
                endpoint,
                site=site,
                client_id=client_id,
                method=method,
                response_body=response_body,
            )

        if status >= 500:
            return ServerError(status, endpoint, method=method, response_body=response_body)

        return APIError(
            f"Controller {method} {endpoint} failed with HTTP {status}",
            status_code=status,
            endpoint=endpoint,
            method=method,
            response_body=response_body,
        )

    # ----------------------------------------
    # Controller Operations
    # ----------------------------------------

    def set_site(self, site: str) -> None:
        """Select the site used by site-scoped calls."""
        self.site = site

    def _site_path(self, suffix: str) -> str:
        return f"/api/s/{quote(self.site, safe='')}{suffix}"

    async def list_sites(self) -> list[dict[str, Any]]:
        """List every site visible to the logged-in admin."""
        return await self._request("GET", "/api/self/sites")

    async def stat_allusers(self) -> list[dict[str, Any]]:
        """List all known clients of the selected site, online or not."""
        return await self._request(
            "POST",
            self._site_path("/stat/alluser"),
            json_body={"type": "all", "conn": "all", "within": self.history_hours},
        )

    async def set_sta_name(self, user_id: str, name: str) -> bool:
        """Set the alias of a client in the selected site.

        Args:
            user_id: Site-scoped client record id (``_id``)
            name: Alias to assign

        Returns:
            True on success, False otherwise; see ``last_error_message``.
        """
        path = self._site_path(f"/upd/user/{quote(user_id, safe='')}")
        try:
            await self._request("POST", path, json_body={"name": name})
        except AliasSyncError as e:
            logger.debug(f"Setting name for client {user_id} failed: {e}")
            return False
        return True
