"""Shared fixtures: an in-memory inventory implementing IInventoryClient."""

from dataclasses import replace

import pytest

from unifi_alias_sync.sync.domain.entities import Client, Site
from unifi_alias_sync.sync.domain.ports import IInventoryClient


class MockInventoryClient(IInventoryClient):
    """In-memory controller for testing.

    ``sites`` maps site name -> clients. Reads return copies, so writes made
    during a run never show up in an already-fetched snapshot, just like a
    real controller. Successful writes are stored and visible to later runs.
    """

    def __init__(
        self,
        sites: dict[str, list[Client]] | None = None,
        fail_macs: set[str] | None = None,
        error_message: str = "api.err.InvalidObject",
        raise_on_list_sites: Exception | None = None,
    ):
        self.sites = sites or {}
        self.fail_macs = fail_macs or set()
        self.error_message = error_message
        self.raise_on_list_sites = raise_on_list_sites

        self.selected: str | None = None
        self.events: list[tuple] = []
        self.writes: list[tuple[str, str, str]] = []
        self.end_session_calls = 0
        self._last_error = ""

    async def list_sites(self) -> list[Site]:
        self.events.append(("list_sites",))
        if self.raise_on_list_sites:
            raise self.raise_on_list_sites
        return [Site(name=name) for name in self.sites]

    def select_site(self, name: str) -> None:
        self.selected = name

    async def list_clients(self) -> list[Client]:
        self.events.append(("list_clients", self.selected))
        return [replace(client) for client in self.sites[self.selected]]

    async def set_alias(self, client_id: str, alias: str) -> bool:
        self.events.append(("set_alias", self.selected, client_id, alias))
        for client in self.sites[self.selected]:
            if client.id != client_id:
                continue
            if client.mac in self.fail_macs:
                self._last_error = self.error_message
                return False
            client.name = alias
            self.writes.append((self.selected, client.mac, alias))
            return True
        self._last_error = "api.err.UnknownUser"
        return False

    @property
    def last_error_message(self) -> str:
        return self._last_error

    async def end_session(self) -> None:
        self.end_session_calls += 1

    def list_calls(self) -> list[str]:
        return [event[1] for event in self.events if event[0] == "list_clients"]


def make_client(mac: str, name: str | None = None, site: str = "x") -> Client:
    """Build a client whose id is unique per site."""
    return Client(id=f"{site}-{mac[-2:]}", mac=mac, name=name)


@pytest.fixture
def make_inventory():
    """Factory for MockInventoryClient instances."""
    def _make(sites, **kwargs) -> MockInventoryClient:
        return MockInventoryClient(sites=sites, **kwargs)
    return _make
