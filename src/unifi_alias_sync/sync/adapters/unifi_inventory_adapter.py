"""UniFi controller adapter for the inventory port.

This adapter implements IInventoryClient and wraps UniFiControllerClient
to provide site, client and alias operations in domain terms.
"""

import logging
from typing import TYPE_CHECKING

from ..domain.entities import Client, Site
from ..domain.ports import IInventoryClient
from .field_mapper import ControllerFieldMapper

if TYPE_CHECKING:
    from ...api.client import UniFiControllerClient

logger = logging.getLogger(__name__)


class UniFiInventoryAdapter(IInventoryClient):
    """UniFi controller implementation of IInventoryClient.

    Raw records that cannot be mapped (no ``_id`` or ``mac``) are skipped
    with a warning rather than failing the whole enumeration.
    """

    def __init__(
        self,
        controller: "UniFiControllerClient",
        field_mapper: ControllerFieldMapper | None = None,
    ):
        """Initialize the adapter.

        Args:
            controller: Logged-in UniFiControllerClient instance
            field_mapper: Optional mapper override
        """
        self.controller = controller
        self.mapper = field_mapper or ControllerFieldMapper()

    async def list_sites(self) -> list[Site]:
        sites: list[Site] = []
        for raw in await self.controller.list_sites():
            site = self.mapper.map_site(raw)
            if site is not None:
                sites.append(site)
        return sites

    def select_site(self, name: str) -> None:
        self.controller.set_site(name)

    async def list_clients(self) -> list[Client]:
        clients: list[Client] = []
        for raw in await self.controller.stat_allusers():
            try:
                clients.append(self.mapper.map_client(raw))
            except ValueError as e:
                logger.warning(
                    f"Skipping client record {raw.get('_id', 'unknown')} "
                    f"on site {self.controller.site}: {e}"
                )
        return clients

    async def set_alias(self, client_id: str, alias: str) -> bool:
        return await self.controller.set_sta_name(client_id, alias)

    @property
    def last_error_message(self) -> str:
        return self.controller.last_error_message

    async def end_session(self) -> None:
        await self.controller.logout()
