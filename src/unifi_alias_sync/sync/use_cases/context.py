"""Run-scoped state shared by the alias sync stages."""

import logging

from ..domain.entities import Client
from ..domain.ports import IInventoryClient

logger = logging.getLogger(__name__)


class SyncContext:
    """Owns the inventory handle and the per-site client snapshot for one run.

    Each site's client list is fetched at most once. The applier reads the
    same cached snapshot the resolver reasoned about, so aliases written
    during the run never feed back into the merge.
    """

    def __init__(self, inventory: IInventoryClient):
        self.inventory = inventory
        self._clients: dict[str, list[Client]] = {}

    async def get_clients(self, site_name: str) -> list[Client]:
        """Return the site's clients, fetching them on first use."""
        if site_name not in self._clients:
            self.inventory.select_site(site_name)
            self._clients[site_name] = await self.inventory.list_clients()
            logger.debug(f"Cached {len(self._clients[site_name])} clients for site {site_name}")
        return self._clients[site_name]
