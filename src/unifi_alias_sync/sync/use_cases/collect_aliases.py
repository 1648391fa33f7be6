"""Alias collection across sites.

For every site, in precedence order, fetch its clients (through the run
context cache) and keep the ones that already carry an alias.
"""

import logging
from dataclasses import dataclass, field

from ..domain.entities import Client, Site
from .context import SyncContext

logger = logging.getLogger(__name__)


@dataclass
class CollectedAliases:
    """Aliased clients per site, keyed in precedence order.

    Sites without any aliased client are absent from ``aliased_by_site``
    but still present in ``client_counts``.
    """

    aliased_by_site: dict[str, list[Client]] = field(default_factory=dict)
    client_counts: dict[str, int] = field(default_factory=dict)

    @property
    def has_aliases(self) -> bool:
        return bool(self.aliased_by_site)

    def aliased_count(self, site_name: str) -> int:
        return len(self.aliased_by_site.get(site_name, []))


class AliasCollector:
    """Collects the aliased clients of every site.

    Example:
        collector = AliasCollector(SyncContext(inventory))
        collected = await collector.collect(prioritized_sites)
    """

    def __init__(self, context: SyncContext):
        self.context = context

    async def collect(self, sites: list[Site]) -> CollectedAliases:
        """Snapshot all sites and extract their aliased clients.

        Must finish for every site before any alias is written.

        Args:
            sites: Sites in precedence order

        Returns:
            CollectedAliases preserving the given site order
        """
        collected = CollectedAliases()

        for site in sites:
            clients = await self.context.get_clients(site.name)
            aliased = [client for client in clients if client.is_aliased]

            collected.client_counts[site.name] = len(clients)
            if aliased:
                collected.aliased_by_site[site.name] = aliased

            logger.info(
                f"  Site {site.name} has {len(clients)} clients, "
                f"{len(aliased)} of which are aliased."
            )
            for client in aliased:
                logger.info(f"    '{client.mac}' => '{client.name}'")

        return collected
