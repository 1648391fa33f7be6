"""Alias application for one site.

Walks a site's cached clients against its target mapping and writes only
the aliases that are missing. Existing aliases are never overwritten, and
a failed write is reported and skipped without stopping the run.
"""

import logging

from ..domain.entities import (
    AliasAssignment,
    AliasOutcome,
    Client,
    Site,
    SiteSyncResult,
    TargetMapping,
)
from ..domain.ports import IInventoryClient

logger = logging.getLogger(__name__)


class AliasApplier:
    """Performs (or, in a dry run, simulates) the alias writes for a site.

    Example:
        applier = AliasApplier(inventory, dry_run=True)
        result = await applier.apply(site, clients, target)
    """

    def __init__(self, inventory: IInventoryClient, dry_run: bool = True):
        self.inventory = inventory
        self.dry_run = dry_run

    async def apply(
        self,
        site: Site,
        clients: list[Client],
        target: TargetMapping,
    ) -> SiteSyncResult:
        """Apply ``target`` to the clients of ``site``.

        Args:
            site: Site being processed
            clients: The site's cached client snapshot
            target: The site's resolved MAC -> alias mapping

        Returns:
            SiteSyncResult with one assignment record per matched client
        """
        logger.info(f"About to assign client aliases to site {site.name}...")

        result = SiteSyncResult(
            site_name=site.name,
            total_clients=len(clients),
            aliased_clients=sum(1 for c in clients if c.is_aliased),
            target_size=len(target),
        )

        if not self.dry_run:
            self.inventory.select_site(site.name)

        for client in clients:
            alias = target.get(client.mac)
            if alias is None:
                continue

            if client.is_aliased:
                result.assignments.append(self._report_existing(site, client, alias))
            else:
                result.assignments.append(await self._assign(site, client, alias))

        if result.assigned_count:
            logger.info(f"  Clients assigned an alias: {result.assigned_count}.")
        else:
            logger.info("  No clients assigned an alias.")

        return result

    def _report_existing(self, site: Site, client: Client, alias: str) -> AliasAssignment:
        if client.name == alias:
            logger.info(f"  Client {client.mac} already has the alias \"{client.name}\".")
            outcome = AliasOutcome.ALREADY_ALIASED
        else:
            logger.info(
                f"  Client {client.mac} already aliased as \"{client.name}\" "
                f"(thus not getting aliased as \"{alias}\")."
            )
            outcome = AliasOutcome.CONFLICT

        return AliasAssignment(
            site_name=site.name,
            mac=client.mac,
            client_id=client.id,
            target_alias=alias,
            current_alias=client.name,
            outcome=outcome,
        )

    async def _assign(self, site: Site, client: Client, alias: str) -> AliasAssignment:
        assignment = AliasAssignment(
            site_name=site.name,
            mac=client.mac,
            client_id=client.id,
            target_alias=alias,
            current_alias=client.name,
            outcome=AliasOutcome.WOULD_ASSIGN,
        )

        if self.dry_run:
            logger.info(f"  Would have set alias for {client.mac} to \"{alias}\".")
            return assignment

        if await self.inventory.set_alias(client.id, alias):
            logger.info(f"  Setting alias for {client.mac} to \"{alias}\".")
            assignment.outcome = AliasOutcome.ASSIGNED
        else:
            assignment.outcome = AliasOutcome.FAILED
            assignment.error = self.inventory.last_error_message
            logger.warning(
                f"  Warning: Unable to set alias for {client.mac} to \"{alias}\" "
                f"({assignment.error})."
            )

        return assignment
