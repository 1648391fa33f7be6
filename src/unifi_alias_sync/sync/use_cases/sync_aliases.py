"""Sync Aliases Use Case - Orchestrates the cross-site alias reconciliation.

This use case implements the business logic for propagating client aliases
between the sites of one controller. It depends on the IInventoryClient
port for all controller operations, making it fully testable without a
controller.

Workflow:
1. Enumerate sites and order them by precedence
2. Abort if there is nothing to reconcile
3. Snapshot every site's clients and collect the aliased ones
4. Abort if no alias exists anywhere and none is configured
5. For each site, resolve its target mapping and apply it
6. Release the controller session, whatever happened
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone

from ...api.exceptions import SyncAbortedError
from ..domain.entities import SyncResult, normalize_mac
from ..domain.ports import IInventoryClient
from .apply_aliases import AliasApplier
from .collect_aliases import AliasCollector
from .context import SyncContext
from .prioritize_sites import prioritize_sites
from .resolve_aliases import build_target_mapping, resolve_sources

logger = logging.getLogger(__name__)


class SyncAliasesUseCase:
    """Orchestrates the alias sync workflow.

    Fatal conditions raise SyncAbortedError; the session is released in
    ``execute()`` before the error reaches the caller. A failed alias write
    is never fatal.

    Example:
        use_case = SyncAliasesUseCase(
            inventory=UniFiInventoryAdapter(controller),
            overrides={"aa:bb:cc:dd:ee:02": "server-1"},
            prioritized_sites=["hq"],
            dry_run=False,
        )
        result = await use_case.execute()
    """

    def __init__(
        self,
        inventory: IInventoryClient,
        overrides: Mapping[str, str] | None = None,
        prioritized_sites: Sequence[str] = (),
        dry_run: bool = True,
    ):
        """Initialize the use case with its dependencies.

        Args:
            inventory: Port for controller reads and writes
            overrides: Operator-configured MAC -> alias mapping
            prioritized_sites: Site names ranked above all others, in order
            dry_run: Report intended writes without performing them
        """
        self.inventory = inventory
        self.overrides = {normalize_mac(mac): alias for mac, alias in (overrides or {}).items()}
        self.prioritized_sites = list(prioritized_sites)
        self.dry_run = dry_run

    async def execute(self) -> SyncResult:
        """Run the sync and release the session afterwards.

        Returns:
            SyncResult with per-site outcomes

        Raises:
            SyncAbortedError: If there is nothing to reconcile
            AliasSyncError: If the controller cannot be read
        """
        try:
            return await self._reconcile()
        finally:
            await self.inventory.end_session()

    async def _reconcile(self) -> SyncResult:
        started_at = datetime.now(timezone.utc)
        context = SyncContext(self.inventory)

        sites = prioritize_sites(await self.inventory.list_sites(), self.prioritized_sites)

        if not sites:
            raise SyncAbortedError(SyncAbortedError.NO_SITES)
        if len(sites) == 1 and not self.overrides:
            raise SyncAbortedError(SyncAbortedError.SINGLE_SITE)

        logger.info(f"Sites found: {len(sites)}")
        logger.debug(
            "Site precedence: "
            + ", ".join(f"{s.name} ({s.description})" if s.description else s.name for s in sites)
        )

        if self.overrides:
            logger.info(f"  Configuration has {len(self.overrides)} client aliases defined.")
            for mac, alias in self.overrides.items():
                logger.info(f"    '{mac}' => '{alias}'")

        collected = await AliasCollector(context).collect(sites)

        if not collected.has_aliases and not self.overrides:
            raise SyncAbortedError(SyncAbortedError.NO_ALIASES)

        result = SyncResult(dry_run=self.dry_run, started_at=started_at)
        applier = AliasApplier(self.inventory, dry_run=self.dry_run)

        for site in sites:
            target = build_target_mapping(site.name, self.overrides, collected.aliased_by_site)
            if logger.isEnabledFor(logging.DEBUG):
                for mac, fact in resolve_sources(site.name, self.overrides, collected.aliased_by_site).items():
                    logger.debug(f"  {site.name}: {mac} -> '{fact.alias}' (from {fact.source})")

            clients = await context.get_clients(site.name)
            result.sites.append(await applier.apply(site, clients, target))

        result.completed_at = datetime.now(timezone.utc)
        logger.info(
            f"Clients {'to be ' if self.dry_run else ''}assigned an alias: {result.total_assigned}, "
            f"failed: {result.total_failed}, left with a different alias: {result.total_conflicts}."
        )
        logger.info("Done.")
        return result
