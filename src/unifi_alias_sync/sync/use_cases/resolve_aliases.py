"""Target mapping resolution.

A site's target mapping is seeded with the operator's configured aliases,
which are final. Aliases observed on the *other* sites are then merged in
precedence order, and the first site to supply a MAC wins. A site never
merges in its own aliases.
"""

from collections.abc import Iterator, Mapping, Sequence

from ..domain.entities import AliasFact, Client, TargetMapping

# Source label for operator-configured aliases
CONFIG_SOURCE = "config"


def alias_facts(
    aliased_by_site: Mapping[str, Sequence[Client]],
    exclude_site: str | None = None,
) -> Iterator[AliasFact]:
    """Yield observed alias facts in precedence order.

    Args:
        aliased_by_site: Aliased clients per site, keyed in precedence order
        exclude_site: Site whose own facts are skipped
    """
    for site_name, clients in aliased_by_site.items():
        if site_name == exclude_site:
            continue
        for client in clients:
            if client.is_aliased:
                yield AliasFact(mac=client.mac, alias=client.name, source=site_name)


def resolve_sources(
    site_name: str,
    overrides: Mapping[str, str],
    aliased_by_site: Mapping[str, Sequence[Client]],
) -> dict[str, AliasFact]:
    """Resolve each MAC to the fact that supplies its alias for ``site_name``.

    Args:
        site_name: Site the mapping is for
        overrides: Operator-configured aliases (normalized MACs)
        aliased_by_site: Aliased clients per site, keyed in precedence order

    Returns:
        MAC -> winning AliasFact
    """
    resolved = {
        mac: AliasFact(mac=mac, alias=alias, source=CONFIG_SOURCE)
        for mac, alias in overrides.items()
    }
    for fact in alias_facts(aliased_by_site, exclude_site=site_name):
        # First writer wins
        if fact.mac not in resolved:
            resolved[fact.mac] = fact
    return resolved


def build_target_mapping(
    site_name: str,
    overrides: Mapping[str, str],
    aliased_by_site: Mapping[str, Sequence[Client]],
) -> TargetMapping:
    """Build the MAC -> alias mapping a site should converge toward."""
    resolved = resolve_sources(site_name, overrides, aliased_by_site)
    return {mac: fact.alias for mac, fact in resolved.items()}
