"""Site precedence ordering.

Order: the operator's explicitly prioritized sites (in the order given),
then the ``default`` site, then every other site by name.
"""

from collections.abc import Iterable, Sequence

from ..domain.entities import DEFAULT_SITE_NAME, Site


def prioritize_sites(
    sites: Iterable[Site],
    prioritized_names: Sequence[str] = (),
    default_name: str = DEFAULT_SITE_NAME,
) -> list[Site]:
    """Order sites by precedence, highest first.

    Names in ``prioritized_names`` that match no site are ignored. Every
    site appears exactly once in the result.

    Args:
        sites: Sites as enumerated from the controller
        prioritized_names: Operator-ordered site names to rank first
        default_name: Site ranked right after the prioritized ones

    Returns:
        Sites in precedence order
    """
    remaining = {site.name: site for site in sites}

    ordered: list[Site] = []
    for name in prioritized_names:
        site = remaining.pop(name, None)
        if site is not None:
            ordered.append(site)

    default_site = remaining.pop(default_name, None)
    if default_site is not None:
        ordered.append(default_site)

    # str ordering is by code point, independent of locale
    ordered.extend(remaining[name] for name in sorted(remaining))
    return ordered
