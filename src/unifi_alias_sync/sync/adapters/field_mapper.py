"""Field mapper for transforming controller API records into domain entities.

The controller reports sites from ``/api/self/sites`` and clients from
``stat/alluser``. This module is the only place that knows their field names.
"""

from typing import Any

from ..domain.entities import Client, Site, normalize_mac


class ControllerFieldMapper:
    """Maps UniFi controller API records to Site and Client entities.

    This class handles:
    - Field extraction (``desc`` -> description, ``_id`` -> id)
    - MAC normalization so identities join across sites

    Client names are kept exactly as stored. A name of only whitespace is
    still an alias and must never be written over.
    """

    def map_site(self, raw: dict[str, Any]) -> Site | None:
        """Transform a site record to a Site entity.

        Returns:
            Site entity, or None when the record has no usable name
        """
        name = (raw.get("name") or "").strip()
        if not name:
            return None

        return Site(
            name=name,
            description=raw.get("desc"),
            raw_data=raw,
        )

    def map_client(self, raw: dict[str, Any]) -> Client:
        """Transform a ``stat/alluser`` record to a Client entity.

        Raises:
            ValueError: If the record lacks an ``_id`` or ``mac``
        """
        client_id = raw.get("_id")
        mac = raw.get("mac")
        if not client_id or not mac:
            raise ValueError("client record is missing '_id' or 'mac'")

        return Client(
            id=str(client_id),
            mac=normalize_mac(str(mac)),
            name=raw.get("name") or None,
            raw_data=raw,
        )
