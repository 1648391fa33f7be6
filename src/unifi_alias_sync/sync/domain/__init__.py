"""Domain layer - Pure domain entities and port interfaces.

This layer contains:
- Entities: Pure data structures representing sites, clients and outcomes
- Ports: Abstract interfaces defining contracts for adapters

No infrastructure dependencies allowed in this layer.
"""

from .entities import (
    DEFAULT_SITE_NAME,
    AliasAssignment,
    AliasFact,
    AliasOutcome,
    Client,
    Site,
    SiteSyncResult,
    SyncResult,
    TargetMapping,
    is_valid_mac,
    normalize_mac,
)
from .ports import IInventoryClient

__all__ = [
    # Entities
    "AliasAssignment",
    "AliasFact",
    "AliasOutcome",
    "Client",
    "Site",
    "TargetMapping",
    # Result Entities
    "SiteSyncResult",
    "SyncResult",
    # Helpers
    "DEFAULT_SITE_NAME",
    "is_valid_mac",
    "normalize_mac",
    # Ports
    "IInventoryClient",
]
