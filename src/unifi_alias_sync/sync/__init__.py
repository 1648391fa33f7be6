"""Sync module - Clean Architecture implementation of cross-site alias sync.

Architecture:
    domain/     - Pure domain entities and port interfaces
    use_cases/  - Business logic orchestration
    adapters/   - Infrastructure implementations (UniFi controller)
"""

from .domain.entities import (
    AliasAssignment,
    AliasFact,
    AliasOutcome,
    Client,
    Site,
    SiteSyncResult,
    SyncResult,
    TargetMapping,
)
from .domain.ports import IInventoryClient
from .use_cases.sync_aliases import SyncAliasesUseCase

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
    # Ports
    "IInventoryClient",
    # Use Cases
    "SyncAliasesUseCase",
]
