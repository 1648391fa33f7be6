"""Domain entities for alias sync operations.

These are pure data structures with no infrastructure dependencies.
They represent the core business objects used in alias reconciliation.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

# Six hex octets, all separated by the same delimiter (":" or "-")
MAC_ADDRESS_PATTERN = re.compile(r"^[0-9A-Fa-f]{2}([-:])(?:[0-9A-Fa-f]{2}\1){4}[0-9A-Fa-f]{2}$")

# Site that ranks right after the operator's explicitly prioritized sites
DEFAULT_SITE_NAME = "default"

# Identity -> alias; what a site's clients should end up being named
TargetMapping = dict[str, str]


def is_valid_mac(value: str) -> bool:
    """Check for a colon- or hyphen-delimited 6-octet hex address."""
    return bool(MAC_ADDRESS_PATTERN.match(value or ""))


def normalize_mac(value: str) -> str:
    """Canonical form used as the cross-site join key: ``aa:bb:cc:dd:ee:ff``."""
    return value.strip().lower().replace("-", ":")


@dataclass(frozen=True)
class Site:
    """Domain entity representing a controller site (a partition).

    Sites are enumerated once at the start of a run and never change
    afterwards.
    """

    name: str
    description: str | None = None
    raw_data: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass
class Client:
    """Domain entity representing a network client known to one site.

    The same physical client appears once per site it has been seen on,
    with a different ``id`` but the same ``mac``.
    """

    # Site-scoped record id, used for alias writes
    id: str

    # Cross-site identity (normalized)
    mac: str

    # The alias exactly as the controller stores it; empty or None when unaliased
    name: str | None = None

    raw_data: dict[str, Any] = field(default_factory=dict)

    @property
    def is_aliased(self) -> bool:
        """Business rule: only a non-empty name counts as an alias."""
        return bool(self.name)


@dataclass(frozen=True)
class AliasFact:
    """An (identity, alias) pair observed on a site or configured by the operator."""

    mac: str
    alias: str
    source: str


class AliasOutcome(str, Enum):
    """What happened to one client whose MAC had a target alias."""

    ASSIGNED = "assigned"
    WOULD_ASSIGN = "would_assign"
    FAILED = "failed"
    ALREADY_ALIASED = "already_aliased"
    CONFLICT = "conflict"


@dataclass
class AliasAssignment:
    """Record of one client compared against its site's target mapping."""

    site_name: str
    mac: str
    client_id: str
    target_alias: str
    outcome: AliasOutcome
    current_alias: str | None = None
    error: str | None = None

    @property
    def counts_as_assigned(self) -> bool:
        return self.outcome in (AliasOutcome.ASSIGNED, AliasOutcome.WOULD_ASSIGN)


@dataclass
class SiteSyncResult:
    """Result of applying a target mapping to one site."""

    site_name: str
    total_clients: int = 0
    aliased_clients: int = 0
    target_size: int = 0
    assignments: list[AliasAssignment] = field(default_factory=list)

    @property
    def assigned_count(self) -> int:
        """Clients assigned (or, in a dry run, to be assigned) an alias."""
        return sum(1 for a in self.assignments if a.counts_as_assigned)

    @property
    def failed_count(self) -> int:
        return sum(1 for a in self.assignments if a.outcome is AliasOutcome.FAILED)

    @property
    def conflict_count(self) -> int:
        return sum(1 for a in self.assignments if a.outcome is AliasOutcome.CONFLICT)


@dataclass
class SyncResult:
    """Result of a full alias sync run across all sites."""

    dry_run: bool
    started_at: datetime
    completed_at: datetime | None = None
    sites: list[SiteSyncResult] = field(default_factory=list)

    @property
    def total_assigned(self) -> int:
        return sum(s.assigned_count for s in self.sites)

    @property
    def total_failed(self) -> int:
        return sum(s.failed_count for s in self.sites)

    @property
    def total_conflicts(self) -> int:
        return sum(s.conflict_count for s in self.sites)

    @property
    def duration_seconds(self) -> float | None:
        """Calculate sync duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for summaries and JSON output."""
        return {
            "dry_run": self.dry_run,
            "sites": {s.site_name: s.assigned_count for s in self.sites},
            "assigned": self.total_assigned,
            "failed": self.total_failed,
            "conflicts": self.total_conflicts,
            "started_at": self.started_at.isoformat(),
            "duration_seconds": self.duration_seconds,
        }
