"""Use cases layer - Business logic orchestration for alias sync.

This layer contains the stages of a sync run, each consuming the previous
stage's output:
- prioritize_sites: order sites by precedence
- AliasCollector: snapshot clients and collect existing aliases
- build_target_mapping: resolve each site's target aliases
- AliasApplier: write (or simulate) the missing aliases
- SyncAliasesUseCase: run the stages end to end

Use cases depend only on ports, not concrete implementations.
"""

from .apply_aliases import AliasApplier
from .collect_aliases import AliasCollector, CollectedAliases
from .context import SyncContext
from .prioritize_sites import prioritize_sites
from .resolve_aliases import alias_facts, build_target_mapping, resolve_sources
from .sync_aliases import SyncAliasesUseCase

__all__ = [
    "AliasApplier",
    "AliasCollector",
    "CollectedAliases",
    "SyncAliasesUseCase",
    "SyncContext",
    "alias_facts",
    "build_target_mapping",
    "prioritize_sites",
    "resolve_sources",
]
