"""Adapters layer - Infrastructure implementations for alias sync operations.

This layer contains concrete implementations of the ports defined in the domain layer:
- UniFiInventoryAdapter: UniFi controller implementation of IInventoryClient
- ControllerFieldMapper: Maps controller API records to domain entities
"""

from .field_mapper import ControllerFieldMapper
from .unifi_inventory_adapter import UniFiInventoryAdapter

__all__ = [
    "ControllerFieldMapper",
    "UniFiInventoryAdapter",
]
