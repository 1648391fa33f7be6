"""Synchronize client aliases across the sites of a UniFi controller."""

__version__ = "1.0.0"
