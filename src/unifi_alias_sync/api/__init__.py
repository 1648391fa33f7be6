"""UniFi controller API modules.

Classes:
    UniFiControllerClient: Session-based HTTP client for the controller

Exceptions:
    AliasSyncError: Base exception for all alias sync errors
    ConfigurationError: Missing or invalid configuration
    AuthenticationError: Controller login failures
    APIError: Controller request failures
    NetworkError: Network connectivity issues
    SyncAbortedError: Run terminated, nothing to reconcile
"""
from .client import DEFAULT_HISTORY_HOURS, UniFiControllerClient
from .exceptions import (
    AliasSyncError,
    APIError,
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    InvalidCredentialsError,
    NetworkError,
    NotFoundError,
    ServerError,
    SyncAbortedError,
    TimeoutError,
)

__all__ = [
    # Client
    "DEFAULT_HISTORY_HOURS",
    "UniFiControllerClient",
    # Exceptions
    "AliasSyncError",
    "APIError",
    "AuthenticationError",
    "ConfigurationError",
    "ConnectionError",
    "InvalidCredentialsError",
    "NetworkError",
    "NotFoundError",
    "ServerError",
    "SyncAbortedError",
    "TimeoutError",
]
