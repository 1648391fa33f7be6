"""Errors raised while talking to the controller or running a sync.

Every error carries the single line shown to the operator in ``message``.
Nothing here is retried: a run either completes, or ends at the CLI
boundary with that line and exit status 1.

    AliasSyncError
    ├── ConfigurationError        settings rejected before connecting
    ├── AuthenticationError
    │   └── InvalidCredentialsError
    ├── APIError                  HTTP error status or ``meta.rc == "error"``
    │   ├── NotFoundError         unknown site or client record
    │   └── ServerError           controller 5xx
    ├── NetworkError
    │   ├── ConnectionError
    │   └── TimeoutError
    └── SyncAbortedError          nothing to reconcile
"""
from typing import Any, Optional


class AliasSyncError(Exception):
    """Base class for every alias sync error.

    Attributes:
        message: Line reported to the operator
        details: Context for debug output (endpoint, site, ...)
        cause: Lower-level exception, also chained as ``__cause__``
    """

    code = "ALIAS_SYNC_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({context})"

    def to_dict(self) -> dict[str, Any]:
        """Debug representation, logged by the CLI on fatal errors."""
        return {
            "error_type": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "cause": repr(self.cause) if self.cause else None,
        }


class ConfigurationError(AliasSyncError):
    """Settings were missing or invalid.

    ``problems`` holds one line per rejected setting so all of them are
    reported together.
    """

    code = "CONFIGURATION_ERROR"

    def __init__(
        self,
        problems: list[str],
        missing_keys: Optional[list[str]] = None,
        message: str = "Terminating for invalid configuration.",
    ):
        self.problems = list(problems)
        self.missing_keys = list(missing_keys or [])
        super().__init__(message, details={"missing_keys": self.missing_keys} if self.missing_keys else None)


class AuthenticationError(AliasSyncError):
    code = "AUTHENTICATION_ERROR"


class InvalidCredentialsError(AuthenticationError):
    """The controller refused the admin login."""

    code = "INVALID_CREDENTIALS"

    def __init__(
        self,
        username: Optional[str] = None,
        controller: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        if username and controller:
            message = f"Controller at {controller} rejected login for '{username}'"
        else:
            message = "Invalid controller credentials"
        super().__init__(message, cause=cause)
        self.username = username
        self.controller = controller


class APIError(AliasSyncError):
    """The controller answered, but not with success.

    For ``meta.rc == "error"`` envelopes the HTTP status is 200 and
    ``message`` is the controller's own ``meta.msg`` (``api.err.*``), which
    is what a failed alias write reports as its error.

    Attributes:
        status_code: HTTP status
        endpoint: Path that was requested, without the controller URL
        method: HTTP method
    """

    code = "API_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int,
        endpoint: str,
        method: str = "GET",
        response_body: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        details: dict[str, Any] = {"status": status_code, "request": f"{method} {endpoint}"}
        if response_body:
            details["body"] = response_body[:200]
        super().__init__(message, details=details, cause=cause)
        self.status_code = status_code
        self.endpoint = endpoint
        self.method = method
        self.response_body = response_body


class NotFoundError(APIError):
    """HTTP 404 for a site-scoped path: unknown site or client record."""

    code = "NOT_FOUND"

    def __init__(
        self,
        endpoint: str,
        site: Optional[str] = None,
        client_id: Optional[str] = None,
        method: str = "GET",
        response_body: Optional[str] = None,
    ):
        if client_id:
            message = f"Client record {client_id} not found on site '{site}'"
        elif site:
            message = f"Site '{site}' not found on the controller"
        else:
            message = f"Controller has no endpoint {endpoint}"
        super().__init__(message, 404, endpoint, method=method, response_body=response_body)
        self.site = site
        self.client_id = client_id


class ServerError(APIError):
    code = "SERVER_ERROR"

    def __init__(self, status_code: int, endpoint: str, method: str = "GET", response_body: Optional[str] = None):
        super().__init__(
            f"Controller server error ({status_code}) for {method} {endpoint}",
            status_code,
            endpoint,
            method=method,
            response_body=response_body,
        )


class NetworkError(AliasSyncError):
    """The controller could not be talked to at all."""

    code = "NETWORK_ERROR"


class ConnectionError(NetworkError):
    code = "CONNECTION_ERROR"

    def __init__(self, host: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to connect to controller at {host}", details={"host": host}, cause=cause)
        self.host = host


class TimeoutError(NetworkError):
    code = "TIMEOUT_ERROR"

    def __init__(self, endpoint: str, timeout_seconds: float, cause: Optional[BaseException] = None):
        super().__init__(
            f"Controller request to {endpoint} timed out after {timeout_seconds:g}s",
            details={"endpoint": endpoint},
            cause=cause,
        )
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds


class SyncAbortedError(AliasSyncError):
    """The run found nothing to reconcile and stops.

    ``reason`` is one of the ``NO_SITES``, ``SINGLE_SITE`` or ``NO_ALIASES``
    constants; ``message`` is the terminal line, prefixed ``Error:`` or
    ``Notice:``.
    """

    code = "SYNC_ABORTED"

    NO_SITES = "no_sites"
    SINGLE_SITE = "single_site"
    NO_ALIASES = "no_aliases"

    MESSAGES = {
        NO_SITES: "Error: No sites found.",
        SINGLE_SITE: "Notice: Only one site found so there is no need to sync aliases across any other sites.",
        NO_ALIASES: "Notice: There are no clients with an alias on any site.",
    }

    def __init__(self, reason: str):
        super().__init__(self.MESSAGES[reason], details={"reason": reason})
        self.reason = reason

    @property
    def is_notice(self) -> bool:
        return self.message.startswith("Notice:")


__all__ = [
    "AliasSyncError",
    "ConfigurationError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "APIError",
    "NotFoundError",
    "ServerError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    "SyncAbortedError",
]
