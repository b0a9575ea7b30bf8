"""Exceptions raised by DataHub operations."""

from __future__ import annotations

from collections.abc import Iterable


class DataHubError(Exception):
    """Base class for all DataHub errors.

    An optional detail is appended to the class's default message.
    """

    default_message = "datahub error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        if detail is None:
            message = self.default_message
        else:
            message = f"{self.default_message}: {detail}"
        super().__init__(message)


class ConfigError(DataHubError, ValueError):
    """The configuration is missing a value or holds an invalid one."""

    default_message = "invalid configuration"

    def __init__(self, message: str) -> None:
        self.detail = message
        Exception.__init__(self, message)


class UnauthorizedError(DataHubError):
    """The authentication token is invalid or missing."""

    default_message = "unauthorized: invalid or missing token"


class ForbiddenError(DataHubError):
    """The token lacks the permissions for the request."""

    default_message = "forbidden: insufficient permissions"


class NotFoundError(DataHubError, LookupError):
    """The requested entity does not exist."""

    default_message = "entity not found"


class InvalidURNError(DataHubError, ValueError):
    """A URN does not follow the DataHub format."""

    default_message = "invalid DataHub URN format"


class RequestTimeoutError(DataHubError, TimeoutError):
    """The request did not complete in time."""

    default_message = "request timed out"


class RateLimitedError(DataHubError):
    """DataHub refused the request because of rate limiting."""

    default_message = "rate limited by DataHub"


class NotConfiguredError(DataHubError):
    """The client has not been configured."""

    default_message = "datahub client not configured"


class UnknownConnectionError(DataHubError, LookupError):
    """A named connection is not part of the configuration."""

    default_message = "unknown connection"

    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        self.name = name
        self.available = list(available)
        self.detail = f"{name!r} (available: {self.available})"
        Exception.__init__(self, f"{self.default_message}: {self.detail}")