"""Custom exceptions for the staffing cache layer.

All exceptions are namespaced under StaffingCacheError so callers can
catch any failure of this package with a single except clause.
"""

from typing import Any


class StaffingCacheError(Exception):
    """Base exception for all staffing cache errors."""

    def __init__(self, message: str, key: str | None = None) -> None:
        """Initialize staffing cache error.

        Args:
            message: Error description
            key: Cache key involved, if any
        """
        self.key = key
        super().__init__(message)


class CacheSerializationError(StaffingCacheError):
    """Raised when a cache envelope cannot be encoded or decoded.

    The store always recovers from this error by treating the entry
    as absent; it never reaches callers of the store.
    """

    def __init__(
        self,
        message: str,
        key: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize serialization error.

        Args:
            message: Error description
            key: Cache key whose entry failed
            cause: Original exception raised by the codec
        """
        self.cause = cause
        if cause:
            self.__cause__ = cause
        super().__init__(message, key)


class InvalidCacheKeyError(StaffingCacheError):
    """Raised when a cache key, category, or period is malformed."""

    def __init__(self, message: str, value: Any | None = None) -> None:
        """Initialize key error.

        Args:
            message: Error description
            value: The offending value
        """
        self.value = value
        super().__init__(message)


class ClientError(StaffingCacheError):
    """Raised when an external service client fails.

    This is the base class for service-specific client errors.
    """

    def __init__(
        self,
        message: str,
        service_name: str,
        status_code: int | None = None,
    ) -> None:
        """Initialize client error.

        Args:
            message: Error description
            service_name: Name of the external service
            status_code: HTTP status code if applicable
        """
        self.service_name = service_name
        self.status_code = status_code
        super().__init__(message)


class RemoteUnavailable(ClientError):
    """Raised when the remote document store cannot serve a fetch."""

    def __init__(
        self,
        message: str,
        resource: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.resource = resource
        super().__init__(message, "document-store", status_code)
