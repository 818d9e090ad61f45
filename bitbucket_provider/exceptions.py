"""Bitbucket provider exception classes and error classification."""

import asyncio
from enum import Enum


class ErrorKind(str, Enum):
    """Classification attached to every failed operation."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission"
    CONFLICT = "conflict"
    MALFORMED = "response_malformed"
    TRANSPORT = "transport"
    CANCELLED = "cancelled"
    CONFIGURATION = "configuration"


class BitbucketError(Exception):
    """Base exception for all Bitbucket provider errors."""

    kind: ErrorKind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.url = url
        self.status_code = status_code
        super().__init__(f"[{self.kind.value}] {message}")


class ConfigurationError(BitbucketError):
    """Raised when provider configuration or a desired state is invalid."""

    kind = ErrorKind.CONFIGURATION


class NotFoundError(BitbucketError):
    """Raised when the requested resource does not exist (404)."""

    kind = ErrorKind.NOT_FOUND


class PermissionDeniedError(BitbucketError):
    """Raised when the credentials are rejected (401)."""

    kind = ErrorKind.PERMISSION_DENIED


class ConflictError(BitbucketError):
    """Raised when creating a resource that already exists (409)."""

    kind = ErrorKind.CONFLICT


class MalformedResponseError(BitbucketError):
    """Raised when a response body is not valid JSON."""

    kind = ErrorKind.MALFORMED


class TransportError(BitbucketError):
    """Raised on network failures, timeouts and unexpected status codes."""

    kind = ErrorKind.TRANSPORT


def classify_error(error: BaseException) -> ErrorKind:
    """
    Map any exception raised by the provider to an ErrorKind.

    Cancellation is left to propagate as ``asyncio.CancelledError`` so that
    asyncio's own machinery keeps working; this function is how a caller
    tells it apart from the HTTP error kinds.

    Args:
        error: The exception to classify

    Returns:
        The ErrorKind for the exception. Anything unrecognised is TRANSPORT.
    """
    if isinstance(error, BitbucketError):
        return error.kind
    if isinstance(error, asyncio.CancelledError):
        return ErrorKind.CANCELLED
    return ErrorKind.TRANSPORT
