"""Bitbucket provider - reconcile Bitbucket Server repositories toward a desired state."""

from bitbucket_provider.async_client import AsyncBitbucketClient
from bitbucket_provider.client import BitbucketClient
from bitbucket_provider.config import ConnectionConfig
from bitbucket_provider.exceptions import (
    BitbucketError,
    ConfigurationError,
    ConflictError,
    ErrorKind,
    MalformedResponseError,
    NotFoundError,
    PermissionDeniedError,
    TransportError,
    classify_error,
)
from bitbucket_provider.factory import async_connect, connect, connect_from_env
from bitbucket_provider.logging import configure_logging, get_logger
from bitbucket_provider.reconcile import AsyncRepositoryReconciler, RepositoryReconciler
from bitbucket_provider.transport import HTTPTransport
from bitbucket_provider.types import (
    DesiredRepository,
    GroupGrant,
    Project,
    ReconciliationOutcome,
    Repository,
    RepositoryRef,
    ResourceState,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Clients
    "BitbucketClient",
    "AsyncBitbucketClient",
    # Connection factory
    "connect",
    "async_connect",
    "connect_from_env",
    "ConnectionConfig",
    # Reconciliation
    "RepositoryReconciler",
    "AsyncRepositoryReconciler",
    # Types
    "DesiredRepository",
    "GroupGrant",
    "Project",
    "ReconciliationOutcome",
    "Repository",
    "RepositoryRef",
    "ResourceState",
    # Exceptions
    "BitbucketError",
    "ConfigurationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ConflictError",
    "MalformedResponseError",
    "TransportError",
    "ErrorKind",
    "classify_error",
    # Transport
    "HTTPTransport",
    # Logging
    "configure_logging",
    "get_logger",
]
