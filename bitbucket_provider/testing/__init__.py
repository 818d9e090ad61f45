"""Bitbucket provider testing utilities.

Provides an in-memory repository service and fixtures for testing code
that drives the reconciler.
"""

from bitbucket_provider.testing.fake import (
    AsyncFakeRepositoryService,
    FakeCall,
    FakeRepositoryService,
)
from bitbucket_provider.testing.fixtures import (
    create_desired_repository,
    create_repository,
)

__all__ = [
    # Fakes
    "FakeRepositoryService",
    "AsyncFakeRepositoryService",
    "FakeCall",
    # Helper functions
    "create_desired_repository",
    "create_repository",
]
