"""Bitbucket provider type definitions.

This module exports all data model types used by the provider.
"""

from bitbucket_provider.types.desired import (
    DesiredRepository,
    ReconciliationOutcome,
    ResourceState,
)
from bitbucket_provider.types.projects import Project
from bitbucket_provider.types.repos import (
    REPO_ADMIN,
    REPO_READ,
    REPO_WRITE,
    REPOSITORY_PERMISSIONS,
    GroupGrant,
    Repository,
    RepositoryRef,
)

__all__ = [
    # Remote types
    "Project",
    "Repository",
    "RepositoryRef",
    "GroupGrant",
    # Permission levels
    "REPO_READ",
    "REPO_WRITE",
    "REPO_ADMIN",
    "REPOSITORY_PERMISSIONS",
    # Desired state
    "DesiredRepository",
    "ReconciliationOutcome",
    "ResourceState",
]
