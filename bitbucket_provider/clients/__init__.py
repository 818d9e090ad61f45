"""Bitbucket provider resource clients."""

from bitbucket_provider.clients.projects import ProjectsClient
from bitbucket_provider.clients.protocol import AsyncRepositoryService, RepositoryService
from bitbucket_provider.clients.repos import ReposClient

__all__ = [
    "ProjectsClient",
    "ReposClient",
    "RepositoryService",
    "AsyncRepositoryService",
]
