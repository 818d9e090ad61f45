"""Bitbucket provider async resource clients."""

from bitbucket_provider.async_clients.projects import AsyncProjectsClient
from bitbucket_provider.async_clients.repos import AsyncReposClient

__all__ = [
    "AsyncProjectsClient",
    "AsyncReposClient",
]
