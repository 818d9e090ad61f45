"""Async projects resource client."""

from typing import TYPE_CHECKING
from urllib.parse import quote

from bitbucket_provider.clients.projects import parse_project
from bitbucket_provider.types.projects import Project

if TYPE_CHECKING:
    from bitbucket_provider.async_transport import AsyncHTTPTransport


class AsyncProjectsClient:
    """Async client for project operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def list(self) -> list[Project]:
        """List every project visible to the credentials."""
        values = await self.transport.paged_request("projects")
        return [parse_project(p) for p in values]

    async def get(self, key: str) -> Project:
        """Get a project by key. Raises NotFoundError if it does not exist."""
        data = await self.transport.request("GET", f"projects/{quote(key, safe='')}")
        return parse_project(data)
