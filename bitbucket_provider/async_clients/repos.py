"""Async repositories resource client."""

from typing import TYPE_CHECKING

from bitbucket_provider.clients.repos import (
    groups_path,
    parse_group_grant,
    parse_repository,
    repo_path,
    repos_path,
    serialize_repository,
)
from bitbucket_provider.exceptions import NotFoundError
from bitbucket_provider.logging import get_logger
from bitbucket_provider.types.repos import GroupGrant, Repository, RepositoryRef

if TYPE_CHECKING:
    from bitbucket_provider.async_transport import AsyncHTTPTransport

logger = get_logger("repos")


class AsyncReposClient:
    """Async client for repository and repository-permission operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async repos client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def get(self, ref: RepositoryRef) -> Repository:
        """Get a repository. Raises NotFoundError if it does not exist."""
        data = await self.transport.request("GET", repo_path(ref))
        return parse_repository(data)

    async def create(self, repository: Repository) -> Repository:
        """Create a repository and return it with its new id."""
        data = await self.transport.request(
            "POST", repos_path(repository.project), body=serialize_repository(repository)
        )
        return parse_repository(data)

    async def update(self, repository: Repository) -> Repository:
        """Update a repository and return the server's copy."""
        data = await self.transport.request(
            "PUT", repo_path(repository.ref), body=serialize_repository(repository)
        )
        return parse_repository(data)

    async def delete(self, ref: RepositoryRef) -> None:
        """Delete a repository."""
        await self.transport.request("DELETE", repo_path(ref), expect_body=False)

    async def get_groups(self, ref: RepositoryRef) -> list[GroupGrant]:
        """List group permissions on a repository, across all pages."""
        values = await self.transport.paged_request(groups_path(ref))
        return [parse_group_grant(entry) for entry in values]

    async def add_group(self, ref: RepositoryRef, grant: GroupGrant) -> None:
        """Grant a group a permission, overwriting any existing one."""
        await self.transport.request(
            "PUT",
            groups_path(ref),
            params={"name": grant.name, "permission": grant.permission},
            expect_body=False,
        )

    async def revoke_group(self, ref: RepositoryRef, grant: GroupGrant) -> bool:
        """Revoke a group's permission. Returns False if there was none."""
        try:
            await self.transport.request(
                "DELETE", groups_path(ref), params={"name": grant.name}, expect_body=False
            )
        except NotFoundError:
            logger.debug("No permission for group %s on %s to revoke", grant.name, ref)
            return False
        return True
