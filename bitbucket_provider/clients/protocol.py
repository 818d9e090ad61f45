"""Repository service protocols.

The reconciliation engine depends on these protocols rather than on the
HTTP clients, so it can be driven by ``bitbucket_provider.testing`` fakes.
"""

from typing import Protocol, runtime_checkable

from bitbucket_provider.types.repos import GroupGrant, Repository, RepositoryRef


@runtime_checkable
class RepositoryService(Protocol):
    """Repository and group-permission operations."""

    def get(self, ref: RepositoryRef) -> Repository:
        """Fetch a repository. Raises NotFoundError if it does not exist."""
        ...

    def create(self, repository: Repository) -> Repository:
        """Create a repository and return it with its server-assigned id."""
        ...

    def update(self, repository: Repository) -> Repository:
        """Update a repository and return the server's copy."""
        ...

    def delete(self, ref: RepositoryRef) -> None:
        """Delete a repository."""
        ...

    def get_groups(self, ref: RepositoryRef) -> list[GroupGrant]:
        """List every group grant on a repository."""
        ...

    def add_group(self, ref: RepositoryRef, grant: GroupGrant) -> None:
        """Grant, or overwrite, a group's permission."""
        ...

    def revoke_group(self, ref: RepositoryRef, grant: GroupGrant) -> bool:
        """Revoke a group's permission. Returns False if there was none."""
        ...


@runtime_checkable
class AsyncRepositoryService(Protocol):
    """Async repository and group-permission operations."""

    async def get(self, ref: RepositoryRef) -> Repository: ...

    async def create(self, repository: Repository) -> Repository: ...

    async def update(self, repository: Repository) -> Repository: ...

    async def delete(self, ref: RepositoryRef) -> None: ...

    async def get_groups(self, ref: RepositoryRef) -> list[GroupGrant]: ...

    async def add_group(self, ref: RepositoryRef, grant: GroupGrant) -> None: ...

    async def revoke_group(self, ref: RepositoryRef, grant: GroupGrant) -> bool: ...
