"""Repositories resource client."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from bitbucket_provider.exceptions import NotFoundError
from bitbucket_provider.logging import get_logger
from bitbucket_provider.types.repos import GroupGrant, Repository, RepositoryRef

if TYPE_CHECKING:
    from bitbucket_provider.transport import HTTPTransport

logger = get_logger("repos")


def _segment(value: str) -> str:
    return quote(value, safe="")


def repos_path(project: str) -> str:
    """Path of a project's repository collection."""
    return f"projects/{_segment(project)}/repos"


def repo_path(ref: RepositoryRef) -> str:
    """Path of a single repository."""
    return f"{repos_path(ref.project)}/{_segment(ref.name)}"


def groups_path(ref: RepositoryRef) -> str:
    """Path of a repository's group permission collection."""
    return f"{repo_path(ref)}/permissions/groups"


def serialize_repository(repository: Repository) -> dict[str, Any]:
    """Request body for create and update. Id and project are never sent."""
    return {
        "name": repository.name,
        "public": repository.public,
        "description": repository.description or "",
    }


def parse_repository(data: dict[str, Any]) -> Repository:
    """Parse repository JSON into a Repository."""
    return Repository(
        id=data["id"],
        name=data["name"],
        project=data["project"]["key"],
        description=data.get("description"),
        public=bool(data.get("public", False)),
    )


def parse_group_grant(entry: dict[str, Any]) -> GroupGrant:
    """Parse one entry of the group permission collection."""
    return GroupGrant(name=entry["group"]["name"], permission=entry["permission"])


class ReposClient:
    """Client for repository and repository-permission operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def get(self, ref: RepositoryRef) -> Repository:
        """
        Get a repository.

        Args:
            ref: Project key and repository slug

        Returns:
            Repository with its id

        Raises:
            NotFoundError: If the repository does not exist
        """
        data = self.transport.request("GET", repo_path(ref))
        return parse_repository(data)

    def create(self, repository: Repository) -> Repository:
        """
        Create a repository in its project.

        Args:
            repository: Repository to create; id is ignored

        Returns:
            The created Repository including its new id

        Raises:
            ConflictError: If the repository already exists
        """
        data = self.transport.request(
            "POST", repos_path(repository.project), body=serialize_repository(repository)
        )
        return parse_repository(data)

    def update(self, repository: Repository) -> Repository:
        """
        Update a repository.

        Args:
            repository: Desired repository attributes

        Returns:
            The updated Repository as returned by the server
        """
        data = self.transport.request(
            "PUT", repo_path(repository.ref), body=serialize_repository(repository)
        )
        return parse_repository(data)

    def delete(self, ref: RepositoryRef) -> None:
        """
        Delete a repository.

        Args:
            ref: Project key and repository slug
        """
        self.transport.request("DELETE", repo_path(ref), expect_body=False)

    def get_groups(self, ref: RepositoryRef) -> list[GroupGrant]:
        """
        List group permissions on a repository, across all pages.

        Args:
            ref: Project key and repository slug

        Returns:
            List of GroupGrant (empty if no group has access)
        """
        values = self.transport.paged_request(groups_path(ref))
        return [parse_group_grant(entry) for entry in values]

    def add_group(self, ref: RepositoryRef, grant: GroupGrant) -> None:
        """
        Grant a group a permission, overwriting any existing one.

        Args:
            ref: Project key and repository slug
            grant: Group name and permission level
        """
        self.transport.request(
            "PUT",
            groups_path(ref),
            params={"name": grant.name, "permission": grant.permission},
            expect_body=False,
        )

    def revoke_group(self, ref: RepositoryRef, grant: GroupGrant) -> bool:
        """
        Revoke a group's permission.

        Args:
            ref: Project key and repository slug
            grant: Group to revoke; the permission is not sent

        Returns:
            True if revoked, False if the server reported nothing to revoke
        """
        try:
            self.transport.request(
                "DELETE", groups_path(ref), params={"name": grant.name}, expect_body=False
            )
        except NotFoundError:
            logger.debug("No permission for group %s on %s to revoke", grant.name, ref)
            return False
        return True
