"""Projects resource client."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from bitbucket_provider.types.projects import Project

if TYPE_CHECKING:
    from bitbucket_provider.transport import HTTPTransport


def parse_project(data: dict[str, Any]) -> Project:
    """Parse project JSON into a Project."""
    return Project(
        id=data["id"],
        key=data["key"],
        name=data.get("name", data["key"]),
        description=data.get("description"),
        public=bool(data.get("public", False)),
    )


class ProjectsClient:
    """Client for project operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def list(self) -> list[Project]:
        """List every project visible to the credentials."""
        return [parse_project(p) for p in self.transport.paged_request("projects")]

    def get(self, key: str) -> Project:
        """
        Get a project by key.

        Raises:
            NotFoundError: If the project does not exist
        """
        data = self.transport.request("GET", f"projects/{quote(key, safe='')}")
        return parse_project(data)
