"""Repository-related data models."""

from dataclasses import dataclass

REPO_READ = "REPO_READ"
REPO_WRITE = "REPO_WRITE"
REPO_ADMIN = "REPO_ADMIN"

REPOSITORY_PERMISSIONS = (REPO_READ, REPO_WRITE, REPO_ADMIN)


@dataclass(frozen=True)
class RepositoryRef:
    """Addressing key for a repository: the API has no id-based paths."""

    project: str
    name: str

    def __str__(self) -> str:
        return f"{self.project}/{self.name}"


@dataclass(frozen=True)
class GroupGrant:
    """A group's permission on a repository."""

    name: str
    permission: str  # "REPO_READ", "REPO_WRITE", "REPO_ADMIN"


@dataclass(frozen=True)
class Repository:
    """Repository as stored on the server."""

    name: str
    project: str
    description: str | None = None
    public: bool = False
    id: int | None = None  # assigned by the server on creation

    @property
    def ref(self) -> RepositoryRef:
        return RepositoryRef(project=self.project, name=self.name)
