"""Desired state and reconciliation outcome models."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from bitbucket_provider.exceptions import ConfigurationError
from bitbucket_provider.types.repos import GroupGrant, Repository, RepositoryRef


class ResourceState(str, Enum):
    """State of a repository as seen by a reconciliation pass."""

    MISSING = "missing"
    OUT_OF_DATE = "out_of_date"
    UP_TO_DATE = "up_to_date"


@dataclass(frozen=True)
class DesiredRepository:
    """
    Caller-declared target for a repository.

    ``groups`` keeps the caller's order, which is the order grants are
    applied on creation, but is compared as a set when detecting drift.
    """

    name: str
    project: str
    public: bool = False
    description: str | None = None
    groups: tuple[GroupGrant, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("repository name must not be empty")
        if not self.project:
            raise ConfigurationError("repository project must not be empty")

        groups = tuple(self.groups)
        seen: set[str] = set()
        for grant in groups:
            if grant.name in seen:
                raise ConfigurationError(
                    f"group {grant.name!r} is granted more than once on {self.project}/{self.name}"
                )
            seen.add(grant.name)
        object.__setattr__(self, "groups", groups)

    @classmethod
    def build(
        cls,
        name: str,
        project: str,
        public: bool = False,
        description: str | None = None,
        groups: Iterable[tuple[str, str]] | dict[str, str] = (),
    ) -> "DesiredRepository":
        """Build from plain (group, permission) pairs or a group->permission mapping."""
        pairs = groups.items() if isinstance(groups, dict) else groups
        return cls(
            name=name,
            project=project,
            public=public,
            description=description,
            groups=tuple(GroupGrant(name=g, permission=p) for g, p in pairs),
        )

    @property
    def ref(self) -> RepositoryRef:
        return RepositoryRef(project=self.project, name=self.name)

    def to_repository(self) -> Repository:
        """The repository payload to send on create and update."""
        return Repository(
            name=self.name,
            project=self.project,
            description=self.description,
            public=self.public,
        )


@dataclass(frozen=True)
class ReconciliationOutcome:
    """Result of observing a repository."""

    exists: bool
    up_to_date: bool = False  # meaningful only if exists
    id: int | None = None
    drift: tuple[str, ...] = ()

    @property
    def state(self) -> ResourceState:
        if not self.exists:
            return ResourceState.MISSING
        if self.up_to_date:
            return ResourceState.UP_TO_DATE
        return ResourceState.OUT_OF_DATE
