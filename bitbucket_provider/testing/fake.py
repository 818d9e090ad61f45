"""
In-memory repository service for testing.

Provides FakeRepositoryService, which implements RepositoryService against
a dict instead of a Bitbucket server, recording every call so tests can
assert on the exact sequence the reconciler issued.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from bitbucket_provider.exceptions import ConflictError, NotFoundError
from bitbucket_provider.types.repos import GroupGrant, Repository, RepositoryRef


@dataclass
class FakeCall:
    """Record of a method call."""

    method: str
    args: tuple[Any, ...]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class FakeRepositoryService:
    """
    Fake repository service for testing.

    Behaves like the server for the operations the reconciler uses:
    creating an existing repository conflicts, touching a missing one is
    NotFound, granting overwrites, and deleting drops the grants too.

    Example:
        ```python
        from bitbucket_provider.reconcile import RepositoryReconciler
        from bitbucket_provider.testing import FakeRepositoryService

        fake = FakeRepositoryService()
        reconciler = RepositoryReconciler(fake)
        reconciler.create(desired)

        assert fake.call_count("create") == 1
        assert reconciler.observe(desired).up_to_date
        ```
    """

    def __init__(self) -> None:
        self.repositories: dict[RepositoryRef, Repository] = {}
        self.grants: dict[RepositoryRef, dict[str, str]] = {}
        self._calls: list[FakeCall] = []
        self._errors: dict[str, Exception] = {}
        self._next_id = 1

    # =========================================================================
    # Test setup helpers
    # =========================================================================

    def seed(
        self,
        repository: Repository,
        groups: dict[str, str] | None = None,
    ) -> Repository:
        """Put a repository (and its grants) on the fake server without recording a call."""
        if repository.id is None:
            repository = replace(repository, id=self._allocate_id())
        self.repositories[repository.ref] = repository
        self.grants[repository.ref] = dict(groups or {})
        return repository

    def configure_error(self, method: str, error: Exception) -> None:
        """Raise ``error`` from every subsequent call to ``method``."""
        self._errors[method] = error

    def clear_error(self, method: str) -> None:
        """Stop raising a configured error."""
        self._errors.pop(method, None)

    # =========================================================================
    # Call inspection
    # =========================================================================

    def was_called(self, method: str) -> bool:
        """Check if a method was called at least once."""
        return any(call.method == method for call in self._calls)

    def call_count(self, method: str) -> int:
        """Get the number of times a method was called."""
        return sum(1 for call in self._calls if call.method == method)

    def get_calls(self, method: str | None = None) -> list[FakeCall]:
        """Get recorded calls, optionally filtered by method."""
        if method is None:
            return list(self._calls)
        return [call for call in self._calls if call.method == method]

    def mutations(self) -> list[tuple[Any, ...]]:
        """
        Mutating calls as compact tuples, in call order.

        ``("create", ref)``, ``("update", ref)``, ``("delete", ref)``,
        ``("add_group", name, permission)`` and ``("revoke_group", name)``.
        """
        result: list[tuple[Any, ...]] = []
        for call in self._calls:
            if call.method in ("create", "update"):
                result.append((call.method, call.args[0].ref))
            elif call.method == "delete":
                result.append(("delete", call.args[0]))
            elif call.method == "add_group":
                grant = call.args[1]
                result.append(("add_group", grant.name, grant.permission))
            elif call.method == "revoke_group":
                result.append(("revoke_group", call.args[1].name))
        return result

    def reset(self) -> None:
        """Reset recorded calls and configured errors. Stored state is kept."""
        self._calls.clear()
        self._errors.clear()

    # =========================================================================
    # RepositoryService
    # =========================================================================

    def get(self, ref: RepositoryRef) -> Repository:
        self._record("get", ref)
        return self._require(ref)

    def create(self, repository: Repository) -> Repository:
        self._record("create", repository)
        if repository.ref in self.repositories:
            raise ConflictError(f"repository {repository.ref} already exists")
        created = replace(repository, id=self._allocate_id())
        self.repositories[created.ref] = created
        self.grants[created.ref] = {}
        return created

    def update(self, repository: Repository) -> Repository:
        self._record("update", repository)
        current = self._require(repository.ref)
        updated = replace(repository, id=current.id)
        self.repositories[updated.ref] = updated
        return updated

    def delete(self, ref: RepositoryRef) -> None:
        self._record("delete", ref)
        self._require(ref)
        del self.repositories[ref]
        self.grants.pop(ref, None)

    def get_groups(self, ref: RepositoryRef) -> list[GroupGrant]:
        self._record("get_groups", ref)
        self._require(ref)
        return [
            GroupGrant(name=name, permission=permission)
            for name, permission in self.grants[ref].items()
        ]

    def add_group(self, ref: RepositoryRef, grant: GroupGrant) -> None:
        self._record("add_group", ref, grant)
        self._require(ref)
        self.grants[ref][grant.name] = grant.permission

    def revoke_group(self, ref: RepositoryRef, grant: GroupGrant) -> bool:
        self._record("revoke_group", ref, grant)
        self._require(ref)
        return self.grants[ref].pop(grant.name, None) is not None

    # =========================================================================
    # Internals
    # =========================================================================

    def _record(self, method: str, *args: Any) -> None:
        self._calls.append(FakeCall(method=method, args=args))
        error = self._errors.get(method)
        if error is not None:
            raise error

    def _require(self, ref: RepositoryRef) -> Repository:
        try:
            return self.repositories[ref]
        except KeyError:
            raise NotFoundError(f"repository {ref} not found") from None

    def _allocate_id(self) -> int:
        repo_id = self._next_id
        self._next_id += 1
        return repo_id


class AsyncFakeRepositoryService:
    """
    Async facade over a FakeRepositoryService.

    Shares state and call records with the wrapped fake, so the same
    assertions work for the sync and async reconcilers.
    """

    def __init__(self, fake: FakeRepositoryService | None = None) -> None:
        self.fake = fake or FakeRepositoryService()

    async def get(self, ref: RepositoryRef) -> Repository:
        return self.fake.get(ref)

    async def create(self, repository: Repository) -> Repository:
        return self.fake.create(repository)

    async def update(self, repository: Repository) -> Repository:
        return self.fake.update(repository)

    async def delete(self, ref: RepositoryRef) -> None:
        self.fake.delete(ref)

    async def get_groups(self, ref: RepositoryRef) -> list[GroupGrant]:
        return self.fake.get_groups(ref)

    async def add_group(self, ref: RepositoryRef, grant: GroupGrant) -> None:
        self.fake.add_group(ref, grant)

    async def revoke_group(self, ref: RepositoryRef, grant: GroupGrant) -> bool:
        return self.fake.revoke_group(ref, grant)


__all__ = [
    "FakeCall",
    "FakeRepositoryService",
    "AsyncFakeRepositoryService",
]
