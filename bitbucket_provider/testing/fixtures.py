"""
Pytest fixtures for Bitbucket provider testing.

Provides fakes and sample records for testing code that drives the
reconciler.
"""

from collections.abc import Generator, Iterable

import pytest

from bitbucket_provider.reconcile import AsyncRepositoryReconciler, RepositoryReconciler
from bitbucket_provider.testing.fake import AsyncFakeRepositoryService, FakeRepositoryService
from bitbucket_provider.types.desired import DesiredRepository
from bitbucket_provider.types.repos import REPO_READ, REPO_WRITE, GroupGrant, Repository

# ============================================================================
# Helper Functions
# ============================================================================


def create_desired_repository(
    name: str = "svc",
    project: str = "CORE",
    public: bool = False,
    description: str | None = "Service repository",
    groups: Iterable[tuple[str, str]] | dict[str, str] | None = None,
) -> DesiredRepository:
    """
    Create a DesiredRepository with sensible defaults.

    Example:
        ```python
        desired = create_desired_repository(groups={"devs": "REPO_WRITE"})
        ```
    """
    return DesiredRepository.build(
        name=name,
        project=project,
        public=public,
        description=description,
        groups=groups or {},
    )


def create_repository(
    name: str = "svc",
    project: str = "CORE",
    public: bool = False,
    description: str | None = "Service repository",
    repo_id: int | None = 1,
) -> Repository:
    """Create a Repository as the server would return it."""
    return Repository(
        id=repo_id,
        name=name,
        project=project,
        description=description,
        public=public,
    )


# ============================================================================
# Fake Service Fixtures
# ============================================================================


@pytest.fixture
def fake_service() -> Generator[FakeRepositoryService, None, None]:
    """
    Provide an empty FakeRepositoryService.

    Example:
        ```python
        def test_creates_missing_repo(fake_service, sample_desired):
            RepositoryReconciler(fake_service).create(sample_desired)
            assert fake_service.was_called("create")
        ```
    """
    service = FakeRepositoryService()
    yield service
    service.reset()


@pytest.fixture
def async_fake_service(fake_service: FakeRepositoryService) -> AsyncFakeRepositoryService:
    """Provide an async facade sharing state with ``fake_service``."""
    return AsyncFakeRepositoryService(fake_service)


@pytest.fixture
def reconciler(fake_service: FakeRepositoryService) -> RepositoryReconciler:
    """Provide a RepositoryReconciler bound to ``fake_service``."""
    return RepositoryReconciler(fake_service)


@pytest.fixture
def async_reconciler(
    async_fake_service: AsyncFakeRepositoryService,
) -> AsyncRepositoryReconciler:
    """Provide an AsyncRepositoryReconciler bound to ``async_fake_service``."""
    return AsyncRepositoryReconciler(async_fake_service)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_desired() -> DesiredRepository:
    """Provide a sample DesiredRepository with two group grants."""
    return create_desired_repository(
        groups={"devs": REPO_WRITE, "auditors": REPO_READ},
    )


@pytest.fixture
def sample_repository() -> Repository:
    """Provide a sample Repository matching ``sample_desired``'s attributes."""
    return create_repository()


@pytest.fixture
def sample_grant() -> GroupGrant:
    """Provide a sample GroupGrant."""
    return GroupGrant(name="devs", permission=REPO_WRITE)
