"""
Pytest plugin for Bitbucket provider testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["bitbucket_provider.testing.conftest"]
"""

from bitbucket_provider.testing.fixtures import (
    async_fake_service,
    async_reconciler,
    fake_service,
    reconciler,
    sample_desired,
    sample_grant,
    sample_repository,
)

__all__ = [
    "fake_service",
    "async_fake_service",
    "reconciler",
    "async_reconciler",
    "sample_desired",
    "sample_repository",
    "sample_grant",
]
