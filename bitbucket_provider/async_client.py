"""
Bitbucket provider async client.

Async counterpart of BitbucketClient.
"""

from typing import Any

import httpx

from bitbucket_provider.async_clients import AsyncProjectsClient, AsyncReposClient
from bitbucket_provider.async_transport import AsyncHTTPTransport
from bitbucket_provider.config import DEFAULT_TIMEOUT, ConnectionConfig


class AsyncBitbucketClient:
    """
    Async client for a Bitbucket Server instance.

    Example:
        ```python
        from bitbucket_provider.factory import async_connect

        async with await async_connect(base_url, token) as client:
            repo = await client.repos.get(ref)
        ```
    """

    DEFAULT_TIMEOUT = DEFAULT_TIMEOUT

    def __init__(
        self,
        base_url: str,
        token: str,
        ca_cert_path: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the async Bitbucket client.

        Args:
            base_url: Bitbucket Server URL
            token: Bearer credential
            ca_cert_path: Optional PEM bundle appended to the system trust store
            timeout: Request timeout in seconds (default: 10.0)
            http_transport: Replacement httpx async transport (used by tests)
        """
        self.base_url = base_url
        self.timeout = timeout

        self._transport = AsyncHTTPTransport(
            base_url=base_url,
            token=token,
            ca_cert_path=ca_cert_path,
            timeout=timeout,
            http_transport=http_transport,
        )

        self.projects = AsyncProjectsClient(self._transport)
        self.repos = AsyncReposClient(self._transport)

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> "AsyncBitbucketClient":
        """Create a client from a ConnectionConfig."""
        return cls(
            base_url=config.base_url,
            token=config.token,
            ca_cert_path=config.ca_cert_path,
            timeout=config.timeout,
            http_transport=http_transport,
        )

    @classmethod
    def from_env(cls) -> "AsyncBitbucketClient":
        """Create a client from environment variables."""
        return cls.from_config(ConnectionConfig.from_env())

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport."""
        return self._transport

    async def ping(self) -> None:
        """Verify the server is reachable and accepts the credentials."""
        await self._transport.ping()

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "AsyncBitbucketClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
