"""
Bitbucket provider main client.

Aggregates the resource clients over one authenticated transport.
"""

from typing import Any

import httpx

from bitbucket_provider.clients import ProjectsClient, ReposClient
from bitbucket_provider.config import DEFAULT_TIMEOUT, ConnectionConfig
from bitbucket_provider.transport import HTTPTransport


class BitbucketClient:
    """
    Client for a Bitbucket Server instance.

    Construction performs no network I/O; use
    ``bitbucket_provider.factory.connect`` to get a client whose
    connectivity has been verified.

    Example:
        ```python
        from bitbucket_provider import BitbucketClient, RepositoryRef

        with BitbucketClient("https://bitbucket.example.com", token) as client:
            repo = client.repos.get(RepositoryRef(project="CORE", name="svc"))
        ```
    """

    DEFAULT_TIMEOUT = DEFAULT_TIMEOUT

    def __init__(
        self,
        base_url: str,
        token: str,
        ca_cert_path: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the Bitbucket client.

        Args:
            base_url: Bitbucket Server URL
            token: Bearer credential
            ca_cert_path: Optional PEM bundle appended to the system trust store
            timeout: Request timeout in seconds (default: 10.0)
            http_transport: Replacement httpx transport (used by tests)
        """
        self.base_url = base_url
        self.timeout = timeout

        self._transport = HTTPTransport(
            base_url=base_url,
            token=token,
            ca_cert_path=ca_cert_path,
            timeout=timeout,
            http_transport=http_transport,
        )

        self.projects = ProjectsClient(self._transport)
        self.repos = ReposClient(self._transport)

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        http_transport: httpx.BaseTransport | None = None,
    ) -> "BitbucketClient":
        """Create a client from a ConnectionConfig."""
        return cls(
            base_url=config.base_url,
            token=config.token,
            ca_cert_path=config.ca_cert_path,
            timeout=config.timeout,
            http_transport=http_transport,
        )

    @classmethod
    def from_env(cls) -> "BitbucketClient":
        """
        Create a client from environment variables.

        See ``ConnectionConfig.from_env`` for the variables read.

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        return cls.from_config(ConnectionConfig.from_env())

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport."""
        return self._transport

    def ping(self) -> None:
        """Verify the server is reachable and accepts the credentials."""
        self._transport.ping()

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "BitbucketClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
