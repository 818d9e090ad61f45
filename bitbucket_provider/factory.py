"""
Connection factory.

Produces clients that have already proven they can talk to the server.
Failures are raised to the caller; nothing here terminates the process.
"""

import httpx

from bitbucket_provider.async_client import AsyncBitbucketClient
from bitbucket_provider.client import BitbucketClient
from bitbucket_provider.config import DEFAULT_TIMEOUT, ConnectionConfig
from bitbucket_provider.exceptions import ConfigurationError
from bitbucket_provider.logging import get_logger

logger = get_logger()


def _decode_token(token: str | bytes) -> str:
    if isinstance(token, str):
        return token
    try:
        return token.decode("utf-8")
    except UnicodeDecodeError:
        raise ConfigurationError("token is not valid UTF-8") from None


def connect(
    base_url: str,
    token: str | bytes,
    ca_cert_path: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    http_transport: httpx.BaseTransport | None = None,
) -> BitbucketClient:
    """
    Create a BitbucketClient and verify it with a liveness probe.

    Args:
        base_url: Bitbucket Server URL
        token: Bearer credential, as text or raw secret bytes
        ca_cert_path: Optional PEM bundle appended to the system trust store
        timeout: Request timeout in seconds
        http_transport: Replacement httpx transport (used by tests)

    Returns:
        A client that has successfully listed projects

    Raises:
        ConfigurationError: If the parameters are invalid
        BitbucketError: If the liveness probe fails
    """
    config = ConnectionConfig(
        base_url=base_url, token=_decode_token(token), ca_cert_path=ca_cert_path, timeout=timeout
    )
    client = BitbucketClient.from_config(config, http_transport=http_transport)
    try:
        client.ping()
    except Exception:
        logger.error("Error creating Bitbucket client for %s", config.api_url)
        client.close()
        raise

    logger.info("Connected to Bitbucket at %s", config.api_url)
    return client


def connect_from_env() -> BitbucketClient:
    """Create and verify a BitbucketClient configured from the environment."""
    config = ConnectionConfig.from_env()
    return connect(
        config.base_url,
        config.token,
        ca_cert_path=config.ca_cert_path,
        timeout=config.timeout,
    )


async def async_connect(
    base_url: str,
    token: str | bytes,
    ca_cert_path: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncBitbucketClient:
    """
    Create an AsyncBitbucketClient and verify it with a liveness probe.

    Raises:
        ConfigurationError: If the parameters are invalid
        BitbucketError: If the liveness probe fails
    """
    config = ConnectionConfig(
        base_url=base_url, token=_decode_token(token), ca_cert_path=ca_cert_path, timeout=timeout
    )
    client = AsyncBitbucketClient.from_config(config, http_transport=http_transport)
    try:
        await client.ping()
    except BaseException:
        logger.error("Error creating Bitbucket client for %s", config.api_url)
        await client.close()
        raise

    logger.info("Connected to Bitbucket at %s", config.api_url)
    return client
