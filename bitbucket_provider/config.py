"""Connection configuration for the Bitbucket provider."""

import os
from dataclasses import dataclass

from bitbucket_provider.exceptions import ConfigurationError

API_PATH = "/rest/api/1.0/"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class ConnectionConfig:
    """
    Parameters needed to reach a Bitbucket Server instance.

    The token is treated as opaque; surrounding whitespace (a trailing
    newline from a mounted secret, typically) is stripped.
    """

    base_url: str
    token: str
    ca_cert_path: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ConfigurationError("base_url must not be empty")
        object.__setattr__(self, "token", self.token.strip())
        if not self.token:
            raise ConfigurationError("token must not be empty")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

    @property
    def api_url(self) -> str:
        """Base URL with the REST API prefix appended."""
        return f"{self.base_url.rstrip('/')}{API_PATH}"

    @classmethod
    def from_env(cls) -> "ConnectionConfig":
        """
        Create a configuration from environment variables.

        Environment variables:
            BITBUCKET_BASE_URL: Server URL, e.g. https://bitbucket.example.com (required)
            BITBUCKET_TOKEN: HTTP access token used as bearer credential (required)
            BITBUCKET_CA_CERT_PATH: PEM bundle appended to the system trust store (optional)
            BITBUCKET_TIMEOUT: Request timeout in seconds (optional, default: 10)

        Returns:
            ConnectionConfig instance

        Raises:
            ConfigurationError: If required variables are missing or invalid
        """
        base_url = os.environ.get("BITBUCKET_BASE_URL")
        token = os.environ.get("BITBUCKET_TOKEN")
        ca_cert_path = os.environ.get("BITBUCKET_CA_CERT_PATH") or None
        timeout_str = os.environ.get("BITBUCKET_TIMEOUT")

        if not base_url:
            raise ConfigurationError("BITBUCKET_BASE_URL environment variable not set")

        if not token:
            raise ConfigurationError("BITBUCKET_TOKEN environment variable not set")

        timeout = DEFAULT_TIMEOUT
        if timeout_str:
            try:
                timeout = float(timeout_str)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid BITBUCKET_TIMEOUT: {timeout_str}. Must be a number of seconds"
                ) from None

        return cls(
            base_url=base_url,
            token=token,
            ca_cert_path=ca_cert_path,
            timeout=timeout,
        )
