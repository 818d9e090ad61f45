"""
Async HTTP Transport for the Bitbucket provider.

Same request building and status classification as the sync transport,
using the httpx async client. Cancelling the task that awaits a request
aborts the in-flight exchange; ``asyncio.CancelledError`` propagates as is
and ``classify_error`` reports it as ``ErrorKind.CANCELLED``.
"""

import asyncio
import time
from typing import Any

import httpx

from bitbucket_provider.config import DEFAULT_TIMEOUT, ConnectionConfig
from bitbucket_provider.exceptions import TransportError
from bitbucket_provider.logging import get_logger, log_http_request, log_http_response
from bitbucket_provider.tls import build_ssl_context
from bitbucket_provider.transport import (
    build_headers,
    encode_body,
    handle_response,
    next_page_start,
)

logger = get_logger("http")


class AsyncHTTPTransport:
    """
    Async HTTP transport layer for the Bitbucket Server REST API.

    Handles:
    - Base URL normalization and the REST API prefix
    - TLS trust (system store plus optional CA bundle)
    - Bearer authentication on every request
    - Status code classification into typed exceptions
    - Prompt abort of in-flight requests on task cancellation
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        ca_cert_path: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            base_url: Bitbucket Server URL (e.g., "https://bitbucket.example.com")
            token: Bearer credential sent on every request
            ca_cert_path: Optional PEM bundle appended to the system trust store
            timeout: Request timeout in seconds
            http_transport: Replacement httpx async transport (used by tests)
        """
        config = ConnectionConfig(
            base_url=base_url, token=token, ca_cert_path=ca_cert_path, timeout=timeout
        )
        self.base_url = config.api_url
        self.timeout = config.timeout
        self._headers = {"Authorization": f"Bearer {config.token}"}

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            verify=build_ssl_context(ca_cert_path),
            transport=http_transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def build_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Request:
        """Build a request relative to the API base URL."""
        return self._client.build_request(
            method,
            path,
            content=encode_body(method, body),
            params=params,
            headers=build_headers(method, self._headers),
        )

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
        expect_body: bool = True,
    ) -> Any:
        """
        Make a request and decode the response.

        Args:
            method: HTTP method
            path: API path relative to the base
            body: JSON-serializable body (non-GET only)
            params: Query parameters
            expect_body: Decode the response body as JSON

        Returns:
            Decoded JSON response, or None

        Raises:
            BitbucketError: On API or network errors
            asyncio.CancelledError: If the awaiting task is cancelled
        """
        req = self.build_request(method, path, body=body, params=params)
        log_http_request(method, str(req.url), dict(req.headers), body)

        started = time.monotonic()
        try:
            response = await self._client.send(req)
        except asyncio.CancelledError:
            logger.info("%s %s cancelled", method, req.url)
            raise
        except httpx.TimeoutException as e:
            raise TransportError(f"{req.url} timed out after {self.timeout}s", str(req.url)) from e
        except httpx.RequestError as e:
            raise TransportError(f"{req.url} request failed: {e}", str(req.url)) from e

        log_http_response(
            response.status_code, str(req.url), (time.monotonic() - started) * 1000
        )
        return handle_response(response, expect_body=expect_body)

    async def paged_request(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> list[Any]:
        """
        Fetch every page of a paged collection and concatenate the values.

        Raises:
            MalformedResponseError: If a page points back at itself or earlier
        """
        values: list[Any] = []
        query = dict(params or {})

        while True:
            page = await self.request("GET", path, params=query) or {}
            values.extend(page.get("values") or [])

            start = next_page_start(
                page, int(query.get("start", 0)), f"{self.base_url}{path}"
            )
            if start is None:
                return values
            query["start"] = start

    async def ping(self) -> None:
        """
        Check that the transport can talk to the API.

        Raises:
            BitbucketError: If listing projects fails
        """
        await self.request("GET", "projects")
