"""
HTTP Transport for the Bitbucket provider.

Builds authenticated JSON requests against the Bitbucket Server REST API and
maps response status codes into typed exceptions. There is no retry logic
here; retry policy belongs to whoever drives reconciliation.
"""

import json
import time
from typing import Any

import httpx

from bitbucket_provider.config import DEFAULT_TIMEOUT, ConnectionConfig
from bitbucket_provider.exceptions import (
    ConflictError,
    MalformedResponseError,
    NotFoundError,
    PermissionDeniedError,
    TransportError,
)
from bitbucket_provider.logging import log_http_request, log_http_response
from bitbucket_provider.tls import build_ssl_context

JSON_MEDIA_TYPE = "application/json"


def build_headers(method: str, overrides: dict[str, str]) -> dict[str, str]:
    """
    Build request headers for a method.

    Every request accepts JSON; non-GET requests also declare a JSON body.
    The fixed overrides (Authorization and friends) are applied last.
    """
    headers = {"Accept": JSON_MEDIA_TYPE}
    if method.upper() != "GET":
        headers["Content-Type"] = JSON_MEDIA_TYPE
    headers.update(overrides)
    return headers


def encode_body(method: str, body: Any) -> bytes | None:
    """Encode a JSON body. GET never carries one; a None body is empty."""
    if method.upper() == "GET":
        return None
    if body is None:
        return b""
    return json.dumps(body).encode("utf-8")


def handle_response(response: httpx.Response, expect_body: bool = True) -> Any:
    """
    Classify a response and decode its JSON body.

    Args:
        response: The HTTP response
        expect_body: Whether the caller wants the body decoded

    Returns:
        The decoded JSON body, or None for 204 / when no body is expected

    Raises:
        NotFoundError: On 404
        PermissionDeniedError: On 401
        ConflictError: On 409
        TransportError: On any other status >= 400
        MalformedResponseError: If the body is not valid JSON
    """
    url = str(response.request.url)
    status_code = response.status_code

    if status_code == 404:
        raise NotFoundError(f"{url} not found", url, status_code)
    if status_code == 401:
        raise PermissionDeniedError(f"{url} rejected the credentials", url, status_code)
    if status_code == 409:
        raise ConflictError(f"{url} reported a conflict", url, status_code)
    if status_code >= 400:
        raise TransportError(f"{url} returned {status_code}", url, status_code)

    if not expect_body or status_code == 204:
        return None

    try:
        return json.loads(response.content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedResponseError(
            f"{url} returned a body that is not valid JSON: {e}", url, status_code
        ) from e


def next_page_start(page: dict[str, Any], current: int = 0, url: str | None = None) -> int | None:
    """
    Return the start offset of the next page, or None on the last page.

    Raises:
        MalformedResponseError: If the offset does not move past ``current``
    """
    if page.get("isLastPage", True):
        return None
    start = page.get("nextPageStart")
    if start is None:
        return None
    start = int(start)
    if start <= current:
        raise MalformedResponseError(
            f"{url} returned nextPageStart {start}, which does not advance past {current}", url
        )
    return start


class HTTPTransport:
    """
    HTTP transport layer for the Bitbucket Server REST API.

    Handles:
    - Base URL normalization and the REST API prefix
    - TLS trust (system store plus optional CA bundle)
    - Bearer authentication on every request
    - Status code classification into typed exceptions

    The only state is read-only configuration and the httpx connection
    pool, so one transport may serve concurrent requests.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        ca_cert_path: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Bitbucket Server URL (e.g., "https://bitbucket.example.com")
            token: Bearer credential sent on every request
            ca_cert_path: Optional PEM bundle appended to the system trust store
            timeout: Request timeout in seconds
            http_transport: Replacement httpx transport (used by tests)
        """
        config = ConnectionConfig(
            base_url=base_url, token=token, ca_cert_path=ca_cert_path, timeout=timeout
        )
        self.base_url = config.api_url
        self.timeout = config.timeout
        self._headers = {"Authorization": f"Bearer {config.token}"}

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            verify=build_ssl_context(ca_cert_path),
            transport=http_transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def build_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Request:
        """
        Build a request relative to the API base URL.

        Args:
            method: HTTP method
            path: API path relative to the base (e.g., "projects/CORE/repos")
            body: JSON-serializable body, ignored for GET
            params: Query parameters

        Returns:
            The prepared httpx.Request
        """
        return self._client.build_request(
            method,
            path,
            content=encode_body(method, body),
            params=params,
            headers=build_headers(method, self._headers),
        )

    def request(
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
        """
        req = self.build_request(method, path, body=body, params=params)
        log_http_request(method, str(req.url), dict(req.headers), body)

        started = time.monotonic()
        try:
            response = self._client.send(req)
        except httpx.TimeoutException as e:
            raise TransportError(f"{req.url} timed out after {self.timeout}s", str(req.url)) from e
        except httpx.RequestError as e:
            raise TransportError(f"{req.url} request failed: {e}", str(req.url)) from e

        log_http_response(
            response.status_code, str(req.url), (time.monotonic() - started) * 1000
        )
        return handle_response(response, expect_body=expect_body)

    def paged_request(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> list[Any]:
        """
        Fetch every page of a paged collection.

        Bitbucket wraps collections in ``{"values": [...], "isLastPage": ...,
        "nextPageStart": ...}``; the values of all pages are concatenated.

        Args:
            path: API path of the collection
            params: Extra query parameters

        Returns:
            Flat list of collection values (empty if there are none)

        Raises:
            MalformedResponseError: If a page points back at itself or earlier
        """
        values: list[Any] = []
        query = dict(params or {})

        while True:
            page = self.request("GET", path, params=query) or {}
            values.extend(page.get("values") or [])

            start = next_page_start(
                page, int(query.get("start", 0)), f"{self.base_url}{path}"
            )
            if start is None:
                return values
            query["start"] = start

    def ping(self) -> None:
        """
        Check that the transport can talk to the API.

        Raises:
            BitbucketError: If listing projects fails
        """
        self.request("GET", "projects")
