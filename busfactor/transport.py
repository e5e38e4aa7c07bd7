"""
Async HTTP Transport for the bus factor pipeline.

Handles authenticated single-shot requests to the GitHub REST API using
httpx async client, classifies failures into typed exceptions and keeps the
shared rate-limit state current.
"""

import time
from dataclasses import dataclass
from typing import Any

import httpx

from busfactor.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, RetryConfig
from busfactor.exceptions import (
    ClientError,
    MalformedResponseError,
    NotFoundError,
    RateLimitedError,
    RemoteError,
    TransientError,
)
from busfactor.logging import get_logger, log_http_request, log_http_response
from busfactor.ratelimit import RateLimitState, is_rate_limited

logger = get_logger("http")

USER_AGENT = "bus-factor"
API_VERSION = "2022-11-28"


@dataclass(frozen=True)
class ApiResponse:
    """A decoded successful response."""

    status_code: int
    data: Any
    has_next: bool | None = None  # None when the server sent no Link header


class AsyncHTTPTransport:
    """
    Async HTTP transport layer for the GitHub REST API.

    Handles:
    - Bearer authentication on every request
    - Waiting out an exhausted quota before sending
    - Recording rate-limit headers from every response
    - Error response parsing into typed exceptions

    Retries are left to the callers; each ``request`` is a single attempt.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        rate_limit: RateLimitState | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            token: Bearer token sent with every request
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            timeout: Request timeout in seconds
            retry_config: Retry tuning; only ``default_retry_after`` is used here
            rate_limit: Shared rate-limit state (a fresh one by default)
            transport: Custom httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self.rate_limit = rate_limit or RateLimitState()

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "User-Agent": USER_AGENT,
                "X-GitHub-Api-Version": API_VERSION,
            },
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> ApiResponse:
        """
        Make a single GET request.

        Args:
            path: API path (e.g., "/search/repositories")
            params: Query parameters

        Returns:
            The decoded response

        Raises:
            RateLimitedError: On 403/429 carrying rate-limit signals
            NotFoundError: On 404
            TransientError: On 5xx, timeouts and connection failures
            ClientError: On any other 4xx
            MalformedResponseError: If a successful body is not valid JSON
        """
        await self.rate_limit.wait_if_exhausted()

        log_http_request("GET", path, params, dict(self._client.headers))
        started = time.monotonic()

        try:
            response = await self._client.get(path, params=params)
        except httpx.RequestError as e:
            raise TransientError(f"{type(e).__name__} requesting {path}: {e}") from e

        self.rate_limit.update(response.headers)
        log_http_response(
            response.status_code,
            path,
            elapsed_ms=(time.monotonic() - started) * 1000,
            rate_limit_remaining=self.rate_limit.snapshot.remaining,
        )

        if response.status_code >= 400:
            raise self._parse_error_response(response, path)

        return ApiResponse(
            status_code=response.status_code,
            data=self._decode_body(response, path),
            has_next=self._has_next(response),
        )

    def _decode_body(self, response: httpx.Response, path: str) -> Any:
        if not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error("Undecodable body from %s: %s", path, e)
            raise MalformedResponseError(
                f"Response from {path} is not valid JSON: {e}",
                response.status_code,
            ) from e

    @staticmethod
    def _has_next(response: httpx.Response) -> bool | None:
        if "link" not in response.headers:
            return None
        return "next" in response.links

    def _parse_error_response(self, response: httpx.Response, path: str) -> RemoteError:
        """
        Parse an error response into a typed exception.

        Args:
            response: HTTP response with error status
            path: Requested path, for the message

        Returns:
            Appropriate RemoteError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}

        message = data.get("message") if isinstance(data, dict) else None
        message = f"{path}: {message or f'HTTP {response.status_code}'}"

        status_code = response.status_code

        if is_rate_limited(status_code, response.headers):
            retry_after = self.rate_limit.retry_after(
                response.headers, self.retry_config.default_retry_after
            )
            return RateLimitedError(message, retry_after, status_code)
        elif status_code == 404:
            return NotFoundError(message, status_code)
        elif status_code >= 500:
            return TransientError(message, status_code)
        else:
            return ClientError(message, status_code)
