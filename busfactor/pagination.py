"""
Page walking over paginated REST endpoints.

Drives the transport across ``page=1, 2, ...`` for one logical query and
yields the concatenated items, retrying individual pages on transient and
rate-limit failures.
"""

import asyncio
import random
from collections.abc import AsyncGenerator, Callable
from typing import Any

from busfactor.config import RetryConfig
from busfactor.exceptions import (
    MalformedResponseError,
    PaginationLimitError,
    RateLimitedError,
    TransientError,
)
from busfactor.logging import get_logger
from busfactor.transport import ApiResponse, AsyncHTTPTransport

logger = get_logger("pagination")


def bare_list(payload: Any) -> list[Any]:
    """Extract items from an endpoint that returns a JSON array."""
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise MalformedResponseError(
            f"Expected a JSON array, got {type(payload).__name__}"
        )
    return payload


def items_field(payload: Any) -> list[Any]:
    """Extract items from a search-style ``{"items": [...]}`` payload."""
    if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
        raise MalformedResponseError("Expected an object with an 'items' array")
    return payload["items"]


class PaginationWalker:
    """Walks paginated endpoints with per-page retry."""

    def __init__(
        self,
        transport: AsyncHTTPTransport,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Args:
            transport: Transport used for every page request
            retry_config: Configuration for retry behavior
        """
        self.transport = transport
        self.retry_config = retry_config or transport.retry_config

    async def walk(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        page_size: int = 100,
        max_pages: int = 10,
        extract: Callable[[Any], list[Any]] = bare_list,
        on_response: Callable[[ApiResponse], None] | None = None,
    ) -> AsyncGenerator[Any, None]:
        """
        Yield every item of a paginated query, in page order.

        The walk ends after a page shorter than ``page_size`` or when the
        server's Link header has no next page. Asking for more than
        ``max_pages`` pages raises instead of looping.

        Args:
            path: API path
            params: Query parameters sent with every page
            page_size: Items per page (``per_page``)
            max_pages: Upper bound on pages fetched
            extract: Turns a page payload into its list of items
            on_response: Called with each page's raw response before its
                items are extracted (may raise to abort the walk)

        Raises:
            TransientError: When a page keeps failing past the retry budget
            PaginationLimitError: When the walk would exceed ``max_pages``
            RemoteError: Any non-retryable failure, as raised by the transport
        """
        page = 1
        while True:
            if page > max_pages:
                raise PaginationLimitError(
                    f"{path} has more than {max_pages} pages of {page_size} items"
                )

            response = await self._fetch_page(
                path, {**(params or {}), "per_page": page_size, "page": page}
            )
            if on_response is not None:
                on_response(response)

            items = extract(response.data)
            for item in items:
                yield item

            if len(items) < page_size or response.has_next is False:
                return

            page += 1

    async def _fetch_page(self, path: str, params: dict[str, Any]) -> ApiResponse:
        """
        Fetch one page, retrying transient and rate-limit failures.

        Rate-limit waits do not count against the transient retry budget.
        """
        attempt = 0
        rate_limit_waits = 0

        while True:
            try:
                return await self.transport.request(path, params)
            except RateLimitedError as e:
                rate_limit_waits += 1
                if rate_limit_waits > self.retry_config.max_rate_limit_waits:
                    raise TransientError(
                        f"Still rate limited after {rate_limit_waits - 1} waits: {e.message}",
                        e.status_code,
                    ) from e

                logger.warning(
                    "Rate limited on %s page %s; resuming in %.2f seconds",
                    path,
                    params.get("page"),
                    e.retry_after,
                )
                await asyncio.sleep(e.retry_after)
            except TransientError as e:
                if attempt >= self.retry_config.max_retries:
                    logger.warning(
                        "Giving up on %s page %s after %d retries: %s",
                        path,
                        params.get("page"),
                        attempt,
                        e.message,
                    )
                    raise

                wait_time = self._get_backoff_time(attempt)
                attempt += 1
                logger.warning(
                    "Transient failure on %s page %s (%s); retry %d/%d in %.2f seconds",
                    path,
                    params.get("page"),
                    e.message,
                    attempt,
                    self.retry_config.max_retries,
                    wait_time,
                )
                await asyncio.sleep(wait_time)

    def _get_backoff_time(self, attempt: int) -> float:
        """
        Calculate backoff time for retry.

        Args:
            attempt: Number of retries already made (0-indexed)

        Returns:
            Time to wait in seconds
        """
        base_wait = self.retry_config.backoff_base * self.retry_config.backoff_factor ** attempt

        # Apply jitter (±jitter%)
        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        # Cap at max_backoff
        return min(wait_time, self.retry_config.max_backoff)
