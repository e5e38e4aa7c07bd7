"""
Bus factor async client.

Provides the entry point that wires the transport, the shared rate-limit
state and the resource clients into one pipeline run.
"""

import os
from typing import Any

import httpx

from busfactor.clients import ContributorFetcher, RepositoryLister
from busfactor.config import (
    DEFAULT_BASE_URL,
    DEFAULT_CONCURRENCY,
    DEFAULT_TIMEOUT,
    PipelineConfig,
    RetryConfig,
    token_from_env,
)
from busfactor.exceptions import ConfigurationError
from busfactor.logging import get_logger
from busfactor.orchestrator import ProgressFn, collect_bus_factors
from busfactor.pagination import PaginationWalker
from busfactor.ratelimit import RateLimitState
from busfactor.transport import AsyncHTTPTransport
from busfactor.types.results import BusFactorResult

logger = get_logger()


class BusFactorClient:
    """
    Async client computing bus factors of the top repositories of a language.

    Example:
        ```python
        import asyncio
        from busfactor import BusFactorClient, load_token

        async def main():
            async with BusFactorClient(token=load_token(".token")) as client:
                results = await client.run("rust", 50)
                for result in results:
                    print(result.repository.full_name, result.bus_factor)

        asyncio.run(main())
        ```
    """

    DEFAULT_BASE_URL = DEFAULT_BASE_URL
    DEFAULT_TIMEOUT = DEFAULT_TIMEOUT
    DEFAULT_CONCURRENCY = DEFAULT_CONCURRENCY

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        concurrency_limit: int = DEFAULT_CONCURRENCY,
        stats_retry_interval: float = 1.0,
        stats_max_attempts: int = 10,
        max_contributor_pages: int = 100,
        rate_limit_floor: int = 0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: Bearer token for the API
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Per-request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            concurrency_limit: Default maximum of concurrent contributor fetches
            stats_retry_interval: Seconds between attempts while statistics are computed
            stats_max_attempts: Attempts before statistics count as unavailable
            max_contributor_pages: Upper bound on contributor pages per repository
            rate_limit_floor: Hold requests back once remaining quota reaches this
            transport: Custom httpx transport (used by tests)
        """
        if not token:
            raise ConfigurationError("token must not be empty")

        self.base_url = base_url
        self.timeout = timeout
        self.concurrency_limit = concurrency_limit
        self.rate_limit = RateLimitState(floor=rate_limit_floor)

        self._transport = AsyncHTTPTransport(
            token=token,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
            rate_limit=self.rate_limit,
            transport=transport,
        )
        walker = PaginationWalker(self._transport)

        self.repos = RepositoryLister(walker)
        self.contributors = ContributorFetcher(
            walker,
            retry_interval=stats_retry_interval,
            max_attempts=stats_max_attempts,
            max_pages=max_contributor_pages,
        )

    @classmethod
    def from_config(
        cls,
        config: PipelineConfig,
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "BusFactorClient":
        """Create a client from a validated ``PipelineConfig``."""
        config.validate()
        return cls(
            token=config.token,
            base_url=config.base_url,
            timeout=config.timeout,
            retry_config=retry_config,
            concurrency_limit=config.concurrency_limit,
            stats_retry_interval=config.stats_retry_interval,
            stats_max_attempts=config.stats_max_attempts,
            max_contributor_pages=config.max_contributor_pages,
            rate_limit_floor=config.rate_limit_floor,
            transport=transport,
        )

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> "BusFactorClient":
        """
        Create a client from environment variables.

        Environment variables:
            BUS_FACTOR_TOKEN / BUS_FACTOR_TOKEN_PATH: Token or token file (one required)
            BUS_FACTOR_BASE_URL: Base URL for API (optional, default: https://api.github.com)
            BUS_FACTOR_CONCURRENCY: Concurrency limit (optional, default: 8)

        Raises:
            ConfigurationError: If required environment variables are missing or invalid
        """
        token = token_from_env()
        base_url = os.environ.get("BUS_FACTOR_BASE_URL", cls.DEFAULT_BASE_URL)
        concurrency = os.environ.get("BUS_FACTOR_CONCURRENCY")

        try:
            concurrency_limit = int(concurrency) if concurrency else cls.DEFAULT_CONCURRENCY
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid BUS_FACTOR_CONCURRENCY: {concurrency}. Must be an integer"
            ) from e
        if concurrency_limit < 1:
            raise ConfigurationError("BUS_FACTOR_CONCURRENCY must be at least 1")

        return cls(
            token=token,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
            concurrency_limit=concurrency_limit,
        )

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport (for advanced use cases)."""
        return self._transport

    async def run(
        self,
        language: str,
        count: int,
        concurrency_limit: int | None = None,
        on_progress: ProgressFn | None = None,
    ) -> list[BusFactorResult]:
        """
        Compute bus factors for the ``count`` most-starred repositories.

        Args:
            language: Language filter
            count: Number of repositories
            concurrency_limit: Maximum concurrent contributor fetches
                (default: the client's ``concurrency_limit``)
            on_progress: Called once per repository as it completes

        Returns:
            One result per listed repository, in listing order

        Raises:
            BusFactorError: If the repository listing fails
        """
        repositories = await self.repos.list_top(language, count)
        return await collect_bus_factors(
            repositories,
            self.contributors.fetch,
            self.concurrency_limit if concurrency_limit is None else concurrency_limit,
            on_progress=on_progress,
        )

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "BusFactorClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit - closes the client."""
        await self.close()
