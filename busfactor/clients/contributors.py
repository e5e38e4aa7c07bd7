"""Contributor statistics client."""

import asyncio
from typing import TYPE_CHECKING, Any

from busfactor.exceptions import MalformedResponseError, StatsUnavailableError
from busfactor.logging import get_logger
from busfactor.pagination import bare_list
from busfactor.types.contributors import ContributionSet, Contributor

if TYPE_CHECKING:
    from busfactor.pagination import PaginationWalker
    from busfactor.transport import ApiResponse
    from busfactor.types.repos import Repository

logger = get_logger("contributors")

PAGE_SIZE = 100
HTTP_ACCEPTED = 202


class _StatsPending(Exception):
    """The server is still computing statistics for the repository."""


def parse_contributor(item: Any) -> Contributor:
    """
    Decode one contributor item.

    Raises:
        MalformedResponseError: If ``login`` or ``contributions`` is missing or ill-typed
    """
    if not isinstance(item, dict):
        raise MalformedResponseError(f"Contributor item is not an object: {item!r:.200}")

    login = item.get("login")
    commits = item.get("contributions")

    if not isinstance(login, str):
        raise MalformedResponseError(f"Contributor item has no login: {item!r:.200}")
    if not isinstance(commits, int) or isinstance(commits, bool) or commits < 0:
        raise MalformedResponseError(
            f"Contributor {login} has an invalid contribution count: {commits!r}"
        )

    return Contributor(login=login, commits=commits)


def _raise_if_pending(response: "ApiResponse") -> None:
    if response.status_code == HTTP_ACCEPTED:
        raise _StatsPending()


class ContributorFetcher:
    """Client for per-repository contributor statistics."""

    def __init__(
        self,
        walker: "PaginationWalker",
        retry_interval: float = 1.0,
        max_attempts: int = 10,
        max_pages: int = 100,
    ) -> None:
        """
        Initialize the contributor fetcher.

        Args:
            walker: Pagination walker for making requests
            retry_interval: Seconds to wait while statistics are being computed
            max_attempts: Attempts before giving up on deferred statistics
            max_pages: Upper bound on contributor pages per repository
        """
        self.walker = walker
        self.retry_interval = retry_interval
        self.max_attempts = max_attempts
        self.max_pages = max_pages

    async def fetch(self, repository: "Repository") -> ContributionSet:
        """
        Get the contributors of a repository.

        When the server answers 202 (statistics still being computed) on any
        page, the whole fetch is restarted after ``retry_interval``.

        Args:
            repository: Repository to fetch contributors for

        Returns:
            ContributionSet in the order the server returned it (possibly empty)

        Raises:
            StatsUnavailableError: If statistics stay deferred for ``max_attempts`` attempts
            RemoteError: On failures the walker could not recover from
        """
        path = f"/repos/{repository.owner}/{repository.name}/contributors"

        for attempt in range(1, self.max_attempts + 1):
            try:
                contributors = [
                    parse_contributor(item)
                    async for item in self.walker.walk(
                        path,
                        page_size=PAGE_SIZE,
                        max_pages=self.max_pages,
                        extract=bare_list,
                        on_response=_raise_if_pending,
                    )
                ]
            except MalformedResponseError as e:
                logger.error(
                    "Malformed contributor data for %s: %s", repository.full_name, e.message
                )
                raise
            except _StatsPending:
                logger.info(
                    "Statistics for %s are being computed (attempt %d/%d)",
                    repository.full_name,
                    attempt,
                    self.max_attempts,
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.retry_interval)
                continue

            logger.debug(
                "Fetched %d contributors for %s", len(contributors), repository.full_name
            )
            return ContributionSet(repository=repository, contributors=tuple(contributors))

        raise StatsUnavailableError(
            f"Statistics for {repository.full_name} still unavailable after "
            f"{self.max_attempts} attempts"
        )
