"""Repository search client."""

import math
from typing import TYPE_CHECKING, Any

from busfactor.exceptions import MalformedResponseError, PaginationLimitError
from busfactor.logging import get_logger
from busfactor.pagination import items_field
from busfactor.types.repos import Repository

if TYPE_CHECKING:
    from busfactor.pagination import PaginationWalker

logger = get_logger("repos")

SEARCH_PATH = "/search/repositories"
MAX_PAGE_SIZE = 100
SEARCH_RESULT_LIMIT = 1000


def parse_repository(item: Any, language: str) -> Repository:
    """
    Decode one search result item.

    Args:
        item: One element of the search ``items`` array
        language: Language to record when the item reports none

    Raises:
        MalformedResponseError: If a required field is missing or ill-typed
    """
    try:
        owner = item["owner"]["login"]
        name = item["name"]
        stars = item["stargazers_count"]
    except (KeyError, TypeError) as e:
        raise MalformedResponseError(f"Search result item is missing {e}") from e

    if not isinstance(owner, str) or not isinstance(name, str):
        raise MalformedResponseError(f"Search result item has a non-string name: {item!r:.200}")
    if not isinstance(stars, int) or isinstance(stars, bool) or stars < 0:
        raise MalformedResponseError(f"{owner}/{name} has an invalid star count: {stars!r}")

    item_language = item.get("language")
    return Repository(
        owner=owner,
        name=name,
        stars=stars,
        language=item_language if isinstance(item_language, str) else language,
    )


def language_qualifier(language: str) -> str:
    """Search qualifier for a language, quoted when the name has spaces."""
    if any(ch.isspace() for ch in language):
        return f'language:"{language}"'
    return f"language:{language}"


class RepositoryLister:
    """Client for discovering the most-starred repositories of a language."""

    def __init__(self, walker: "PaginationWalker") -> None:
        """
        Initialize the repository lister.

        Args:
            walker: Pagination walker for making requests
        """
        self.walker = walker

    async def list_top(self, language: str, count: int) -> list[Repository]:
        """
        Get the ``count`` most-starred repositories for a language.

        Results are ordered by stars descending, ties broken by
        ``owner/name``. Repositories tied with the last one kept are read
        too (within the page bound), so the tie-break decides which of them
        make the cut. The list is all or nothing: any unrecovered error
        propagates and no partial list is returned.

        Search serves at most ``SEARCH_RESULT_LIMIT`` results; larger counts
        are capped with a warning.

        Args:
            language: Language filter (e.g., "rust", "Jupyter Notebook")
            count: Number of repositories wanted

        Returns:
            Up to ``count`` repositories (fewer only if the search has fewer)
        """
        if count < 1:
            raise ValueError(f"count must be positive, got {count}")
        if count > SEARCH_RESULT_LIMIT:
            logger.warning(
                "Search serves at most %d results; listing %d instead of %d",
                SEARCH_RESULT_LIMIT,
                SEARCH_RESULT_LIMIT,
                count,
            )
            count = SEARCH_RESULT_LIMIT

        page_size = min(count, MAX_PAGE_SIZE)
        # One spare page absorbs results that shift between pages.
        max_pages = min(
            math.ceil(count / page_size) + 1,
            math.ceil(SEARCH_RESULT_LIMIT / page_size),
        )

        params = {
            "q": language_qualifier(language),
            "sort": "stars",
            "order": "desc",
        }

        repositories: list[Repository] = []
        seen: set[str] = set()
        cutoff: int | None = None

        logger.info("Listing top %d %s repositories", count, language)

        items = self.walker.walk(
            SEARCH_PATH,
            params,
            page_size=page_size,
            max_pages=max_pages,
            extract=items_field,
        )
        try:
            async for item in items:
                repository = parse_repository(item, language)
                if repository.full_name in seen:
                    logger.debug("Skipping duplicate search result %s", repository.full_name)
                    continue
                if cutoff is not None and repository.stars < cutoff:
                    break
                seen.add(repository.full_name)
                repositories.append(repository)
                if cutoff is None and len(repositories) >= count:
                    cutoff = min(r.stars for r in repositories)
        except PaginationLimitError:
            # Only the tie scan past the last kept repository may run out of pages.
            if cutoff is None:
                raise
            logger.debug("Stopped scanning ties at %d stars on the page bound", cutoff)
        except MalformedResponseError as e:
            logger.error("Malformed search results for %s: %s", language, e.message)
            raise
        finally:
            await items.aclose()

        repositories.sort(key=Repository.sort_key)
        del repositories[count:]
        logger.info("Listed %d %s repositories", len(repositories), language)
        return repositories
