"""
Bounded fan-out of contributor fetches.

A fixed pool of worker tasks pulls repositories from a shared queue and
writes each outcome into the slot matching the repository's position, so the
output order is the input order no matter which fetch finishes first.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import cast

from busfactor.exceptions import BusFactorError
from busfactor.logging import get_logger
from busfactor.metrics import compute_bus_factor, leader_share
from busfactor.types.contributors import ContributionSet
from busfactor.types.repos import Repository
from busfactor.types.results import BusFactorResult, FetchFailure, ProgressEvent

logger = get_logger("orchestrator")

FetchFn = Callable[[Repository], Awaitable[ContributionSet]]
ProgressFn = Callable[[ProgressEvent], None]


def summarize(repository: Repository, contribution_set: ContributionSet) -> BusFactorResult:
    """Build the successful result for one repository."""
    leader, share = leader_share(contribution_set)
    return BusFactorResult(
        repository=repository,
        bus_factor=compute_bus_factor(contribution_set),
        total_commits=contribution_set.total_commits,
        contributor_count=len(contribution_set),
        leader=leader,
        leader_share=share,
    )


async def collect_bus_factors(
    repositories: Sequence[Repository],
    fetch: FetchFn,
    concurrency_limit: int,
    on_progress: ProgressFn | None = None,
) -> list[BusFactorResult]:
    """
    Fetch contributors for every repository and compute bus factors.

    At most ``concurrency_limit`` fetches are in flight at any time. A
    failure of one fetch is recorded as that repository's result and does
    not affect the others. No retries happen here.

    Args:
        repositories: Repositories in listing order
        fetch: Coroutine function returning a repository's contributors
        concurrency_limit: Maximum number of concurrent fetches
        on_progress: Called once per repository as it completes

    Returns:
        One result per repository, ``results[i]`` belonging to ``repositories[i]``

    Raises:
        ValueError: If ``concurrency_limit`` is less than 1
    """
    if concurrency_limit < 1:
        raise ValueError(f"concurrency_limit must be at least 1, got {concurrency_limit}")

    total = len(repositories)
    results: list[BusFactorResult | None] = [None] * total
    completed = 0

    queue: asyncio.Queue[tuple[int, Repository]] = asyncio.Queue()
    for index, repository in enumerate(repositories):
        queue.put_nowait((index, repository))

    async def worker() -> None:
        nonlocal completed
        while True:
            try:
                index, repository = queue.get_nowait()
            except asyncio.QueueEmpty:
                return

            try:
                contribution_set = await fetch(repository)
            except BusFactorError as e:
                logger.warning("Could not fetch %s: %s", repository.full_name, e)
                result = BusFactorResult(repository=repository, failure=FetchFailure.from_error(e))
            else:
                result = summarize(repository, contribution_set)

            results[index] = result
            completed += 1
            if on_progress is not None:
                on_progress(ProgressEvent(index=index, result=result, completed=completed, total=total))

    workers = [asyncio.create_task(worker()) for _ in range(min(concurrency_limit, total))]
    logger.info("Fetching contributors for %d repositories with %d workers", total, len(workers))

    try:
        await asyncio.gather(*workers)
    except BaseException:
        for task in workers:
            task.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        raise

    # Every slot is filled once all workers have drained the queue.
    return cast(list[BusFactorResult], results)
