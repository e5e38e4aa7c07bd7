"""
Bus factor computation.

The bus factor of a repository is the smallest number of contributors whose
combined commits reach at least half of all commits. Everything here is
integer arithmetic, so the threshold comparison is exact.
"""

from busfactor.types.contributors import ContributionSet, Contributor


def rank_contributors(contribution_set: ContributionSet) -> list[Contributor]:
    """Contributors by commits descending, ties broken by login."""
    return sorted(contribution_set.contributors, key=lambda c: (-c.commits, c.login))


def compute_bus_factor(contribution_set: ContributionSet) -> int:
    """
    Compute the bus factor of a repository.

    Args:
        contribution_set: The repository's contributors

    Returns:
        Number of top contributors needed to reach half of the commits;
        0 when there are no commits at all

    Example:
        Commits of 50, 30 and 20 give 1, because ``50 * 2 >= 100``.
    """
    total = contribution_set.total_commits
    if total == 0:
        return 0

    running = 0
    for consumed, contributor in enumerate(rank_contributors(contribution_set), start=1):
        running += contributor.commits
        if running * 2 >= total:
            return consumed

    # Unreachable: the full set sums to total.
    return len(contribution_set)


def leader_share(contribution_set: ContributionSet) -> tuple[str | None, float]:
    """
    Top contributor and their fraction of all commits.

    Returns:
        ``(login, share)``, or ``(None, 0.0)`` when there are no commits
    """
    total = contribution_set.total_commits
    if total == 0:
        return None, 0.0

    leader = rank_contributors(contribution_set)[0]
    return leader.login, leader.commits / total
