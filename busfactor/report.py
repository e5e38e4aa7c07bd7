"""Rendering of pipeline results."""

from collections.abc import Sequence

from rich.table import Table

from busfactor.types.results import BusFactorResult


def format_plain(result: BusFactorResult) -> str:
    """One line per repository, for piping into other tools."""
    repository = result.repository
    if result.failure is not None:
        return (
            f"project: {repository.full_name:30} stars: {repository.stars:<8} "
            f"failed: {result.failure}"
        )
    return (
        f"project: {repository.full_name:30} stars: {repository.stars:<8} "
        f"bus factor: {result.bus_factor:<4} user: {result.leader or '-':20} "
        f"percentage: {result.leader_share:.2f}"
    )


def build_table(
    results: Sequence[BusFactorResult],
    language: str,
    highlight_share: float = 0.75,
) -> Table:
    """
    Build a rich table of results.

    Rows whose top contributor holds at least ``highlight_share`` of the
    commits are highlighted. Failed repositories stay in the table with their
    reason.
    """
    table = Table(title=f"Bus factor of top {len(results)} {language} repositories")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Repository", style="cyan", no_wrap=True)
    table.add_column("Stars", justify="right")
    table.add_column("Bus factor", justify="right")
    table.add_column("Top contributor")
    table.add_column("Share", justify="right")
    table.add_column("Contributors", justify="right")

    for position, result in enumerate(results, start=1):
        repository = result.repository
        if result.failure is not None:
            table.add_row(
                str(position),
                repository.full_name,
                f"{repository.stars:,}",
                "[red]failed[/red]",
                f"[red]{result.failure.code}[/red]",
                "",
                "",
            )
            continue

        style = "bold yellow" if result.leader_share >= highlight_share else None
        table.add_row(
            str(position),
            repository.full_name,
            f"{repository.stars:,}",
            str(result.bus_factor),
            result.leader or "-",
            f"{result.leader_share:.0%}",
            str(result.contributor_count),
            style=style,
        )

    return table
