"""Contributor-related data models."""

from dataclasses import dataclass, field

from busfactor.types.repos import Repository


@dataclass(frozen=True)
class Contributor:
    """A contributor and their commit count within one repository."""

    login: str
    commits: int


@dataclass(frozen=True)
class ContributionSet:
    """
    The contributors of one repository.

    ``total_commits`` is derived from the members, so it always equals the
    sum of their commit counts.
    """

    repository: Repository
    contributors: tuple[Contributor, ...] = ()
    total_commits: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "total_commits", sum(c.commits for c in self.contributors)
        )

    def __len__(self) -> int:
        return len(self.contributors)
