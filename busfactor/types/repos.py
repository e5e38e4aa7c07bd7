"""Repository-related data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Repository:
    """A repository returned by the search endpoint."""

    owner: str
    name: str
    stars: int
    language: str

    @property
    def full_name(self) -> str:
        """Returns the repository identifier (owner/name)."""
        return f"{self.owner}/{self.name}"

    def sort_key(self) -> tuple[int, str]:
        """Key ordering repositories by stars descending, then identifier."""
        return (-self.stars, self.full_name)
