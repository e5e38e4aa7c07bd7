"""Pipeline result data models."""

from dataclasses import dataclass

from busfactor.exceptions import BusFactorError, RemoteError
from busfactor.types.repos import Repository


@dataclass(frozen=True)
class FetchFailure:
    """Why contributor statistics could not be obtained for a repository."""

    code: str  # "NOT_FOUND", "TRANSIENT", "STATS_UNAVAILABLE", ...
    message: str
    status_code: int | None = None

    @classmethod
    def from_error(cls, error: BusFactorError) -> "FetchFailure":
        status_code = error.status_code if isinstance(error, RemoteError) else None
        return cls(code=error.code, message=error.message, status_code=status_code)

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.code} (HTTP {self.status_code}): {self.message}"
        return f"{self.code}: {self.message}"


@dataclass(frozen=True)
class BusFactorResult:
    """Terminal outcome for one repository: a bus factor or a failure."""

    repository: Repository
    bus_factor: int | None = None
    failure: FetchFailure | None = None
    total_commits: int = 0
    contributor_count: int = 0
    leader: str | None = None
    leader_share: float = 0.0

    def __post_init__(self) -> None:
        if (self.bus_factor is None) == (self.failure is None):
            raise ValueError("exactly one of bus_factor and failure must be set")

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass(frozen=True)
class ProgressEvent:
    """Emitted each time a repository reaches its terminal outcome."""

    index: int
    result: BusFactorResult
    completed: int
    total: int
