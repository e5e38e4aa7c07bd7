"""Bus factor - concentration of commits in the most popular repositories of a language."""

from busfactor.client import BusFactorClient
from busfactor.config import PipelineConfig, RetryConfig, load_token
from busfactor.exceptions import (
    BusFactorError,
    ClientError,
    ConfigurationError,
    MalformedResponseError,
    NotFoundError,
    PaginationLimitError,
    RateLimitedError,
    RemoteError,
    StatsUnavailableError,
    TransientError,
)
from busfactor.logging import configure_logging, get_logger
from busfactor.metrics import compute_bus_factor, leader_share
from busfactor.orchestrator import collect_bus_factors
from busfactor.ratelimit import RateLimitSnapshot, RateLimitState
from busfactor.transport import ApiResponse, AsyncHTTPTransport
from busfactor.types import (
    BusFactorResult,
    ContributionSet,
    Contributor,
    FetchFailure,
    ProgressEvent,
    Repository,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Client
    "BusFactorClient",
    # Pipeline
    "collect_bus_factors",
    "compute_bus_factor",
    "leader_share",
    # Types
    "Repository",
    "Contributor",
    "ContributionSet",
    "BusFactorResult",
    "FetchFailure",
    "ProgressEvent",
    # Exceptions
    "BusFactorError",
    "RemoteError",
    "TransientError",
    "RateLimitedError",
    "NotFoundError",
    "ClientError",
    "MalformedResponseError",
    "StatsUnavailableError",
    "PaginationLimitError",
    "ConfigurationError",
    # Transport
    "AsyncHTTPTransport",
    "ApiResponse",
    "RateLimitState",
    "RateLimitSnapshot",
    # Configuration
    "PipelineConfig",
    "RetryConfig",
    "load_token",
    # Logging
    "configure_logging",
    "get_logger",
]
