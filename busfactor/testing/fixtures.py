"""
Pytest fixtures for bus factor testing.

Provides common fixtures for testing code that drives the pipeline.
"""

from collections.abc import Generator, Sequence
from typing import Any

import pytest

from busfactor.client import BusFactorClient
from busfactor.config import RetryConfig
from busfactor.testing.mock import FakeGitHubAPI
from busfactor.types.contributors import ContributionSet, Contributor
from busfactor.types.repos import Repository

# Keeps retrying tests fast while preserving the backoff shape.
FAST_RETRY_CONFIG = RetryConfig(
    backoff_base=0.001,
    max_backoff=0.01,
    default_retry_after=0.01,
)


# ============================================================================
# Fake API Fixtures
# ============================================================================


@pytest.fixture
def fake_api() -> Generator[FakeGitHubAPI, None, None]:
    """
    Provide an empty FakeGitHubAPI.

    Example:
        ```python
        def test_my_feature(fake_api):
            fake_api.add_repository("octo", "spoon", stars=5)
            ...
            assert fake_api.was_called("/search/repositories")
        ```
    """
    api = FakeGitHubAPI()
    yield api
    api.reset()


@pytest.fixture
def fast_retry_config() -> RetryConfig:
    """Provide a retry configuration with millisecond backoffs."""
    return FAST_RETRY_CONFIG


@pytest.fixture
def client(fake_api: FakeGitHubAPI) -> BusFactorClient:
    """
    Provide a BusFactorClient talking to ``fake_api``.

    Statistics retries wait 10ms so deferred-statistics tests stay fast.
    """
    return create_test_client(fake_api)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_repository() -> Repository:
    """Provide a sample Repository."""
    return create_mock_repository()


@pytest.fixture
def sample_contribution_set(sample_repository: Repository) -> ContributionSet:
    """Provide a ContributionSet with commits of 50, 30 and 20."""
    return create_contribution_set(
        [("alice", 50), ("bob", 30), ("carol", 20)],
        repository=sample_repository,
    )


# ============================================================================
# Helper Functions
# ============================================================================


def create_test_client(api: FakeGitHubAPI, **kwargs: Any) -> BusFactorClient:
    """
    Create a BusFactorClient served by a fake API.

    Args:
        api: Fake API used as the httpx transport
        **kwargs: Overrides for BusFactorClient arguments
    """
    defaults: dict[str, Any] = {
        "token": "test-token",
        "retry_config": FAST_RETRY_CONFIG,
        "stats_retry_interval": 0.01,
    }
    defaults.update(kwargs)
    return BusFactorClient(transport=api, **defaults)


def create_mock_repository(
    owner: str = "octo",
    name: str = "spoon",
    stars: int = 0,
    language: str = "Python",
) -> Repository:
    """Create a Repository with customizable fields."""
    return Repository(owner=owner, name=name, stars=stars, language=language)


def create_contribution_set(
    commits: Sequence[tuple[str, int]],
    repository: Repository | None = None,
) -> ContributionSet:
    """
    Create a ContributionSet from ``(login, commits)`` pairs.

    Args:
        commits: Contributors in the order the server would return them
        repository: Owning repository (a default one if omitted)
    """
    return ContributionSet(
        repository=repository or create_mock_repository(),
        contributors=tuple(Contributor(login=login, commits=n) for login, n in commits),
    )
