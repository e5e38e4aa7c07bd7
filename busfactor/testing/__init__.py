"""Bus factor testing utilities.

Provides a fake GitHub API and helpers for testing code that drives the
pipeline without network access.
"""

from busfactor.testing.fixtures import (
    create_contribution_set,
    create_mock_repository,
    create_test_client,
)
from busfactor.testing.mock import FakeCall, FakeGitHubAPI, FakeRepository

__all__ = [
    # Fake API
    "FakeGitHubAPI",
    "FakeRepository",
    "FakeCall",
    # Helper functions
    "create_test_client",
    "create_mock_repository",
    "create_contribution_set",
]
