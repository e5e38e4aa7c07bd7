"""
Pytest plugin for bus factor testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
discovered by pytest. To use them, add this to your conftest.py:

    pytest_plugins = ["busfactor.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from busfactor.testing.fixtures import (
    client,
    fake_api,
    fast_retry_config,
    sample_contribution_set,
    sample_repository,
)

__all__ = [
    "fake_api",
    "fast_retry_config",
    "client",
    "sample_repository",
    "sample_contribution_set",
]
