"""
Configuration for the bus factor pipeline.

Holds retry tuning, run parameters and credential loading.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from busfactor.exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_CONCURRENCY = 8
DEFAULT_TOKEN_PATH = "./.token"


@dataclass
class RetryConfig:
    """Configuration for page retry behavior."""

    max_retries: int = 3
    backoff_base: float = 0.2  # First backoff in seconds
    backoff_factor: float = 2.0
    max_backoff: float = 5.0  # Maximum backoff time in seconds
    jitter: float = 0.0  # Jitter factor (0.1 = ±10%)
    max_rate_limit_waits: int = 10
    default_retry_after: float = 60.0


@dataclass
class PipelineConfig:
    """Parameters of one bus factor run."""

    language: str
    project_count: int
    token: str
    concurrency_limit: int = DEFAULT_CONCURRENCY
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    stats_retry_interval: float = 1.0
    stats_max_attempts: int = 10
    max_contributor_pages: int = 100
    rate_limit_floor: int = 0

    def validate(self) -> "PipelineConfig":
        """
        Check the configuration for values the pipeline cannot run with.

        Returns:
            The same config, for chaining

        Raises:
            ConfigurationError: If a value is out of range
        """
        if not self.language.strip():
            raise ConfigurationError("language must not be empty")
        if self.project_count < 1:
            raise ConfigurationError(
                f"project_count must be positive, got {self.project_count}"
            )
        if not self.token:
            raise ConfigurationError("token must not be empty")
        if self.concurrency_limit < 1:
            raise ConfigurationError(
                f"concurrency_limit must be at least 1, got {self.concurrency_limit}"
            )
        if self.stats_max_attempts < 1:
            raise ConfigurationError("stats_max_attempts must be at least 1")
        if self.max_contributor_pages < 1:
            raise ConfigurationError("max_contributor_pages must be at least 1")
        return self


def load_token(path: str | os.PathLike[str] = DEFAULT_TOKEN_PATH) -> str:
    """
    Read a bearer token from a file.

    Args:
        path: Path to a file holding the token (surrounding whitespace is ignored)

    Returns:
        The token

    Raises:
        ConfigurationError: If the file cannot be read or is empty
    """
    token_path = Path(path)
    try:
        token = token_path.read_text(encoding="utf-8").strip()
    except OSError as e:
        raise ConfigurationError(f"Cannot read token file {token_path}: {e}") from e

    if not token:
        raise ConfigurationError(f"Token file {token_path} is empty")

    return token


def token_from_env() -> str:
    """
    Resolve the token from the environment.

    Environment variables:
        BUS_FACTOR_TOKEN: The token itself
        BUS_FACTOR_TOKEN_PATH: Path to a token file (used if BUS_FACTOR_TOKEN is unset)

    Raises:
        ConfigurationError: If neither variable is set
    """
    token = os.environ.get("BUS_FACTOR_TOKEN")
    if token:
        return token.strip()

    token_path = os.environ.get("BUS_FACTOR_TOKEN_PATH")
    if token_path:
        return load_token(token_path)

    raise ConfigurationError(
        "BUS_FACTOR_TOKEN or BUS_FACTOR_TOKEN_PATH environment variable not set"
    )
