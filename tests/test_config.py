"""
Tests for configuration and token loading.

Feature: bus-factor
"""

from pathlib import Path

import pytest

from busfactor.config import PipelineConfig, load_token, token_from_env
from busfactor.exceptions import ConfigurationError


def test_load_token_strips_whitespace(tmp_path: Path) -> None:
    token_file = tmp_path / ".token"
    token_file.write_text("ghp_abc123\n")

    assert load_token(token_file) == "ghp_abc123"


def test_load_token_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        load_token(tmp_path / "missing")

    assert exc_info.value.code == "CONFIGURATION_ERROR"


def test_load_token_empty_file(tmp_path: Path) -> None:
    token_file = tmp_path / ".token"
    token_file.write_text("  \n")

    with pytest.raises(ConfigurationError):
        load_token(token_file)


def test_token_from_env_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    token_file = tmp_path / ".token"
    token_file.write_text("from-file")
    monkeypatch.delenv("BUS_FACTOR_TOKEN", raising=False)
    monkeypatch.setenv("BUS_FACTOR_TOKEN_PATH", str(token_file))

    assert token_from_env() == "from-file"


@pytest.mark.parametrize(
    "overrides",
    [
        {"language": " "},
        {"project_count": 0},
        {"token": ""},
        {"concurrency_limit": 0},
        {"stats_max_attempts": 0},
        {"max_contributor_pages": 0},
    ],
)
def test_invalid_pipeline_config(overrides: dict) -> None:
    values = {"language": "rust", "project_count": 10, "token": "t", **overrides}

    with pytest.raises(ConfigurationError):
        PipelineConfig(**values).validate()


def test_valid_pipeline_config() -> None:
    config = PipelineConfig(language="rust", project_count=10, token="t")

    assert config.validate() is config
    assert config.concurrency_limit == 8
