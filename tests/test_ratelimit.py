"""
Tests for rate-limit bookkeeping.

Feature: bus-factor
"""

import asyncio
import time

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from busfactor.ratelimit import RateLimitSnapshot, RateLimitState, is_rate_limited


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_snapshot_from_headers() -> None:
    snapshot = RateLimitSnapshot.from_headers(
        {"x-ratelimit-remaining": "12", "x-ratelimit-reset": "1700000000", "x-ratelimit-limit": "5000"}
    )
    assert snapshot == RateLimitSnapshot(remaining=12, reset_at=1_700_000_000.0, limit=5000)


def test_snapshot_absent_without_headers() -> None:
    assert RateLimitSnapshot.from_headers({}) is None


def test_update_without_headers_keeps_previous_snapshot() -> None:
    state = RateLimitState()
    state.update({"x-ratelimit-remaining": "3", "x-ratelimit-reset": "10"})
    state.update({})
    assert state.snapshot.remaining == 3


def test_garbage_headers_are_ignored() -> None:
    assert RateLimitSnapshot.from_headers({"x-ratelimit-remaining": "lots"}) is None


@given(
    remaining=st.integers(min_value=0, max_value=5000),
    reset_in=st.integers(min_value=-100, max_value=3600),
    floor=st.integers(min_value=0, max_value=10),
)
@settings(max_examples=100)
def test_required_wait_only_when_exhausted(remaining: int, reset_in: int, floor: int) -> None:
    """A wait is required exactly when quota is at the floor and the reset lies ahead."""
    clock = FakeClock()
    state = RateLimitState(floor=floor, clock=clock)
    state.update({"x-ratelimit-remaining": str(remaining), "x-ratelimit-reset": str(int(clock.now) + reset_in)})

    wait = state.required_wait()

    if remaining <= floor and reset_in > 0:
        assert wait == float(reset_in)
    else:
        assert wait == 0.0


def test_retry_after_prefers_header() -> None:
    clock = FakeClock()
    state = RateLimitState(clock=clock)
    headers = {"retry-after": "5", "x-ratelimit-reset": str(int(clock.now) + 100)}
    assert state.retry_after(headers, default=60.0) == 5.0


def test_retry_after_falls_back_to_reset_then_default() -> None:
    clock = FakeClock()
    state = RateLimitState(clock=clock)
    assert state.retry_after({"x-ratelimit-reset": str(int(clock.now) + 100)}, default=60.0) == 100.0
    assert state.retry_after({}, default=60.0) == 60.0


@pytest.mark.parametrize(
    ("status_code", "headers", "expected"),
    [
        (429, {"retry-after": "1"}, True),
        (403, {"x-ratelimit-remaining": "0"}, True),
        (403, {"x-ratelimit-remaining": "10"}, False),
        (403, {}, False),
        (500, {"retry-after": "1"}, False),
    ],
)
def test_is_rate_limited(status_code: int, headers: dict[str, str], expected: bool) -> None:
    assert is_rate_limited(status_code, headers) is expected


@pytest.mark.asyncio
async def test_wait_if_exhausted_sleeps_until_reset() -> None:
    state = RateLimitState()
    state.update({"x-ratelimit-remaining": "0", "x-ratelimit-reset": str(int(time.time()) + 1)})

    started = time.monotonic()
    waited = await asyncio.wait_for(state.wait_if_exhausted(), timeout=5)

    assert waited > 0
    assert time.monotonic() - started >= waited - 0.05
