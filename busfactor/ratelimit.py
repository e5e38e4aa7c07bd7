"""
Rate-limit bookkeeping shared by every request of one transport.

The remote service reports its quota in the ``X-RateLimit-*`` headers of
every response. ``RateLimitState`` keeps the latest report as one immutable
snapshot and replaces it in a single assignment, so concurrent readers always
see a consistent ``(remaining, reset_at)`` pair.
"""

import asyncio
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from busfactor.logging import get_logger

logger = get_logger("ratelimit")

REMAINING_HEADER = "x-ratelimit-remaining"
RESET_HEADER = "x-ratelimit-reset"
LIMIT_HEADER = "x-ratelimit-limit"
RETRY_AFTER_HEADER = "retry-after"


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class RateLimitSnapshot:
    """Last quota report received from the remote service."""

    remaining: int | None = None
    reset_at: float | None = None  # epoch seconds
    limit: int | None = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RateLimitSnapshot | None":
        """Build a snapshot from response headers, or None if none are present."""
        remaining = _parse_int(headers.get(REMAINING_HEADER))
        reset_at = _parse_int(headers.get(RESET_HEADER))
        limit = _parse_int(headers.get(LIMIT_HEADER))

        if remaining is None and reset_at is None and limit is None:
            return None

        return cls(
            remaining=remaining,
            reset_at=float(reset_at) if reset_at is not None else None,
            limit=limit,
        )


class RateLimitState:
    """
    Process-wide quota tracker for one remote client.

    One instance is created per transport and shared by reference with every
    concurrent call it issues.
    """

    def __init__(
        self,
        floor: int = 0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            floor: Wait for the reset once remaining quota drops to this value
            clock: Source of the current epoch time
        """
        self.floor = floor
        self._clock = clock
        self._snapshot = RateLimitSnapshot()

    @property
    def snapshot(self) -> RateLimitSnapshot:
        return self._snapshot

    def update(self, headers: Mapping[str, str]) -> None:
        """Record the quota reported in a response's headers."""
        snapshot = RateLimitSnapshot.from_headers(headers)
        if snapshot is not None:
            self._snapshot = snapshot

    def seconds_until_reset(self) -> float:
        """Seconds until the reported reset time (0 if unknown or past)."""
        reset_at = self._snapshot.reset_at
        if reset_at is None:
            return 0.0
        return max(reset_at - self._clock(), 0.0)

    def required_wait(self) -> float:
        """
        How long a new request should be held back.

        Returns:
            Seconds to wait; 0 unless the quota is exhausted and the reset
            time is still in the future
        """
        snapshot = self._snapshot
        if snapshot.remaining is None or snapshot.remaining > self.floor:
            return 0.0
        if snapshot.reset_at is None:
            return 0.0
        return max(snapshot.reset_at - self._clock(), 0.0)

    async def wait_if_exhausted(self) -> float:
        """
        Sleep until the quota resets if it is exhausted.

        Returns:
            Seconds waited
        """
        wait_time = self.required_wait()
        if wait_time > 0:
            logger.warning(
                "Rate limit exhausted (remaining=%s). Waiting %.0f seconds until reset",
                self._snapshot.remaining,
                wait_time,
            )
            await asyncio.sleep(wait_time)
        return wait_time

    def retry_after(self, headers: Mapping[str, str], default: float) -> float:
        """
        Work out how long to wait after a rate-limited response.

        Uses the ``Retry-After`` header if present, else the time until the
        reported reset, else ``default``.
        """
        retry_after = headers.get(RETRY_AFTER_HEADER)
        if retry_after is not None:
            try:
                return max(float(retry_after), 0.0)
            except ValueError:
                pass  # Fall through to the reset time

        reset_at = _parse_int(headers.get(RESET_HEADER))
        if reset_at is not None:
            return max(reset_at - self._clock(), 0.0)

        return default


def is_rate_limited(status_code: int, headers: Mapping[str, str]) -> bool:
    """Whether a 403/429 response carries rate-limit signals."""
    if status_code not in (403, 429):
        return False
    if RETRY_AFTER_HEADER in headers:
        return True
    return _parse_int(headers.get(REMAINING_HEADER)) == 0
