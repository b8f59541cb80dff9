"""Tracking of the rate-limit window reported by the Hashnode API."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime

import httpx

from hashpost.utils.logging import get_logger

logger = get_logger(__name__)

LIMIT_HEADER = "X-RateLimit-Limit"
REMAINING_HEADER = "X-RateLimit-Remaining"
RESET_HEADER = "X-RateLimit-Reset"


@dataclass(frozen=True)
class RateLimitSnapshot:
    """The rate-limit window from one response."""

    limit: int
    remaining: int
    reset: datetime


class RateLimitTracker:
    """Keeps the most recent complete rate-limit snapshot.

    The client is the only writer. Concurrent successful responses race and
    the last one recorded wins.
    """

    def __init__(self) -> None:
        self._snapshot: RateLimitSnapshot | None = None

    def record(self, headers: Mapping[str, str]) -> bool:
        """Store the rate-limit window carried by a set of response headers.

        Args:
            headers: Response headers. Lookup is case-insensitive.

        Returns:
            True if the snapshot was replaced. Partial or malformed headers
            leave the previous snapshot in place and return False.
        """
        normalized = httpx.Headers(headers)
        raw = [normalized.get(name) for name in (LIMIT_HEADER, REMAINING_HEADER, RESET_HEADER)]
        if any(value is None for value in raw):
            return False

        try:
            limit, remaining, reset = (int(value.strip()) for value in raw)  # type: ignore[union-attr]
            reset_at = datetime.fromtimestamp(reset, tz=UTC)
        except (ValueError, OverflowError, OSError):
            logger.debug("Ignoring malformed rate limit headers", headers=raw)
            return False

        self._snapshot = RateLimitSnapshot(limit=limit, remaining=remaining, reset=reset_at)
        return True

    def current(self) -> RateLimitSnapshot | None:
        """Return the latest snapshot, or None before any complete headers."""
        return self._snapshot
