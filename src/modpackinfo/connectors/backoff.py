"""
Retry backoff for registry lookups.

Each run issues at most one request per registry, so there is no shared
rate governor. A failed batch is retried a bounded number of times:
- 429: wait at least Retry-After, then retry
- 5xx / connection errors / timeouts: exponential backoff with jitter
- other 4xx: no retry
"""

from __future__ import annotations

import random
from dataclasses import dataclass


class RateLimitError(Exception):
    """Raised when a registry answers 429 Too Many Requests."""

    def __init__(self, message: str, retry_after_ms: int | None = None) -> None:
        super().__init__(message)
        self.retry_after_ms = retry_after_ms


@dataclass
class BackoffConfig:
    """Retry policy for one registry request."""

    base_delay_ms: int = 500
    max_delay_ms: int = 8000
    multiplier: float = 2.0
    jitter_factor: float = 0.5  # delay scaled by 1 ± jitter_factor
    max_retries: int = 2


@dataclass
class BackoffState:
    """Attempt counter for one request."""

    attempt: int = 0

    def reset(self) -> None:
        """Reset after a successful request."""
        self.attempt = 0

    def record_error(self) -> None:
        """Record a failed attempt."""
        self.attempt += 1

    def exhausted(self, config: BackoffConfig) -> bool:
        """Check whether no retries remain."""
        return self.attempt > config.max_retries


def compute_backoff_delay(
    config: BackoffConfig,
    state: BackoffState,
    retry_after_ms: int | None = None,
    *,
    rng: random.Random | None = None,
) -> int:
    """
    Delay before the next attempt, in milliseconds.

    The n-th retry waits ``base * multiplier**(n-1)``, scaled by a random
    factor in ``1 ± jitter_factor`` and capped at ``max_delay_ms``. A
    positive Retry-After raises the delay to at least that value.

    Args:
        config: Retry policy.
        state: Attempts made so far.
        retry_after_ms: Retry-After from the registry, if any.
        rng: Seeded Random for reproducible jitter in tests.
    """
    if state.attempt == 0:
        return 0

    exponential = config.base_delay_ms * config.multiplier ** (state.attempt - 1)
    spread = config.jitter_factor
    factor = (rng or random).uniform(1.0 - spread, 1.0 + spread)
    delay = min(exponential * factor, config.max_delay_ms)
    if retry_after_ms and retry_after_ms > 0:
        delay = max(delay, retry_after_ms)
    return int(delay)


def parse_retry_after(value: str | None) -> int | None:
    """Parse a Retry-After header given in seconds into milliseconds."""
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    if seconds < 0:
        return None
    return int(seconds * 1000)


def handle_error_response(
    status_code: int,
    retry_after_ms: int | None = None,
) -> RateLimitError | None:
    """
    Classify a registry error status.

    Args:
        status_code: HTTP status code.
        retry_after_ms: Suggested retry delay (Retry-After header).

    Returns:
        RateLimitError for 429, None otherwise.
    """
    if status_code == 429:
        return RateLimitError("Rate limit exceeded (429)", retry_after_ms=retry_after_ms)
    return None


def is_retryable_status(status_code: int) -> bool:
    """Check whether an HTTP status is worth retrying."""
    return status_code == 429 or status_code >= 500
