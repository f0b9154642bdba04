"""
Tests for registry retry backoff.

- Exponential backoff with jitter, capped at max_delay_ms
- Retry-After respected as a lower bound
- Seeded jitter for deterministic tests
- Only 429 and 5xx are retryable
"""

from __future__ import annotations

import random

import pytest

from modpackinfo.connectors import (
    BackoffConfig,
    BackoffState,
    RateLimitError,
    compute_backoff_delay,
    handle_error_response,
    is_retryable_status,
    parse_retry_after,
)


class TestBackoffConfig:
    """Tests for BackoffConfig."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = BackoffConfig()
        assert config.base_delay_ms == 500
        assert config.max_delay_ms == 8000
        assert config.multiplier == 2.0
        assert config.jitter_factor == 0.5
        assert config.max_retries == 2


class TestBackoffState:
    """Tests for BackoffState."""

    def test_record_error_increments_attempt(self) -> None:
        state = BackoffState()
        state.record_error()
        assert state.attempt == 1

    def test_reset(self) -> None:
        state = BackoffState(attempt=3)
        state.reset()
        assert state.attempt == 0

    def test_exhausted_after_max_retries(self) -> None:
        config = BackoffConfig(max_retries=2)
        state = BackoffState()
        for _ in range(2):
            state.record_error()
            assert not state.exhausted(config)
        state.record_error()
        assert state.exhausted(config)

    def test_zero_retries_exhausted_after_first_error(self) -> None:
        state = BackoffState()
        state.record_error()
        assert state.exhausted(BackoffConfig(max_retries=0))


class TestComputeBackoffDelay:
    """Tests for compute_backoff_delay."""

    def test_no_delay_before_first_error(self) -> None:
        assert compute_backoff_delay(BackoffConfig(), BackoffState()) == 0

    def test_exponential_without_jitter(self) -> None:
        config = BackoffConfig(base_delay_ms=100, jitter_factor=0.0, max_delay_ms=10_000)
        delays = [compute_backoff_delay(config, BackoffState(attempt=n)) for n in (1, 2, 3, 4)]
        assert delays == [100, 200, 400, 800]

    def test_capped_at_max_delay(self) -> None:
        config = BackoffConfig(base_delay_ms=1000, jitter_factor=0.0, max_delay_ms=3000)
        assert compute_backoff_delay(config, BackoffState(attempt=10)) == 3000

    def test_jitter_within_bounds(self) -> None:
        config = BackoffConfig(base_delay_ms=1000, jitter_factor=0.5, max_delay_ms=60_000)
        rng = random.Random(7)
        for _ in range(50):
            delay = compute_backoff_delay(config, BackoffState(attempt=1), rng=rng)
            assert 500 <= delay <= 1500

    def test_seeded_jitter_deterministic(self) -> None:
        config = BackoffConfig()
        state = BackoffState(attempt=2)
        a = [compute_backoff_delay(config, state, rng=random.Random(42)) for _ in range(3)]
        b = [compute_backoff_delay(config, state, rng=random.Random(42)) for _ in range(3)]
        assert a == b

    def test_retry_after_is_lower_bound(self) -> None:
        config = BackoffConfig(base_delay_ms=100, jitter_factor=0.0)
        assert compute_backoff_delay(config, BackoffState(attempt=1), retry_after_ms=5000) == 5000

    def test_retry_after_smaller_than_backoff_ignored(self) -> None:
        config = BackoffConfig(base_delay_ms=1000, jitter_factor=0.0)
        assert compute_backoff_delay(config, BackoffState(attempt=1), retry_after_ms=10) == 1000


class TestParseRetryAfter:
    """Tests for parse_retry_after."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("2", 2000), ("0.5", 500), ("0", 0), (None, None), ("soon", None), ("-1", None)],
    )
    def test_values(self, value: str | None, expected: int | None) -> None:
        assert parse_retry_after(value) == expected


class TestErrorClassification:
    """Tests for handle_error_response and is_retryable_status."""

    def test_429_is_rate_limit(self) -> None:
        error = handle_error_response(429, retry_after_ms=3000)
        assert isinstance(error, RateLimitError)
        assert error.retry_after_ms == 3000

    @pytest.mark.parametrize("status", [400, 403, 404, 500, 503])
    def test_other_status_not_rate_limit(self, status: int) -> None:
        assert handle_error_response(status) is None

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
    def test_retryable(self, status: int) -> None:
        assert is_retryable_status(status)

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 418])
    def test_not_retryable(self, status: int) -> None:
        assert not is_retryable_status(status)
