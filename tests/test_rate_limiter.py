"""Tests for NCBI request throttling."""

import time
from unittest.mock import patch

import pytest

from co1_extract.rate_limiter import (
    NCBI_RATE_WITH_KEY, NCBI_RATE_WITHOUT_KEY, RateLimitConfig, TokenBucket
)


class TestRateLimitConfig:
    """Test cases for limiter configuration."""

    def test_burst_defaults_to_rate(self):
        config = RateLimitConfig(requests_per_second=10)

        assert config.burst_size == 10

    def test_burst_at_least_one(self):
        config = RateLimitConfig(requests_per_second=0.5)

        assert config.burst_size == 1

    def test_invalid_rate(self):
        with pytest.raises(ValueError):
            RateLimitConfig(requests_per_second=0)

    def test_ncbi_defaults(self):
        """Test the key-dependent NCBI ceilings."""
        assert RateLimitConfig.for_ncbi().requests_per_second == NCBI_RATE_WITHOUT_KEY
        assert RateLimitConfig.for_ncbi("key").requests_per_second == NCBI_RATE_WITH_KEY
        assert RateLimitConfig.for_ncbi("key", 5.0).requests_per_second == 5.0


class TestTokenBucket:
    """Test cases for the token bucket."""

    def test_burst_without_waiting(self):
        """Test a full bucket serves a burst immediately."""
        bucket = TokenBucket(RateLimitConfig(requests_per_second=100, burst_size=5))

        with patch('co1_extract.rate_limiter.time.sleep') as mock_sleep:
            for _ in range(5):
                assert bucket.acquire() is True

        mock_sleep.assert_not_called()
        assert bucket.total_requests == 5

    def test_non_blocking_when_empty(self):
        """Test non-blocking acquire fails on an empty bucket."""
        bucket = TokenBucket(RateLimitConfig(requests_per_second=1, burst_size=1))

        assert bucket.acquire(blocking=False) is True
        assert bucket.acquire(blocking=False) is False
        assert bucket.total_requests == 1

    def test_blocking_waits(self):
        """Test an empty bucket sleeps for the refill time."""
        bucket = TokenBucket(RateLimitConfig(requests_per_second=2, burst_size=1))
        bucket.acquire()

        with patch('co1_extract.rate_limiter.time.sleep') as mock_sleep:
            bucket.acquire()

        wait = mock_sleep.call_args[0][0]
        assert 0 < wait <= 0.5
        assert bucket.total_wait_time == pytest.approx(wait)

    def test_refill_over_time(self):
        """Test tokens come back at the configured rate."""
        bucket = TokenBucket(RateLimitConfig(requests_per_second=50, burst_size=1))
        bucket.acquire()

        time.sleep(0.05)

        assert bucket.acquire(blocking=False) is True

    def test_stats(self):
        bucket = TokenBucket(RateLimitConfig(requests_per_second=10))
        bucket.acquire()

        stats = bucket.get_stats()

        assert stats['total_requests'] == 1
        assert stats['requests_per_second'] == 10
        assert stats['current_tokens'] < 10
