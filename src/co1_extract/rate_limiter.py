"""Token bucket throttling for NCBI E-utilities requests."""

import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# E-utilities request ceilings
NCBI_RATE_WITHOUT_KEY = 3.0
NCBI_RATE_WITH_KEY = 10.0


@dataclass
class RateLimitConfig:
    """Configuration for rate limiting."""
    requests_per_second: float
    burst_size: Optional[int] = None  # Max tokens in bucket

    def __post_init__(self):
        if self.requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        if self.burst_size is None:
            self.burst_size = max(1, int(self.requests_per_second))

    @classmethod
    def for_ncbi(cls, api_key: Optional[str] = None,
                 requests_per_second: Optional[float] = None) -> 'RateLimitConfig':
        """Limits matching NCBI's published policy unless overridden."""
        if requests_per_second is None:
            requests_per_second = NCBI_RATE_WITH_KEY if api_key else NCBI_RATE_WITHOUT_KEY
        return cls(requests_per_second)


class TokenBucket:
    """Token bucket shared by every request a client makes."""

    def __init__(self, config: RateLimitConfig):
        self.config = config
        self.tokens = float(config.burst_size)
        self.last_update = time.monotonic()
        self.lock = Lock()

        self.total_requests = 0
        self.total_wait_time = 0.0

    def acquire(self, tokens: int = 1, blocking: bool = True) -> bool:
        """
        Take tokens from the bucket, sleeping until they are available.

        Args:
            tokens: Number of tokens to acquire
            blocking: Wait if tokens not available

        Returns:
            True if tokens acquired, False if non-blocking and not available
        """
        with self.lock:
            self._refill()

            if self.tokens < tokens:
                if not blocking:
                    return False

                wait_time = (tokens - self.tokens) / self.config.requests_per_second
                logger.debug(f"Rate limit: waiting {wait_time:.2f}s")
                self.total_wait_time += wait_time
                time.sleep(wait_time)
                self._refill()

            self.tokens -= tokens
            self.total_requests += 1
            return True

    def _refill(self):
        now = time.monotonic()
        new_tokens = (now - self.last_update) * self.config.requests_per_second
        self.tokens = min(self.config.burst_size, self.tokens + new_tokens)
        self.last_update = now

    def get_stats(self) -> Dict[str, float]:
        """Get rate limiter statistics."""
        with self.lock:
            return {
                'total_requests': self.total_requests,
                'total_wait_time': self.total_wait_time,
                'requests_per_second': self.config.requests_per_second,
                'current_tokens': self.tokens,
            }
