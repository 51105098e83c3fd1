"""Retry with exponential backoff around NCBI requests."""

import time
from dataclasses import dataclass
from http.client import HTTPException
from typing import Any, Callable, Optional, Tuple, Type
from urllib.error import HTTPError

from .error_handler import ErrorHandler, ErrorType, get_error_handler
from .logging_config import get_logger

logger = get_logger('network_recovery')

# Entrez surfaces server-side failures as RuntimeError
RETRYABLE_ERRORS: Tuple[Type[BaseException], ...] = (OSError, HTTPException, RuntimeError)

# Client errors that will not succeed on retry
NON_RETRYABLE_STATUS = (400, 401, 403, 404)
NON_RETRYABLE_TYPES = (ErrorType.NOT_FOUND, ErrorType.PARSE_ERROR)


@dataclass
class RetryConfig:
    """Configuration for request retries."""
    max_retries: int = 3
    backoff_factor: float = 2.0
    max_backoff: float = 120.0

    def backoff(self, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt + 1``."""
        return min(self.backoff_factor * (2 ** attempt), self.max_backoff)


def _is_retryable(error: BaseException, error_type: ErrorType) -> bool:
    if error_type in NON_RETRYABLE_TYPES:
        return False
    if isinstance(error, HTTPError) and error.code in NON_RETRYABLE_STATUS:
        return False
    return isinstance(error, RETRYABLE_ERRORS)


def call_with_retry(func: Callable[..., Any],
                    *args,
                    config: Optional[RetryConfig] = None,
                    operation: Optional[str] = None,
                    item_id: Optional[str] = None,
                    error_handler: Optional[ErrorHandler] = None,
                    sleep: Callable[[float], None] = time.sleep,
                    **kwargs) -> Any:
    """
    Call ``func`` and retry transient failures.

    Args:
        func: Callable to invoke
        config: Retry configuration
        operation: Operation name for error logging
        item_id: Identifier the call concerns
        error_handler: Handler receiving each failure
        sleep: Sleep function, replaceable in tests

    Returns:
        Whatever ``func`` returns

    Raises:
        The last error once retries are exhausted, or a non-retryable
        error immediately
    """
    config = config or RetryConfig()
    error_handler = error_handler or get_error_handler()
    operation = operation or getattr(func, '__name__', 'request')

    attempt = 0
    while True:
        try:
            return func(*args, **kwargs)
        except Exception as e:
            context = error_handler.handle_error(e, operation=operation, item_id=item_id, retry_count=attempt)

            if not _is_retryable(e, context.error_type) or attempt >= config.max_retries:
                raise

            wait_time = config.backoff(attempt)
            if context.error_type is ErrorType.API_RATE_LIMIT and isinstance(e, HTTPError):
                retry_after = e.headers.get('Retry-After') if e.headers else None
                if retry_after and retry_after.isdigit():
                    wait_time = max(wait_time, float(retry_after))

            logger.info(f"{operation} failed, retrying in {wait_time:.1f}s...")
            sleep(wait_time)
            attempt += 1

