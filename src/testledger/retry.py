"""Retry logic with exponential backoff for store writes."""

from __future__ import annotations

import secrets
import time
from functools import wraps
from typing import TYPE_CHECKING, Any, TypeVar

from testledger.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")

logger = get_logger(__name__)


def compute_delay(attempt: int, base_delay: float, max_delay: float, jitter: bool) -> float:
    """Delay before retry number ``attempt`` (zero-based)."""
    delay = min(base_delay * (2**attempt), max_delay)
    if jitter:
        # secrets.randbelow returns [0, n), so the factor lands in [0.5, 1.5)
        jitter_factor = 0.5 + (secrets.randbelow(1000) / 1000)
        delay = delay * jitter_factor
    return delay


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    jitter: bool = True,
    retryable_exceptions: tuple[type[Exception], ...] = (
        TimeoutError,
        ConnectionError,
    ),
    should_retry: Callable[[Exception], bool] | None = None,
    log: Any = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator for retrying functions with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts.
        base_delay: Initial delay between retries in seconds.
        max_delay: Maximum delay between retries in seconds.
        jitter: Whether to add randomness to delay.
        retryable_exceptions: Tuple of exception types that trigger retry.
        should_retry: Optional check on a caught exception; False re-raises it at once.
        log: Logger for retry events (defaults to this module's logger).

    Returns:
        Decorated function with retry logic.
    """
    retry_log = log if log is not None else logger

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    if should_retry is not None and not should_retry(e):
                        raise
                    if attempt == max_retries:
                        retry_log.error(
                            "retry_exhausted",
                            function=func.__name__,
                            attempt=attempt + 1,
                            max_retries=max_retries,
                            error=str(e),
                        )
                        raise

                    delay = compute_delay(attempt, base_delay, max_delay, jitter)
                    retry_log.warning(
                        "retry_attempt",
                        function=func.__name__,
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        delay_seconds=round(delay, 2),
                        error=str(e),
                    )
                    time.sleep(delay)

            raise RuntimeError("Unexpected retry loop exit")

        return wrapper

    return decorator
