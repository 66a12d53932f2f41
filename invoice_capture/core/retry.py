"""
Retry and circuit breaking for calls to remote recognition services.

Transient transport errors are retried with exponential backoff. A service
that keeps failing is skipped for a while so the caller can move on to the
next text source without waiting on timeouts.
"""

import time
from functools import wraps
from typing import Any, Callable, Optional, Tuple, Type
from ..config.settings import get_settings
from ..core.exceptions import APIError
from ..core.logging_config import get_logger

logger = get_logger(__name__)

CLOSED = 'closed'
OPEN = 'open'
HALF_OPEN = 'half_open'


def retry(
    max_attempts: Optional[int] = None,
    delay: Optional[float] = None,
    backoff: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,)
):
    """
    Retry a function on the given exceptions.

    Args:
        max_attempts: Total attempts, at least one (MAX_RETRIES if None)
        delay: Seconds before the second attempt (RETRY_DELAY if None)
        backoff: Factor applied to the delay after every failed attempt
        exceptions: Exception types that trigger another attempt
    """
    if max_attempts is None or delay is None:
        settings = get_settings()
        max_attempts = settings.max_retries if max_attempts is None else max_attempts
        delay = settings.retry_delay if delay is None else delay
    attempts = max(1, max_attempts)

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            wait = delay
            for attempt in range(1, attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == attempts:
                        logger.error(f"{func.__name__} failed after {attempts} attempts: {e}")
                        raise
                    logger.warning(
                        f"{func.__name__} attempt {attempt}/{attempts} failed ({e}), retrying in {wait}s"
                    )
                    time.sleep(wait)
                    wait *= backoff

        return wrapper
    return decorator


class CircuitBreaker:
    """
    Stops calling a service after repeated failures.

    After ``failure_threshold`` consecutive failures of ``expected_exception``
    the breaker opens and calls fail fast with APIError. Once
    ``recovery_timeout`` seconds have passed a single trial call is let
    through; success closes the breaker again.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: int = 60,
        expected_exception: Type[Exception] = Exception
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception = expected_exception
        self.failure_count = 0
        self.last_failure_time: Optional[float] = None
        self.state = CLOSED

    def _cooled_down(self) -> bool:
        return time.time() - (self.last_failure_time or 0) > self.recovery_timeout

    def call(self, func: Callable, *args, **kwargs) -> Any:
        """
        Call ``func`` unless the breaker is open.

        Raises:
            APIError: If the breaker is open
        """
        if self.state == OPEN:
            if not self._cooled_down():
                raise APIError("Recognition service temporarily disabled after repeated failures")
            self.state = HALF_OPEN
            logger.info("Circuit breaker half-open, trying the service again")

        try:
            result = func(*args, **kwargs)
        except self.expected_exception:
            self._record_failure()
            raise

        if self.state == HALF_OPEN:
            logger.info("Circuit breaker closed, service recovered")
        self.state = CLOSED
        self.failure_count = 0
        return result

    def _record_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = time.time()
        if self.state == HALF_OPEN or self.failure_count >= self.failure_threshold:
            self.state = OPEN
            logger.error(f"Circuit breaker opened after {self.failure_count} failures")
