"""Retry utilities for Supabase calls with exponential backoff."""
import logging
from typing import Callable, TypeVar

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from domain.exceptions import SessionEngineError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default retry configuration
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_WAIT_SECONDS = 0.5
DEFAULT_MAX_WAIT_SECONDS = 5.0


def is_retryable_error(exception: BaseException) -> bool:
    """
    Determine if a storage exception is transient.

    Domain errors (a second open session, a missing row) are never retried.

    Retryable errors include:
    - Rate limit errors (429)
    - Server errors (5xx)
    - Timeout errors
    - Connection errors
    """
    if isinstance(exception, SessionEngineError):
        return False

    error_str = str(exception).lower()
    exception_type_str = type(exception).__name__.lower()

    # Check for rate limit (429) - always retry
    if "429" in error_str or ("rate" in error_str and "limit" in error_str):
        return True

    # Check for server errors (5xx) - retry
    if any(code in error_str for code in ["500", "502", "503", "504"]):
        return True

    # Check for timeout errors - retry
    if "timeout" in error_str or "timed out" in error_str or "timeout" in exception_type_str:
        return True

    # Check for connection errors - retry
    if "connection" in error_str or "connect" in exception_type_str:
        return True

    # Default: don't retry unknown errors (auth, bad request, RLS)
    return False


def _validate_retry_params(
    max_attempts: int,
    min_wait_seconds: float,
    max_wait_seconds: float,
) -> None:
    """
    Validate retry parameters.

    Raises:
        ValueError: If any parameter is invalid
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
    if min_wait_seconds <= 0:
        raise ValueError(f"min_wait_seconds must be positive, got {min_wait_seconds}")
    if max_wait_seconds <= 0:
        raise ValueError(f"max_wait_seconds must be positive, got {max_wait_seconds}")
    if min_wait_seconds > max_wait_seconds:
        raise ValueError(
            f"min_wait_seconds ({min_wait_seconds}) cannot exceed "
            f"max_wait_seconds ({max_wait_seconds})"
        )


def create_retry_decorator(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait_seconds: float = DEFAULT_MIN_WAIT_SECONDS,
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Create a retry decorator with exponential backoff.

    Works for both sync and async callables. The last exception is re-raised
    unchanged once attempts are exhausted.

    Args:
        max_attempts: Maximum number of attempts
        min_wait_seconds: Minimum wait time between retries
        max_wait_seconds: Maximum wait time between retries

    Raises:
        ValueError: If parameters are invalid
    """
    _validate_retry_params(max_attempts, min_wait_seconds, max_wait_seconds)

    return retry(
        retry=retry_if_exception(is_retryable_error),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(
            multiplier=min_wait_seconds,
            min=min_wait_seconds,
            max=max_wait_seconds,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
