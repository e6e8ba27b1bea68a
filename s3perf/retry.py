"""Retry and polling helpers.

Two kinds of waiting happen during a run:

- The optional HTTP endpoint probe is retried with backoff when it hits a
  transient failure (connection problems, timeouts, 429/5xx).
- Bucket existence is polled a bounded number of times after creating or
  deleting a bucket, since some services are eventually consistent. The poll
  is a consistency wait, not an error retry: exhausting it is not a failure.
"""

import time
from typing import Any, Callable, Optional, Sequence

import httpx

# HTTP status codes that indicate transient server issues
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

# Existence poll defaults: 5 checks, one second apart
POLL_ATTEMPTS = 5
POLL_INTERVAL = 1.0


class RetryExhausted(Exception):
    """Raised when all retry attempts have been exhausted."""

    def __init__(
        self,
        message: str,
        attempts: int,
        last_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


def is_retryable_error(error: Exception) -> bool:
    """Determine if an error is transient and worth retrying.

    Args:
        error: The exception that was raised.

    Returns:
        True if the error is transient and should trigger a retry,
        False if the error is permanent and retrying won't help.
    """
    if isinstance(error, (httpx.ConnectError, httpx.ConnectTimeout, httpx.ReadTimeout)):
        return True

    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code in RETRYABLE_STATUS_CODES

    return False


def retry_with_backoff(
    func: Callable[..., Any],
    max_attempts: int = 3,
    delays: Sequence[float] = (1.0, 2.0, 4.0),
    args: tuple = (),
    kwargs: Optional[dict] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """Execute a function with retry logic and increasing delays.

    Args:
        func: The function to execute.
        max_attempts: Maximum number of attempts (including first try).
        delays: Delay times (seconds) between retries.
                delays[0] is used after first failure, etc.
        args: Positional arguments to pass to func.
        kwargs: Keyword arguments to pass to func.
        sleep: Function used to wait between attempts.

    Returns:
        The return value of func if successful.

    Raises:
        RetryExhausted: If all attempts fail with retryable errors.
        Exception: If a non-retryable error occurs, it's raised immediately.
    """
    if kwargs is None:
        kwargs = {}

    last_error: Optional[Exception] = None

    for attempt in range(1, max_attempts + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            last_error = e

            if not is_retryable_error(e):
                raise

            if attempt >= max_attempts:
                raise RetryExhausted(
                    f"Operation failed after {max_attempts} attempts",
                    attempts=max_attempts,
                    last_error=last_error,
                ) from last_error

            delay_index = min(attempt - 1, len(delays) - 1)
            sleep(delays[delay_index])

    raise RetryExhausted(
        f"Operation failed after {max_attempts} attempts",
        attempts=max_attempts,
        last_error=last_error,
    )


def poll(
    predicate: Callable[[], bool],
    attempts: int = POLL_ATTEMPTS,
    interval: float = POLL_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Check a condition repeatedly until it holds or attempts run out.

    Args:
        predicate: Condition to check; called at most ``attempts`` times.
        attempts: Maximum number of checks.
        interval: Seconds to wait after a failed check.
        sleep: Function used to wait between checks.

    Returns:
        True as soon as the predicate holds, False when every check failed.
    """
    for attempt in range(1, attempts + 1):
        if predicate():
            return True
        if attempt < attempts:
            sleep(interval)
    return False
