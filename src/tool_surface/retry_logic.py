"""Retry logic with exponential backoff for interpreter rate limits.

Retries only on 429 responses (1s, 2s, 4s) and fails fast for every other
error.
"""

import logging
import time
from typing import Callable, TypeVar

from .errors import InterpreterError

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3


def retry_on_rate_limit(func: Callable[..., T], *args, **kwargs) -> T:
    """Call ``func`` and retry with exponential backoff while it is rate limited.

    Returns:
        The return value of the function

    Raises:
        InterpreterError: If the rate limit persists after MAX_RETRIES retries
        Other exceptions: Passed through immediately without retry

    Example:
        >>> text = retry_on_rate_limit(client.complete, prompt)
    """
    for retry_num in range(MAX_RETRIES + 1):
        try:
            return func(*args, **kwargs)
        except InterpreterError as e:
            if e.status_code != 429:
                raise

            if retry_num >= MAX_RETRIES:
                logger.error(f"Rate limit persisted after {MAX_RETRIES} retries, giving up")
                raise InterpreterError(
                    f"rate limited after {MAX_RETRIES} retries", status_code=429
                )

            wait_time = 2 ** retry_num
            logger.info(
                f"Rate limit hit, retrying in {wait_time}s "
                f"(retry {retry_num + 1}/{MAX_RETRIES})"
            )
            time.sleep(wait_time)

    raise InterpreterError(f"rate limited after {MAX_RETRIES} retries", status_code=429)
