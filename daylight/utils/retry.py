"""Retry utilities for handling transient failures."""

import time
import logging
from functools import wraps
from typing import Callable, Type, Union, Tuple

from .exceptions import NetworkError

logger = logging.getLogger(__name__)

def retry_with_backoff(
    retries: int = 3,
    backoff_in_seconds: float = 1,
    max_backoff_in_seconds: float = 30,
    exceptions_to_check: Union[Type[Exception], Tuple[Type[Exception], ...]] = NetworkError,
):
    """
    Retry decorator with exponential backoff.

    Args:
        retries: Total number of attempts for the wrapped function
        backoff_in_seconds: Initial backoff time in seconds
        max_backoff_in_seconds: Maximum backoff time in seconds
        exceptions_to_check: Exception or tuple of exceptions to catch
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            attempt = 0
            backoff = min(backoff_in_seconds, max_backoff_in_seconds)

            while True:
                try:
                    return func(*args, **kwargs)
                except exceptions_to_check as e:
                    attempt += 1

                    if attempt >= retries:
                        logger.error(
                            f"Failed to execute {func.__name__} after {retries} attempts. "
                            f"Final error: {str(e)}"
                        )
                        raise

                    logger.warning(
                        f"Attempt {attempt} failed for {func.__name__}. "
                        f"Retrying in {backoff} seconds... Error: {str(e)}"
                    )

                    time.sleep(backoff)
                    backoff = min(backoff * 2, max_backoff_in_seconds)

        return wrapper

    return decorator
