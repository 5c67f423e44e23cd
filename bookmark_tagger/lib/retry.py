"""Async retry with exponential backoff for generative service calls.

Example:
    @retry_on_failure_async(max_retries=2, base_delay=0.5)
    async def call_model(prompt: str) -> str:
        ...
"""

import asyncio
import logging
import random
from functools import wraps
from typing import Awaitable, Callable, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default exceptions to retry on
RETRYABLE_EXCEPTIONS = (
    ConnectionError,
    TimeoutError,
    asyncio.TimeoutError,
    httpx.RequestError,
    httpx.TimeoutException,
)


def retry_on_failure_async(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exceptions: tuple = RETRYABLE_EXCEPTIONS,
    jitter: bool = True,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator for async retry with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts (default: 3)
        base_delay: Initial delay in seconds (default: 1.0)
        max_delay: Maximum delay between retries (default: 30.0)
        exceptions: Tuple of exception types to retry on
        jitter: Add random jitter to delay to prevent thundering herd

    Returns:
        Decorated coroutine function that retries on failure

    Backoff schedule (with base_delay=1.0):
        Attempt 1: immediate
        Attempt 2: 1s delay (+ jitter)
        Attempt 3: 2s delay (+ jitter)
        (capped at max_delay)
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            retries = max(max_retries, 0)
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= retries:
                        logger.warning(
                            f"{func.__name__} failed after {retries + 1} attempts: {e!r}"
                        )
                        raise

                    delay = min(base_delay * (2**attempt), max_delay)
                    if jitter:
                        delay += random.uniform(0, delay * 0.25)

                    logger.info(
                        f"{func.__name__} attempt {attempt + 1} failed: {e!r}. "
                        f"Retrying in {delay:.1f}s..."
                    )

                    await asyncio.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
