import asyncio
import functools
import logging
import random
from typing import Any, Callable, Coroutine, TypeVar

from playwright.async_api import Error as PlaywrightError

from techjobs.config.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS = (PlaywrightError, asyncio.TimeoutError)


def with_retry(
    max_retries: int = settings.MAX_RETRIES,
    base_delay: float = settings.RETRY_BASE_DELAY,
    max_delay: float = settings.RETRY_MAX_DELAY,
):
    """
    Decorator for async functions to retry Playwright navigation failures
    with exponential backoff and jitter. Anything else propagates immediately.
    """

    def decorator(
        func: Callable[..., Coroutine[Any, Any, T]],
    ) -> Callable[..., Coroutine[Any, Any, T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except RETRYABLE_ERRORS as e:
                    if attempt >= max_retries:
                        logger.error(
                            f"Giving up on {func.__name__} after {attempt + 1} attempts: {e}"
                        )
                        raise

                    delay = min(base_delay * (2**attempt), max_delay)
                    sleep_time = delay + random.uniform(0, 0.5 * delay)
                    logger.warning(
                        f"Attempt {attempt + 1}/{max_retries + 1} failed for {func.__name__}. "
                        f"Retrying in {sleep_time:.2f}s. Error: {e}"
                    )
                    await asyncio.sleep(sleep_time)
                    attempt += 1

        return wrapper

    return decorator
