"""Retry logic for Reddit API requests."""

import asyncio
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar, cast

from aiohttp import ClientError
from aiohttp.client_exceptions import ClientResponseError

from penny_trends.exceptions import FetchError, FetchExhausted, NetworkError, RateLimited

logger = logging.getLogger(__name__)

T = TypeVar("T")
AsyncFunc = Callable[..., Awaitable[T]]


def _classify(error: BaseException, url: Any) -> FetchError:
    """Map a transport exception onto the fetch error taxonomy."""
    if isinstance(error, FetchError):
        return error
    if isinstance(error, ClientResponseError):
        if error.status == 429:
            return RateLimited(f"Rate limited (429): {error.message}", url=url, status=429)
        return NetworkError(f"HTTP {error.status}: {error.message}", url=url, status=error.status)
    if isinstance(error, asyncio.TimeoutError):
        return NetworkError("Request timed out", url=url)
    return NetworkError(f"{type(error).__name__}: {error}", url=url)


def with_exponential_backoff(
    max_attempts: int = 5,
    initial_backoff: float = 10.0,
    backoff_factor: float = 2.0,
    prometheus_exporter=None,
) -> Callable[[AsyncFunc[T]], AsyncFunc[T]]:
    """
    Decorator retrying rate-limited async requests with exponential backoff.

    Only 429 responses are retried. Any other failure is raised as a
    ``NetworkError`` on the first attempt.

    Args:
        max_attempts: Total number of attempts, the first one included
        initial_backoff: Sleep before the second attempt, in seconds
        backoff_factor: Multiplier applied to the sleep after each retry
        prometheus_exporter: Optional exporter that counts API errors

    Returns:
        Decorator function
    """
    def decorator(func: AsyncFunc[T]) -> AsyncFunc[T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            url = args[-1] if args else kwargs.get("url")
            backoff = initial_backoff
            attempt = 0

            while True:
                attempt += 1
                try:
                    return await func(*args, **kwargs)
                except (ClientError, asyncio.TimeoutError, FetchError) as e:
                    cause = e
                    error = _classify(e, url)

                if prometheus_exporter:
                    prometheus_exporter.record_api_error(str(error.status) if error.status else "network")

                if not isinstance(error, RateLimited):
                    logger.warning(f"Request to {url} failed: {error}")
                    if error is cause:
                        raise error
                    raise error from cause

                if attempt >= max_attempts:
                    logger.error(f"Giving up on {url} after {attempt} rate-limited attempts")
                    raise FetchExhausted(
                        f"Failed after {attempt} attempts", url=url, attempts=attempt
                    ) from error

                logger.warning(
                    f"Rate limited, waiting {backoff:.0f}s before retry {attempt}/{max_attempts - 1}"
                )
                await asyncio.sleep(backoff)
                backoff *= backoff_factor

        return cast(AsyncFunc[T], wrapper)
    return decorator
