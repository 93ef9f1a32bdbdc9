"""Request pacing for the Reddit read API."""

import asyncio
import logging
import time
from typing import Any, Mapping, Optional

from penny_trends.config import RateLimitConfig

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Pacing for Reddit API requests.

    Enforces a fixed delay after every successful call and a longer pause
    between subreddits, and honours the X-Ratelimit headers Reddit returns.
    """

    def __init__(self, config: RateLimitConfig):
        """
        Initialize the rate limiter with configuration.

        Args:
            config: Rate limiting configuration
        """
        self.config = config
        self.remaining_calls: Optional[int] = None
        self.reset_timestamp: Optional[float] = None

    async def pre_request(self) -> None:
        """
        Sleep until the rate limit window resets when Reddit reports few calls left.

        This should be called before each Reddit API request.
        """
        if (self.remaining_calls is not None and
                self.reset_timestamp is not None and
                self.remaining_calls < self.config.min_remaining_calls):

            wait_time = self.reset_timestamp - time.time() + self.config.sleep_buffer_sec
            if wait_time > 0:
                logger.info(f"Rate limit approaching: {self.remaining_calls} calls remaining. "
                            f"Sleeping for {wait_time:.2f}s until reset.")
                await asyncio.sleep(wait_time)
            self.remaining_calls = None
            self.reset_timestamp = None

    def update_from_headers(self, headers: Mapping[str, Any]) -> None:
        """
        Update rate limit tracking based on Reddit API response headers.

        Args:
            headers: Response headers from a Reddit API request
        """
        remaining = headers.get("x-ratelimit-remaining")
        if remaining is not None:
            try:
                self.remaining_calls = int(float(remaining))
            except (ValueError, TypeError):
                logger.warning("Failed to parse x-ratelimit-remaining header")

        reset = headers.get("x-ratelimit-reset")
        if reset is not None:
            try:
                self.reset_timestamp = time.time() + float(reset)
            except (ValueError, TypeError):
                logger.warning("Failed to parse x-ratelimit-reset header")

    async def after_call(self) -> None:
        """Fixed pause that follows every successful request."""
        if self.config.call_delay_sec > 0:
            await asyncio.sleep(self.config.call_delay_sec)

    async def between_sources(self) -> None:
        """Longer pause between two subreddits of the same run."""
        if self.config.source_delay_sec > 0:
            logger.info(f"Waiting {self.config.source_delay_sec:.0f}s before the next subreddit")
            await asyncio.sleep(self.config.source_delay_sec)
