"""HTTP client for Reddit's public JSON read API."""

import logging
from contextlib import nullcontext
from typing import Any, Dict, Optional

import aiohttp

from penny_trends.collector.error_handler import with_exponential_backoff
from penny_trends.collector.rate_limiter import RateLimiter
from penny_trends.config import Config
from penny_trends.exceptions import RecordValidationError

logger = logging.getLogger(__name__)


class RedditClient:
    """
    Rate-limited, retrying fetcher for Reddit listings and comment threads.

    Use as an async context manager, or call ``initialize``/``close`` explicitly.
    """

    def __init__(
        self,
        config: Config,
        rate_limiter: Optional[RateLimiter] = None,
        prometheus_exporter=None,
    ):
        """
        Initialize the Reddit client with configuration.

        Args:
            config: Application configuration with Reddit credentials
            rate_limiter: Pacing policy, built from ``config.rate_limit`` when omitted
            prometheus_exporter: Optional Prometheus exporter for metrics
        """
        self.config = config
        self.rate_limiter = rate_limiter or RateLimiter(config.rate_limit)
        self.prometheus_exporter = prometheus_exporter
        self._session: Optional[aiohttp.ClientSession] = None

    async def initialize(self) -> aiohttp.ClientSession:
        """Create the HTTP session used for every request."""
        if self._session is None:
            logger.info("Initializing Reddit client")
            auth = None
            if self.config.client_id and self.config.client_secret:
                auth = aiohttp.BasicAuth(self.config.client_id, self.config.client_secret)
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.config.user_agent},
                auth=auth,
                timeout=aiohttp.ClientTimeout(total=self.config.rate_limit.request_timeout_sec),
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session and release resources."""
        if self._session is not None:
            logger.info("Closing Reddit client")
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "RedditClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _request(self, url: str) -> Any:
        """Single GET attempt. Raises aiohttp errors untouched, undecodable bodies as RecordValidationError."""
        session = await self.initialize()
        await self.rate_limiter.pre_request()

        timer = self.prometheus_exporter.time_request() if self.prometheus_exporter else None
        with timer if timer else nullcontext():
            async with session.get(url) as response:
                self.rate_limiter.update_from_headers(response.headers)
                response.raise_for_status()
                try:
                    return await response.json()
                except ValueError as e:
                    raise RecordValidationError(f"Invalid JSON from {url}: {e}") from e

    async def get(self, url: str) -> Any:
        """
        Fetch a JSON document, retrying on 429 responses.

        Args:
            url: Absolute URL of the resource

        Returns:
            Decoded JSON body

        Raises:
            FetchExhausted: If every attempt was rate limited
            NetworkError: On any other failure (not retried)
            RecordValidationError: If the body is not valid JSON (not retried)
        """
        limits = self.config.rate_limit
        fetch = with_exponential_backoff(
            max_attempts=limits.max_attempts,
            initial_backoff=limits.initial_backoff_sec,
            backoff_factor=limits.backoff_factor,
            prometheus_exporter=self.prometheus_exporter,
        )(self._request)

        payload = await fetch(url)
        await self.rate_limiter.after_call()
        return payload

    async def get_listing(self, subreddit: str, sort: str, params: Dict[str, Any]) -> Any:
        """Fetch ``/r/{subreddit}/{sort}.json`` with the given query parameters."""
        if self.prometheus_exporter:
            self.prometheus_exporter.record_fetch_operation(sort)
        query = "&".join(f"{key}={value}" for key, value in params.items())
        return await self.get(f"{self.config.base_url}/r/{subreddit}/{sort}.json?{query}")

    async def get_thread(self, permalink: str) -> Any:
        """Fetch the comment thread of a post by its permalink."""
        if self.prometheus_exporter:
            self.prometheus_exporter.record_fetch_operation("comments")
        return await self.get(f"{self.config.base_url}{permalink.rstrip('/')}.json")
