"""
HTTP client for the snapshot read endpoint.

Also holds the record sanitizing and ordering helpers the dashboard side
applies to whatever the endpoint returns.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Iterable, List, Optional

import aiohttp
from pydantic import ValidationError

from penny_trends.exceptions import NetworkError, RecordValidationError
from penny_trends.models import DataSource, Post, Snapshot, StockAggregate

logger = logging.getLogger(__name__)

STOCK_SORT_KEYS = {
    "posts": lambda stock: stock.unique_post_count,
    "sentiment": lambda stock: stock.sentiment_score,
    "mentions": lambda stock: stock.mention_count,
}

DISCUSSION_SORT_KEYS = {
    "date": lambda post: post.created_at,
    "upvotes": lambda post: post.score,
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def sanitize_stocks(records: Any) -> List[StockAggregate]:
    """
    Keep the stock records that carry a non-empty string symbol and a posts list.

    Records that pass that check but still fail model validation are dropped too.
    """
    if not isinstance(records, list):
        return []

    stocks = []
    for record in records:
        if not (
            isinstance(record, dict)
            and isinstance(record.get("symbol"), str)
            and record["symbol"]
            and isinstance(record.get("posts"), list)
        ):
            logger.debug(f"Dropping malformed stock record: {record!r:.80}")
            continue
        try:
            stocks.append(StockAggregate.model_validate(record))
        except ValidationError as e:
            logger.debug(f"Dropping invalid stock record {record['symbol']}: {e.error_count()} field errors")
    return stocks


def sort_stocks(stocks: Iterable[StockAggregate], by: str = "posts", order: str = "desc") -> List[StockAggregate]:
    """
    Order stocks by unique posts, sentiment or mentions.

    Unknown keys fall back to unique posts. Ties keep their input order.
    """
    key = STOCK_SORT_KEYS.get(by, STOCK_SORT_KEYS["posts"])
    return sorted(stocks, key=key, reverse=(order == "desc"))


def sort_discussions(posts: Iterable[Post], by: str = "date", order: str = "desc") -> List[Post]:
    """Order a stock's posts by creation time or upvotes."""
    key = DISCUSSION_SORT_KEYS.get(by, DISCUSSION_SORT_KEYS["date"])
    return sorted(posts, key=key, reverse=(order == "desc"))


class SnapshotClient:
    """Reads the published snapshot from the HTTP endpoint."""

    def __init__(
        self,
        endpoint_url: str,
        timeout_sec: float = 15.0,
        clock: Callable[[], float] = time.time,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize the client.

        Args:
            endpoint_url: Absolute URL of the snapshot endpoint
            timeout_sec: Total timeout of one read
            clock: Time source, used for the cache-buster and missing timestamps
            session: Shared session; one is created lazily when omitted
        """
        self.endpoint_url = endpoint_url
        self.timeout = aiohttp.ClientTimeout(total=timeout_sec)
        self.clock = clock
        self._session = session
        self._owns_session = session is None

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    def parse(self, data: Any) -> Snapshot:
        """
        Build a Snapshot from an endpoint payload.

        A missing ``lastUpdated`` is replaced by the current time.

        Raises:
            RecordValidationError: If the payload is not a JSON object
        """
        if not isinstance(data, dict):
            raise RecordValidationError("Snapshot payload is not an object")

        last_updated = data.get("lastUpdated")
        if not _is_number(last_updated):
            last_updated = int(self.clock() * 1000)

        source_count = data.get("totalSubreddits")
        try:
            data_source = DataSource(data.get("dataSource"))
        except ValueError:
            data_source = DataSource.REDDIT

        return Snapshot(
            stocks=sanitize_stocks(data.get("stocks")),
            last_updated=int(last_updated),
            source_count=int(source_count) if _is_number(source_count) else 0,
            data_source=data_source,
        )

    async def fetch(self) -> Snapshot:
        """
        Read the current snapshot, bypassing caches.

        Raises:
            NetworkError: On transport failure or an unsuccessful status
            RecordValidationError: If the payload is malformed
        """
        if self._session is None:
            self._session = aiohttp.ClientSession()

        params = {"_": str(int(self.clock() * 1000))}
        try:
            async with self._session.get(self.endpoint_url, params=params, timeout=self.timeout) as response:
                response.raise_for_status()
                data = await response.json(content_type=None)
        except aiohttp.ClientResponseError as e:
            raise NetworkError(f"HTTP {e.status}: {e.message}", url=self.endpoint_url, status=e.status) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"{type(e).__name__}: {e}", url=self.endpoint_url) from e
        except ValueError as e:
            raise RecordValidationError(f"Snapshot payload is not JSON: {e}") from e

        return self.parse(data)
