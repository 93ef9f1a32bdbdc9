"""Per-symbol aggregation, cross-source merging and trending rank."""

import logging
import math
import time
from typing import Callable, Dict, Iterable, List, Optional

from penny_trends.analysis.sentiment import SentimentScorer
from penny_trends.analysis.symbols import SymbolExtractor
from penny_trends.config import ScoringConfig
from penny_trends.models import Post, StockAggregate

logger = logging.getLogger(__name__)

StockMap = Dict[str, StockAggregate]


def deduplicate_posts(posts: Iterable[Post]) -> List[Post]:
    """
    Remove duplicate posts by id, keeping the first occurrence and the order.

    Args:
        posts: Posts in any order, possibly repeated

    Returns:
        New list with one post per id
    """
    seen = set()
    unique = []
    for post in posts:
        if post.id in seen:
            logger.debug(f"Removing duplicate post: {post.title} (ID: {post.id})")
            continue
        seen.add(post.id)
        unique.append(post)
    return unique


def trending_score(stock: StockAggregate) -> float:
    """
    Composite ranking score, never shown to users.

    unique posts x 3 + mentions x 0.5 + log10(avg post score + 1) x 2 + |sentiment|,
    where post scores below 1 count as 1.
    """
    diversity = stock.unique_post_count * 3
    mention_score = stock.mention_count * 0.5

    engagement = 0.0
    if stock.posts:
        avg_score = sum(max(post.score, 1) for post in stock.posts) / len(stock.posts)
        engagement = math.log10(avg_score + 1) * 2

    return diversity + mention_score + engagement + abs(stock.sentiment_score)


class Aggregator:
    """Builds StockAggregates from posts and ranks them."""

    def __init__(
        self,
        extractor: SymbolExtractor,
        scorer: SentimentScorer,
        config: Optional[ScoringConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.extractor = extractor
        self.scorer = scorer
        self.config = config or ScoringConfig()
        self.clock = clock

    def refresh(self, stock: StockAggregate) -> StockAggregate:
        """Recompute every derived field of an aggregate from its posts and samples."""
        stock.posts = deduplicate_posts(stock.posts)
        stock.unique_post_count = len(stock.posts)
        stock.unique_user_count = len({sample.author for sample in stock.sentiment_samples})
        stock.sentiment_score = self.scorer.score_set(stock.sentiment_samples)
        return stock

    def process_source(self, posts: Iterable[Post]) -> StockMap:
        """
        Group one subreddit's posts by the symbols named in their titles.

        Args:
            posts: Posts of a single source, already deduplicated by id

        Returns:
            Mapping of symbol to its aggregate for this source
        """
        stocks: StockMap = {}
        now_ms = int(self.clock() * 1000)
        total_matches = 0

        for post in posts:
            symbols = self.extractor.extract(post.title)
            if not symbols:
                continue
            total_matches += len(symbols)
            samples = self.scorer.samples_for_post(post)

            for symbol in symbols:
                stock = stocks.get(symbol)
                if stock is None:
                    stock = stocks[symbol] = StockAggregate(symbol=symbol, last_updated=now_ms)
                stock.mention_count += 1
                stock.posts.append(post)
                stock.sentiment_samples.extend(samples)

        for stock in stocks.values():
            self.refresh(stock)

        logger.info(f"Matched {total_matches} symbol mentions, {len(stocks)} distinct symbols")
        return stocks

    def merge(self, into: StockMap, source_stocks: StockMap) -> StockMap:
        """
        Fold one source's aggregates into the run-wide map.

        Mentions add up; posts are deduplicated by id (first seen wins);
        samples are concatenated and the sentiment is recomputed.
        """
        for symbol, stock in source_stocks.items():
            existing = into.get(symbol)
            if existing is None:
                into[symbol] = self.refresh(stock)
                continue
            existing.mention_count += stock.mention_count
            existing.posts = existing.posts + stock.posts
            existing.sentiment_samples = existing.sentiment_samples + stock.sentiment_samples
            self.refresh(existing)
        return into

    def finalize(self, stocks: StockMap) -> List[StockAggregate]:
        """
        Sanitize, score and rank the merged aggregates.

        Returns:
            Top-N aggregates ordered by descending trending score
        """
        for symbol in self.config.invalid_symbols:
            if symbol in stocks:
                logger.info(f"Removing invalid symbol: {symbol}")

        survivors = []
        for symbol, stock in stocks.items():
            if symbol in self.config.invalid_symbols:
                continue
            self.refresh(stock)
            if not stock.posts:
                continue
            logger.debug(
                f"Final deduplication for {symbol}: {stock.unique_post_count} unique posts, "
                f"{stock.mention_count} total mentions"
            )
            stock.trending_score = trending_score(stock)
            survivors.append(stock)

        survivors.sort(key=lambda s: s.trending_score, reverse=True)
        return survivors[: self.config.top_n]
