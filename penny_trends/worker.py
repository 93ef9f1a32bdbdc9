"""
Ingestion worker: one full collect, score, rank and publish run.

Sources are processed one after another. A failing source is skipped and
reported on the run result; any other failure ends the run and publishes an
error snapshot in place of the current one.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from penny_trends.analysis.aggregator import Aggregator, StockMap
from penny_trends.analysis.sentiment import SentimentScorer
from penny_trends.analysis.symbols import SymbolExtractor
from penny_trends.analysis.validator import SymbolValidator
from penny_trends.collector.collector import SubmissionCollector
from penny_trends.config import Config
from penny_trends.exceptions import PennyTrendsError
from penny_trends.models import Snapshot
from penny_trends.storage.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class WorkerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SourceWarning:
    """A subreddit that was skipped during a run."""

    source: str
    error_type: str
    message: str


@dataclass
class RunResult:
    """Outcome of one worker run."""

    state: WorkerState
    snapshot: Optional[Snapshot] = None
    warnings: List[SourceWarning] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state is WorkerState.SUCCEEDED


class IngestionWorker:
    """
    Runs the ingestion pipeline once per ``run()`` call.

    Usage:
        async with RedditClient(config) as client:
            worker = IngestionWorker(config, client, create_store(config.storage))
            result = await worker.run()
    """

    def __init__(
        self,
        config: Config,
        reddit_client,
        store: SnapshotStore,
        extractor: Optional[SymbolExtractor] = None,
        scorer: Optional[SentimentScorer] = None,
        validator: Optional[SymbolValidator] = None,
        collector: Optional[SubmissionCollector] = None,
        prometheus_exporter=None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.reddit_client = reddit_client
        self.store = store
        self.prometheus_exporter = prometheus_exporter
        self.clock = clock

        scoring = config.scoring
        self.collector = collector or SubmissionCollector(
            reddit_client, scoring, prometheus_exporter=prometheus_exporter
        )
        self.aggregator = Aggregator(
            extractor or SymbolExtractor(scoring),
            scorer or SentimentScorer(scoring),
            scoring,
            clock=clock,
        )
        if validator is None and scoring.validate_symbols:
            validator = SymbolValidator()
        self.validator = validator
        self.state = WorkerState.IDLE

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    async def _process_source(self, subreddit: str) -> StockMap:
        posts = await self.collector.collect(subreddit)
        return self.aggregator.process_source(posts)

    async def _validate(self, stocks: StockMap) -> StockMap:
        try:
            valid = await self.validator.filter_valid(sorted(stocks))
        finally:
            await self.validator.close()
        dropped = sorted(set(stocks) - valid)
        if dropped:
            logger.info(f"Dropping symbols not listed on any exchange: {dropped}")
        return {symbol: stock for symbol, stock in stocks.items() if symbol in valid}

    async def _collect_all(self, warnings: List[SourceWarning]) -> StockMap:
        merged: StockMap = {}
        sources = self.config.subreddits

        for index, subreddit in enumerate(sources):
            try:
                source_stocks = await self._process_source(subreddit)
            except PennyTrendsError as e:
                logger.error(f"Error processing r/{subreddit}: {e}")
                warnings.append(SourceWarning(subreddit, type(e).__name__, str(e)))
                if self.prometheus_exporter:
                    self.prometheus_exporter.record_source_failure(subreddit)
            else:
                self.aggregator.merge(merged, source_stocks)
                logger.info(f"r/{subreddit}: {len(source_stocks)} symbols, {len(merged)} merged so far")

            if index < len(sources) - 1:
                await self.reddit_client.rate_limiter.between_sources()

        return merged

    def _save_error_snapshot(self) -> Optional[Snapshot]:
        snapshot = Snapshot.error(self._now_ms(), len(self.config.subreddits))
        try:
            self.store.save(snapshot)
        except Exception as e:
            logger.critical(f"Failed to persist error snapshot: {e}")
            return None
        return snapshot

    async def run(self) -> RunResult:
        """
        Execute one ingestion run. Never raises.

        Returns:
            RunResult with the published snapshot and per-source warnings
        """
        self.state = WorkerState.RUNNING
        warnings: List[SourceWarning] = []
        logger.info(f"Starting ingestion run over {len(self.config.subreddits)} subreddits")

        try:
            merged = await self._collect_all(warnings)
            if self.validator is not None:
                merged = await self._validate(merged)

            stocks = self.aggregator.finalize(merged)
            snapshot = Snapshot(
                stocks=stocks,
                last_updated=self._now_ms(),
                source_count=len(self.config.subreddits),
            )
            self.store.save(snapshot)
        except Exception as e:
            logger.exception(f"Ingestion run failed: {e}")
            self.state = WorkerState.FAILED
            if self.prometheus_exporter:
                self.prometheus_exporter.record_run(self.state.value)
            return RunResult(
                state=self.state,
                snapshot=self._save_error_snapshot(),
                warnings=warnings,
                error=f"{type(e).__name__}: {e}",
            )

        self.state = WorkerState.SUCCEEDED
        if self.prometheus_exporter:
            self.prometheus_exporter.record_run(self.state.value, symbols=len(stocks))

        for stock in stocks:
            logger.info(
                f"{stock.symbol}: {stock.unique_post_count} unique posts, {stock.mention_count} mentions, "
                f"sentiment {stock.sentiment_score:.2f}, trending {stock.trending_score:.2f}"
            )
        logger.info(f"Published {len(stocks)} symbols with {len(warnings)} source warnings")
        return RunResult(state=self.state, snapshot=snapshot, warnings=warnings)
