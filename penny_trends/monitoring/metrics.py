"""Prometheus metrics for monitoring the Penny Trends pipeline."""

import logging
import time
from typing import Optional

from prometheus_client import Counter, Gauge, Histogram, start_http_server

logger = logging.getLogger(__name__)

# Define metrics
SUBMISSIONS_COLLECTED = Counter(
    "penny_trends_submissions_collected_total",
    "Total number of Reddit posts collected",
    ["subreddit"],
)

FETCH_OPERATIONS = Counter(
    "penny_trends_fetch_operations_total",
    "Number of fetch operations performed",
    ["operation_type"],
)

API_ERRORS = Counter(
    "penny_trends_api_errors_total",
    "Number of API errors encountered",
    ["error_type"],
)

WORKER_RUNS = Counter(
    "penny_trends_worker_runs_total",
    "Number of ingestion runs by final state",
    ["status"],
)

SOURCE_FAILURES = Counter(
    "penny_trends_source_failures_total",
    "Number of subreddits that failed during a run",
    ["subreddit"],
)

SYMBOLS_PUBLISHED = Gauge(
    "penny_trends_symbols_published",
    "Number of symbols in the last published snapshot",
)

LAST_SUCCESSFUL_RUN = Gauge(
    "penny_trends_last_successful_run_timestamp_seconds",
    "Unix time of the last run that published a snapshot",
)

REQUEST_DURATION = Histogram(
    "penny_trends_request_duration_seconds",
    "Duration of API requests in seconds",
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)


class PrometheusExporter:
    """Prometheus metrics exporter for the Penny Trends pipeline."""

    def __init__(self, port: int = 8000):
        """
        Initialize the Prometheus exporter.

        Args:
            port: Port to expose metrics on
        """
        self.port = port
        self.server_started = False

    def start_server(self) -> None:
        """Start the Prometheus metrics server."""
        if not self.server_started:
            try:
                start_http_server(self.port)
                self.server_started = True
                logger.info(f"Started Prometheus metrics server on port {self.port}")
            except OSError as e:
                logger.error(f"Failed to start Prometheus metrics server: {str(e)}")

    def record_submissions_collected(self, subreddit: str, count: int = 1) -> None:
        SUBMISSIONS_COLLECTED.labels(subreddit=subreddit).inc(count)

    def record_fetch_operation(self, operation_type: str) -> None:
        """
        Record a fetch operation.

        Args:
            operation_type: Listing sort or 'comments'
        """
        FETCH_OPERATIONS.labels(operation_type=operation_type).inc()

    def record_api_error(self, error_type: str) -> None:
        """
        Record an API error.

        Args:
            error_type: HTTP status as a string, or 'network'
        """
        API_ERRORS.labels(error_type=error_type).inc()

    def record_source_failure(self, subreddit: str) -> None:
        SOURCE_FAILURES.labels(subreddit=subreddit).inc()

    def record_run(self, status: str, symbols: Optional[int] = None) -> None:
        """
        Record the end of an ingestion run.

        Args:
            status: Final worker state ('succeeded' or 'failed')
            symbols: Number of symbols published, for successful runs
        """
        WORKER_RUNS.labels(status=status).inc()
        if symbols is not None:
            SYMBOLS_PUBLISHED.set(symbols)
            LAST_SUCCESSFUL_RUN.set(time.time())

    def time_request(self) -> "RequestTimer":
        """
        Create a context manager for timing API requests.

        Returns:
            RequestTimer context manager
        """
        return RequestTimer()


class RequestTimer:
    """Context manager for timing API requests."""

    def __init__(self):
        """Initialize the request timer."""
        self.start_time: Optional[float] = None

    def __enter__(self) -> "RequestTimer":
        """Start timing the request."""
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.start_time is not None:
            duration = time.time() - self.start_time
            REQUEST_DURATION.observe(duration)
