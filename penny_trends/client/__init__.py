from penny_trends.client.polling import PollingController, PollState
from penny_trends.client.snapshot_client import (
    SnapshotClient,
    sanitize_stocks,
    sort_discussions,
    sort_stocks,
)

__all__ = [
    "PollState",
    "PollingController",
    "SnapshotClient",
    "sanitize_stocks",
    "sort_discussions",
    "sort_stocks",
]
