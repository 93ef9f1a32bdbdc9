from penny_trends.models.snapshot import (
    DataSource,
    SampleSource,
    Sentiment,
    SentimentSample,
    Snapshot,
    StockAggregate,
)
from penny_trends.models.submission import Comment, Post

__all__ = [
    "Comment",
    "DataSource",
    "Post",
    "SampleSource",
    "Sentiment",
    "SentimentSample",
    "Snapshot",
    "StockAggregate",
]
