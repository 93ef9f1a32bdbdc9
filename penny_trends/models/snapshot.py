"""Models for sentiment samples, per-symbol aggregates and the published snapshot."""

from enum import Enum
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field

from penny_trends.models.submission import Post


class Sentiment(str, Enum):
    """Keyword classification of one text fragment."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

    @property
    def polarity(self) -> int:
        if self is Sentiment.POSITIVE:
            return 1
        if self is Sentiment.NEGATIVE:
            return -1
        return 0


class DataSource(str, Enum):
    """Outcome of the run that produced a snapshot, as seen by the client."""

    REDDIT = "reddit"
    ERROR = "error"


class SampleSource(BaseModel):
    """Where a sentiment sample came from."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["post", "comment"] = Field(alias="type")
    id: str
    text: str


class SentimentSample(BaseModel):
    """One classified fragment: a post's own content or one of its comments."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    author: str = Field(alias="userId")
    classification: Sentiment = Field(alias="sentiment")
    timestamp: float
    # Raw upvote score; post samples carry the post score doubled
    weight_score: int = Field(alias="score")
    source: SampleSource


class StockAggregate(BaseModel):
    """Everything collected about one symbol during a run."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str = Field(pattern=r"^[A-Z]{2,5}$")
    mention_count: int = Field(default=0, alias="mentions")
    unique_post_count: int = Field(default=0, alias="uniquePosts")
    unique_user_count: int = Field(default=0, alias="uniqueUsers")
    sentiment_samples: List[SentimentSample] = Field(default_factory=list, alias="userSentiments")
    sentiment_score: float = Field(default=0.0, ge=-1.0, le=1.0, alias="sentimentScore")
    trending_score: float = Field(default=0.0, alias="trendingScore")
    posts: List[Post] = Field(default_factory=list)
    last_updated: int = Field(default=0, alias="lastUpdated")


class Snapshot(BaseModel):
    """
    The single published result of one ingestion run.

    Serialized with the camelCase keys the dashboard reads
    (``stocks``, ``lastUpdated``, ``totalSubreddits``, ``dataSource``).
    """

    model_config = ConfigDict(populate_by_name=True)

    stocks: List[StockAggregate] = Field(default_factory=list)
    last_updated: int = Field(alias="lastUpdated")
    source_count: int = Field(default=0, alias="totalSubreddits")
    data_source: DataSource = Field(default=DataSource.REDDIT, alias="dataSource")

    @property
    def status(self) -> str:
        return "error" if self.data_source is DataSource.ERROR else "ok"

    @classmethod
    def error(cls, last_updated: int, source_count: int) -> "Snapshot":
        return cls(
            stocks=[],
            last_updated=last_updated,
            source_count=source_count,
            data_source=DataSource.ERROR,
        )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_wire(cls, payload: Dict[str, Any]) -> "Snapshot":
        return cls.model_validate(payload)
