"""Core collector functionality for fetching Reddit submissions."""

import logging
from typing import List, Optional

from penny_trends.analysis.aggregator import deduplicate_posts
from penny_trends.collector.comment_sampler import CommentSampler
from penny_trends.config import ScoringConfig
from penny_trends.models import Post
from penny_trends.models.mapping import children_to_posts, listing_children

logger = logging.getLogger(__name__)

# (sort, extra query parameters) of each listing read per subreddit
LISTINGS = (
    ("new", {}),
    ("top", {"t": "week"}),
)


class SubmissionCollector:
    """Collector for recent Reddit submissions and their sampled comments."""

    def __init__(
        self,
        reddit_client,
        config: Optional[ScoringConfig] = None,
        comment_sampler: Optional[CommentSampler] = None,
        prometheus_exporter=None,
    ):
        """
        Initialize the submission collector.

        Args:
            reddit_client: Client for the Reddit read API
            config: Scoring configuration (listing size, comment thresholds)
            comment_sampler: Sampler for post comments, built from the client when omitted
            prometheus_exporter: Optional Prometheus exporter for metrics
        """
        self.reddit_client = reddit_client
        self.config = config or ScoringConfig()
        self.comment_sampler = comment_sampler or CommentSampler(reddit_client, self.config)
        self.prometheus_exporter = prometheus_exporter

    async def _listing(self, subreddit: str, sort: str, params: dict) -> List[Post]:
        query = {"limit": self.config.listing_limit, **params}
        payload = await self.reddit_client.get_listing(subreddit, sort, query)
        posts = children_to_posts(listing_children(payload))
        logger.debug(f"r/{subreddit}/{sort}: {len(posts)} posts")
        return posts

    async def collect(self, subreddit: str) -> List[Post]:
        """
        Collect the new and top-of-week posts of a subreddit.

        Args:
            subreddit: Name of the subreddit, without the ``r/`` prefix

        Returns:
            Posts deduplicated by id, with sampled comments attached

        Raises:
            FetchError: If a listing could not be fetched
            RecordValidationError: If a listing payload is malformed
        """
        logger.info(f"Collecting posts from r/{subreddit}")

        posts: List[Post] = []
        for sort, params in LISTINGS:
            posts.extend(await self._listing(subreddit, sort, params))

        unique = deduplicate_posts(posts)

        collected = []
        for post in unique:
            comments = await self.comment_sampler.sample(post)
            collected.append(post.with_comments(comments) if comments else post)

        if self.prometheus_exporter:
            self.prometheus_exporter.record_submissions_collected(subreddit, len(collected))

        logger.info(f"Collected {len(collected)} unique posts from r/{subreddit}")
        return collected
