"""Comment sampling for posts that name a ticker explicitly."""

import logging
import re
from typing import List, Optional

from penny_trends.analysis.symbols import explicit_symbol
from penny_trends.config import ScoringConfig
from penny_trends.exceptions import FetchError, RecordValidationError
from penny_trends.models import Comment, Post
from penny_trends.models.mapping import child_to_comment, listing_children

logger = logging.getLogger(__name__)


def mentions_symbol(text: str, symbol: str) -> bool:
    """
    True when ``text`` names ``symbol`` as ``$SYM``, as a standalone word,
    or followed by punctuation. Case-insensitive.
    """
    pattern = rf"(?:\${re.escape(symbol)}\b|(?<!\w){re.escape(symbol)}(?=[\s,.!?]|$))"
    return re.search(pattern, text, re.IGNORECASE) is not None


class CommentSampler:
    """Fetches a post's thread and keeps the best replies that mention its ticker."""

    def __init__(self, reddit_client, config: Optional[ScoringConfig] = None):
        self.reddit_client = reddit_client
        self.config = config or ScoringConfig()

    def qualifies(self, post: Post) -> Optional[str]:
        """
        Return the ticker a post's comments should be sampled for, or None.

        Only posts that name a ticker explicitly and reached the minimum
        score are worth the extra request.
        """
        if post.score < self.config.min_post_score_for_comments:
            return None
        return explicit_symbol(post.title, self.config.excluded_symbols)

    def select(self, payload, symbol: str) -> List[Comment]:
        """Pick the top-scored positive comments mentioning ``symbol`` from a thread payload."""
        if not isinstance(payload, list) or len(payload) < 2:
            raise RecordValidationError("Thread payload has no comment listing")

        comments = []
        for child in listing_children(payload[1]):
            if not isinstance(child, dict) or child.get("kind") != "t1":
                continue
            try:
                comment = child_to_comment(child)
            except RecordValidationError as e:
                logger.debug(f"Skipping comment: {e}")
                continue
            if comment.score > 0 and mentions_symbol(comment.body, symbol):
                comments.append(comment)

        comments.sort(key=lambda c: c.score, reverse=True)
        return comments[: self.config.max_sampled_comments]

    async def sample(self, post: Post) -> List[Comment]:
        """
        Sample comments for a post.

        Failures are logged and yield an empty sample; they never fail the post.
        """
        symbol = self.qualifies(post)
        if symbol is None:
            return []

        try:
            payload = await self.reddit_client.get_thread(post.permalink)
            comments = self.select(payload, symbol)
        except (FetchError, RecordValidationError) as e:
            logger.warning(f"Failed to fetch comments for post {post.id}: {e}")
            return []

        logger.debug(f"Sampled {len(comments)} comments mentioning {symbol} for post {post.id}")
        return comments
