"""Keyword sentiment classification and log-weighted scoring."""

import math
from typing import Iterable, List, Optional

from penny_trends.config import ScoringConfig
from penny_trends.models import Comment, Post, SampleSource, Sentiment, SentimentSample


class SentimentScorer:
    """
    Lexicon sentiment for posts and comments.

    Usage:
        scorer = SentimentScorer(config.scoring)
        samples = scorer.samples_for_post(post)
        score = scorer.score_set(samples)
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()
        self.positive = tuple(word.lower() for word in self.config.positive_keywords)
        self.negative = tuple(word.lower() for word in self.config.negative_keywords)

    def classify(self, text: str) -> Sentiment:
        """Whichever keyword list has strictly more hits wins; ties are neutral."""
        lowered = (text or "").lower()
        positive_count = sum(1 for keyword in self.positive if keyword in lowered)
        negative_count = sum(1 for keyword in self.negative if keyword in lowered)

        if positive_count > negative_count:
            return Sentiment.POSITIVE
        if negative_count > positive_count:
            return Sentiment.NEGATIVE
        return Sentiment.NEUTRAL

    @staticmethod
    def weight(score: int) -> float:
        """log10(max(score, 1)) + 1, so non-positive scores still weigh 1."""
        return math.log10(max(score, 1)) + 1

    def score_set(self, samples: Iterable[SentimentSample]) -> float:
        """
        Weighted average polarity of a set of samples.

        Returns:
            A value in [-1, 1]; 0.0 for an empty set
        """
        weighted_sum = 0.0
        total_weight = 0.0
        for sample in samples:
            weight = self.weight(sample.weight_score)
            weighted_sum += sample.classification.polarity * weight
            total_weight += weight

        if total_weight <= 0:
            return 0.0
        return max(-1.0, min(1.0, weighted_sum / total_weight))

    def post_sample(self, post: Post) -> SentimentSample:
        content = post.content.lower()
        return SentimentSample(
            author=post.author,
            classification=self.classify(content),
            timestamp=post.created_at,
            weight_score=post.score * self.config.post_weight_multiplier,
            source=SampleSource(kind="post", id=post.id, text=content),
        )

    def comment_sample(self, comment: Comment) -> SentimentSample:
        return SentimentSample(
            author=comment.author,
            classification=self.classify(comment.body),
            timestamp=comment.created_at,
            weight_score=comment.score,
            source=SampleSource(kind="comment", id=comment.id, text=comment.body),
        )

    def samples_for_post(self, post: Post) -> List[SentimentSample]:
        """The post's own sample followed by its top comments by score."""
        top_comments = sorted(post.comments, key=lambda c: c.score, reverse=True)
        top_comments = top_comments[: self.config.max_comment_samples]
        return [self.post_sample(post)] + [self.comment_sample(c) for c in top_comments]
