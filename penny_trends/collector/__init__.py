from penny_trends.collector.collector import SubmissionCollector
from penny_trends.collector.comment_sampler import CommentSampler
from penny_trends.collector.error_handler import with_exponential_backoff
from penny_trends.collector.rate_limiter import RateLimiter

__all__ = ["CommentSampler", "RateLimiter", "SubmissionCollector", "with_exponential_backoff"]
