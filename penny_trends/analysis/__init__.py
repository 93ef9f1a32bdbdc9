from penny_trends.analysis.aggregator import Aggregator, deduplicate_posts, trending_score
from penny_trends.analysis.sentiment import SentimentScorer
from penny_trends.analysis.symbols import SymbolExtractor, explicit_symbol

__all__ = [
    "Aggregator",
    "SentimentScorer",
    "SymbolExtractor",
    "deduplicate_posts",
    "explicit_symbol",
    "trending_score",
]
