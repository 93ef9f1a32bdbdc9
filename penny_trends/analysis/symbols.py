"""
Ticker symbol extraction from post titles.

Extraction is a fixed sequence of named strategies. Each one is a pure
function returning raw candidate tokens; the extractor unions them,
normalizes them and applies the exclusion filter in a single place.
Only titles are scanned: bodies produce too many false positives.
"""

import logging
import re
from typing import Callable, Iterable, List, NamedTuple, Optional, Set, Tuple

from penny_trends.config import ScoringConfig

logger = logging.getLogger(__name__)

UPPERCASE_WORD = re.compile(r"[A-Z]+")
BARE_TICKER_REGEX = re.compile(r"(?<!\w)\$?([A-Z]{2,5})(?!\w)")
DOLLAR_TICKER_REGEX = re.compile(r"\$([a-z]{2,5})\b", re.IGNORECASE)
KEYWORD_THEN_TICKER_REGEX = re.compile(r"\b(?:ticker|stock|share)s?\s+([a-z]{2,5})\b", re.IGNORECASE)
# Keyword matched case-insensitively, ticker must be written in capitals
TICKER_THEN_KEYWORD_REGEX = re.compile(r"\b([A-Z]{2,5})\s+(?i:ticker|stock|share)(?i:s)?\b")

# Same case rules as the keyword and cashtag strategies
EXPLICIT_SYMBOL_PATTERNS = (DOLLAR_TICKER_REGEX, TICKER_THEN_KEYWORD_REGEX, KEYWORD_THEN_TICKER_REGEX)


class ExtractionStrategy(NamedTuple):
    name: str
    extract: Callable[[str], List[str]]


def bare_uppercase_tokens(text: str) -> List[str]:
    """2-5 capital letters standing alone, optionally ``$``-prefixed."""
    return BARE_TICKER_REGEX.findall(text)


def dollar_tokens(text: str) -> List[str]:
    """``$tick`` cashtags in any case."""
    return [f"${match}" for match in DOLLAR_TICKER_REGEX.findall(text)]


def keyword_adjacent_tokens(text: str) -> List[str]:
    """Tokens next to ticker/stock/share(s), in either order."""
    return KEYWORD_THEN_TICKER_REGEX.findall(text) + TICKER_THEN_KEYWORD_REGEX.findall(text)


DEFAULT_STRATEGIES: Tuple[ExtractionStrategy, ...] = (
    ExtractionStrategy("bare_uppercase", bare_uppercase_tokens),
    ExtractionStrategy("dollar", dollar_tokens),
    ExtractionStrategy("keyword_adjacent", keyword_adjacent_tokens),
)


def explicit_symbol(title: str, excluded: Iterable[str] = ()) -> Optional[str]:
    """
    Return the first explicitly named ticker in a title, if any.

    "Explicit" means a ``$TICK`` cashtag or a token adjacent to
    stock/share/ticker(s). Bare capitalised words do not count, and
    tokens in ``excluded`` are skipped.
    """
    excluded = frozenset(excluded)
    for pattern in EXPLICIT_SYMBOL_PATTERNS:
        for match in pattern.finditer(title):
            symbol = match.group(1).upper()
            if symbol not in excluded:
                return symbol
    return None


def normalize(candidate: str) -> str:
    return candidate.strip().upper().lstrip("$")


class SymbolExtractor:
    """Derives ticker candidates from titles and rejects false positives."""

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        strategies: Iterable[ExtractionStrategy] = DEFAULT_STRATEGIES,
    ):
        self.config = config or ScoringConfig()
        self.strategies = tuple(strategies)

    def candidates(self, text: str) -> Set[str]:
        """Union of every strategy's output, normalized but unfiltered."""
        found: Set[str] = set()
        for strategy in self.strategies:
            found.update(normalize(token) for token in strategy.extract(text))
        found.discard("")
        return found

    def is_valid(self, symbol: str) -> bool:
        """Length bound plus static exclusion list."""
        if not self.config.min_symbol_length <= len(symbol) <= self.config.max_symbol_length:
            return False
        if not UPPERCASE_WORD.fullmatch(symbol):
            return False
        return symbol not in self.config.excluded_symbols

    def extract(self, title: str) -> List[str]:
        """
        Extract ticker symbols from a post title.

        Args:
            title: Post title

        Returns:
            Sorted list of distinct symbols that survived filtering
        """
        if not title:
            return []

        candidates = self.candidates(title)
        symbols = sorted(symbol for symbol in candidates if self.is_valid(symbol))

        rejected = candidates.difference(symbols)
        if rejected:
            logger.debug(f"Rejected candidates in {title!r}: {sorted(rejected)}")

        return symbols
