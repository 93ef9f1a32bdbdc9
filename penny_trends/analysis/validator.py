"""Optional exchange lookup for extracted symbols.

Disabled by default (``scoring.validate_symbols``): a lookup per symbol
quickly exhausts the search endpoint's rate limit. When enabled it runs on
the merged symbol set, after extraction, never inside it.
"""

import asyncio
import logging
from typing import Dict, Iterable, Optional, Sequence

import aiohttp

logger = logging.getLogger(__name__)

SYMBOL_SEARCH_URL = "https://symbol-search.tradingview.com/symbol_search/"
EXCHANGES = ("NASDAQ", "NYSE", "AMEX", "OTC")


class SymbolValidator:
    """Checks that a symbol is listed on at least one supported exchange."""

    def __init__(
        self,
        search_url: str = SYMBOL_SEARCH_URL,
        exchanges: Sequence[str] = EXCHANGES,
        timeout_sec: float = 3.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.search_url = search_url
        self.exchanges = tuple(exchanges)
        self.timeout = aiohttp.ClientTimeout(total=timeout_sec)
        self._session = session
        self._owns_session = session is None
        self._cache: Dict[str, bool] = {}

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": "Mozilla/5.0 (compatible; PennyTrends/0.1)"}
            )
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def _search(self, symbol: str, exchange: str) -> list:
        session = await self._get_session()
        params = {"text": symbol, "exchange": exchange}
        async with session.get(self.search_url, params=params, timeout=self.timeout) as response:
            response.raise_for_status()
            return await response.json(content_type=None) or []

    @staticmethod
    def _matches(symbol: str, exchange: str, results: list) -> bool:
        accepted = {symbol, f"${symbol}", f"{symbol}:{exchange}"}
        return any(isinstance(item, dict) and item.get("symbol") in accepted for item in results)

    async def validate(self, symbol: str) -> bool:
        """
        Return True when any exchange lists the symbol exactly.

        Lookup failures count as "not listed".
        """
        if symbol in self._cache:
            return self._cache[symbol]

        valid = False
        for exchange in self.exchanges:
            try:
                results = await self._search(symbol, exchange)
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                logger.debug(f"Lookup of {symbol} on {exchange} failed: {e}")
                continue
            if self._matches(symbol, exchange, results):
                logger.info(f"Symbol {symbol} validated on {exchange}")
                valid = True
                break

        if not valid:
            logger.info(f"Symbol {symbol} NOT found on any major exchange")
        self._cache[symbol] = valid
        return valid

    async def filter_valid(self, symbols: Iterable[str]) -> set:
        """Subset of ``symbols`` that passed validation, checked one at a time."""
        return {symbol for symbol in symbols if await self.validate(symbol)}
