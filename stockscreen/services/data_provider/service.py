"""
Market Data Service - cache-or-fetch access to daily series and quotes.

Wraps a MarketDataClient with:
- Symbol formatting per market (NSE suffix for India)
- Bounded retries for timeouts and 5xx responses only
- A per-attempt time box
- The shared QuoteCache, keyed SYMBOL|MARKET
"""

import asyncio
from typing import Optional

from stockscreen.core.config import settings
from stockscreen.core.logger import Logger
from stockscreen.services.cache import QuoteCache
from stockscreen.services.data_provider.base import FetchError, MarketDataClient, UpstreamTimeout
from stockscreen.services.data_provider.models import (
    MARKET_IN,
    MARKET_US,
    DailySeries,
    StockQuote,
    build_quote,
)
from stockscreen.services.data_provider.yahoo_provider import YahooChartProvider
from stockscreen.services.scanner.indicators import calculate_sma

logger = Logger("MarketData")


def get_market_from_symbol(symbol: str) -> str:
    """Determine market from an upstream-formatted symbol."""
    if symbol.upper().endswith(('.NS', '.BO')):
        return MARKET_IN
    return MARKET_US


def format_symbol(symbol: str, market: str) -> str:
    """Format a bare ticker for the upstream (NSE suffix for India)."""
    symbol = symbol.strip().upper()
    if '.' in symbol:
        return symbol
    if market == MARKET_IN:
        return f"{symbol}.NS"
    return symbol


class MarketDataService:
    """Facade over a MarketDataClient with caching and bounded retries."""

    def __init__(
        self,
        client: Optional[MarketDataClient] = None,
        cache: Optional[QuoteCache] = None,
        retries: Optional[int] = None,
        retry_backoff: Optional[float] = None,
    ):
        self.client = client or YahooChartProvider()
        self.cache = cache if cache is not None else QuoteCache()
        self.retries = settings.FETCH_RETRIES if retries is None else retries
        self.retry_backoff = (
            settings.FETCH_RETRY_BACKOFF_MS / 1000 if retry_backoff is None else retry_backoff
        )
        self.history_range = settings.HISTORY_RANGE

    async def shutdown(self):
        await self.client.shutdown()

    async def fetch(
        self,
        symbol: str,
        range: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> DailySeries:
        """Fetch from the upstream, retrying only timeouts and 5xx responses.

        Each attempt is time-boxed by `timeout` whether or not the client
        honours it itself.
        """
        range = range or self.history_range
        attempt = 0
        while True:
            try:
                request = self.client.fetch_daily_series(symbol, range=range, timeout=timeout)
                if timeout is None:
                    return await request
                try:
                    return await asyncio.wait_for(request, timeout)
                except asyncio.TimeoutError as e:
                    raise UpstreamTimeout(symbol, f"no response within {timeout}s") from e
            except FetchError as e:
                if not e.retryable or attempt >= self.retries:
                    raise
                delay = self.retry_backoff * (2 ** attempt)
                attempt += 1
                logger.debug(f"Retrying {symbol} in {delay:.2f}s ({attempt}/{self.retries}): {e}")
                await asyncio.sleep(delay)

    async def get_daily_series(
        self,
        symbol: str,
        market: str,
        timeout: Optional[float] = None,
    ) -> DailySeries:
        """Cache-or-fetch the daily series used by every scan path."""
        formatted = format_symbol(symbol, market)
        key = QuoteCache.make_key(formatted, market)
        return await self.cache.get_or_fetch(
            key,
            lambda: self.fetch(formatted, timeout=timeout),
        )

    async def get_quote(self, symbol: str, market: str) -> StockQuote:
        """Single-quote path. Upstream errors propagate to the caller."""
        series = await self.get_daily_series(symbol, market, timeout=settings.FETCH_TIMEOUT_SECONDS)
        closes = series.closes
        quote = build_quote(
            series,
            market,
            sma50=calculate_sma(closes, settings.SMA_FAST),
            sma200=calculate_sma(closes, settings.SMA_SLOW),
            avg_volume_period=settings.AVG_VOLUME_PERIOD,
        )
        if quote is None:
            raise FetchError(series.symbol, "no price data")
        return quote
