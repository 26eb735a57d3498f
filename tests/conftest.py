"""
Pytest configuration and shared fixtures.

This module provides fixtures for:
- Building synthetic daily series and quotes
- A scripted in-memory MarketDataClient
- A controllable clock for the quote cache
"""

import asyncio
import os
from datetime import date, timedelta
from typing import Dict, List, Optional

import pytest

# Set testing environment before importing stockscreen modules
os.environ["LOG_LEVEL"] = "ERROR"

from stockscreen.services.data_provider.base import MarketDataClient, UpstreamTimeout
from stockscreen.services.data_provider.models import DailySeries, PriceBar, SeriesMeta, StockQuote


# ─────────────────────────────────────────────────────────────────────────────
# Series Fixtures
# ─────────────────────────────────────────────────────────────────────────────

def build_series(
    closes: List[float],
    symbol: str = "TEST",
    highs: Optional[List[float]] = None,
    lows: Optional[List[float]] = None,
    volumes: Optional[List[float]] = None,
    meta: Optional[SeriesMeta] = None,
    start: date = date(2023, 1, 2),
) -> DailySeries:
    highs = highs or [c * 1.01 for c in closes]
    lows = lows or [c * 0.99 for c in closes]
    volumes = volumes or [1_000_000.0] * len(closes)
    bars = tuple(
        PriceBar(
            date=start + timedelta(days=i),
            high=highs[i],
            low=lows[i],
            close=closes[i],
            open=closes[i],
            volume=volumes[i],
        )
        for i in range(len(closes))
    )
    return DailySeries(symbol=symbol, bars=bars, meta=meta or SeriesMeta(name=f"{symbol} Inc"))


@pytest.fixture
def make_series():
    """Factory for DailySeries built from a list of closes."""
    return build_series


@pytest.fixture
def uptrend_closes():
    """260 steadily rising closes (enough for every indicator)."""
    return [100.0 + i * 0.5 for i in range(260)]


@pytest.fixture
def make_quote():
    """Factory for StockQuote with neutral defaults."""
    def _make(**overrides) -> StockQuote:
        fields = dict(
            symbol="TEST",
            name="Test Inc",
            market="US",
            price=100.0,
            previous_close=100.0,
            change=0.0,
            change_percent=0.0,
            volume=1_000_000.0,
            avg_volume=1_000_000.0,
            relative_volume=1.0,
            fifty_two_week_high=150.0,
            fifty_two_week_low=50.0,
            percent_from_52w_high=-33.3,
            percent_from_52w_low=100.0,
            fifty_day_ma=None,
            two_hundred_day_ma=None,
            percent_from_50ma=None,
            percent_from_200ma=None,
        )
        fields.update(overrides)
        return StockQuote(**fields)
    return _make


# ─────────────────────────────────────────────────────────────────────────────
# Market Data Client Fixtures
# ─────────────────────────────────────────────────────────────────────────────

class FakeMarketDataClient(MarketDataClient):
    """Scripted client: returns a series, raises an error, or hangs per symbol."""

    def __init__(self, series: Optional[Dict[str, DailySeries]] = None):
        self.series: Dict[str, DailySeries] = dict(series or {})
        self.errors: Dict[str, List[Exception]] = {}
        self.hanging = set()
        self.delay = 0.0
        self.calls: List[tuple] = []
        self.active = 0
        self.max_active = 0

    def get_name(self) -> str:
        return "fake"

    def fail(self, symbol: str, *errors: Exception):
        """Raise each error once, in order, before serving the series."""
        self.errors.setdefault(symbol, []).extend(errors)

    async def fetch_daily_series(self, symbol, range="1y", timeout=None):
        self.calls.append((symbol, range))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if symbol in self.hanging:
                await asyncio.sleep(3600)
            if self.delay:
                await asyncio.sleep(self.delay)
            pending = self.errors.get(symbol)
            if pending:
                raise pending.pop(0)
            if symbol not in self.series:
                raise UpstreamTimeout(symbol, "unknown symbol")
            return self.series[symbol]
        finally:
            self.active -= 1


@pytest.fixture
def fake_client():
    return FakeMarketDataClient()


@pytest.fixture
def data_service(fake_client):
    """MarketDataService over the fake client, no retries, fresh cache."""
    from stockscreen.services.cache import QuoteCache
    from stockscreen.services.data_provider.service import MarketDataService
    return MarketDataService(client=fake_client, cache=QuoteCache(ttl=300, max_size=1000), retries=0)


# ─────────────────────────────────────────────────────────────────────────────
# Helper Fixtures
# ─────────────────────────────────────────────────────────────────────────────

class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
