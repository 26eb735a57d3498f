"""
Market data models.

PriceBar and DailySeries are what a MarketDataClient returns; StockQuote is
the per-symbol snapshot (price action, volume, 52-week range, moving
averages) that the alert rules and the day-trade scorer consume.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

import numpy as np

MARKET_US = "US"
MARKET_IN = "IN"
MARKETS = (MARKET_US, MARKET_IN)

TRADING_DAYS_PER_YEAR = 252


@dataclass(frozen=True)
class PriceBar:
    date: date
    high: float
    low: float
    close: float
    open: Optional[float] = None
    volume: Optional[float] = None


@dataclass(frozen=True)
class SeriesMeta:
    """Upstream metadata that travels with a series."""
    name: Optional[str] = None
    currency: Optional[str] = None
    exchange: Optional[str] = None
    regular_market_price: Optional[float] = None
    previous_close: Optional[float] = None
    regular_market_volume: Optional[float] = None
    fifty_two_week_high: Optional[float] = None
    fifty_two_week_low: Optional[float] = None
    fifty_day_average: Optional[float] = None
    two_hundred_day_average: Optional[float] = None
    beta: Optional[float] = None
    analyst_rating: Optional[float] = None


@dataclass(frozen=True)
class DailySeries:
    """Daily bars for one symbol, ordered by date ascending.

    Accessors return fresh lists so indicator code can never mutate the
    fetched bars.
    """
    symbol: str
    bars: Tuple[PriceBar, ...]
    meta: SeriesMeta = field(default_factory=SeriesMeta)

    def __len__(self) -> int:
        return len(self.bars)

    @property
    def closes(self) -> List[float]:
        return [b.close for b in self.bars]

    @property
    def highs(self) -> List[float]:
        return [b.high for b in self.bars]

    @property
    def lows(self) -> List[float]:
        return [b.low for b in self.bars]

    @property
    def volumes(self) -> List[Optional[float]]:
        return [b.volume for b in self.bars]

    @property
    def dates(self) -> List[date]:
        return [b.date for b in self.bars]


@dataclass(frozen=True)
class StockQuote:
    symbol: str
    name: str
    market: str
    price: float
    previous_close: Optional[float]
    change: float
    change_percent: float
    volume: float
    avg_volume: float
    relative_volume: float
    fifty_two_week_high: float
    fifty_two_week_low: float
    percent_from_52w_high: Optional[float]
    percent_from_52w_low: Optional[float]
    fifty_day_ma: Optional[float] = None
    two_hundred_day_ma: Optional[float] = None
    percent_from_50ma: Optional[float] = None
    percent_from_200ma: Optional[float] = None
    beta: Optional[float] = None
    analyst_rating: Optional[float] = None
    currency: Optional[str] = None
    exchange: Optional[str] = None


def _percent_from(price: float, reference: Optional[float]) -> Optional[float]:
    if not reference or reference <= 0:
        return None
    return (price - reference) / reference * 100


def build_quote(
    series: DailySeries,
    market: str,
    sma50: Optional[float] = None,
    sma200: Optional[float] = None,
    avg_volume_period: int = 50,
) -> Optional[StockQuote]:
    """Derive a StockQuote from a daily series.

    Moving averages computed from the series take precedence over the
    upstream's own averages. Returns None for an empty series.
    """
    if not series.bars:
        return None

    meta = series.meta
    closes = series.closes

    price = meta.regular_market_price or closes[-1]
    if len(closes) >= 2:
        previous_close = closes[-2]
    else:
        previous_close = meta.previous_close

    if previous_close:
        change = price - previous_close
        change_percent = change / previous_close * 100
    else:
        change = 0.0
        change_percent = 0.0

    volumes = series.volumes
    volume = meta.regular_market_volume
    if volume is None:
        volume = volumes[-1] or 0.0
    history = [v for v in volumes[-(avg_volume_period + 1):-1] if v]
    avg_volume = float(np.mean(history)) if history else 0.0
    relative_volume = volume / avg_volume if avg_volume > 0 else 1.0

    year_highs = series.highs[-TRADING_DAYS_PER_YEAR:]
    year_lows = series.lows[-TRADING_DAYS_PER_YEAR:]
    high_52 = meta.fifty_two_week_high or max(year_highs)
    low_52 = meta.fifty_two_week_low or min(year_lows)

    fifty_day_ma = sma50 if sma50 is not None else meta.fifty_day_average
    two_hundred_day_ma = sma200 if sma200 is not None else meta.two_hundred_day_average

    return StockQuote(
        symbol=series.symbol,
        name=meta.name or series.symbol,
        market=market,
        price=price,
        previous_close=previous_close,
        change=change,
        change_percent=change_percent,
        volume=volume,
        avg_volume=avg_volume,
        relative_volume=relative_volume,
        fifty_two_week_high=high_52,
        fifty_two_week_low=low_52,
        percent_from_52w_high=_percent_from(price, high_52),
        percent_from_52w_low=_percent_from(price, low_52),
        fifty_day_ma=fifty_day_ma,
        two_hundred_day_ma=two_hundred_day_ma,
        percent_from_50ma=_percent_from(price, fifty_day_ma),
        percent_from_200ma=_percent_from(price, two_hundred_day_ma),
        beta=meta.beta,
        analyst_rating=meta.analyst_rating,
        currency=meta.currency or ("INR" if market == MARKET_IN else "USD"),
        exchange=meta.exchange,
    )
