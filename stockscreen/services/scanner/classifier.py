"""
Signal Classifier - turns indicator values into discrete categories.

Provides:
- RSI zones
- MACD signal type (using the retained previous MACD/signal pair)
- Golden / death cross detection (edge-triggered)
- Crossover history over a full series
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

from .indicators import calculate_sma, rolling_sma

# RSI zones
RSI_OVERSOLD = "oversold"
RSI_APPROACHING_OVERSOLD = "approaching_oversold"
RSI_NEUTRAL = "neutral"
RSI_APPROACHING_OVERBOUGHT = "approaching_overbought"
RSI_OVERBOUGHT = "overbought"

# MACD signal types
MACD_STRONG_BULLISH = "strong_bullish"
MACD_STRONG_BEARISH = "strong_bearish"
MACD_BULLISH_CROSSOVER = "bullish_crossover"
MACD_BEARISH_CROSSOVER = "bearish_crossover"
MACD_BULLISH = "bullish"
MACD_BEARISH = "bearish"

GOLDEN_CROSS = "golden_cross"
DEATH_CROSS = "death_cross"


@dataclass(frozen=True)
class CrossoverEvent:
    date: date
    type: str
    sma50: float
    sma200: float
    close: float


def rsi_zone(rsi: Optional[float]) -> Optional[str]:
    """Classify an RSI value into its zone."""
    if rsi is None:
        return None
    if rsi < 30:
        return RSI_OVERSOLD
    if rsi < 40:
        return RSI_APPROACHING_OVERSOLD
    if rsi < 60:
        return RSI_NEUTRAL
    if rsi < 70:
        return RSI_APPROACHING_OVERBOUGHT
    return RSI_OVERBOUGHT


def macd_signal_type(
    macd: Optional[float],
    signal: Optional[float],
    histogram: Optional[float],
    prev_macd: Optional[float] = None,
    prev_signal: Optional[float] = None,
) -> Optional[str]:
    """Classify MACD state.

    Rules are checked in order: strong bullish/bearish, crossover (needs the
    previous bar's pair), then plain bullish/bearish.
    """
    if macd is None or signal is None or histogram is None:
        return None

    if macd > 0 and histogram > 0 and macd > signal:
        return MACD_STRONG_BULLISH
    if macd < 0 and histogram < 0 and macd < signal:
        return MACD_STRONG_BEARISH

    if prev_macd is not None and prev_signal is not None:
        if prev_macd <= prev_signal and macd > signal:
            return MACD_BULLISH_CROSSOVER
        if prev_macd >= prev_signal and macd < signal:
            return MACD_BEARISH_CROSSOVER

    if histogram > 0 and macd > signal:
        return MACD_BULLISH
    if histogram < 0 and macd < signal:
        return MACD_BEARISH
    return None


def classify_cross(
    prev_fast: float,
    prev_slow: float,
    curr_fast: float,
    curr_slow: float,
) -> Optional[str]:
    """Golden/death cross transition between two consecutive days."""
    if prev_fast <= prev_slow and curr_fast > curr_slow:
        return GOLDEN_CROSS
    if prev_fast >= prev_slow and curr_fast < curr_slow:
        return DEATH_CROSS
    return None


def detect_ma_crossover(
    closes: Sequence[float],
    fast: int = 50,
    slow: int = 200,
) -> Optional[str]:
    """Cross on the most recent trading day only.

    Needs slow + 1 closes: the slow SMA for yesterday plus today.
    """
    if len(closes) < slow + 1:
        return None

    previous = closes[:-1]
    prev_fast = calculate_sma(previous, fast)
    prev_slow = calculate_sma(previous, slow)
    curr_fast = calculate_sma(closes, fast)
    curr_slow = calculate_sma(closes, slow)
    if None in (prev_fast, prev_slow, curr_fast, curr_slow):
        return None

    return classify_cross(prev_fast, prev_slow, curr_fast, curr_slow)


def find_crossovers(
    closes: Sequence[float],
    dates: Sequence[date],
    since: Optional[date] = None,
    fast: int = 50,
    slow: int = 200,
) -> List[CrossoverEvent]:
    """All golden/death crosses in a series, oldest first.

    Args:
        closes: Close prices aligned with `dates`
        dates: Trading dates
        since: Ignore crosses before this date
    """
    sma_fast = rolling_sma(closes, fast)
    sma_slow = rolling_sma(closes, slow)

    events = []
    for i in range(1, len(closes)):
        if None in (sma_fast[i], sma_slow[i], sma_fast[i - 1], sma_slow[i - 1]):
            continue
        if since is not None and dates[i] < since:
            continue

        kind = classify_cross(sma_fast[i - 1], sma_slow[i - 1], sma_fast[i], sma_slow[i])
        if kind:
            events.append(CrossoverEvent(
                date=dates[i],
                type=kind,
                sma50=sma_fast[i],
                sma200=sma_slow[i],
                close=closes[i],
            ))
    return events
