"""
Indicator Engine - shared technical indicator calculations.

Every scan path computes indicators through this module:
- SMA / rolling SMA
- EMA (seeded with the first raw value)
- RSI (Wilder smoothing)
- MACD (12/26/9) with the previous bar's MACD/signal pair
- ATR (Wilder smoothing)

All functions are pure: they never mutate their inputs and return None
when the series is too short.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class MACDResult:
    macd: Optional[float] = None
    signal: Optional[float] = None
    histogram: Optional[float] = None
    prev_macd: Optional[float] = None
    prev_signal: Optional[float] = None


@dataclass(frozen=True)
class IndicatorSnapshot:
    rsi: Optional[float] = None
    sma50: Optional[float] = None
    sma200: Optional[float] = None
    atr: Optional[float] = None
    macd_line: Optional[float] = None
    macd_signal: Optional[float] = None
    macd_histogram: Optional[float] = None
    prev_macd_line: Optional[float] = None
    prev_macd_signal: Optional[float] = None
    recent_closes: List[float] = field(default_factory=list)


MACD_MIN_BARS = 35


def calculate_sma(closes: Sequence[float], period: int) -> Optional[float]:
    """Simple moving average of the last `period` closes.

    Returns:
        SMA rounded to 2 decimals, or None if len(closes) < period
    """
    if period <= 0 or len(closes) < period:
        return None
    return round(float(np.mean(closes[-period:])), 2)


def rolling_sma(closes: Sequence[float], period: int) -> List[Optional[float]]:
    """SMA aligned to each index (None until `period` bars are available)."""
    sma = pd.Series(list(closes), dtype=float).rolling(period).mean().round(2)
    return [None if pd.isna(v) else float(v) for v in sma]


def calculate_ema(series: Sequence[float], period: int) -> List[float]:
    """Exponential moving average series.

    Seeded with the first raw value (not an initial SMA):
        ema[0] = series[0]
        ema[i] = (series[i] - ema[i-1]) * m + ema[i-1],  m = 2 / (period + 1)
    """
    if len(series) == 0:
        return []
    m = 2 / (period + 1)
    ema = [float(series[0])]
    for value in series[1:]:
        ema.append((value - ema[-1]) * m + ema[-1])
    return ema


def calculate_rsi(closes: Sequence[float], period: int = 14) -> Optional[float]:
    """Relative Strength Index with Wilder smoothing.

    Args:
        closes: Close prices, oldest first
        period: RSI period (default 14)

    Returns:
        RSI in [0, 100] rounded to 1 decimal, or None if len < period + 1
    """
    if period <= 0 or len(closes) < period + 1:
        return None

    deltas = np.diff(np.asarray(closes, dtype=float))
    gains = np.clip(deltas, 0, None)
    losses = np.clip(-deltas, 0, None)

    avg_gain = float(gains[:period].sum()) / period
    avg_loss = float(losses[:period].sum()) / period

    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return round(100 - 100 / (1 + rs), 1)


def calculate_macd_series(
    closes: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal_period: int = 9,
) -> Optional[tuple]:
    """Full MACD and signal-line series.

    The MACD series starts where the slow EMA has `slow` points of support
    (offset slow - 1).

    Returns:
        (macd_values, signal_values) or None if fewer than 35 closes
    """
    if len(closes) < max(MACD_MIN_BARS, slow + signal_period):
        return None

    ema_fast = calculate_ema(closes, fast)
    ema_slow = calculate_ema(closes, slow)
    offset = slow - 1
    macd_values = [ema_fast[i] - ema_slow[i] for i in range(offset, len(closes))]
    signal_values = calculate_ema(macd_values, signal_period)
    return macd_values, signal_values


def calculate_macd(
    closes: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """MACD line, signal line and histogram for the latest bar.

    The previous bar's MACD/signal pair is kept so crossovers can be
    classified from real history.

    Returns:
        MACDResult with values rounded to 3 decimals; all None if len < 35
    """
    series = calculate_macd_series(closes, fast, slow, signal_period)
    if series is None:
        return MACDResult()

    macd_values, signal_values = series
    macd_line = macd_values[-1]
    signal_line = signal_values[-1]
    histogram = macd_line - signal_line

    prev_macd = prev_signal = None
    if len(macd_values) >= 2:
        prev_macd = round(macd_values[-2], 3)
        prev_signal = round(signal_values[-2], 3)

    return MACDResult(
        macd=round(macd_line, 3),
        signal=round(signal_line, 3),
        histogram=round(histogram, 3),
        prev_macd=prev_macd,
        prev_signal=prev_signal,
    )


def calculate_atr(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> Optional[float]:
    """Average True Range with Wilder smoothing.

    True Range:
      TR = max(high - low, |high - prev_close|, |low - prev_close|)

    Returns:
        ATR rounded to 2 decimals, or None if min length < period + 1
    """
    n = min(len(highs), len(lows), len(closes))
    if period <= 0 or n < period + 1:
        return None

    # Align on the most recent bars when lengths differ
    h = np.asarray(highs[-n:], dtype=float)
    l = np.asarray(lows[-n:], dtype=float)
    c = np.asarray(closes[-n:], dtype=float)

    prev_close = c[:-1]
    true_ranges = np.maximum(
        h[1:] - l[1:],
        np.maximum(np.abs(h[1:] - prev_close), np.abs(l[1:] - prev_close)),
    )

    atr = float(true_ranges[:period].mean())
    for tr in true_ranges[period:]:
        atr = (atr * (period - 1) + float(tr)) / period

    return round(max(atr, 0.0), 2)


def compute_indicators(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    rsi_period: int = 14,
    sma_fast: int = 50,
    sma_slow: int = 200,
    atr_period: int = 14,
    macd_fast: int = 12,
    macd_slow: int = 26,
    macd_signal: int = 9,
) -> IndicatorSnapshot:
    """Compute the full indicator snapshot for one series."""
    macd = calculate_macd(closes, macd_fast, macd_slow, macd_signal)
    return IndicatorSnapshot(
        rsi=calculate_rsi(closes, rsi_period),
        sma50=calculate_sma(closes, sma_fast),
        sma200=calculate_sma(closes, sma_slow),
        atr=calculate_atr(highs, lows, closes, atr_period),
        macd_line=macd.macd,
        macd_signal=macd.signal,
        macd_histogram=macd.histogram,
        prev_macd_line=macd.prev_macd,
        prev_macd_signal=macd.prev_signal,
        recent_closes=list(closes[-5:]),
    )
