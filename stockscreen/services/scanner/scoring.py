"""
Day Trade Scoring Engine.

Weighted point system over today's price action, volume, breakout state,
MACD, RSI, trend support, a multi-day streak and beta. The raw total is
normalized to 0-100 against MAX_RAW_SCORE and paired with ATR-based
buy/sell/stop-loss targets.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from stockscreen.services.data_provider.models import MARKET_IN, MARKET_US, StockQuote
from .indicators import IndicatorSnapshot

# Max possible: 7 + 6 + 5 + 3 + 3 + 2 + 3 + 2
MAX_RAW_SCORE = 31

# Entry/exit band in ATR multiples
BUY_ATR_MULTIPLE = 0.3
SELL_ATR_MULTIPLE = 1.0
STOP_ATR_MULTIPLE = 0.5
FALLBACK_ATR_PERCENT = 0.01

MIN_PRICE = {MARKET_US: 5.0, MARKET_IN: 50.0}


@dataclass(frozen=True)
class BreakdownItem:
    label: str
    value: str
    points: int


@dataclass(frozen=True)
class Targets:
    buy_price: float
    sell_price: float
    stop_loss: float


@dataclass
class ScoreResult:
    symbol: str
    name: str
    market: str
    price: float
    change: float
    change_percent: float
    score: int
    signals: List[str] = field(default_factory=list)
    breakdown: List[BreakdownItem] = field(default_factory=list)
    buy_price: float = 0.0
    sell_price: float = 0.0
    stop_loss: float = 0.0
    atr: Optional[float] = None
    rsi: Optional[float] = None
    macd_histogram: Optional[float] = None
    relative_volume: float = 0.0
    beta: Optional[float] = None
    currency: Optional[str] = None
    exchange: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calculate_targets(price: float, atr: Optional[float]) -> Targets:
    """Buy/sell/stop-loss prices from ATR.

    Buy Price  = price - 0.3 * ATR  (small dip entry)
    Sell Price = price + 1.0 * ATR  (one ATR of profit)
    Stop Loss  = buy - 0.5 * ATR    (tight stop for a day trade)

    A missing or non-positive ATR is replaced by 1% of price.
    """
    if atr is None or atr <= 0:
        atr = price * FALLBACK_ATR_PERCENT

    buy_price = price - BUY_ATR_MULTIPLE * atr
    sell_price = price + SELL_ATR_MULTIPLE * atr
    stop_loss = buy_price - STOP_ATR_MULTIPLE * atr
    return Targets(
        buy_price=round(buy_price, 2),
        sell_price=round(sell_price, 2),
        stop_loss=round(stop_loss, 2),
    )


def uptrend_streak(recent_closes: Sequence[float]) -> int:
    """Consecutive rising closes ending at the latest close."""
    streak = 0
    for i in range(len(recent_closes) - 1, 0, -1):
        if recent_closes[i] > recent_closes[i - 1]:
            streak += 1
        else:
            break
    return streak


def score_day_trade(quote: StockQuote, tech: IndicatorSnapshot) -> ScoreResult:
    """Score a stock for day-trade potential.

    Returns:
        ScoreResult with a 0-100 score, signal names, a point breakdown and
        ATR-based targets
    """
    raw = 0
    signals: List[str] = []
    breakdown: List[BreakdownItem] = []

    def add(label: str, value: str, points: int, signal: Optional[str] = None):
        nonlocal raw
        breakdown.append(BreakdownItem(label=label, value=value, points=points))
        raw += points
        if signal:
            signals.append(signal)

    change_pct = quote.change_percent
    rel_vol = quote.relative_volume
    pct_52_high = quote.percent_from_52w_high
    pct_50ma = quote.percent_from_50ma
    pct_200ma = quote.percent_from_200ma
    rsi = tech.rsi
    macd, macd_signal, histogram = tech.macd_line, tech.macd_signal, tech.macd_histogram
    has_macd = macd is not None and macd_signal is not None and histogram is not None

    # Today's price action
    if change_pct >= 5:
        add("Big Mover (5%+)", f"+{change_pct:.2f}%", 7, "Big Mover")
    elif change_pct >= 3:
        add("Strong Move (3-5%)", f"+{change_pct:.2f}%", 5, "Strong Move")
    elif change_pct >= 1.5:
        add("Good Move (1.5-3%)", f"+{change_pct:.2f}%", 3, "Good Move")
    elif change_pct > 0:
        add("Positive Day", f"+{change_pct:.2f}%", 1, "Positive Day")

    # Volume
    if rel_vol >= 2.5:
        add("Massive Volume (2.5x+)", f"{rel_vol:.2f}x", 6, "Massive Volume")
    elif rel_vol >= 1.8:
        add("High Volume (1.8-2.5x)", f"{rel_vol:.2f}x", 4, "High Volume")
    elif rel_vol >= 1.3:
        add("Above Avg Volume (1.3-1.8x)", f"{rel_vol:.2f}x", 2, "Above Avg Volume")

    # Breakout
    if pct_52_high is not None:
        if pct_52_high >= 0:
            add("New 52W High", "Breakout", 5, "New 52W High")
        elif pct_52_high >= -3:
            add("Near 52W High", f"{pct_52_high:.1f}%", 3, "Near 52W High")

    if has_macd and histogram > 0 and macd > macd_signal:
        add("MACD Bullish", f"H: {histogram:.3f}", 3, "MACD Bullish")

    # RSI
    if rsi is not None:
        if 60 <= rsi <= 75:
            add("Strong RSI (60-75)", f"{rsi:.0f}", 3, "Strong RSI")
        elif 50 <= rsi < 60:
            add("RSI 50-60", f"{rsi:.0f}", 1)
        if rsi > 80:
            add("Extreme RSI (>80)", f"{rsi:.0f}", -2, "Extreme RSI")

    # Trend support
    if pct_50ma is not None and pct_50ma > 0:
        add("Above 50 MA", f"+{pct_50ma:.1f}%", 1, "Above 50 MA")
    if pct_200ma is not None and pct_200ma > 0:
        add("Above 200 MA", f"+{pct_200ma:.1f}%", 1, "Above 200 MA")

    recent = tech.recent_closes
    if len(recent) >= 4:
        streak = uptrend_streak(recent)
        if streak >= 3:
            add("3-Day Uptrend", f"{streak}-day streak", 3, "Multi-Day Uptrend")

    if quote.beta is not None and 1.2 <= quote.beta <= 2.5:
        add("Ideal Beta", f"{quote.beta:.2f}", 2, "Ideal Volatility")

    # Penalties
    if change_pct < 0:
        add("Negative Day", f"{change_pct:.2f}%", -3, "Negative Day")
    if rel_vol < 0.7:
        add("Low Volume (<0.7x)", f"{rel_vol:.2f}x", -2, "Low Volume")
    if has_macd and histogram < 0 and macd < macd_signal:
        add("Bearish MACD", f"H: {histogram:.3f}", -2, "Bearish MACD")

    score = max(0, min(100, round(raw / MAX_RAW_SCORE * 100)))
    targets = calculate_targets(quote.price, tech.atr)

    return ScoreResult(
        symbol=quote.symbol,
        name=quote.name,
        market=quote.market,
        price=quote.price,
        change=quote.change,
        change_percent=quote.change_percent,
        score=score,
        signals=signals,
        breakdown=breakdown,
        buy_price=targets.buy_price,
        sell_price=targets.sell_price,
        stop_loss=targets.stop_loss,
        atr=tech.atr,
        rsi=tech.rsi,
        macd_histogram=tech.macd_histogram,
        relative_volume=rel_vol,
        beta=quote.beta,
        currency=quote.currency,
        exchange=quote.exchange,
    )


def prefilter_day_trade(quote: StockQuote) -> bool:
    """Only positive movers with decent volume above the market's price floor."""
    min_price = MIN_PRICE.get(quote.market, MIN_PRICE[MARKET_US])
    return (
        quote.change_percent > 0
        and quote.relative_volume >= 0.8
        and quote.price > min_price
    )


def activity_rank(quote: StockQuote) -> float:
    """Most active movers first when trimming the candidate list."""
    return quote.change_percent * quote.relative_volume


def select_top_picks(
    scores: Sequence[ScoreResult],
    us_count: int = 7,
    in_count: int = 3,
) -> Dict[str, List[ScoreResult]]:
    """Highest scores per market."""
    picks = {}
    for market, count in ((MARKET_US, us_count), (MARKET_IN, in_count)):
        ranked = sorted(
            (s for s in scores if s.market == market),
            key=lambda s: s.score,
            reverse=True,
        )
        picks[market] = ranked[:count]
    return picks
