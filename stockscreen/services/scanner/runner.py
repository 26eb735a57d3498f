"""
Market Scanner - bounded-concurrency scans over a symbol list.

Every scan path goes through MarketScanner.run():
- Splits the symbols into fixed-size batches
- Runs each batch concurrently under a semaphore
- Turns any per-symbol failure into a skipped result
- Sleeps between batches to go easy on the upstream
"""

import asyncio
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from stockscreen.core.config import settings as default_settings
from stockscreen.core.logger import Logger
from stockscreen.services.data_provider.models import MARKET_IN, MARKET_US, DailySeries, build_quote
from stockscreen.services.data_provider import service as market_data
from .base import AlertResult, ScanContext
from .classifier import (
    DEATH_CROSS,
    GOLDEN_CROSS,
    CrossoverEvent,
    detect_ma_crossover,
    find_crossovers,
    macd_signal_type,
)
from .indicators import IndicatorSnapshot, calculate_sma, compute_indicators
from .registry import AlertRegistry
from .scoring import (
    ScoreResult,
    activity_rank,
    prefilter_day_trade,
    score_day_trade,
    select_top_picks,
)

logger = Logger("MarketScanner")


@dataclass
class ScanJob:
    """One scan invocation: what to scan and how gently."""
    symbols: List[str]
    market: str
    batch_size: int
    inter_batch_delay: float
    min_score: Optional[int] = None


@dataclass
class ScanOutcome:
    hits: List[Any] = field(default_factory=list)
    attempted: int = 0
    skipped: int = 0


@dataclass(frozen=True)
class CrossoverHit:
    symbol: str
    name: str
    market: str
    price: float
    change_percent: float
    type: str
    sma50: float
    sma200: float


@dataclass
class CrossoverHistory:
    symbol: str
    market: str
    current_state: str
    sma50: Optional[float]
    sma200: Optional[float]
    events: List[CrossoverEvent] = field(default_factory=list)


def build_context(series: DailySeries, market: str, settings=default_settings) -> Optional[ScanContext]:
    """Indicators, quote and classified states for one series.

    Returns None when the series has no usable bars.
    """
    highs, lows, closes = series.highs, series.lows, series.closes
    tech = compute_indicators(
        highs,
        lows,
        closes,
        rsi_period=settings.RSI_PERIOD,
        sma_fast=settings.SMA_FAST,
        sma_slow=settings.SMA_SLOW,
        atr_period=settings.ATR_PERIOD,
        macd_fast=settings.MACD_FAST,
        macd_slow=settings.MACD_SLOW,
        macd_signal=settings.MACD_SIGNAL,
    )
    quote = build_quote(
        series,
        market,
        sma50=tech.sma50,
        sma200=tech.sma200,
        avg_volume_period=settings.AVG_VOLUME_PERIOD,
    )
    if quote is None:
        return None

    return ScanContext(
        quote=quote,
        tech=tech,
        macd_type=macd_signal_type(
            tech.macd_line,
            tech.macd_signal,
            tech.macd_histogram,
            tech.prev_macd_line,
            tech.prev_macd_signal,
        ),
        ma_crossover=detect_ma_crossover(closes, settings.SMA_FAST, settings.SMA_SLOW),
    )


class MarketScanner:
    """Runs per-symbol fetch -> compute -> classify/score over symbol lists."""

    def __init__(self, data_service: Optional["market_data.MarketDataService"] = None, settings=default_settings):
        self.data_service = data_service or market_data.MarketDataService()
        self.settings = settings
        self.max_concurrency = settings.SCAN_MAX_CONCURRENCY

    async def shutdown(self):
        await self.data_service.shutdown()

    async def run(
        self,
        job: ScanJob,
        evaluate: Callable[[str], Awaitable[Any]],
    ) -> ScanOutcome:
        """Execute `evaluate` for every symbol of the job.

        A symbol whose evaluation raises or returns None is skipped but still
        counted in `attempted`. Results come back in completion order.
        """
        outcome = ScanOutcome()
        symbols = list(job.symbols)
        if not symbols:
            return outcome

        batch_size = max(1, job.batch_size)
        sem = asyncio.Semaphore(max(1, self.max_concurrency))

        async def run_one(symbol: str):
            async with sem:
                try:
                    return await evaluate(symbol)
                except Exception as e:
                    logger.debug(f"Skipping {symbol}: {e.__class__.__name__}: {e}")
                    return None

        total_batches = (len(symbols) + batch_size - 1) // batch_size
        for index in range(total_batches):
            batch = symbols[index * batch_size:(index + 1) * batch_size]
            results = await asyncio.gather(*(run_one(s) for s in batch))

            for result in results:
                outcome.attempted += 1
                if result is None:
                    outcome.skipped += 1
                else:
                    outcome.hits.append(result)

            if index < total_batches - 1 and job.inter_batch_delay > 0:
                await asyncio.sleep(job.inter_batch_delay)

        if job.min_score is not None:
            outcome.hits = [h for h in outcome.hits if getattr(h, "score", 0) >= job.min_score]

        logger.info(
            f"✅ Scan {job.market}: {outcome.attempted} attempted, "
            f"{outcome.skipped} skipped, {len(outcome.hits)} hits"
        )
        return outcome

    async def _context(self, symbol: str, market: str, timeout: Optional[float]) -> Optional[ScanContext]:
        series = await self.data_service.get_daily_series(symbol, market, timeout=timeout)
        return build_context(series, market, self.settings)

    # ------------------------------------------------------------------
    # Day trade
    # ------------------------------------------------------------------

    async def evaluate_day_trade(self, symbol: str, market: str) -> Optional[ScoreResult]:
        ctx = await self._context(symbol, market, self.settings.FETCH_TIMEOUT_SECONDS)
        if ctx is None:
            return None
        return score_day_trade(ctx.quote, ctx.tech)

    async def scan_day_trades(
        self,
        symbols: Sequence[str],
        market: str,
        min_score: Optional[int] = None,
    ) -> ScanOutcome:
        """Score every symbol; hits sorted by score, highest first."""
        job = ScanJob(
            symbols=list(symbols),
            market=market,
            batch_size=self.settings.TECHNICALS_BATCH_SIZE,
            inter_batch_delay=self.settings.TECHNICALS_BATCH_DELAY_MS / 1000,
            min_score=min_score,
        )
        outcome = await self.run(job, lambda s: self.evaluate_day_trade(s, market))
        outcome.hits.sort(key=lambda r: r.score, reverse=True)
        return outcome

    # ------------------------------------------------------------------
    # Breakouts
    # ------------------------------------------------------------------

    async def evaluate_alerts(self, symbol: str, market: str) -> Optional[List[AlertResult]]:
        series = await self.data_service.get_daily_series(
            symbol, market, timeout=self.settings.BREAKOUT_FETCH_TIMEOUT_SECONDS
        )
        ctx = build_context(series, market, self.settings)
        if ctx is None:
            return None

        signals = AlertRegistry.evaluate(ctx, bars=len(series))
        if not signals:
            return None

        quote = ctx.quote
        return [
            AlertResult(
                symbol=quote.symbol,
                name=quote.name,
                market=market,
                price=quote.price,
                change_percent=quote.change_percent,
                relative_volume=quote.relative_volume,
                signal=signal,
                rsi=ctx.tech.rsi,
                macd_signal_type=ctx.macd_type,
            )
            for signal in signals
        ]

    async def scan_breakouts(self, symbols: Sequence[str], market: str) -> ScanOutcome:
        """Alerts for every symbol, sorted by |change_percent| descending."""
        job = ScanJob(
            symbols=list(symbols),
            market=market,
            batch_size=self.settings.BREAKOUT_BATCH_SIZE,
            inter_batch_delay=self.settings.BREAKOUT_BATCH_DELAY_MS / 1000,
        )
        outcome = await self.run(job, lambda s: self.evaluate_alerts(s, market))
        alerts = [alert for per_symbol in outcome.hits for alert in per_symbol]
        alerts.sort(key=lambda a: abs(a.change_percent), reverse=True)
        outcome.hits = alerts
        return outcome

    # ------------------------------------------------------------------
    # Golden / death crosses
    # ------------------------------------------------------------------

    async def evaluate_crossover(self, symbol: str, market: str) -> Optional[CrossoverHit]:
        ctx = await self._context(symbol, market, self.settings.CROSSOVER_FETCH_TIMEOUT_SECONDS)
        if ctx is None or ctx.ma_crossover is None:
            return None

        quote = ctx.quote
        return CrossoverHit(
            symbol=quote.symbol,
            name=quote.name,
            market=market,
            price=quote.price,
            change_percent=quote.change_percent,
            type=ctx.ma_crossover,
            sma50=ctx.tech.sma50,
            sma200=ctx.tech.sma200,
        )

    async def scan_crossovers(self, symbols: Sequence[str], market: str) -> ScanOutcome:
        """Symbols whose SMA50 crossed SMA200 on the latest trading day."""
        job = ScanJob(
            symbols=list(symbols),
            market=market,
            batch_size=self.settings.CROSSOVER_BATCH_SIZE,
            inter_batch_delay=self.settings.CROSSOVER_BATCH_DELAY_MS / 1000,
        )
        return await self.run(job, lambda s: self.evaluate_crossover(s, market))

    async def get_crossover_history(self, symbol: str, market: str, years: int = 3) -> CrossoverHistory:
        """Every cross within the last `years` plus the current SMA state.

        Fetches a long uncached range; upstream errors propagate.
        """
        formatted = market_data.format_symbol(symbol, market)
        series = await self.data_service.fetch(
            formatted,
            range=self.settings.CROSSOVER_HISTORY_RANGE,
            timeout=self.settings.HISTORY_FETCH_TIMEOUT_SECONDS,
        )
        closes, dates = series.closes, series.dates
        fast, slow = self.settings.SMA_FAST, self.settings.SMA_SLOW

        since = None
        if dates:
            since = dates[-1] - timedelta(days=365 * years)
        events = find_crossovers(closes, dates, since=since, fast=fast, slow=slow)

        sma50 = calculate_sma(closes, fast)
        sma200 = calculate_sma(closes, slow)
        if sma50 is None or sma200 is None:
            state = "unknown"
        elif sma50 > sma200:
            state = GOLDEN_CROSS
        else:
            state = DEATH_CROSS

        return CrossoverHistory(
            symbol=formatted,
            market=market,
            current_state=state,
            sma50=sma50,
            sma200=sma200,
            events=events,
        )

    # ------------------------------------------------------------------
    # Indicators only
    # ------------------------------------------------------------------

    async def compute_technicals(self, symbols: Sequence[str], market: str) -> Dict[str, IndicatorSnapshot]:
        """Indicator snapshot per symbol; an empty snapshot when unavailable."""
        symbols = list(symbols)[:self.settings.INDICATORS_MAX_SYMBOLS]

        async def evaluate(symbol: str):
            ctx = await self._context(symbol, market, self.settings.FETCH_TIMEOUT_SECONDS)
            if ctx is None:
                return None
            return symbol, ctx.tech

        job = ScanJob(
            symbols=symbols,
            market=market,
            batch_size=self.settings.INDICATORS_BATCH_SIZE,
            inter_batch_delay=self.settings.INDICATORS_BATCH_DELAY_MS / 1000,
        )
        outcome = await self.run(job, evaluate)
        found = dict(outcome.hits)
        return {s: found.get(s, IndicatorSnapshot()) for s in symbols}

    # ------------------------------------------------------------------
    # Daily picks
    # ------------------------------------------------------------------

    async def _quotes(self, symbols: Sequence[str], market: str) -> List[Any]:
        async def evaluate(symbol: str):
            ctx = await self._context(symbol, market, self.settings.FETCH_TIMEOUT_SECONDS)
            return ctx.quote if ctx else None

        job = ScanJob(
            symbols=list(symbols),
            market=market,
            batch_size=self.settings.BREAKOUT_BATCH_SIZE,
            inter_batch_delay=self.settings.BREAKOUT_BATCH_DELAY_MS / 1000,
        )
        outcome = await self.run(job, evaluate)
        return outcome.hits

    async def daily_picks(
        self,
        us_symbols: Sequence[str],
        in_symbols: Sequence[str],
    ) -> Dict[str, List[ScoreResult]]:
        """Pre-filter, score and pick the top day-trade candidates per market."""
        candidates = {}
        for market, symbols, limit in (
            (MARKET_US, us_symbols, self.settings.US_CANDIDATES),
            (MARKET_IN, in_symbols, self.settings.IN_CANDIDATES),
        ):
            quotes = [q for q in await self._quotes(symbols, market) if prefilter_day_trade(q)]
            quotes.sort(key=activity_rank, reverse=True)
            candidates[market] = [q.symbol for q in quotes[:limit]]
            logger.info(f"📋 {market}: {len(quotes)} pre-filtered, {len(candidates[market])} candidates")

        scored = []
        for market, symbols in candidates.items():
            outcome = await self.scan_day_trades(
                symbols, market, min_score=self.settings.DAY_TRADE_MIN_SCORE
            )
            scored.extend(outcome.hits)

        return select_top_picks(
            scored,
            us_count=self.settings.US_TOP_PICKS,
            in_count=self.settings.IN_TOP_PICKS,
        )
