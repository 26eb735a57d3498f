import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from stockscreen.core.config import settings
from stockscreen.core.logger import Logger
from stockscreen.core.rate_limiter import RateLimiter
from stockscreen.services.data_provider.base import (
    MarketDataClient,
    UpstreamHTTPError,
    UpstreamParseError,
    UpstreamTimeout,
)
from stockscreen.services.data_provider.models import DailySeries, PriceBar, SeriesMeta

logger = Logger("YahooChartProvider")


class YahooChartProvider(MarketDataClient):
    """
    Yahoo Finance v8 chart API provider.

    The chart endpoint needs no crumb/cookie handshake and returns both the
    daily OHLCV arrays and a `meta` block (price, 52-week range, volume).
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        rate_limiter: Optional[RateLimiter] = None,
        timeout: Optional[float] = None,
    ):
        self._headers = {
            "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Accept": "application/json",
        }
        self._client = client
        self._owns_client = client is None
        self.base_url = (base_url or settings.YAHOO_CHART_URL).rstrip("/")
        self.rate_limiter = rate_limiter or RateLimiter()
        self.timeout = timeout or settings.FETCH_TIMEOUT_SECONDS

    def get_name(self) -> str:
        return "yahoo_chart"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(headers=self._headers)
        return self._client

    async def shutdown(self):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch_daily_series(
        self,
        symbol: str,
        range: str = "1y",
        timeout: Optional[float] = None,
    ) -> DailySeries:
        url = f"{self.base_url}/{quote(symbol, safe='')}"
        params = {"interval": "1d", "range": range, "includePrePost": "false"}

        await self.rate_limiter.acquire()
        try:
            response = await self._get_client().get(
                url,
                params=params,
                headers=self._headers,
                timeout=timeout or self.timeout,
            )
        except httpx.TimeoutException as e:
            raise UpstreamTimeout(symbol, f"request timed out ({e.__class__.__name__})") from e
        except httpx.HTTPError as e:
            # Connection resets and the like behave like a transient 5xx
            raise UpstreamHTTPError(symbol, 503, f"transport error: {e}") from e

        if response.status_code != 200:
            logger.debug(f"HTTP {response.status_code} for {symbol}")
            raise UpstreamHTTPError(symbol, response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamParseError(symbol, "response is not JSON") from e

        return self.parse_chart(symbol, payload)

    @staticmethod
    def _safe_float(value) -> Optional[float]:
        try:
            if value in (None, "-", ""):
                return None
            return float(value)
        except (TypeError, ValueError):
            return None

    @classmethod
    def parse_chart(cls, symbol: str, payload: Dict[str, Any]) -> DailySeries:
        """Convert a chart API payload into a DailySeries.

        Bars missing a close, high or low are dropped.
        """
        chart = payload.get("chart") if isinstance(payload, dict) else None
        if not isinstance(chart, dict):
            raise UpstreamParseError(symbol, "missing 'chart' object")

        results = chart.get("result") or []
        if not results:
            error = chart.get("error") or {}
            raise UpstreamParseError(symbol, f"empty chart result: {error.get('description', 'no data')}")

        result = results[0]
        meta_raw = result.get("meta") or {}
        timestamps: List[int] = result.get("timestamp") or []
        quotes = (result.get("indicators") or {}).get("quote") or []
        if not quotes or not isinstance(quotes[0], dict):
            raise UpstreamParseError(symbol, "missing indicators.quote")

        q = quotes[0]
        closes = q.get("close") or []
        highs = q.get("high") or []
        lows = q.get("low") or []
        opens = q.get("open") or []
        volumes = q.get("volume") or []

        bars = []
        for i, ts in enumerate(timestamps):
            close = cls._safe_float(closes[i]) if i < len(closes) else None
            high = cls._safe_float(highs[i]) if i < len(highs) else None
            low = cls._safe_float(lows[i]) if i < len(lows) else None
            if close is None or high is None or low is None:
                continue
            bars.append(PriceBar(
                date=datetime.datetime.fromtimestamp(ts, tz=datetime.timezone.utc).date(),
                high=high,
                low=low,
                close=close,
                open=cls._safe_float(opens[i]) if i < len(opens) else None,
                volume=cls._safe_float(volumes[i]) if i < len(volumes) else None,
            ))

        meta = SeriesMeta(
            name=meta_raw.get("shortName") or meta_raw.get("longName") or meta_raw.get("symbol"),
            currency=meta_raw.get("currency"),
            exchange=meta_raw.get("exchangeName") or meta_raw.get("fullExchangeName"),
            regular_market_price=cls._safe_float(meta_raw.get("regularMarketPrice")),
            previous_close=cls._safe_float(meta_raw.get("previousClose") or meta_raw.get("chartPreviousClose")),
            regular_market_volume=cls._safe_float(meta_raw.get("regularMarketVolume")),
            fifty_two_week_high=cls._safe_float(meta_raw.get("fiftyTwoWeekHigh")),
            fifty_two_week_low=cls._safe_float(meta_raw.get("fiftyTwoWeekLow")),
            fifty_day_average=cls._safe_float(meta_raw.get("fiftyDayAverage")),
            two_hundred_day_average=cls._safe_float(meta_raw.get("twoHundredDayAverage")),
        )

        return DailySeries(symbol=symbol, bars=tuple(bars), meta=meta)
