from abc import ABC, abstractmethod
from typing import Optional

from stockscreen.services.data_provider.models import DailySeries


class FetchError(Exception):
    """Base class for upstream market data failures."""

    def __init__(self, symbol: str, message: str):
        self.symbol = symbol
        super().__init__(f"{symbol}: {message}")

    @property
    def retryable(self) -> bool:
        return False


class UpstreamTimeout(FetchError):
    """Upstream request exceeded its time box."""

    @property
    def retryable(self) -> bool:
        return True


class UpstreamHTTPError(FetchError):
    """Upstream answered with a non-2xx status."""

    def __init__(self, symbol: str, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(symbol, message or f"HTTP {status_code}")

    @property
    def retryable(self) -> bool:
        return self.status_code >= 500


class UpstreamParseError(FetchError):
    """Upstream response was malformed or had an unexpected shape."""


class MarketDataClient(ABC):
    """Abstract base class for daily OHLC data sources.

    The scanner core never reaches outside this interface.
    """

    @abstractmethod
    def get_name(self) -> str:
        """Get provider name."""
        pass

    @abstractmethod
    async def fetch_daily_series(
        self,
        symbol: str,
        range: str = "1y",
        timeout: Optional[float] = None,
    ) -> DailySeries:
        """Fetch daily bars for one symbol.

        Args:
            symbol: Upstream-formatted ticker (e.g. 'AAPL', 'RELIANCE.NS')
            range: Lookback window understood by the upstream ('3mo', '1y', '5y')
            timeout: Per-request time box in seconds (provider default if None)

        Returns:
            DailySeries with gap-free bars ordered by date ascending.

        Raises:
            UpstreamTimeout, UpstreamHTTPError, UpstreamParseError
        """
        pass

    async def shutdown(self):
        """Release provider resources (HTTP clients etc.)."""
        pass
