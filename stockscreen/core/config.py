from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Optional

def parse_comma_list(v):
    """Parse comma-separated string into list. 'none' means empty/no override."""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        if v.strip().lower() == 'none':
            return []
        return [x.strip() for x in v.split(',') if x.strip() and x.strip().lower() != 'none']
    return []

class Settings(BaseSettings):
    # App Settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None  # Extra file handler, used only if its directory exists

    # Indicator periods
    RSI_PERIOD: int = 14
    SMA_FAST: int = 50
    SMA_SLOW: int = 200
    ATR_PERIOD: int = 14
    MACD_FAST: int = 12
    MACD_SLOW: int = 26
    MACD_SIGNAL: int = 9
    AVG_VOLUME_PERIOD: int = 50  # Bars averaged for relative volume (excludes today)

    # Upstream (Yahoo chart API)
    YAHOO_CHART_URL: str = "https://query1.finance.yahoo.com/v8/finance/chart"
    HISTORY_RANGE: str = "1y"  # Range cached per symbol; must cover SMA_SLOW + 1 bars
    CROSSOVER_HISTORY_RANGE: str = "5y"
    UPSTREAM_MIN_INTERVAL_MS: int = 0  # Minimum spacing between upstream requests
    FETCH_TIMEOUT_SECONDS: float = 15.0  # Single-quote / day-trade path
    BREAKOUT_FETCH_TIMEOUT_SECONDS: float = 6.0
    CROSSOVER_FETCH_TIMEOUT_SECONDS: float = 10.0
    HISTORY_FETCH_TIMEOUT_SECONDS: float = 20.0
    FETCH_RETRIES: int = 1  # Extra attempts for timeouts / 5xx only
    FETCH_RETRY_BACKOFF_MS: int = 500

    # Quote cache
    CACHE_TTL_SECONDS: float = 300.0
    CACHE_MAX_SIZE: int = 1000

    # Scanner batching (per caller)
    SCAN_MAX_CONCURRENCY: int = 20
    TECHNICALS_BATCH_SIZE: int = 5
    TECHNICALS_BATCH_DELAY_MS: int = 200
    INDICATORS_BATCH_SIZE: int = 10
    INDICATORS_BATCH_DELAY_MS: int = 100
    INDICATORS_MAX_SYMBOLS: int = 50
    BREAKOUT_BATCH_SIZE: int = 20
    BREAKOUT_BATCH_DELAY_MS: int = 100
    CROSSOVER_BATCH_SIZE: int = 20
    CROSSOVER_BATCH_DELAY_MS: int = 100

    # Daily picks
    DAY_TRADE_MIN_SCORE: int = 20
    US_TOP_PICKS: int = 7
    IN_TOP_PICKS: int = 3
    US_CANDIDATES: int = 40
    IN_CANDIDATES: int = 20

    # Scan universe overrides - comma-separated strings to avoid pydantic-settings JSON parsing
    US_SYMBOLS: Optional[str] = None
    IN_SYMBOLS: Optional[str] = None

    @field_validator('FETCH_RETRIES', 'UPSTREAM_MIN_INTERVAL_MS', mode='before')
    @classmethod
    def parse_optional_int(cls, v, info):
        if v is None or v == '':
            defaults = {'FETCH_RETRIES': 1, 'UPSTREAM_MIN_INTERVAL_MS': 0}
            return defaults.get(info.field_name)
        return int(v)

    @property
    def us_symbols_list(self) -> List[str]:
        return parse_comma_list(self.US_SYMBOLS)

    @property
    def in_symbols_list(self) -> List[str]:
        return parse_comma_list(self.IN_SYMBOLS)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore unknown env vars

settings = Settings()
