"""
Scan universe - static US and India large-cap symbol lists.

US_SYMBOLS / IN_SYMBOLS settings add symbols on top of the static lists;
the merged list is de-duplicated case-insensitively, first occurrence wins.
"""

from typing import List

from stockscreen.core.config import settings
from stockscreen.core.logger import Logger
from stockscreen.services.data_provider.models import MARKET_IN
from stockscreen.services.data_provider.service import format_symbol

logger = Logger("StockLists")

US_STOCKS = [
    # Mega-cap tech
    "AAPL", "MSFT", "GOOGL", "AMZN", "NVDA", "META", "TSLA", "BRK-B",
    # Healthcare
    "UNH", "JNJ", "LLY", "PFE", "MRK", "ABBV", "TMO", "ABT", "AMGN", "ISRG",
    "VRTX", "REGN",
    # Financials
    "V", "JPM", "MA", "BAC", "WFC", "GS", "MS", "BLK", "SCHW", "AXP", "SPGI",
    # Consumer
    "WMT", "PG", "HD", "KO", "PEP", "COST", "MCD", "NKE", "SBUX", "TGT", "LOW",
    "LULU", "GM", "F",
    # Energy
    "XOM", "CVX", "COP", "SLB", "EOG", "OXY",
    # Technology & semiconductors
    "AVGO", "CSCO", "CRM", "ORCL", "NFLX", "AMD", "INTC", "QCOM", "TXN", "IBM",
    "AMAT", "LRCX", "MU", "KLAC", "MRVL", "DELL", "SMCI",
    # Industrials
    "CAT", "DE", "BA", "HON", "UPS", "RTX", "LMT", "GE", "UNP", "FDX",
    # Telecom & media
    "DIS", "CMCSA", "VZ", "T", "TMUS",
    # Utilities & REITs
    "NEE", "DUK", "SO", "CEG", "VST", "AMT", "PLD", "EQIX",
    # Growth / high-profile
    "PYPL", "SHOP", "UBER", "ABNB", "COIN", "SNOW", "PLTR", "NOW", "INTU",
    "ADBE", "PANW", "CRWD", "DDOG", "NET", "SOFI", "HOOD", "DKNG",
    # ETFs
    "SPY", "QQQ", "IWM", "DIA", "TQQQ", "SOXX", "SMH", "GLD", "TLT",
]

IN_STOCKS = [
    # NIFTY 50
    "RELIANCE.NS", "TCS.NS", "HDFCBANK.NS", "INFY.NS", "ICICIBANK.NS",
    "HINDUNILVR.NS", "SBIN.NS", "BHARTIARTL.NS", "ITC.NS", "KOTAKBANK.NS",
    "LT.NS", "AXISBANK.NS", "BAJFINANCE.NS", "ASIANPAINT.NS", "MARUTI.NS",
    "HCLTECH.NS", "TITAN.NS", "SUNPHARMA.NS", "WIPRO.NS", "ULTRACEMCO.NS",
    "NTPC.NS", "NESTLEIND.NS", "POWERGRID.NS", "TATAMOTORS.NS", "M&M.NS",
    "JSWSTEEL.NS", "TATASTEEL.NS", "ADANIPORTS.NS", "BAJAJFINSV.NS", "TECHM.NS",
    "ONGC.NS", "COALINDIA.NS", "DRREDDY.NS", "CIPLA.NS", "APOLLOHOSP.NS",
    # NIFTY Next 50
    "ADANIENT.NS", "BAJAJ-AUTO.NS", "BANKBARODA.NS", "BEL.NS", "DLF.NS",
    "GAIL.NS", "HAVELLS.NS", "HINDALCO.NS", "INDIGO.NS", "IRCTC.NS",
    "LICI.NS", "PIDILITIND.NS", "PNB.NS", "SIEMENS.NS", "TATAPOWER.NS",
    "TRENT.NS", "VEDL.NS", "ZOMATO.NS",
    # Mid-caps, PSU & defence
    "ABB.NS", "BHEL.NS", "DIXON.NS", "HAL.NS", "IRFC.NS", "MAZAGON.NS",
    "NHPC.NS", "PERSISTENT.NS", "PFC.NS", "POLYCAB.NS", "RVNL.NS", "TVSMOTOR.NS",
]


def dedupe_symbols(symbols: List[str]) -> List[str]:
    seen = set()
    merged = []
    for sym in symbols:
        key = sym.upper()
        if key not in seen:
            seen.add(key)
            merged.append(sym)
    return merged


def get_stocks_to_scan(market: str) -> List[str]:
    """Static list for the market merged with the configured extra symbols."""
    if market == MARKET_IN:
        static, extra = IN_STOCKS, settings.in_symbols_list
    else:
        static, extra = US_STOCKS, settings.us_symbols_list

    extra = [format_symbol(s, market) for s in extra]
    merged = dedupe_symbols(static + extra)
    logger.info(
        f"{market} scan list: {len(static)} static + {len(extra)} configured = {len(merged)} unique symbols"
    )
    return merged
