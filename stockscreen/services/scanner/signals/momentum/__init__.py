"""Momentum Alerts - 52-week extremes, RSI zones and MACD states."""
from .week52 import FiftyTwoWeekHighAlert, FiftyTwoWeekLowAlert
from .rsi_zone import RSIZoneAlert
from .macd import MACDAlert
