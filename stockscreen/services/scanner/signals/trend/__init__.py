"""Trend Alerts - moving average proximity and golden/death crosses."""
from .ma_proximity import FiftyDayMAAlert, TwoHundredDayMAAlert
from .ma_crossover import MACrossoverAlert
