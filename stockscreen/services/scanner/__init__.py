"""
Scanner Module - indicators, alert rules, day-trade scoring and scans.

This package provides:
- A shared indicator engine (RSI, MACD, SMA, ATR)
- Alert detectors that auto-register via @AlertRegistry.register
- The day-trade scoring engine with ATR-based targets
- MarketScanner, which runs everything over symbol lists in batches

Usage:
    from stockscreen.services.scanner import MarketScanner

    scanner = MarketScanner()
    outcome = await scanner.scan_day_trades(["AAPL", "NVDA"], "US")
"""

from .base import AlertDetector, AlertResult, ScanContext, Severity, Signal, SignalKind, SignalResult
from .registry import AlertRegistry, registry
from .scoring import ScoreResult, calculate_targets, score_day_trade
from .runner import CrossoverHistory, CrossoverHit, MarketScanner, ScanJob, ScanOutcome, build_context

# Import all alerts to trigger registration
from . import signals

__all__ = [
    # Base classes
    "AlertDetector",
    "AlertResult",
    "ScanContext",
    "Severity",
    "Signal",
    "SignalKind",
    "SignalResult",

    # Registry
    "AlertRegistry",
    "registry",

    # Scoring
    "ScoreResult",
    "calculate_targets",
    "score_day_trade",

    # Runner
    "CrossoverHistory",
    "CrossoverHit",
    "MarketScanner",
    "ScanJob",
    "ScanOutcome",
    "build_context",
]
