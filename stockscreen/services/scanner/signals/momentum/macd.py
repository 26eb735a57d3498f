"""MACD Alert - crossovers and strong trend states."""

from stockscreen.services.scanner.base import AlertDetector, Severity, SignalKind, SignalResult
from stockscreen.services.scanner.classifier import (
    MACD_BEARISH_CROSSOVER,
    MACD_BULLISH_CROSSOVER,
    MACD_STRONG_BEARISH,
    MACD_STRONG_BULLISH,
)
from stockscreen.services.scanner.registry import AlertRegistry

_ALERTS = {
    MACD_BULLISH_CROSSOVER: (
        SignalKind.MACD_BULLISH_CROSS,
        Severity.BULLISH,
        "MACD Bullish Crossover",
        "MACD bullish crossover - MACD line crossed above signal line",
    ),
    MACD_BEARISH_CROSSOVER: (
        SignalKind.MACD_BEARISH_CROSS,
        Severity.BEARISH,
        "MACD Bearish Crossover",
        "MACD bearish crossover - MACD line crossed below signal line",
    ),
    MACD_STRONG_BULLISH: (
        SignalKind.MACD_STRONG_BULLISH,
        Severity.BULLISH,
        "Strong Bullish MACD",
        "Strong bullish MACD - positive MACD above signal line",
    ),
    MACD_STRONG_BEARISH: (
        SignalKind.MACD_STRONG_BEARISH,
        Severity.BEARISH,
        "Strong Bearish MACD",
        "Strong bearish MACD - negative MACD below signal line",
    ),
}


@AlertRegistry.register
class MACDAlert(AlertDetector):
    """Plain bullish/bearish states are not alerts."""

    alert_id = "macd"
    display_name = "MACD"
    icon = "📈"
    category = "macd_signals"
    min_bars = 35
    priority = 50

    def detect(self, ctx) -> SignalResult:
        alert = _ALERTS.get(ctx.macd_type)
        if alert is None:
            return SignalResult(triggered=False)
        kind, severity, label, description = alert
        return self.emit(kind, severity, description, label=label)
