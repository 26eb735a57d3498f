"""52-Week Range Alerts - new/near highs and lows."""

from stockscreen.services.scanner.base import AlertDetector, Severity, SignalKind, SignalResult
from stockscreen.services.scanner.registry import AlertRegistry


@AlertRegistry.register
class FiftyTwoWeekHighAlert(AlertDetector):
    """Within 5% of (or above) the 52-week high."""

    alert_id = "52w_high"
    display_name = "52W High"
    icon = "🚀"
    category = "52w_highs"
    priority = 10

    def detect(self, ctx) -> SignalResult:
        pct = ctx.quote.percent_from_52w_high
        if pct is None or pct < -5:
            return SignalResult(triggered=False)

        if pct >= 0:
            return self.emit(
                SignalKind.NEW_52W_HIGH,
                Severity.BULLISH,
                "New 52-week high - momentum breakout",
                label="New 52W High",
            )
        return self.emit(
            SignalKind.NEAR_52W_HIGH,
            Severity.BULLISH,
            f"Within {abs(pct):.1f}% of 52-week high",
            label="Near 52W High",
        )


@AlertRegistry.register
class FiftyTwoWeekLowAlert(AlertDetector):
    """Within 10% of (or below) the 52-week low."""

    alert_id = "52w_low"
    display_name = "52W Low"
    icon = "🕳️"
    category = "52w_lows"
    priority = 11

    def detect(self, ctx) -> SignalResult:
        pct = ctx.quote.percent_from_52w_low
        if pct is None or pct > 10:
            return SignalResult(triggered=False)

        if pct <= 0:
            return self.emit(
                SignalKind.NEW_52W_LOW,
                Severity.BEARISH,
                "New 52-week low - potential capitulation",
                label="New 52W Low",
            )
        return self.emit(
            SignalKind.NEAR_52W_LOW,
            Severity.NEUTRAL,
            f"Within {pct:.1f}% of 52-week low - potential bounce",
            label="Near 52W Low",
        )
