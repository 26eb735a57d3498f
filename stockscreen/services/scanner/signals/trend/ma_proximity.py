"""MA Proximity Alerts - price trading close to the 50-day or 200-day MA."""

from stockscreen.services.scanner.base import AlertDetector, Severity, SignalKind, SignalResult
from stockscreen.services.scanner.registry import AlertRegistry


@AlertRegistry.register
class FiftyDayMAAlert(AlertDetector):
    """Within 5% of the 50-day moving average."""

    alert_id = "ma50_proximity"
    display_name = "50-Day MA"
    icon = "〰️"
    category = "ma_crossover"
    priority = 30

    threshold = 5.0

    def detect(self, ctx) -> SignalResult:
        pct = ctx.quote.percent_from_50ma
        if pct is None or abs(pct) > self.threshold:
            return SignalResult(triggered=False)

        if pct > 0:
            return self.emit(
                SignalKind.ABOVE_50MA,
                Severity.BULLISH,
                f"Trading {abs(pct):.1f}% above 50-day MA - potential support",
                label="Above 50 MA",
            )
        return self.emit(
            SignalKind.BELOW_50MA,
            Severity.BEARISH,
            f"Trading {abs(pct):.1f}% below 50-day MA - watch for breakdown",
            label="Below 50 MA",
        )


@AlertRegistry.register
class TwoHundredDayMAAlert(AlertDetector):
    """Within 8% of the 200-day moving average."""

    alert_id = "ma200_proximity"
    display_name = "200-Day MA"
    icon = "〰️"
    category = "ma_crossover"
    priority = 31

    threshold = 8.0

    def detect(self, ctx) -> SignalResult:
        pct = ctx.quote.percent_from_200ma
        if pct is None or abs(pct) > self.threshold:
            return SignalResult(triggered=False)

        if pct > 0:
            return self.emit(
                SignalKind.ABOVE_200MA,
                Severity.BULLISH,
                f"Trading {abs(pct):.1f}% above 200-day MA - long-term uptrend",
                label="Above 200 MA",
            )
        return self.emit(
            SignalKind.BELOW_200MA,
            Severity.BEARISH,
            f"Trading {abs(pct):.1f}% below 200-day MA - long-term downtrend",
            label="Below 200 MA",
        )
