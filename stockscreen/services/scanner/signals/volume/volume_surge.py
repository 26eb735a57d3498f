"""High Volume Alert - relative volume of 1.5x or more."""

from stockscreen.services.scanner.base import AlertDetector, Severity, SignalKind, SignalResult
from stockscreen.services.scanner.registry import AlertRegistry


@AlertRegistry.register
class HighVolumeAlert(AlertDetector):
    """Direction of the day decides the severity."""

    alert_id = "high_volume"
    display_name = "High Volume"
    icon = "🔊"
    category = "volume_breakout"
    priority = 60

    threshold = 1.5

    def detect(self, ctx) -> SignalResult:
        quote = ctx.quote
        rel_vol = quote.relative_volume
        if rel_vol < self.threshold:
            return SignalResult(triggered=False)

        activity = "significant" if rel_vol >= 2 else "elevated"
        severity = Severity.BULLISH if quote.change_percent >= 0 else Severity.BEARISH
        return self.emit(
            SignalKind.HIGH_VOLUME,
            severity,
            f"{rel_vol:.1f}x average volume - {activity} activity",
        )
