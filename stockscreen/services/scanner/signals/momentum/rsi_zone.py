"""RSI Zone Alert - oversold / overbought extremes.

Alerts only at RSI <= 35 or >= 65; the wider display zones from
rsi_zone() are left to scoring.
"""

from stockscreen.services.scanner.base import AlertDetector, Severity, SignalKind, SignalResult
from stockscreen.services.scanner.registry import AlertRegistry


@AlertRegistry.register
class RSIZoneAlert(AlertDetector):

    alert_id = "rsi_zone"
    display_name = "RSI Zone"
    icon = "📊"
    category = "rsi_signals"
    min_bars = 15
    priority = 40

    oversold_alert = 35
    overbought_alert = 65
    oversold = 30
    overbought = 70

    def detect(self, ctx) -> SignalResult:
        rsi = ctx.tech.rsi
        if rsi is None:
            return SignalResult(triggered=False)

        if rsi <= self.oversold_alert:
            if rsi <= self.oversold:
                return self.emit(
                    SignalKind.RSI_OVERSOLD,
                    Severity.BULLISH,
                    f"RSI at {rsi:.0f} - oversold territory, potential bounce",
                    label="RSI Oversold",
                )
            return self.emit(
                SignalKind.RSI_APPROACHING_OVERSOLD,
                Severity.BULLISH,
                f"RSI at {rsi:.0f} - approaching oversold, watch for reversal",
                label="RSI Approaching Oversold",
            )

        if rsi >= self.overbought_alert:
            if rsi >= self.overbought:
                return self.emit(
                    SignalKind.RSI_OVERBOUGHT,
                    Severity.BEARISH,
                    f"RSI at {rsi:.0f} - overbought territory, potential pullback",
                    label="RSI Overbought",
                )
            return self.emit(
                SignalKind.RSI_APPROACHING_OVERBOUGHT,
                Severity.BEARISH,
                f"RSI at {rsi:.0f} - approaching overbought, monitor closely",
                label="RSI Approaching Overbought",
            )

        return SignalResult(triggered=False)
