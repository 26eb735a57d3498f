"""Golden / Death Cross Alert - SMA50 crossed SMA200 on the latest day."""

from stockscreen.services.scanner.base import AlertDetector, Severity, SignalKind, SignalResult
from stockscreen.services.scanner.classifier import DEATH_CROSS, GOLDEN_CROSS
from stockscreen.services.scanner.registry import AlertRegistry


@AlertRegistry.register
class MACrossoverAlert(AlertDetector):
    """Edge-triggered: fires only on the transition day."""

    alert_id = "ma_crossover"
    display_name = "MA Crossover"
    icon = "✨"
    category = "ma_crossover"
    min_bars = 201
    priority = 20

    def detect(self, ctx) -> SignalResult:
        tech = ctx.tech
        if ctx.ma_crossover == GOLDEN_CROSS:
            return self.emit(
                SignalKind.GOLDEN_CROSS,
                Severity.BULLISH,
                f"Golden Cross - 50 MA ({tech.sma50}) crossed above 200 MA ({tech.sma200})",
                label="Golden Cross",
            )
        if ctx.ma_crossover == DEATH_CROSS:
            return self.emit(
                SignalKind.DEATH_CROSS,
                Severity.BEARISH,
                f"Death Cross - 50 MA ({tech.sma50}) crossed below 200 MA ({tech.sma200})",
                label="Death Cross",
            )
        return SignalResult(triggered=False)
