"""Strong Technicals - composite setup score when no other alert fired.

Criteria (max 8 points):
- More than 5% above the 50-day MA (+2)
- Above the 200-day MA (+1)
- RSI between 50 and 75 (+1)
- Up 1.5% or more today (+1)
- Relative volume of 1.2x or more (+1)
- Analyst rating of 2.2 or better (+1)
- MACD strong bullish or bullish crossover (+1)
"""

from stockscreen.services.scanner.base import AlertDetector, Severity, SignalKind, SignalResult
from stockscreen.services.scanner.classifier import MACD_BULLISH_CROSSOVER, MACD_STRONG_BULLISH
from stockscreen.services.scanner.registry import AlertRegistry


def strong_technicals_score(ctx) -> int:
    quote = ctx.quote
    rsi = ctx.tech.rsi
    score = 0
    if quote.percent_from_50ma is not None and quote.percent_from_50ma > 5:
        score += 2
    if quote.percent_from_200ma is not None and quote.percent_from_200ma > 0:
        score += 1
    if rsi is not None and 50 <= rsi <= 75:
        score += 1
    if quote.change_percent >= 1.5:
        score += 1
    if quote.relative_volume >= 1.2:
        score += 1
    if quote.analyst_rating is not None and quote.analyst_rating <= 2.2:
        score += 1
    if ctx.macd_type in (MACD_STRONG_BULLISH, MACD_BULLISH_CROSSOVER):
        score += 1
    return score


@AlertRegistry.register
class StrongTechnicalsAlert(AlertDetector):

    alert_id = "strong_technicals"
    display_name = "Strong Technicals"
    icon = "💪"
    category = "strong_technicals"
    priority = 200
    fallback = True

    max_score = 8
    threshold = 4

    def detect(self, ctx) -> SignalResult:
        score = strong_technicals_score(ctx)
        if score < self.threshold:
            return SignalResult(triggered=False, metadata={"score": score})

        return self.emit(
            SignalKind.STRONG_TECHNICALS,
            Severity.BULLISH,
            f"Strong technical setup ({score}/{self.max_score} criteria) - momentum candidate",
            score=score,
        )
