"""
Unit tests for the alert framework.

Tests the core alert infrastructure and the registered detectors:
- SignalResult / Signal / AlertResult dataclasses
- AlertRegistry registration, lookup and evaluation
- Individual breakout/alert rules and the strong-technicals fallback
"""

import pytest

from stockscreen.services.scanner import AlertRegistry
from stockscreen.services.scanner.base import (
    AlertDetector,
    AlertResult,
    ScanContext,
    Severity,
    Signal,
    SignalKind,
    SignalResult,
)
from stockscreen.services.scanner.classifier import (
    DEATH_CROSS,
    GOLDEN_CROSS,
    MACD_BEARISH,
    MACD_BULLISH,
    MACD_BULLISH_CROSSOVER,
    MACD_STRONG_BEARISH,
    MACD_STRONG_BULLISH,
)
from stockscreen.services.scanner.indicators import IndicatorSnapshot
from stockscreen.services.scanner.signals.comprehensive.strong_technicals import strong_technicals_score


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def make_ctx(make_quote):
    """Context with a quiet quote (no alert fires) unless overridden."""
    def _make(rsi=50.0, macd_type=None, ma_crossover=None, **quote_overrides):
        quiet = dict(
            percent_from_52w_high=-20.0,
            percent_from_52w_low=50.0,
            percent_from_50ma=None,
            percent_from_200ma=None,
            relative_volume=1.0,
            change_percent=0.0,
        )
        quiet.update(quote_overrides)
        return ScanContext(
            quote=make_quote(**quiet),
            tech=IndicatorSnapshot(rsi=rsi, sma50=105.0, sma200=100.0),
            macd_type=macd_type,
            ma_crossover=ma_crossover,
        )
    return _make


@pytest.fixture
def clean_registry():
    """Provide a clean registry for each test."""
    saved = AlertRegistry._detectors.copy()
    AlertRegistry.clear()
    yield AlertRegistry
    AlertRegistry._detectors = saved


def kinds(signals):
    return {s.kind for s in signals}


def detect(alert_id, ctx):
    return AlertRegistry.get_by_id(alert_id).detect(ctx)


# ─────────────────────────────────────────────────────────────────────────────
# Result Types
# ─────────────────────────────────────────────────────────────────────────────

class TestResultTypes:

    @pytest.mark.unit
    def test_signal_result_defaults(self):
        result = SignalResult(triggered=False)
        assert result.signal is None
        assert result.metadata == {}

    @pytest.mark.unit
    def test_alert_result_to_dict(self):
        signal = Signal(SignalKind.HIGH_VOLUME, Severity.BULLISH, "High Volume", "2.0x", "volume_breakout")
        alert = AlertResult(
            symbol="AAPL",
            name="Apple",
            market="US",
            price=190.0,
            change_percent=2.0,
            relative_volume=2.0,
            signal=signal,
        )
        data = alert.to_dict()
        assert data["signal"]["kind"] == "high_volume"
        assert data["signal"]["severity"] == "bullish"
        assert data["symbol"] == "AAPL"


# ─────────────────────────────────────────────────────────────────────────────
# Registry
# ─────────────────────────────────────────────────────────────────────────────

class TestAlertRegistry:

    @pytest.mark.unit
    def test_all_detectors_registered(self):
        ids = set(AlertRegistry.get_alert_ids())
        assert ids >= {
            "ma50_proximity", "ma200_proximity", "ma_crossover", "52w_high", "52w_low",
            "rsi_zone", "macd", "high_volume", "strong_technicals",
        }

    @pytest.mark.unit
    def test_sorted_by_priority(self):
        priorities = [d.priority for d in AlertRegistry.get_all()]
        assert priorities == sorted(priorities)

    @pytest.mark.unit
    def test_get_by_category(self):
        ids = {d.alert_id for d in AlertRegistry.get_by_category("ma_crossover")}
        assert ids == {"ma50_proximity", "ma200_proximity", "ma_crossover"}

    @pytest.mark.unit
    def test_register_requires_id(self, clean_registry):
        class NoId(AlertDetector):
            def detect(self, ctx):
                return SignalResult(triggered=False)

        with pytest.raises(ValueError):
            clean_registry.register(NoId)

    @pytest.mark.unit
    def test_register_rejects_duplicates(self, clean_registry):
        class First(AlertDetector):
            alert_id = "dup"

            def detect(self, ctx):
                return SignalResult(triggered=False)

        class Second(First):
            pass

        clean_registry.register(First)
        with pytest.raises(ValueError):
            clean_registry.register(Second)
        assert clean_registry.count() == 1

    @pytest.mark.unit
    def test_disabled_detectors_skipped(self, clean_registry, make_ctx):
        @clean_registry.register
        class Always(AlertDetector):
            alert_id = "always"
            enabled = False

            def detect(self, ctx):
                return self.emit(SignalKind.HIGH_VOLUME, Severity.NEUTRAL, "always")

        assert clean_registry.evaluate(make_ctx()) == []
        assert len(clean_registry.get_all(enabled_only=False)) == 1


class TestEvaluate:

    @pytest.mark.unit
    def test_multiple_alerts_coexist(self, make_ctx):
        ctx = make_ctx(
            percent_from_52w_high=0.0,
            percent_from_50ma=3.0,
            relative_volume=2.0,
            change_percent=2.0,
        )
        signals = AlertRegistry.evaluate(ctx)
        assert kinds(signals) == {
            SignalKind.NEW_52W_HIGH,
            SignalKind.ABOVE_50MA,
            SignalKind.HIGH_VOLUME,
        }

    @pytest.mark.unit
    def test_quiet_symbol_has_no_alerts(self, make_ctx):
        assert AlertRegistry.evaluate(make_ctx()) == []

    @pytest.mark.unit
    def test_min_bars_filter(self, make_ctx):
        ctx = make_ctx(ma_crossover=GOLDEN_CROSS)
        assert SignalKind.GOLDEN_CROSS not in kinds(AlertRegistry.evaluate(ctx, bars=150))
        assert SignalKind.GOLDEN_CROSS in kinds(AlertRegistry.evaluate(ctx, bars=250))

    @pytest.mark.unit
    def test_strong_technicals_fallback(self, make_ctx):
        ctx = make_ctx(
            rsi=55.0,
            percent_from_50ma=8.0,
            percent_from_200ma=15.0,
            change_percent=1.6,
            relative_volume=1.3,
            macd_type=MACD_BULLISH,
        )
        signals = AlertRegistry.evaluate(ctx)
        assert kinds(signals) == {SignalKind.STRONG_TECHNICALS}
        assert "6/8" in signals[0].description

    @pytest.mark.unit
    @pytest.mark.parametrize("rsi", [37.0, 62.0])
    def test_mid_band_rsi_leaves_fallback_alone(self, make_ctx, rsi):
        ctx = make_ctx(
            rsi=rsi,
            percent_from_50ma=6.0,
            percent_from_200ma=10.0,
            change_percent=2.0,
            relative_volume=1.3,
        )
        signals = AlertRegistry.evaluate(ctx, bars=260)
        assert [s.kind for s in signals] == [SignalKind.STRONG_TECHNICALS]

    @pytest.mark.unit
    def test_fallback_skipped_when_other_alert_fires(self, make_ctx):
        ctx = make_ctx(
            rsi=55.0,
            percent_from_50ma=8.0,
            percent_from_200ma=15.0,
            change_percent=1.6,
            relative_volume=1.6,
        )
        assert kinds(AlertRegistry.evaluate(ctx)) == {SignalKind.HIGH_VOLUME}

    @pytest.mark.unit
    def test_fallback_below_threshold(self, make_ctx):
        ctx = make_ctx(rsi=55.0, percent_from_50ma=8.0)
        assert strong_technicals_score(ctx) == 3
        assert AlertRegistry.evaluate(ctx) == []


# ─────────────────────────────────────────────────────────────────────────────
# Individual Rules
# ─────────────────────────────────────────────────────────────────────────────

class TestFiftyTwoWeekAlerts:

    @pytest.mark.unit
    @pytest.mark.parametrize("pct,kind", [
        (2.0, SignalKind.NEW_52W_HIGH),
        (0.0, SignalKind.NEW_52W_HIGH),
        (-3.0, SignalKind.NEAR_52W_HIGH),
        (-5.0, SignalKind.NEAR_52W_HIGH),
    ])
    def test_high(self, make_ctx, pct, kind):
        result = detect("52w_high", make_ctx(percent_from_52w_high=pct))
        assert result.triggered
        assert result.signal.kind == kind
        assert result.signal.severity == Severity.BULLISH
        assert result.signal.category == "52w_highs"

    @pytest.mark.unit
    def test_high_out_of_range(self, make_ctx):
        assert not detect("52w_high", make_ctx(percent_from_52w_high=-5.1)).triggered

    @pytest.mark.unit
    def test_unknown_52w_range(self, make_ctx):
        ctx = make_ctx(percent_from_52w_high=None, percent_from_52w_low=None)
        assert not detect("52w_high", ctx).triggered
        assert not detect("52w_low", ctx).triggered

    @pytest.mark.unit
    def test_new_low_is_bearish(self, make_ctx):
        result = detect("52w_low", make_ctx(percent_from_52w_low=0.0))
        assert result.signal.kind == SignalKind.NEW_52W_LOW
        assert result.signal.severity == Severity.BEARISH

    @pytest.mark.unit
    def test_near_low(self, make_ctx):
        result = detect("52w_low", make_ctx(percent_from_52w_low=10.0))
        assert result.signal.kind == SignalKind.NEAR_52W_LOW
        assert not detect("52w_low", make_ctx(percent_from_52w_low=10.5)).triggered


class TestMovingAverageAlerts:

    @pytest.mark.unit
    def test_above_50ma(self, make_ctx):
        result = detect("ma50_proximity", make_ctx(percent_from_50ma=5.0))
        assert result.signal.kind == SignalKind.ABOVE_50MA
        assert result.signal.severity == Severity.BULLISH

    @pytest.mark.unit
    def test_below_50ma(self, make_ctx):
        result = detect("ma50_proximity", make_ctx(percent_from_50ma=-2.0))
        assert result.signal.kind == SignalKind.BELOW_50MA
        assert result.signal.severity == Severity.BEARISH

    @pytest.mark.unit
    def test_50ma_out_of_range(self, make_ctx):
        assert not detect("ma50_proximity", make_ctx(percent_from_50ma=5.5)).triggered
        assert not detect("ma50_proximity", make_ctx(percent_from_50ma=None)).triggered

    @pytest.mark.unit
    def test_200ma_band(self, make_ctx):
        assert detect("ma200_proximity", make_ctx(percent_from_200ma=-8.0)).signal.kind == SignalKind.BELOW_200MA
        assert detect("ma200_proximity", make_ctx(percent_from_200ma=7.0)).signal.kind == SignalKind.ABOVE_200MA
        assert not detect("ma200_proximity", make_ctx(percent_from_200ma=8.5)).triggered

    @pytest.mark.unit
    def test_golden_and_death_cross(self, make_ctx):
        golden = detect("ma_crossover", make_ctx(ma_crossover=GOLDEN_CROSS))
        death = detect("ma_crossover", make_ctx(ma_crossover=DEATH_CROSS))
        assert golden.signal.kind == SignalKind.GOLDEN_CROSS
        assert golden.signal.severity == Severity.BULLISH
        assert death.signal.kind == SignalKind.DEATH_CROSS
        assert death.signal.severity == Severity.BEARISH
        assert not detect("ma_crossover", make_ctx()).triggered


class TestMomentumAlerts:

    @pytest.mark.unit
    @pytest.mark.parametrize("rsi,kind,severity", [
        (25.0, SignalKind.RSI_OVERSOLD, Severity.BULLISH),
        (30.0, SignalKind.RSI_OVERSOLD, Severity.BULLISH),
        (35.0, SignalKind.RSI_APPROACHING_OVERSOLD, Severity.BULLISH),
        (65.0, SignalKind.RSI_APPROACHING_OVERBOUGHT, Severity.BEARISH),
        (70.0, SignalKind.RSI_OVERBOUGHT, Severity.BEARISH),
        (75.0, SignalKind.RSI_OVERBOUGHT, Severity.BEARISH),
    ])
    def test_rsi_zones(self, make_ctx, rsi, kind, severity):
        result = detect("rsi_zone", make_ctx(rsi=rsi))
        assert result.signal.kind == kind
        assert result.signal.severity == severity

    @pytest.mark.unit
    def test_rsi_neutral_and_missing(self, make_ctx):
        assert not detect("rsi_zone", make_ctx(rsi=50.0)).triggered
        assert not detect("rsi_zone", make_ctx(rsi=37.0)).triggered
        assert not detect("rsi_zone", make_ctx(rsi=62.0)).triggered
        assert not detect("rsi_zone", make_ctx(rsi=None)).triggered

    @pytest.mark.unit
    @pytest.mark.parametrize("macd_type,kind", [
        (MACD_BULLISH_CROSSOVER, SignalKind.MACD_BULLISH_CROSS),
        (MACD_STRONG_BULLISH, SignalKind.MACD_STRONG_BULLISH),
        (MACD_STRONG_BEARISH, SignalKind.MACD_STRONG_BEARISH),
    ])
    def test_macd(self, make_ctx, macd_type, kind):
        result = detect("macd", make_ctx(macd_type=macd_type))
        assert result.signal.kind == kind
        assert result.signal.category == "macd_signals"

    @pytest.mark.unit
    def test_plain_macd_states_do_not_alert(self, make_ctx):
        assert not detect("macd", make_ctx(macd_type=MACD_BULLISH)).triggered
        assert not detect("macd", make_ctx(macd_type=MACD_BEARISH)).triggered
        assert not detect("macd", make_ctx(macd_type=None)).triggered


class TestVolumeAlert:

    @pytest.mark.unit
    def test_threshold(self, make_ctx):
        assert detect("high_volume", make_ctx(relative_volume=1.5)).triggered
        assert not detect("high_volume", make_ctx(relative_volume=1.49)).triggered

    @pytest.mark.unit
    def test_severity_follows_direction(self, make_ctx):
        up = detect("high_volume", make_ctx(relative_volume=2.5, change_percent=1.0))
        down = detect("high_volume", make_ctx(relative_volume=2.5, change_percent=-1.0))
        assert up.signal.severity == Severity.BULLISH
        assert down.signal.severity == Severity.BEARISH
        assert "2.5x" in up.signal.description
