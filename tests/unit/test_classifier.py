"""
Unit tests for the signal classifier.

Tests RSI zones, MACD signal typing and golden/death cross detection.
"""

from datetime import date, timedelta

import pytest

from stockscreen.services.scanner.classifier import (
    DEATH_CROSS,
    GOLDEN_CROSS,
    MACD_BEARISH,
    MACD_BEARISH_CROSSOVER,
    MACD_BULLISH,
    MACD_BULLISH_CROSSOVER,
    MACD_STRONG_BEARISH,
    MACD_STRONG_BULLISH,
    RSI_APPROACHING_OVERBOUGHT,
    RSI_APPROACHING_OVERSOLD,
    RSI_NEUTRAL,
    RSI_OVERBOUGHT,
    RSI_OVERSOLD,
    classify_cross,
    detect_ma_crossover,
    find_crossovers,
    macd_signal_type,
    rsi_zone,
)


@pytest.fixture
def v_shape_closes():
    """Long decline then a sharp recovery: exactly one golden cross."""
    decline = [200.0 - i * 0.5 for i in range(200)]
    recovery = [decline[-1] + (i + 1) * 2.0 for i in range(300)]
    return decline + recovery


@pytest.fixture
def dates_for():
    def _dates(n):
        start = date(2020, 1, 1)
        return [start + timedelta(days=i) for i in range(n)]
    return _dates


# ─────────────────────────────────────────────────────────────────────────────
# RSI Zones
# ─────────────────────────────────────────────────────────────────────────────

class TestRSIZone:

    @pytest.mark.unit
    @pytest.mark.parametrize("rsi,zone", [
        (0, RSI_OVERSOLD),
        (29.9, RSI_OVERSOLD),
        (30, RSI_APPROACHING_OVERSOLD),
        (39.9, RSI_APPROACHING_OVERSOLD),
        (40, RSI_NEUTRAL),
        (59.9, RSI_NEUTRAL),
        (60, RSI_APPROACHING_OVERBOUGHT),
        (69.9, RSI_APPROACHING_OVERBOUGHT),
        (70, RSI_OVERBOUGHT),
        (100, RSI_OVERBOUGHT),
    ])
    def test_boundaries(self, rsi, zone):
        assert rsi_zone(rsi) == zone

    @pytest.mark.unit
    def test_none(self):
        assert rsi_zone(None) is None


# ─────────────────────────────────────────────────────────────────────────────
# MACD Signal Type
# ─────────────────────────────────────────────────────────────────────────────

class TestMACDSignalType:

    @pytest.mark.unit
    def test_strong_bullish(self):
        assert macd_signal_type(1.0, 0.5, 0.5) == MACD_STRONG_BULLISH

    @pytest.mark.unit
    def test_strong_bearish(self):
        assert macd_signal_type(-1.0, -0.5, -0.5) == MACD_STRONG_BEARISH

    @pytest.mark.unit
    def test_strong_takes_precedence_over_crossover(self):
        assert macd_signal_type(1.0, 0.5, 0.5, prev_macd=0.4, prev_signal=0.45) == MACD_STRONG_BULLISH

    @pytest.mark.unit
    def test_bullish_crossover_from_previous_pair(self):
        result = macd_signal_type(-0.2, -0.3, 0.1, prev_macd=-0.4, prev_signal=-0.35)
        assert result == MACD_BULLISH_CROSSOVER

    @pytest.mark.unit
    def test_bearish_crossover_from_previous_pair(self):
        result = macd_signal_type(0.2, 0.3, -0.1, prev_macd=0.4, prev_signal=0.35)
        assert result == MACD_BEARISH_CROSSOVER

    @pytest.mark.unit
    def test_plain_bullish_without_history(self):
        assert macd_signal_type(-0.2, -0.3, 0.1) == MACD_BULLISH

    @pytest.mark.unit
    def test_plain_bullish_when_already_above(self):
        result = macd_signal_type(-0.2, -0.3, 0.1, prev_macd=-0.25, prev_signal=-0.35)
        assert result == MACD_BULLISH

    @pytest.mark.unit
    def test_plain_bearish(self):
        assert macd_signal_type(0.2, 0.3, -0.1) == MACD_BEARISH

    @pytest.mark.unit
    def test_missing_input(self):
        assert macd_signal_type(None, 0.3, -0.1) is None
        assert macd_signal_type(0.2, None, -0.1) is None
        assert macd_signal_type(0.2, 0.3, None) is None


# ─────────────────────────────────────────────────────────────────────────────
# Golden / Death Cross
# ─────────────────────────────────────────────────────────────────────────────

class TestClassifyCross:

    @pytest.mark.unit
    def test_golden(self):
        assert classify_cross(99.0, 100.0, 101.0, 100.0) == GOLDEN_CROSS

    @pytest.mark.unit
    def test_golden_from_equal(self):
        assert classify_cross(100.0, 100.0, 100.5, 100.0) == GOLDEN_CROSS

    @pytest.mark.unit
    def test_death(self):
        assert classify_cross(101.0, 100.0, 99.0, 100.0) == DEATH_CROSS

    @pytest.mark.unit
    def test_no_transition(self):
        assert classify_cross(101.0, 100.0, 102.0, 100.0) is None
        assert classify_cross(100.0, 100.0, 100.0, 100.0) is None


class TestDetectMACrossover:

    @pytest.mark.unit
    def test_requires_slow_plus_one(self):
        assert detect_ma_crossover([100.0] * 200) is None

    @pytest.mark.unit
    def test_flat_series_has_no_cross(self):
        assert detect_ma_crossover([100.0] * 260) is None

    @pytest.mark.unit
    def test_edge_triggered(self, v_shape_closes, dates_for):
        dates = dates_for(len(v_shape_closes))
        events = find_crossovers(v_shape_closes, dates)
        assert [e.type for e in events] == [GOLDEN_CROSS]

        t = dates.index(events[0].date)
        assert detect_ma_crossover(v_shape_closes[:t + 1]) == GOLDEN_CROSS
        assert detect_ma_crossover(v_shape_closes[:t]) is None
        assert detect_ma_crossover(v_shape_closes[:t + 2]) is None

    @pytest.mark.unit
    def test_death_cross(self, v_shape_closes, dates_for):
        inverted = [1000.0 - c for c in v_shape_closes]
        dates = dates_for(len(inverted))
        events = find_crossovers(inverted, dates)
        assert [e.type for e in events] == [DEATH_CROSS]

        t = dates.index(events[0].date)
        assert detect_ma_crossover(inverted[:t + 1]) == DEATH_CROSS
        assert detect_ma_crossover(inverted[:t + 2]) is None


class TestFindCrossovers:

    @pytest.mark.unit
    def test_event_fields(self, v_shape_closes, dates_for):
        dates = dates_for(len(v_shape_closes))
        event = find_crossovers(v_shape_closes, dates)[0]
        t = dates.index(event.date)
        assert event.close == v_shape_closes[t]
        assert event.sma50 > event.sma200

    @pytest.mark.unit
    def test_since_filters_older_events(self, v_shape_closes, dates_for):
        dates = dates_for(len(v_shape_closes))
        assert find_crossovers(v_shape_closes, dates, since=dates[-1]) == []

    @pytest.mark.unit
    def test_short_series(self, dates_for):
        assert find_crossovers([100.0] * 50, dates_for(50)) == []
