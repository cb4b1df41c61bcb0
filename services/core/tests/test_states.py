"""Unit tests for state mapping."""

import pytest

from advisor.signals.states import (
    classify_market_condition,
    map_to_action,
    map_to_confidence,
    map_to_direction,
    map_to_risk_level,
)
from advisor.signals.types import (
    ConfidenceLevel,
    Direction,
    IndicatorSnapshot,
    MacdValues,
    MarketCondition,
    RiskLevel,
    SignalAction,
)

GOLDEN = MacdValues(dif=1.2, dea=0.8)
DEATH = MacdValues(dif=0.8, dea=1.2)
FLAT = MacdValues(dif=1.0, dea=1.0)


class TestMapToAction:
    """Tests for map_to_action function."""

    @pytest.mark.parametrize("strength,expected", [
        (61, SignalAction.BUY),
        (60, SignalAction.HOLD),
        (50, SignalAction.HOLD),
        (40, SignalAction.HOLD),
        (39, SignalAction.SELL),
        (70, SignalAction.BUY),
        (30, SignalAction.SELL),
        (100, SignalAction.BUY),
        (0, SignalAction.SELL),
    ])
    def test_thresholds(self, strength, expected):
        """Action should depend on strength alone with strict thresholds."""
        assert map_to_action(strength) == expected

    def test_direction_follows_action(self):
        """Direction should mirror the action."""
        assert map_to_direction(SignalAction.BUY) == Direction.BULLISH
        assert map_to_direction(SignalAction.SELL) == Direction.BEARISH
        assert map_to_direction(SignalAction.HOLD) == Direction.NEUTRAL


class TestMapToConfidence:
    """Tests for map_to_confidence function."""

    @pytest.mark.parametrize("strength,expected", [
        (71, ConfidenceLevel.STRONG),
        (70, ConfidenceLevel.MODERATE),
        (60, ConfidenceLevel.MODERATE),
        (50.5, ConfidenceLevel.MODERATE),
        (50, ConfidenceLevel.WEAK),
        (40, ConfidenceLevel.MODERATE),
        (30, ConfidenceLevel.MODERATE),
        (29, ConfidenceLevel.STRONG),
        (0, ConfidenceLevel.STRONG),
    ])
    def test_distance_from_neutral(self, strength, expected):
        """Confidence should measure distance from 50, not direction."""
        assert map_to_confidence(strength) == expected

    def test_independent_of_action(self):
        """Strength 65 is a moderate BUY; 35 is a moderate SELL."""
        assert map_to_action(65) == SignalAction.BUY
        assert map_to_action(35) == SignalAction.SELL
        assert map_to_confidence(65) == map_to_confidence(35) == ConfidenceLevel.MODERATE


class TestMapToRiskLevel:
    """Tests for map_to_risk_level function."""

    def test_default_low(self):
        """Neutral score with no RSI should be low risk."""
        assert map_to_risk_level(50, IndicatorSnapshot(close=10)) == RiskLevel.LOW

    @pytest.mark.parametrize("score", [71, 29])
    def test_strong_band_medium(self, score):
        """A score in the strong band should be medium risk."""
        assert map_to_risk_level(score, IndicatorSnapshot(close=10, rsi14=50)) == RiskLevel.MEDIUM

    @pytest.mark.parametrize("score", [70, 30])
    def test_band_edges_low(self, score):
        """Band edges themselves are not strong."""
        assert map_to_risk_level(score, IndicatorSnapshot(close=10, rsi14=50)) == RiskLevel.LOW

    @pytest.mark.parametrize("rsi", [80.1, 19.9, 95, 5])
    def test_extreme_rsi_high(self, rsi):
        """Extreme RSI should be high risk regardless of score."""
        assert map_to_risk_level(50, IndicatorSnapshot(close=10, rsi14=rsi)) == RiskLevel.HIGH

    @pytest.mark.parametrize("rsi", [80, 20])
    def test_rsi_extreme_edges(self, rsi):
        """RSI exactly 80 or 20 is not extreme."""
        assert map_to_risk_level(50, IndicatorSnapshot(close=10, rsi14=rsi)) == RiskLevel.LOW


class TestClassifyMarketCondition:
    """Tests for classify_market_condition function."""

    def test_strong_uptrend_wins_over_mild(self):
        """A snapshot matching strong and mild uptrend should be strong (first match)."""
        condition, rationale = classify_market_condition(
            IndicatorSnapshot(close=10, rsi14=75, macd=GOLDEN)
        )
        assert condition == MarketCondition.STRONG_UPTREND
        assert rationale == ["market_strong_uptrend"]

    def test_strong_downtrend(self):
        """RSI below 30 with DIF below DEA should be a strong downtrend."""
        condition, _ = classify_market_condition(IndicatorSnapshot(close=10, rsi14=25, macd=DEATH))
        assert condition == MarketCondition.STRONG_DOWNTREND

    def test_mild_uptrend(self):
        """RSI above 50 with golden cross should be a mild uptrend."""
        condition, _ = classify_market_condition(IndicatorSnapshot(close=10, rsi14=55, macd=GOLDEN))
        assert condition == MarketCondition.MILD_UPTREND

    def test_mild_downtrend(self):
        """RSI below 50 with DIF below DEA should be a mild downtrend."""
        condition, _ = classify_market_condition(IndicatorSnapshot(close=10, rsi14=45, macd=DEATH))
        assert condition == MarketCondition.MILD_DOWNTREND

    def test_equal_lines_ranging(self):
        """DIF equal to DEA should not count as a downtrend."""
        condition, _ = classify_market_condition(IndicatorSnapshot(close=10, rsi14=25, macd=FLAT))
        assert condition == MarketCondition.RANGING

    def test_rsi_midline_ranging(self):
        """RSI exactly 50 should be ranging."""
        condition, _ = classify_market_condition(IndicatorSnapshot(close=10, rsi14=50, macd=GOLDEN))
        assert condition == MarketCondition.RANGING

    def test_missing_macd_ranging(self):
        """Without MACD every trend rule fails closed."""
        condition, rationale = classify_market_condition(IndicatorSnapshot(close=10, rsi14=90))
        assert condition == MarketCondition.RANGING
        assert rationale == ["market_ranging"]

    def test_overbought_against_cross_ranging(self):
        """RSI above 70 with a death cross matches no rule."""
        condition, _ = classify_market_condition(IndicatorSnapshot(close=10, rsi14=75, macd=DEATH))
        assert condition == MarketCondition.RANGING
