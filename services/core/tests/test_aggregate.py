"""Unit tests for aggregation and ranking."""

import pytest

from advisor.signals.aggregate import (
    compute_aggregate,
    compute_overall_score,
    most_decisive_signal,
    rank_signals,
    round_half_up,
)
from advisor.signals.states import map_to_action, map_to_confidence, map_to_direction
from advisor.signals.types import (
    IndicatorSnapshot,
    MacdValues,
    MarketCondition,
    RiskLevel,
    StrategyKind,
    StrategySignal,
)


def make_signal(strength, kind=StrategyKind.MOMENTUM, risk=RiskLevel.LOW):
    action = map_to_action(strength)
    return StrategySignal(
        kind=kind,
        strength=float(strength),
        action=action,
        direction=map_to_direction(action),
        confidence=map_to_confidence(strength),
        risk_level=risk,
        recommendation="",
    )


def trio(a, b, c):
    return (
        make_signal(a, StrategyKind.MOMENTUM),
        make_signal(b, StrategyKind.MEAN_REVERSION),
        make_signal(c, StrategyKind.BREAKOUT),
    )


class TestOverallScore:
    """Tests for compute_overall_score."""

    def test_mean_of_three(self):
        """{80, 60, 40} should average to 60."""
        assert compute_overall_score(trio(80, 60, 40)) == 60

    def test_rounds_half_up(self):
        """A mean of x.5 should round up, not to even."""
        assert compute_overall_score(trio(50, 50, 51.5)) == 51  # 50.5
        assert round_half_up(52.5) == 53
        assert round_half_up(68.33) == 68

    def test_empty_is_neutral(self):
        """No signals should give a neutral 50."""
        assert compute_overall_score([]) == 50


class TestComputeAggregate:
    """Tests for compute_aggregate."""

    def test_neutral(self):
        """All-neutral signals on an empty snapshot should be ranging and low risk."""
        result = compute_aggregate(trio(50, 50, 50), IndicatorSnapshot(close=1))

        assert result.overall_score == 50
        assert result.market_condition == MarketCondition.RANGING
        assert result.risk_level == RiskLevel.LOW
        assert "aggregate_neutral" in result.rationale

    def test_strong_overall_medium(self):
        """Overall score above 70 should be medium risk."""
        result = compute_aggregate(trio(80, 75, 72), IndicatorSnapshot(close=1, rsi14=50))

        assert result.overall_score == 76
        assert result.risk_level == RiskLevel.MEDIUM
        assert "aggregate_strong_signal" in result.rationale
        assert "aggregate_bullish_bias" in result.rationale

    def test_strong_strategy_medium(self):
        """A strong strategy should raise a low overall risk to medium."""
        result = compute_aggregate(trio(85, 10, 70), IndicatorSnapshot(close=1, rsi14=75))

        assert result.overall_score == 55
        assert result.risk_level == RiskLevel.MEDIUM
        assert "aggregate_strong_strategy" in result.rationale

    @pytest.mark.parametrize("strengths", [(75, 50, 70), (25, 50, 30)])
    def test_strong_strategy_either_side(self, strengths):
        """A strong bearish strategy should escalate just like a bullish one."""
        result = compute_aggregate(trio(*strengths), IndicatorSnapshot(close=1, rsi14=50))

        assert result.overall_score in (65, 35)
        assert result.risk_level == RiskLevel.MEDIUM
        assert "aggregate_strong_strategy" in result.rationale

    def test_moderate_strategies_stay_low(self):
        """Strengths of exactly 70 and 30 are not strong."""
        result = compute_aggregate(trio(70, 30, 50), IndicatorSnapshot(close=1, rsi14=50))

        assert result.risk_level == RiskLevel.LOW
        assert "aggregate_strong_strategy" not in result.rationale

    def test_extreme_rsi_high(self):
        """Extreme RSI should make the aggregate high risk."""
        result = compute_aggregate(trio(50, 50, 50), IndicatorSnapshot(close=1, rsi14=15))

        assert result.risk_level == RiskLevel.HIGH
        assert "aggregate_extreme_rsi" in result.rationale

    def test_condition_from_snapshot_only(self):
        """Market condition should ignore strategy strengths."""
        snapshot = IndicatorSnapshot(close=1, rsi14=75, macd=MacdValues(1.2, 0.8))
        result = compute_aggregate(trio(10, 10, 10), snapshot)

        assert result.market_condition == MarketCondition.STRONG_UPTREND
        assert "aggregate_bearish_bias" in result.rationale


class TestRankSignals:
    """Tests for rank_signals."""

    def test_descending(self):
        """Strongest signal should come first."""
        ranked = rank_signals(trio(40, 90, 60))
        assert [s.kind for s in ranked] == [
            StrategyKind.MEAN_REVERSION,
            StrategyKind.BREAKOUT,
            StrategyKind.MOMENTUM,
        ]

    def test_ties_keep_input_order(self):
        """Equal strengths should keep momentum, mean reversion, breakout order."""
        ranked = rank_signals(trio(50, 50, 50))
        assert [s.kind for s in ranked] == [
            StrategyKind.MOMENTUM,
            StrategyKind.MEAN_REVERSION,
            StrategyKind.BREAKOUT,
        ]

    def test_empty(self):
        """No signals should rank to an empty tuple."""
        assert rank_signals([]) == ()


class TestMostDecisiveSignal:
    """Tests for most_decisive_signal."""

    def test_bearish_can_be_most_decisive(self):
        """A signal at 10 is further from neutral than one at 85."""
        assert most_decisive_signal(trio(85, 10, 70)).kind == StrategyKind.MEAN_REVERSION

    def test_tie_keeps_first(self):
        """Equal distances should pick the first signal."""
        assert most_decisive_signal(trio(80, 20, 50)).kind == StrategyKind.MOMENTUM

    def test_empty(self):
        assert most_decisive_signal([]) is None
