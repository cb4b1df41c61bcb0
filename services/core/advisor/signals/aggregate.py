"""Combine the three strategy signals into one assessment."""

from __future__ import annotations

import math
from typing import Iterable

from .states import classify_market_condition, is_strong_signal, map_to_risk_level
from .types import AggregateResult, IndicatorSnapshot, RiskLevel, StrategySignal


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive scores (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def compute_overall_score(signals: Iterable[StrategySignal]) -> int:
    strengths = [s.strength for s in signals]
    if not strengths:
        return 50
    return round_half_up(sum(strengths) / len(strengths))


def compute_aggregate(
    signals: Iterable[StrategySignal],
    snapshot: IndicatorSnapshot,
) -> AggregateResult:
    """
    Compute overall score, market condition and overall risk.

    Market condition comes from the snapshot only, not from the strategy
    strengths. Risk escalates to MEDIUM when either the overall score or the
    most decisive strategy (furthest from 50, either side) sits in a strong
    band, and to HIGH on an extreme RSI.

    Args:
        signals: Strategy signals from one evaluation pass
        snapshot: The snapshot those signals were scored from

    Returns:
        AggregateResult
    """
    signals = list(signals)
    overall_score = compute_overall_score(signals)
    market_condition, rationale = classify_market_condition(snapshot)
    risk_level = map_to_risk_level(overall_score, snapshot)

    decisive = most_decisive_signal(signals)

    if risk_level == RiskLevel.HIGH:
        rationale.append("aggregate_extreme_rsi")
    elif is_strong_signal(overall_score):
        rationale.append("aggregate_strong_signal")
    elif decisive is not None and is_strong_signal(decisive.strength):
        risk_level = RiskLevel.MEDIUM
        rationale.append("aggregate_strong_strategy")

    if overall_score > 50:
        rationale.append("aggregate_bullish_bias")
    elif overall_score < 50:
        rationale.append("aggregate_bearish_bias")
    else:
        rationale.append("aggregate_neutral")

    return AggregateResult(
        overall_score=overall_score,
        market_condition=market_condition,
        risk_level=risk_level,
        rationale=tuple(rationale),
    )


def most_decisive_signal(signals: Iterable[StrategySignal]) -> StrategySignal | None:
    """Signal furthest from neutral; first one wins on a tie."""
    return max(signals, key=lambda s: abs(s.strength - 50), default=None)


def rank_signals(signals: Iterable[StrategySignal]) -> tuple[StrategySignal, ...]:
    """Order by strength, strongest first; ties keep their input order."""
    return tuple(sorted(signals, key=lambda s: s.strength, reverse=True))
