"""Strategy scorers: momentum, mean reversion and breakout."""

from __future__ import annotations

from typing import Callable

from .config import BASE_STRENGTH, MAX_STRENGTH, MIN_STRENGTH
from .rules import BREAKOUT_RULES, MEAN_REVERSION_RULES, MOMENTUM_RULES, Rule, evaluate_rules
from .states import map_to_action, map_to_confidence, map_to_direction, map_to_risk_level
from .types import (
    ConfidenceLevel,
    IndicatorSnapshot,
    RiskLevel,
    SignalAction,
    StrategyKind,
    StrategySignal,
)


STRATEGY_RULES: dict[StrategyKind, tuple[Rule, ...]] = {
    StrategyKind.MOMENTUM: MOMENTUM_RULES,
    StrategyKind.MEAN_REVERSION: MEAN_REVERSION_RULES,
    StrategyKind.BREAKOUT: BREAKOUT_RULES,
}

STRATEGY_LABELS = {
    StrategyKind.MOMENTUM: "Momentum",
    StrategyKind.MEAN_REVERSION: "Mean reversion",
    StrategyKind.BREAKOUT: "Breakout",
}

RECOMMENDATION_TEMPLATES = {
    (StrategyKind.MOMENTUM, SignalAction.BUY):
        "{label}: multiple bullish momentum readings, consider buying ({strength:.0f}, {confidence} confidence)",
    (StrategyKind.MOMENTUM, SignalAction.SELL):
        "{label}: momentum is fading, consider reducing exposure ({strength:.0f}, {confidence} confidence)",
    (StrategyKind.MOMENTUM, SignalAction.HOLD):
        "{label}: momentum readings are inconsistent, hold and wait ({strength:.0f}, {confidence} confidence)",
    (StrategyKind.MEAN_REVERSION, SignalAction.BUY):
        "{label}: price is stretched to the downside, watch for an oversold rebound ({strength:.0f}, {confidence} confidence)",
    (StrategyKind.MEAN_REVERSION, SignalAction.SELL):
        "{label}: price is stretched to the upside, watch for an overbought pullback ({strength:.0f}, {confidence} confidence)",
    (StrategyKind.MEAN_REVERSION, SignalAction.HOLD):
        "{label}: no extreme deviation, wait for a stretched price ({strength:.0f}, {confidence} confidence)",
    (StrategyKind.BREAKOUT, SignalAction.BUY):
        "{label}: upward breakout on liquid volume, consider following it ({strength:.0f}, {confidence} confidence)",
    (StrategyKind.BREAKOUT, SignalAction.SELL):
        "{label}: downward breakout on liquid volume, consider stepping aside ({strength:.0f}, {confidence} confidence)",
    (StrategyKind.BREAKOUT, SignalAction.HOLD):
        "{label}: no confirmed breakout, wait for confirmation ({strength:.0f}, {confidence} confidence)",
}


def clamp_strength(raw: float) -> float:
    return max(MIN_STRENGTH, min(MAX_STRENGTH, raw))


def format_recommendation(
    kind: StrategyKind,
    action: SignalAction,
    strength: float,
    confidence: ConfidenceLevel,
) -> str:
    template = RECOMMENDATION_TEMPLATES[(kind, action)]
    return template.format(
        label=STRATEGY_LABELS[kind],
        strength=strength,
        confidence=confidence.value,
    )


def score_rules(
    kind: StrategyKind,
    rules: tuple[Rule, ...],
    snapshot: IndicatorSnapshot,
) -> StrategySignal:
    """
    Score a snapshot with an arbitrary rule table.

    Strength starts at 50, adds every matched rule weight in table order,
    then clamps to [0, 100]. Action, confidence and risk are derived from
    the clamped strength; risk also escalates on an extreme RSI.

    Args:
        kind: Strategy the signal is attributed to
        rules: Ordered rule table
        snapshot: Indicator snapshot (optional fields may be absent)

    Returns:
        StrategySignal (never None, even for an empty snapshot)
    """
    contributions = evaluate_rules(rules, snapshot)
    raw = BASE_STRENGTH + sum(c.weight for c in contributions)
    strength = clamp_strength(raw)

    action = map_to_action(strength)
    confidence = map_to_confidence(strength)
    risk_level = map_to_risk_level(strength, snapshot)

    rationale = [c.rule_id for c in contributions if c.matched]
    if raw != strength:
        rationale.append(f"{kind.value}_strength_clamped")
    rationale.append(f"{kind.value}_{action.value.lower()}")
    if risk_level == RiskLevel.HIGH:
        rationale.append(f"{kind.value}_extreme_indicator")

    return StrategySignal(
        kind=kind,
        strength=strength,
        action=action,
        direction=map_to_direction(action),
        confidence=confidence,
        risk_level=risk_level,
        recommendation=format_recommendation(kind, action, strength, confidence),
        contributions=contributions,
        rationale=tuple(rationale),
    )


def score_momentum(snapshot: IndicatorSnapshot) -> StrategySignal:
    return score_rules(StrategyKind.MOMENTUM, MOMENTUM_RULES, snapshot)


def score_mean_reversion(snapshot: IndicatorSnapshot) -> StrategySignal:
    return score_rules(StrategyKind.MEAN_REVERSION, MEAN_REVERSION_RULES, snapshot)


def score_breakout(snapshot: IndicatorSnapshot) -> StrategySignal:
    return score_rules(StrategyKind.BREAKOUT, BREAKOUT_RULES, snapshot)


SCORERS: dict[StrategyKind, Callable[[IndicatorSnapshot], StrategySignal]] = {
    StrategyKind.MOMENTUM: score_momentum,
    StrategyKind.MEAN_REVERSION: score_mean_reversion,
    StrategyKind.BREAKOUT: score_breakout,
}


def score_all(snapshot: IndicatorSnapshot) -> tuple[StrategySignal, ...]:
    """Run every scorer; order is fixed (momentum, mean reversion, breakout)."""
    return tuple(scorer(snapshot) for scorer in SCORERS.values())
