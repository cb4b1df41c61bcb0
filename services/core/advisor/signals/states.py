"""Map strengths and snapshots to discrete states."""

from __future__ import annotations

from .config import (
    BASE_STRENGTH,
    BUY_THRESHOLD,
    SELL_THRESHOLD,
    STRONG_CONFIDENCE_DISTANCE,
    STRONG_SIGNAL_HIGH,
    STRONG_SIGNAL_LOW,
)
from .rules import CONDITION_RULES, RSI_EXTREME_RULE, evaluate_rule
from .types import (
    ConfidenceLevel,
    Direction,
    IndicatorSnapshot,
    MarketCondition,
    RiskLevel,
    SignalAction,
)

_CONDITION_BY_RULE = {
    "condition_strong_uptrend": MarketCondition.STRONG_UPTREND,
    "condition_strong_downtrend": MarketCondition.STRONG_DOWNTREND,
    "condition_mild_uptrend": MarketCondition.MILD_UPTREND,
    "condition_mild_downtrend": MarketCondition.MILD_DOWNTREND,
}


def map_to_action(strength: float) -> SignalAction:
    """Action depends on strength alone: >60 BUY, <40 SELL, else HOLD."""
    if strength > BUY_THRESHOLD:
        return SignalAction.BUY
    if strength < SELL_THRESHOLD:
        return SignalAction.SELL
    return SignalAction.HOLD


def map_to_direction(action: SignalAction) -> Direction:
    if action == SignalAction.BUY:
        return Direction.BULLISH
    if action == SignalAction.SELL:
        return Direction.BEARISH
    return Direction.NEUTRAL


def map_to_confidence(strength: float) -> ConfidenceLevel:
    """
    Confidence measures distance from neutral, not direction.

    Strong beyond 70/30, moderate anywhere else off-neutral, weak at exactly 50.
    """
    distance = abs(strength - BASE_STRENGTH)
    if distance > STRONG_CONFIDENCE_DISTANCE:
        return ConfidenceLevel.STRONG
    if distance > 0:
        return ConfidenceLevel.MODERATE
    return ConfidenceLevel.WEAK


def is_strong_signal(score: float) -> bool:
    return score > STRONG_SIGNAL_HIGH or score < STRONG_SIGNAL_LOW


def map_to_risk_level(score: float, snapshot: IndicatorSnapshot) -> RiskLevel:
    """
    Risk from indicator extremity first, then signal strength.

    An RSI beyond 80/20 is HIGH regardless of score; a strong score in
    either direction is MEDIUM; anything else is LOW.
    """
    if evaluate_rule(RSI_EXTREME_RULE, snapshot).matched:
        return RiskLevel.HIGH
    if is_strong_signal(score):
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def classify_market_condition(snapshot: IndicatorSnapshot) -> tuple[MarketCondition, list[str]]:
    """
    Classify trend from RSI and MACD; first matching rule wins.

    Returns:
        Tuple of (MarketCondition, rationale_tags)
    """
    for rule in CONDITION_RULES:
        if evaluate_rule(rule, snapshot).matched:
            condition = _CONDITION_BY_RULE[rule.rule_id]
            return condition, [f"market_{condition.value}"]

    return MarketCondition.RANGING, [f"market_{MarketCondition.RANGING.value}"]
