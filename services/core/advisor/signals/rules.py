"""Declarative rule tables and the shared rule evaluator.

Every scorer is "base strength plus the sum of its rule contributions", so
each strength can be traced back to the rules that fired.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .config import (
    BREAKOUT_WEIGHTS,
    LIQUIDITY_VOLUME_FLOOR,
    MA20_DEVIATION_THRESHOLD,
    MEAN_REVERSION_WEIGHTS,
    MOMENTUM_WEIGHTS,
    RSI_EXTREME_HIGH,
    RSI_EXTREME_LOW,
    RSI_FIRM,
    RSI_MIDLINE,
    RSI_OVERBOUGHT,
    RSI_OVERSOLD,
    RSI_SOFT,
)
from .types import IndicatorSnapshot, RuleResult


@dataclass(frozen=True)
class Rule:
    """A named predicate over snapshot fields with a fixed weight."""
    rule_id: str
    weight: float
    requires: tuple[str, ...]
    predicate: Callable[[IndicatorSnapshot], bool]
    description: str = ""

    def is_applicable(self, snapshot: IndicatorSnapshot) -> bool:
        return all(getattr(snapshot, name) is not None for name in self.requires)


def evaluate_rule(rule: Rule | str, snapshot: IndicatorSnapshot) -> RuleResult:
    """
    Evaluate one rule against a snapshot.

    Rules whose required fields are absent never match and contribute zero.

    Args:
        rule: Rule object or a rule id registered in RULES
        snapshot: Indicator snapshot

    Returns:
        RuleResult with matched flag and contribution weight
    """
    if isinstance(rule, str):
        rule = RULES[rule]

    matched = rule.is_applicable(snapshot) and bool(rule.predicate(snapshot))
    return RuleResult(
        rule_id=rule.rule_id,
        matched=matched,
        weight=rule.weight if matched else 0.0,
    )


def evaluate_rules(rules: tuple[Rule, ...], snapshot: IndicatorSnapshot) -> tuple[RuleResult, ...]:
    return tuple(evaluate_rule(rule, snapshot) for rule in rules)


def _golden_cross(s: IndicatorSnapshot) -> bool:
    return s.macd.dif > s.macd.dea


def _death_cross(s: IndicatorSnapshot) -> bool:
    # Covers dif == dea: anything that is not a golden cross
    return s.macd.dif <= s.macd.dea


def _strictly_below(s: IndicatorSnapshot) -> bool:
    return s.macd.dif < s.macd.dea


# ===== Momentum =====
MOMENTUM_RULES: tuple[Rule, ...] = (
    Rule(
        "momentum_rsi_strong", MOMENTUM_WEIGHTS["rsi_strong"], ("rsi14",),
        lambda s: s.rsi14 > RSI_OVERBOUGHT,
        "RSI above 70: strong upward momentum",
    ),
    Rule(
        "momentum_rsi_firm", MOMENTUM_WEIGHTS["rsi_firm"], ("rsi14",),
        lambda s: RSI_FIRM < s.rsi14 <= RSI_OVERBOUGHT,
        "RSI between 60 and 70: firm momentum",
    ),
    Rule(
        "momentum_rsi_oversold", MOMENTUM_WEIGHTS["rsi_oversold"], ("rsi14",),
        lambda s: s.rsi14 < RSI_OVERSOLD,
        "RSI below 30: momentum has collapsed",
    ),
    Rule(
        "momentum_rsi_soft", MOMENTUM_WEIGHTS["rsi_soft"], ("rsi14",),
        lambda s: RSI_OVERSOLD <= s.rsi14 < RSI_SOFT,
        "RSI between 30 and 40: soft momentum",
    ),
    Rule(
        "momentum_macd_golden_cross", MOMENTUM_WEIGHTS["macd_golden_cross"], ("macd",),
        _golden_cross,
        "MACD DIF above DEA (golden cross)",
    ),
    Rule(
        "momentum_macd_death_cross", MOMENTUM_WEIGHTS["macd_death_cross"], ("macd",),
        _death_cross,
        "MACD DIF at or below DEA (death cross)",
    ),
)

# ===== Mean reversion =====
MEAN_REVERSION_RULES: tuple[Rule, ...] = (
    Rule(
        "reversion_rsi_oversold", MEAN_REVERSION_WEIGHTS["rsi_oversold"], ("rsi14",),
        lambda s: s.rsi14 < RSI_OVERSOLD,
        "RSI below 30: oversold rebound opportunity",
    ),
    Rule(
        "reversion_rsi_overbought", MEAN_REVERSION_WEIGHTS["rsi_overbought"], ("rsi14",),
        lambda s: s.rsi14 > RSI_OVERBOUGHT,
        "RSI above 70: overbought pullback risk",
    ),
    Rule(
        "reversion_below_ma20", MEAN_REVERSION_WEIGHTS["below_ma20"], ("ma20_deviation",),
        lambda s: s.ma20_deviation < -MA20_DEVIATION_THRESHOLD,
        "Price more than 5% below MA20: reversion upward likely",
    ),
    Rule(
        "reversion_above_ma20", MEAN_REVERSION_WEIGHTS["above_ma20"], ("ma20_deviation",),
        lambda s: s.ma20_deviation > MA20_DEVIATION_THRESHOLD,
        "Price more than 5% above MA20: reversion downward likely",
    ),
)

# ===== Breakout =====
BREAKOUT_RULES: tuple[Rule, ...] = (
    Rule(
        "breakout_upward", BREAKOUT_WEIGHTS["upward"], ("rsi14", "volume"),
        lambda s: s.rsi14 > RSI_FIRM and s.volume > LIQUIDITY_VOLUME_FLOOR,
        "RSI above 60 on liquid volume: upward breakout",
    ),
    Rule(
        "breakout_downward", BREAKOUT_WEIGHTS["downward"], ("rsi14", "volume"),
        lambda s: s.rsi14 < RSI_SOFT and s.volume > LIQUIDITY_VOLUME_FLOOR,
        "RSI below 40 on liquid volume: downward breakout",
    ),
)

# ===== Classification (weightless) =====
CONDITION_RULES: tuple[Rule, ...] = (
    Rule(
        "condition_strong_uptrend", 0.0, ("rsi14", "macd"),
        lambda s: s.rsi14 > RSI_OVERBOUGHT and _golden_cross(s),
        "RSI above 70 with MACD golden cross",
    ),
    Rule(
        "condition_strong_downtrend", 0.0, ("rsi14", "macd"),
        lambda s: s.rsi14 < RSI_OVERSOLD and _strictly_below(s),
        "RSI below 30 with DIF below DEA",
    ),
    Rule(
        "condition_mild_uptrend", 0.0, ("rsi14", "macd"),
        lambda s: s.rsi14 > RSI_MIDLINE and _golden_cross(s),
        "RSI above 50 with MACD golden cross",
    ),
    Rule(
        "condition_mild_downtrend", 0.0, ("rsi14", "macd"),
        lambda s: s.rsi14 < RSI_MIDLINE and _strictly_below(s),
        "RSI below 50 with DIF below DEA",
    ),
)

RSI_EXTREME_RULE = Rule(
    "rsi_extreme", 0.0, ("rsi14",),
    lambda s: s.rsi14 > RSI_EXTREME_HIGH or s.rsi14 < RSI_EXTREME_LOW,
    "RSI beyond 80/20: statistical extreme",
)

RULES: dict[str, Rule] = {
    rule.rule_id: rule
    for rule in (
        *MOMENTUM_RULES,
        *MEAN_REVERSION_RULES,
        *BREAKOUT_RULES,
        *CONDITION_RULES,
        RSI_EXTREME_RULE,
    )
}
