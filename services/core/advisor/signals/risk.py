"""Risk statistics, warnings and position-sizing policy."""

from __future__ import annotations

from typing import Sequence

from .config import PRE_TRADE_CHECKLIST, RISK_POLICY_TABLE
from .types import (
    ConfidenceLevel,
    PositionPolicy,
    RiskAssessment,
    RiskLevel,
    RiskStatistics,
    RiskWarning,
    SignalAction,
    StrategySignal,
)


RISK_POLICIES: dict[RiskLevel, PositionPolicy] = {
    level: PositionPolicy(
        risk_level=level,
        position_size=RISK_POLICY_TABLE[level.value]["position_size"],
        stop_loss=RISK_POLICY_TABLE[level.value]["stop_loss"],
        diversification=RISK_POLICY_TABLE[level.value]["diversification"],
        monitoring=RISK_POLICY_TABLE[level.value]["monitoring"],
        advice=tuple(RISK_POLICY_TABLE[level.value]["advice"]),
    )
    for level in RiskLevel
}


def get_position_policy(risk_level: RiskLevel) -> PositionPolicy:
    return RISK_POLICIES[risk_level]


def compute_risk_statistics(signals: Sequence[StrategySignal]) -> RiskStatistics:
    """
    Summarize a full set of strategy signals.

    Conflict means at least one BUY and at least one SELL at the same time.
    """
    total = len(signals)
    actions = {s.action for s in signals}

    return RiskStatistics(
        total_strategies=total,
        high_risk_count=sum(1 for s in signals if s.risk_level == RiskLevel.HIGH),
        medium_risk_count=sum(1 for s in signals if s.risk_level == RiskLevel.MEDIUM),
        low_risk_count=sum(1 for s in signals if s.risk_level == RiskLevel.LOW),
        average_strength=sum(s.strength for s in signals) / total if total else 0.0,
        strong_signal_count=sum(1 for s in signals if s.confidence == ConfidenceLevel.STRONG),
        has_conflicting_signals=SignalAction.BUY in actions and SignalAction.SELL in actions,
    )


def build_risk_warnings(stats: RiskStatistics) -> list[RiskWarning]:
    """Evaluate the warning conditions in fixed order; each is independent."""
    warnings = []

    if stats.high_risk_count > 0:
        warnings.append(RiskWarning(
            code="high_risk_strategies",
            level=RiskLevel.HIGH,
            title="High-risk strategy warning",
            message=(
                f"{stats.high_risk_count} strategy signal(s) are high risk; "
                "keep position size under control"
            ),
        ))

    if stats.has_conflicting_signals:
        warnings.append(RiskWarning(
            code="conflicting_signals",
            level=RiskLevel.MEDIUM,
            title="Signal conflict warning",
            message="Strategies disagree on direction; wait for the market to pick one",
        ))

    if stats.average_strength < 50:
        warnings.append(RiskWarning(
            code="weak_signals",
            level=RiskLevel.MEDIUM,
            title="Weak signal warning",
            message="Average strategy strength is below 50%; act cautiously or wait for a stronger signal",
        ))

    if stats.strong_signal_count == 0 and stats.total_strategies > 0:
        warnings.append(RiskWarning(
            code="no_strong_signal",
            level=RiskLevel.LOW,
            title="No strong signal",
            message="No strategy has strong confidence; observation is recommended",
        ))

    return warnings


def assess_risk(signals: Sequence[StrategySignal], risk_level: RiskLevel) -> RiskAssessment:
    """
    Build the risk panel for one evaluation pass.

    Args:
        signals: Every strategy signal from the pass, not just the top one
        risk_level: Overall risk level from the aggregator

    Returns:
        RiskAssessment with statistics, warnings, policy and checklist
    """
    stats = compute_risk_statistics(signals)
    return RiskAssessment(
        statistics=stats,
        warnings=tuple(build_risk_warnings(stats)),
        policy=get_position_policy(risk_level),
        checklist=tuple(PRE_TRADE_CHECKLIST),
    )
