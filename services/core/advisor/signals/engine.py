"""Main engine orchestrating scorers, aggregation, risk and advice."""

from __future__ import annotations

import logging
from typing import Any

from .advice import generate_advice
from .aggregate import compute_aggregate, rank_signals
from .explainability import build_debug_trace
from .rationale import build_explanation_object, format_explanation
from .risk import assess_risk
from .snapshot import normalize_snapshot
from .strategies import score_all
from .types import (
    AdviceReport,
    AggregateResult,
    IndicatorSnapshot,
    PositionPolicy,
    RiskAssessment,
    StrategyReport,
    StrategySignal,
)

logger = logging.getLogger(__name__)


def analyze(snapshot: IndicatorSnapshot, symbol: str | None = None) -> StrategyReport:
    """
    Produce a complete strategy report for one snapshot.

    Orchestrates: scorers → aggregate → ranking → risk panel → advice.
    Pure: the same snapshot always yields an identical report.

    Args:
        snapshot: Validated indicator snapshot
        symbol: Optional instrument label carried into the report

    Returns:
        StrategyReport
    """
    # Step 1: Score every strategy independently
    signals = score_all(snapshot)

    # Step 2: Join point - aggregate needs all three signals
    aggregate = compute_aggregate(signals, snapshot)

    # Step 3: Rank, strongest first
    ranked = rank_signals(signals)
    top_signal = ranked[0] if ranked else None

    # Step 4: Risk panel from the full signal set
    risk = assess_risk(signals, aggregate.risk_level)

    # Step 5: Advice from the aggregate and the top strategy
    advice = generate_advice(aggregate, top_signal, signals)

    logger.debug(
        f"Analyzed {symbol or 'snapshot'}: score={aggregate.overall_score} "
        f"condition={aggregate.market_condition.value} risk={aggregate.risk_level.value} "
        f"primary={advice.primary_action}"
    )

    return StrategyReport(
        snapshot=snapshot,
        signals=signals,
        aggregate=aggregate,
        risk=risk,
        advice=advice,
        symbol=symbol,
        ranked=ranked,
    )


def analyze_payload(payload: Any, symbol: str | None = None) -> StrategyReport:
    """
    Validate a raw payload and analyze it.

    Raises:
        InvalidSnapshotError: payload rejected by the adapter
    """
    return analyze(normalize_snapshot(payload), symbol=symbol)


def collect_rationale(report: StrategyReport) -> list[str]:
    """All rationale tags of a report, signals first, aggregate last."""
    tags: list[str] = []
    for signal in report.signals:
        tags.extend(signal.rationale)
    tags.extend(report.aggregate.rationale)
    return tags


def serialize_report(report: StrategyReport) -> dict[str, Any]:
    """Serialize StrategyReport to dict for JSON response."""
    top = report.top_signal
    return {
        "symbol": report.symbol,
        "snapshot": serialize_snapshot(report.snapshot),
        "strategies": [serialize_signal(s) for s in report.signals],
        "ranking": [s.kind.value for s in report.ranked],
        "top_strategy": top.kind.value if top else None,
        "aggregate": serialize_aggregate(report.aggregate),
        "risk": serialize_risk(report.risk),
        "advice": serialize_advice(report.advice),
    }


def serialize_snapshot(snapshot: IndicatorSnapshot) -> dict[str, Any]:
    macd = None
    if snapshot.macd is not None:
        macd = {
            "dif": snapshot.macd.dif,
            "dea": snapshot.macd.dea,
            "histogram": snapshot.macd.histogram,
        }
    return {
        "close": snapshot.close,
        "rsi14": snapshot.rsi14,
        "macd": macd,
        "ma20": snapshot.ma20,
        "ema5": snapshot.ema5,
        "volume": snapshot.volume,
    }


def serialize_signal(signal: StrategySignal) -> dict[str, Any]:
    """Serialize StrategySignal to dict for JSON response."""
    return {
        "kind": signal.kind.value,
        "strength": round(signal.strength, 2),
        "action": signal.action.value,
        "direction": signal.direction.value,
        "confidence": signal.confidence.value,
        "risk_level": signal.risk_level.value,
        "recommendation": signal.recommendation,
        "rules_fired": [c.rule_id for c in signal.contributions if c.matched],
        "rationale": list(signal.rationale),
    }


def serialize_aggregate(aggregate: AggregateResult) -> dict[str, Any]:
    return {
        "overall_score": aggregate.overall_score,
        "market_condition": aggregate.market_condition.value,
        "risk_level": aggregate.risk_level.value,
        "rationale": list(aggregate.rationale),
    }


def serialize_risk(risk: RiskAssessment) -> dict[str, Any]:
    stats = risk.statistics
    return {
        "statistics": {
            "total_strategies": stats.total_strategies,
            "high_risk_count": stats.high_risk_count,
            "medium_risk_count": stats.medium_risk_count,
            "low_risk_count": stats.low_risk_count,
            "average_strength": round(stats.average_strength, 2),
            "strong_signal_count": stats.strong_signal_count,
            "has_conflicting_signals": stats.has_conflicting_signals,
        },
        "warnings": [
            {"code": w.code, "level": w.level.value, "title": w.title, "message": w.message}
            for w in risk.warnings
        ],
        "policy": serialize_policy(risk.policy),
        "checklist": list(risk.checklist),
    }


def serialize_policy(policy: PositionPolicy) -> dict[str, Any]:
    return {
        "risk_level": policy.risk_level.value,
        "position_size": policy.position_size,
        "stop_loss": policy.stop_loss,
        "diversification": policy.diversification,
        "monitoring": policy.monitoring,
        "advice": list(policy.advice),
    }


def serialize_advice(advice: AdviceReport) -> dict[str, Any]:
    """Serialize AdviceReport to dict for JSON response."""
    return {
        "primary_action": advice.primary_action,
        "secondary_actions": list(advice.secondary_actions),
        "warnings": list(advice.warnings),
        "timeframe": advice.timeframe,
        "sentiment": advice.sentiment.value,
        "volatility": advice.volatility,
        "steps": [
            {
                "step": s.step,
                "title": s.title,
                "description": s.description,
                "timing": s.timing,
                "priority": s.priority,
            }
            for s in advice.steps
        ],
        "scenarios": [
            {
                "label": s.label,
                "probability": round(s.probability, 2),
                "expected_return_range": s.expected_return_range,
                "timeframe": s.timeframe,
                "description": s.description,
            }
            for s in advice.scenarios
        ],
        "notes": list(advice.notes),
        "urgency": advice.urgency,
        "contingencies": [
            {
                "scenario": c.scenario,
                "triggers": list(c.triggers),
                "response": c.response,
                "adjustments": list(c.adjustments),
            }
            for c in advice.contingencies
        ],
        "take_profit": [
            {"gain_pct": t.gain_pct, "allocation": t.allocation}
            for t in advice.take_profit
        ],
    }


def render_report(
    report: StrategyReport,
    explain: bool = False,
    debug: bool = False,
) -> dict[str, Any]:
    """
    Serialize a report, optionally with explanation and debug trace.

    Args:
        report: Result of analyze()
        explain: Add categorized rationale (drivers, risks, notes) and a summary
        debug: Add the full intermediate trace (implies explain)

    Returns:
        JSON-ready dict
    """
    result = serialize_report(report)

    if explain or debug:
        explanation = build_explanation_object(collect_rationale(report))
        result["explanation"] = explanation
        result["summary"] = format_explanation(**explanation)

    if debug:
        result["debug_trace"] = build_debug_trace(report)

    return result
