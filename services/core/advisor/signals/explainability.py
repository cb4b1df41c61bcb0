"""
Score breakdown and debug trace.

This module does not recalculate anything. It exposes the rule
contributions behind each strength and the thresholds that were applied.
"""

from typing import Any, Dict, List

from .config import (
    BASE_STRENGTH,
    BUY_THRESHOLD,
    LIQUIDITY_VOLUME_FLOOR,
    MA20_DEVIATION_THRESHOLD,
    RSI_EXTREME_HIGH,
    RSI_EXTREME_LOW,
    SELL_THRESHOLD,
    STRONG_SIGNAL_HIGH,
    STRONG_SIGNAL_LOW,
)
from .rules import RULES
from .types import StrategyReport, StrategySignal


def compute_score_breakdown(signal: StrategySignal) -> Dict[str, Any]:
    """
    Break a strategy strength into base plus rule contributions.

    Args:
        signal: StrategySignal with its contributions

    Returns:
        Dict with base, per-rule contributions, raw sum and clamped strength
    """
    contributions: List[Dict[str, Any]] = []
    for result in signal.contributions:
        rule = RULES.get(result.rule_id)
        contributions.append({
            "rule_id": result.rule_id,
            "matched": result.matched,
            "weight": rule.weight if rule else result.weight,
            "contribution": result.weight,
            "description": rule.description if rule else "",
        })

    raw = BASE_STRENGTH + sum(c["contribution"] for c in contributions)

    return {
        "strategy": signal.kind.value,
        "base": BASE_STRENGTH,
        "contributions": contributions,
        "raw_strength": round(raw, 4),
        "strength": round(signal.strength, 4),
        "clamped": raw != signal.strength,
        "explanation": f"{BASE_STRENGTH:g} + sum(matched weights) = {raw:g}, clamped to [0, 100]",
    }


def build_debug_trace(report: StrategyReport) -> Dict[str, Any]:
    """
    Build a trace of every intermediate value in one evaluation pass.

    For transparency and debugging; values are read from the report as-is.
    """
    snapshot = report.snapshot
    present = {
        "close": True,
        "rsi14": snapshot.rsi14 is not None,
        "macd": snapshot.macd is not None,
        "ma20": snapshot.ma20 is not None,
        "ema5": snapshot.ema5 is not None,
        "volume": snapshot.volume is not None,
    }

    strengths = [s.strength for s in report.signals]
    mean = sum(strengths) / len(strengths) if strengths else BASE_STRENGTH

    return {
        "symbol": report.symbol,
        "fields_present": present,
        "fields_absent": [name for name, ok in present.items() if not ok],
        "ma20_deviation": (
            round(snapshot.ma20_deviation, 6) if snapshot.ma20_deviation is not None else None
        ),
        "score_breakdown": [compute_score_breakdown(s) for s in report.signals],
        "aggregate_calculation": {
            "strengths": [round(s, 4) for s in strengths],
            "mean_strength": round(mean, 4),
            "overall_score": report.aggregate.overall_score,
            "market_condition": report.aggregate.market_condition.value,
            "risk_level": report.aggregate.risk_level.value,
        },
        "ranking": [s.kind.value for s in report.ranked],
        "thresholds": {
            "buy": f">{BUY_THRESHOLD:g}",
            "sell": f"<{SELL_THRESHOLD:g}",
            "strong_signal": f">{STRONG_SIGNAL_HIGH:g} or <{STRONG_SIGNAL_LOW:g}",
            "rsi_extreme": f">{RSI_EXTREME_HIGH:g} or <{RSI_EXTREME_LOW:g}",
            "ma20_deviation": MA20_DEVIATION_THRESHOLD,
            "liquidity_volume_floor": LIQUIDITY_VOLUME_FLOOR,
        },
        "rationale_tags": list(report.aggregate.rationale),
        "note": "Debug trace for transparency. All values are read from the report - no recalculation performed.",
    }
