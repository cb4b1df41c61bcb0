"""
Rationale taxonomy and human-readable explanation formatter.

Translates rationale tags emitted by scorers and the aggregator into
structured explanations. Nothing here changes a score.
"""

from typing import Dict, List, Literal

from .strategies import STRATEGY_LABELS
from .types import MarketCondition

# Rationale tag categories
RationaleCategory = Literal["driver", "risk", "note"]


def _strategy_state_tags() -> Dict[str, tuple[RationaleCategory, str]]:
    tags: Dict[str, tuple[RationaleCategory, str]] = {}
    for kind, text in STRATEGY_LABELS.items():
        tags[f"{kind.value}_buy"] = ("driver", f"{text} strategy signals buy (strength above 60)")
        tags[f"{kind.value}_sell"] = ("driver", f"{text} strategy signals sell (strength below 40)")
        tags[f"{kind.value}_hold"] = ("risk", f"{text} strategy is neutral (strength 40-60)")
        tags[f"{kind.value}_extreme_indicator"] = ("risk", f"{text} strategy relies on an extreme RSI reading")
        tags[f"{kind.value}_strength_clamped"] = ("note", f"{text} rule sum exceeded the 0-100 range and was clamped")
    return tags


RATIONALE_TAXONOMY: Dict[str, tuple[RationaleCategory, str]] = {
    # ===== DRIVERS (rules that fired) =====
    "momentum_rsi_strong": ("driver", "RSI above 70 shows strong upward momentum"),
    "momentum_rsi_firm": ("driver", "RSI between 60 and 70 shows firm momentum"),
    "momentum_rsi_oversold": ("driver", "RSI below 30 shows momentum has collapsed"),
    "momentum_rsi_soft": ("driver", "RSI between 30 and 40 shows soft momentum"),
    "momentum_macd_golden_cross": ("driver", "MACD golden cross (DIF above DEA)"),
    "momentum_macd_death_cross": ("driver", "MACD death cross (DIF at or below DEA)"),
    "reversion_rsi_oversold": ("driver", "Oversold RSI sets up a rebound"),
    "reversion_rsi_overbought": ("driver", "Overbought RSI sets up a pullback"),
    "reversion_below_ma20": ("driver", "Price sits more than 5% below MA20"),
    "reversion_above_ma20": ("driver", "Price sits more than 5% above MA20"),
    "breakout_upward": ("driver", "Upward breakout on volume above the liquidity floor"),
    "breakout_downward": ("driver", "Downward breakout on volume above the liquidity floor"),
    "aggregate_bullish_bias": ("driver", "Overall score leans bullish"),
    "aggregate_bearish_bias": ("driver", "Overall score leans bearish"),

    **_strategy_state_tags(),

    # ===== RISKS =====
    "aggregate_extreme_rsi": ("risk", "RSI beyond 80/20 makes this a high-risk entry point"),
    "aggregate_strong_signal": ("risk", "Strong overall signal carries elevated execution risk"),
    "aggregate_strong_strategy": ("risk", "One strategy sits in a strong band, raising execution risk"),
    "aggregate_neutral": ("risk", "Overall score is exactly neutral"),

    # ===== NOTES =====
    f"market_{MarketCondition.STRONG_UPTREND.value}": ("note", "Market in a strong uptrend"),
    f"market_{MarketCondition.STRONG_DOWNTREND.value}": ("note", "Market in a strong downtrend"),
    f"market_{MarketCondition.MILD_UPTREND.value}": ("note", "Market in a mild uptrend"),
    f"market_{MarketCondition.MILD_DOWNTREND.value}": ("note", "Market in a mild downtrend"),
    f"market_{MarketCondition.RANGING.value}": ("note", "Market is ranging without a clear trend"),
}


def format_explanation(
    drivers: List[str],
    risks: List[str],
    notes: List[str],
    max_items: int = 5,
) -> str:
    """Join the categorized explanation into one paragraph."""
    parts = []

    if drivers:
        parts.append(f"Drivers: {'; '.join(drivers[:max_items])}")

    if risks:
        parts.append(f"Risks: {'; '.join(risks[:max_items])}")

    if notes and len(parts) < 2:  # Only add notes if we have space
        parts.append(f"Notes: {'; '.join(notes[:max_items])}")

    return ". ".join(parts) + "." if parts else "No explanation available."


def build_explanation_object(rationale_tags: List[str]) -> Dict[str, List[str]]:
    """
    Sort rationale tags into drivers, risks and notes.

    Duplicate tags are collapsed, first occurrence wins. A tag outside
    RATIONALE_TAXONOMY becomes a note naming the tag.

    Args:
        rationale_tags: Tags from the scorers and the aggregator

    Returns:
        Dict with keys drivers, risks, notes (human-readable strings)
    """
    buckets: Dict[RationaleCategory, List[str]] = {"driver": [], "risk": [], "note": []}
    for tag in dict.fromkeys(rationale_tags):
        category, text = RATIONALE_TAXONOMY.get(tag, ("note", f"Unknown rationale: {tag}"))
        buckets[category].append(text)

    return {
        "drivers": buckets["driver"],
        "risks": buckets["risk"],
        "notes": buckets["note"],
    }
