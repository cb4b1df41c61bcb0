"""Advice generation from the aggregate assessment and the top strategy."""

from __future__ import annotations

from typing import Iterable

from .config import (
    ADVICE_BUY_SCORE,
    ADVICE_SELL_SCORE,
    ADVICE_TIMEFRAME,
    BEST_CASE_BONUS,
    BEST_CASE_CAP,
    BEST_CASE_DEFAULT,
    BEST_CASE_RETURNS,
    NEUTRAL_CASE_PROBABILITY,
    NEUTRAL_CASE_RETURN,
    NEUTRAL_CASE_TIMEFRAME,
    STOP_LOSS_BY_RISK,
    TAKE_PROFIT_TARGETS,
    URGENCY_IMMEDIATE_CONVICTION,
    URGENCY_MIN_ALIGNED_STRONG,
    URGENCY_NORMAL_CONVICTION,
    URGENCY_SOON_CONVICTION,
    VOLATILITY_BY_RISK,
    WORST_CASE_BASE,
    WORST_CASE_DIVISOR,
    WORST_CASE_FLOOR,
    WORST_CASE_RETURNS,
    WORST_CASE_TIMEFRAME,
)
from .states import is_strong_signal
from .strategies import STRATEGY_LABELS
from .types import (
    ActionStep,
    AdviceReport,
    AggregateResult,
    ContingencyPlan,
    Direction,
    MarketCondition,
    RiskLevel,
    Scenario,
    StrategySignal,
    TakeProfitTarget,
)

PRIMARY_BUY = "Buy"
PRIMARY_SELL = "Sell"
PRIMARY_HOLD = "Hold/Observe"

SCENARIO_PROBABILITY_NOTE = (
    "Scenario probabilities are independent estimates and are not normalized to sum to 100"
)

_SENTIMENT_BY_CONDITION = {
    MarketCondition.STRONG_UPTREND: Direction.BULLISH,
    MarketCondition.MILD_UPTREND: Direction.BULLISH,
    MarketCondition.STRONG_DOWNTREND: Direction.BEARISH,
    MarketCondition.MILD_DOWNTREND: Direction.BEARISH,
    MarketCondition.RANGING: Direction.NEUTRAL,
}


CONTINGENCY_PLANS = (
    ContingencyPlan(
        scenario="Sharp drop",
        triggers=("Key support breaks", "Volume surges", "Indicators turn bearish"),
        response="Cut the loss immediately",
        adjustments=("Close the whole position", "Wait for a confirmed rebound", "Re-evaluate the strategy"),
    ),
    ContingencyPlan(
        scenario="Target reached",
        triggers=("Expected gain reached", "Indicators overbought", "Volume dries up"),
        response="Take profit in stages",
        adjustments=("Keep a core position", "Raise the stop-loss", "Watch for a pullback entry"),
    ),
    ContingencyPlan(
        scenario="Prolonged sideways market",
        triggers=("Indicators flatten out", "Volume keeps shrinking", "No catalyst in sight"),
        response="Adjust the strategy",
        adjustments=("Reduce the position", "Wait for a breakout", "Consider other instruments"),
    ),
)


def generate_advice(
    aggregate: AggregateResult,
    top_signal: StrategySignal | None,
    signals: Iterable[StrategySignal] = (),
) -> AdviceReport:
    """
    Generate the final advice report.

    Args:
        aggregate: Overall score, market condition and risk level
        top_signal: Strongest strategy signal (None if no strategies ran)
        signals: All strategy signals, used to grade urgency

    Returns:
        AdviceReport with primary/secondary actions, warnings, steps,
        scenarios, urgency, contingency plans and (buy only) take-profit targets
    """
    score = aggregate.overall_score
    risk_level = aggregate.risk_level
    take_profit: list[TakeProfitTarget] = []

    if score > ADVICE_BUY_SCORE:
        primary = PRIMARY_BUY
        secondary = [
            "Build the position in 2-3 stages",
            "Set a stop-loss right after entry",
        ]
        warnings = ["Keep risk under control; do not chase strength"]
        steps = build_buy_steps(risk_level)
        take_profit = build_take_profit_targets()
    elif score < ADVICE_SELL_SCORE:
        primary = PRIMARY_SELL
        secondary = [
            "Reduce the position in stages",
            "Watch nearby support levels",
        ]
        warnings = ["Avoid panic selling"]
        steps = build_sell_steps()
    else:
        primary = PRIMARY_HOLD
        secondary = [
            "Wait for a clearer signal",
            "Keep watching key technical levels",
        ]
        warnings = ["Avoid frequent trading"]
        steps = build_hold_steps()

    return AdviceReport(
        primary_action=primary,
        secondary_actions=tuple(secondary),
        warnings=tuple(warnings),
        timeframe=ADVICE_TIMEFRAME,
        scenarios=tuple(generate_scenarios(top_signal, risk_level)),
        steps=tuple(steps),
        sentiment=_SENTIMENT_BY_CONDITION[aggregate.market_condition],
        volatility=VOLATILITY_BY_RISK[risk_level.value],
        notes=(SCENARIO_PROBABILITY_NOTE,),
        urgency=determine_urgency(aggregate, signals),
        contingencies=CONTINGENCY_PLANS,
        take_profit=tuple(take_profit),
    )


def determine_urgency(aggregate: AggregateResult, signals: Iterable[StrategySignal]) -> str:
    """
    Grade how soon the primary action should be carried out.

    Conviction is the distance of the overall score from 50, so buy and
    sell sides are graded alike. The two fastest grades also need at least
    two strong signals pointing the same way as the overall score.

    Returns:
        "immediate", "soon", "normal", "patient" or "wait"
    """
    score = aggregate.overall_score
    conviction = abs(score - 50)
    if conviction == 0:
        return "wait"

    side = Direction.BULLISH if score > 50 else Direction.BEARISH
    aligned_strong = sum(
        1 for s in signals if s.direction == side and is_strong_signal(s.strength)
    )

    if conviction >= URGENCY_IMMEDIATE_CONVICTION and aligned_strong >= URGENCY_MIN_ALIGNED_STRONG:
        return "immediate"
    if conviction >= URGENCY_SOON_CONVICTION and aligned_strong >= URGENCY_MIN_ALIGNED_STRONG:
        return "soon"
    if conviction >= URGENCY_NORMAL_CONVICTION:
        return "normal"
    return "patient"


def build_take_profit_targets() -> list[TakeProfitTarget]:
    """Scale-out targets; allocations add up to the whole position."""
    return [TakeProfitTarget(gain_pct, allocation) for gain_pct, allocation in TAKE_PROFIT_TARGETS]


def compute_best_case_probability(top_signal: StrategySignal | None) -> float:
    if top_signal is None:
        return BEST_CASE_DEFAULT
    return min(top_signal.strength + BEST_CASE_BONUS, BEST_CASE_CAP)


def compute_worst_case_probability(top_signal: StrategySignal | None) -> float:
    top_strength = top_signal.strength if top_signal is not None else 0.0
    return max(WORST_CASE_BASE - top_strength / WORST_CASE_DIVISOR, WORST_CASE_FLOOR)


def generate_scenarios(
    top_signal: StrategySignal | None,
    risk_level: RiskLevel,
) -> list[Scenario]:
    """
    Best / neutral / worst projections.

    Probabilities are computed independently per scenario; return ranges
    come from lookup tables, not from price data.
    """
    direction = top_signal.direction if top_signal is not None else Direction.NEUTRAL

    if top_signal is not None:
        best_description = f"{STRATEGY_LABELS[top_signal.kind]} strategy plays out as expected"
    else:
        best_description = "Technical indicators line up well"

    return [
        Scenario(
            label="best",
            probability=compute_best_case_probability(top_signal),
            expected_return_range=BEST_CASE_RETURNS[direction.value],
            timeframe=ADVICE_TIMEFRAME,
            description=best_description,
        ),
        Scenario(
            label="neutral",
            probability=NEUTRAL_CASE_PROBABILITY,
            expected_return_range=NEUTRAL_CASE_RETURN,
            timeframe=NEUTRAL_CASE_TIMEFRAME,
            description="Market consolidates sideways; strategy results are mixed",
        ),
        Scenario(
            label="worst",
            probability=compute_worst_case_probability(top_signal),
            expected_return_range=WORST_CASE_RETURNS[risk_level.value],
            timeframe=WORST_CASE_TIMEFRAME,
            description="Strategy fails and the market moves the other way",
        ),
    ]


def build_buy_steps(risk_level: RiskLevel) -> list[ActionStep]:
    stop_band = STOP_LOSS_BY_RISK[risk_level.value]
    return [
        ActionStep(1, "Confirm the entry", "Wait for a pullback to support or a confirmed breakout", "within 1 hour", "high"),
        ActionStep(2, "Enter in stages", "Build the position in 2-3 tranches, 30-50% first", "within 1-3 days", "high"),
        ActionStep(3, "Set the stop-loss", f"Place the stop-loss {stop_band} below entry", "immediately after entry", "critical"),
        ActionStep(4, "Monitor progress", "Track indicator changes and volume closely", "ongoing", "medium"),
    ]


def build_sell_steps() -> list[ActionStep]:
    return [
        ActionStep(1, "Validate the exit", "Confirm the sell signal is real; avoid panic", "immediately", "high"),
        ActionStep(2, "Exit in stages", "Reduce in batches, 50-70% first", "within 1-2 days", "high"),
        ActionStep(3, "Keep a watch position", "Hold a small remainder to observe what follows", "after reducing", "medium"),
        ActionStep(4, "Wait to re-enter", "Wait for the next clear buy signal", "later", "low"),
    ]


def build_hold_steps() -> list[ActionStep]:
    return [
        ActionStep(1, "Stay on the sidelines", "Keep the current position and avoid frequent trades", "ongoing", "medium"),
        ActionStep(2, "Monitor signals", "Follow how the indicators develop", "daily", "medium"),
        ActionStep(3, "Prepare a plan", "Decide in advance what to do once a clear signal appears", "in advance", "low"),
        ActionStep(4, "Control risk", "Make sure existing positions stay within tolerance", "periodically", "high"),
    ]
