"""Canonical types for the strategy signal and advice engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StrategyKind(str, Enum):
    """Independent scoring lenses over one snapshot."""
    MOMENTUM = "momentum"
    MEAN_REVERSION = "mean_reversion"
    BREAKOUT = "breakout"


class SignalAction(str, Enum):
    """Discrete strategy actions."""
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class Direction(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class ConfidenceLevel(str, Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MarketCondition(str, Enum):
    """Coarse trend classification from RSI and MACD relative position."""
    STRONG_UPTREND = "strong_uptrend"
    STRONG_DOWNTREND = "strong_downtrend"
    MILD_UPTREND = "mild_uptrend"
    MILD_DOWNTREND = "mild_downtrend"
    RANGING = "ranging"


@dataclass(frozen=True)
class MacdValues:
    dif: float
    dea: float
    histogram: float | None = None


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Point-in-time indicator values for one instrument.

    Optional fields are None when absent. A present 0.0 is a real value.
    """
    close: float
    rsi14: float | None = None
    macd: MacdValues | None = None
    ma20: float | None = None
    ema5: float | None = None
    volume: float | None = None

    @property
    def ma20_deviation(self) -> float | None:
        """Relative distance of close from MA20, e.g. 0.05 = 5% above; None without a positive MA20."""
        if self.ma20 is None or self.ma20 <= 0:
            return None
        return (self.close - self.ma20) / self.ma20


@dataclass(frozen=True)
class RuleResult:
    """Outcome of evaluating one named rule against a snapshot."""
    rule_id: str
    matched: bool
    weight: float  # Contribution: rule weight if matched, else 0.0


@dataclass(frozen=True)
class StrategySignal:
    """Output of one strategy scorer."""
    kind: StrategyKind
    strength: float  # [0, 100], 50 = neutral
    action: SignalAction
    direction: Direction
    confidence: ConfidenceLevel
    risk_level: RiskLevel
    recommendation: str
    contributions: tuple[RuleResult, ...] = ()
    rationale: tuple[str, ...] = ()


@dataclass(frozen=True)
class AggregateResult:
    """Blend of the three strategy strengths plus market classification."""
    overall_score: int
    market_condition: MarketCondition
    risk_level: RiskLevel
    rationale: tuple[str, ...] = ()


@dataclass(frozen=True)
class RiskStatistics:
    total_strategies: int
    high_risk_count: int
    medium_risk_count: int
    low_risk_count: int
    average_strength: float
    strong_signal_count: int
    has_conflicting_signals: bool


@dataclass(frozen=True)
class RiskWarning:
    code: str
    level: RiskLevel  # Severity of the warning itself
    title: str
    message: str


@dataclass(frozen=True)
class PositionPolicy:
    """Static position-sizing guidance for one overall risk level."""
    risk_level: RiskLevel
    position_size: str
    stop_loss: str
    diversification: str
    monitoring: str
    advice: tuple[str, ...]


@dataclass(frozen=True)
class RiskAssessment:
    statistics: RiskStatistics
    warnings: tuple[RiskWarning, ...]
    policy: PositionPolicy
    checklist: tuple[str, ...]


@dataclass(frozen=True)
class Scenario:
    label: str  # best | neutral | worst
    probability: float  # Percent, independent per scenario
    expected_return_range: str
    timeframe: str
    description: str = ""


@dataclass(frozen=True)
class ActionStep:
    step: int
    title: str
    description: str
    timing: str
    priority: str  # critical | high | medium | low


@dataclass(frozen=True)
class ContingencyPlan:
    """What to do if the market takes a given turn after acting."""
    scenario: str
    triggers: tuple[str, ...]
    response: str
    adjustments: tuple[str, ...]


@dataclass(frozen=True)
class TakeProfitTarget:
    gain_pct: float
    allocation: float  # share of the position to sell, 0..1


@dataclass(frozen=True)
class AdviceReport:
    primary_action: str
    secondary_actions: tuple[str, ...]
    warnings: tuple[str, ...]
    timeframe: str
    scenarios: tuple[Scenario, ...]
    steps: tuple[ActionStep, ...] = ()
    sentiment: Direction = Direction.NEUTRAL
    volatility: str = ""
    notes: tuple[str, ...] = ()
    urgency: str = "wait"  # immediate | soon | normal | patient | wait
    contingencies: tuple[ContingencyPlan, ...] = ()
    take_profit: tuple[TakeProfitTarget, ...] = ()


@dataclass(frozen=True)
class StrategyReport:
    """Everything one evaluation pass produces."""
    snapshot: IndicatorSnapshot
    signals: tuple[StrategySignal, ...]
    aggregate: AggregateResult
    risk: RiskAssessment
    advice: AdviceReport
    symbol: str | None = None
    ranked: tuple[StrategySignal, ...] = field(default=())

    @property
    def top_signal(self) -> StrategySignal | None:
        return self.ranked[0] if self.ranked else None
