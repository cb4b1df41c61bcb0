"""Engine constants: thresholds, rule weights and static lookup tables."""

from __future__ import annotations


# Strategy strength
BASE_STRENGTH = 50.0
MIN_STRENGTH = 0.0
MAX_STRENGTH = 100.0

# Action thresholds (strictly greater / strictly less)
BUY_THRESHOLD = 60.0
SELL_THRESHOLD = 40.0

# Confidence: distance from neutral strength
STRONG_CONFIDENCE_DISTANCE = 20.0  # >70 or <30

# "Strong signal" band used for risk escalation
STRONG_SIGNAL_HIGH = 70.0
STRONG_SIGNAL_LOW = 30.0

# RSI bands
RSI_OVERBOUGHT = 70.0
RSI_FIRM = 60.0
RSI_MIDLINE = 50.0
RSI_SOFT = 40.0
RSI_OVERSOLD = 30.0
RSI_EXTREME_HIGH = 80.0
RSI_EXTREME_LOW = 20.0

# Mean reversion: |close - ma20| / ma20 beyond this counts as stretched
MA20_DEVIATION_THRESHOLD = 0.05

# Breakout: minimum traded volume for a breakout to count
LIQUIDITY_VOLUME_FLOOR = 1_000_000

# Rule weights (positive = bullish contribution)
MOMENTUM_WEIGHTS = {
    "rsi_strong": 20.0,
    "rsi_firm": 10.0,
    "rsi_oversold": -20.0,
    "rsi_soft": -10.0,
    "macd_golden_cross": 15.0,
    "macd_death_cross": -15.0,
}

MEAN_REVERSION_WEIGHTS = {
    "rsi_oversold": 25.0,
    "rsi_overbought": -25.0,
    "below_ma20": 15.0,
    "above_ma20": -15.0,
}

BREAKOUT_WEIGHTS = {
    "upward": 20.0,
    "downward": -20.0,
}

# Advice thresholds on the overall score
ADVICE_BUY_SCORE = 70
ADVICE_SELL_SCORE = 30

ADVICE_TIMEFRAME = "Short term (1-2 weeks)"

# Scenario projections (percent)
BEST_CASE_BONUS = 20.0
BEST_CASE_CAP = 95.0
BEST_CASE_DEFAULT = 60.0
NEUTRAL_CASE_PROBABILITY = 60.0
WORST_CASE_BASE = 30.0
WORST_CASE_DIVISOR = 3.0
WORST_CASE_FLOOR = 10.0

# Expected-return lookup, keyed by top-strategy direction (best case)
BEST_CASE_RETURNS = {
    "bullish": "+8-15%",
    "bearish": "avoid a 5-10% loss",
    "neutral": "+3-8%",
}

NEUTRAL_CASE_RETURN = "±2-5%"
NEUTRAL_CASE_TIMEFRAME = "2-4 weeks"

# Expected-return lookup, keyed by overall risk level (worst case)
WORST_CASE_RETURNS = {
    "high": "-8-15%",
    "medium": "-5-10%",
    "low": "-3-8%",
}

WORST_CASE_TIMEFRAME = "1-3 weeks"

# Stop-loss band quoted in the buy plan, keyed by overall risk level
STOP_LOSS_BY_RISK = {
    "high": "3-5%",
    "medium": "5-8%",
    "low": "8-12%",
}

# Action urgency, keyed by conviction = |overall - 50|
URGENCY_IMMEDIATE_CONVICTION = 35
URGENCY_SOON_CONVICTION = 25
URGENCY_NORMAL_CONVICTION = 10
URGENCY_MIN_ALIGNED_STRONG = 2

# Scale-out plan for the buy branch: (gain %, share of position sold)
TAKE_PROFIT_TARGETS = (
    (8.0, 0.3),
    (15.0, 0.4),
    (25.0, 0.3),
)

VOLATILITY_BY_RISK = {
    "high": "high volatility",
    "medium": "moderate volatility",
    "low": "low volatility",
}

# Position-sizing policy per overall risk level
RISK_POLICY_TABLE = {
    "high": {
        "position_size": "10-30%",
        "stop_loss": "tight (2-5%)",
        "diversification": "highly diversified",
        "monitoring": "close monitoring",
        "advice": [
            "Strictly cap the amount committed per trade",
            "Use a tight stop-loss",
            "Avoid leverage",
            "Prepare a fast exit plan",
        ],
    },
    "medium": {
        "position_size": "30-60%",
        "stop_loss": "moderate (3-8%)",
        "diversification": "moderately diversified",
        "monitoring": "regular checks",
        "advice": [
            "Build the position in stages",
            "Set a reasonable stop-loss",
            "Watch for changes in the market environment",
            "Stay patient",
        ],
    },
    "low": {
        "position_size": "50-80%",
        "stop_loss": "loose (5-10%)",
        "diversification": "concentrated allocation",
        "monitoring": "periodic checks",
        "advice": [
            "Position size may be increased moderately",
            "Give the trade enough room",
            "A longer holding period is acceptable",
            "Keep an eye on fundamentals",
        ],
    },
}

PRE_TRADE_CHECKLIST = [
    "Stop-loss level is set",
    "Position size is under control",
    "Market environment is confirmed",
    "Exit plan is prepared",
    "Risk tolerance is assessed",
    "Decision is free of emotion",
]
