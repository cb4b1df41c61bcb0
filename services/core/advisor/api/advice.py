"""Strategy advice API routes."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ..config import get_settings
from ..signals.engine import analyze_payload, render_report, serialize_signal
from ..signals.snapshot import InvalidSnapshotError

logger = logging.getLogger(__name__)

# This router will be included in main app
router = APIRouter(prefix="/v1/advice", tags=["advice"])

_CONTROL_FIELDS = {"symbol", "explain", "debug"}


class AdviceRequest(BaseModel):
    """
    Indicator payload plus request flags.

    Indicator fields are passed through untouched; the snapshot adapter
    validates them.
    """
    model_config = ConfigDict(extra="allow")

    symbol: str | None = Field(None, description="Instrument label (e.g., 600519)")
    explain: bool = Field(
        False,
        description="Include structured explanation (drivers, risks, notes)",
    )
    debug: bool = Field(
        False,
        description="Include full debug trace with intermediate calculations",
    )

    def indicator_payload(self) -> dict[str, Any]:
        return {k: v for k, v in self.model_dump().items() if k not in _CONTROL_FIELDS}


def _invalid(exc: InvalidSnapshotError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"message": "Invalid indicator snapshot", "errors": exc.errors},
    )


@router.post("")
async def generate_advice_report(req: AdviceRequest) -> dict:
    """
    Score all strategies and build the full advice report.

    Returns:
    - Strategy signals (momentum, mean reversion, breakout)
    - Ranking and top strategy
    - Aggregate score, market condition, overall risk
    - Risk panel (statistics, warnings, position policy, checklist)
    - Advice (actions, warnings, steps, scenarios)
    - [Optional] Structured explanation (explain=true)
    - [Optional] Debug trace (debug=true)
    """
    try:
        report = analyze_payload(req.indicator_payload(), symbol=req.symbol)
        return render_report(
            report,
            explain=req.explain or req.debug,
            debug=req.debug and get_settings().include_debug_trace,
        )

    except InvalidSnapshotError as e:
        raise _invalid(e)
    except Exception as e:
        logger.error(f"Error generating advice for {req.symbol}: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Error generating advice: {str(e)}",
        )


@router.post("/strategies")
async def generate_strategy_signals(req: AdviceRequest) -> dict:
    """Strategy signals only, in fixed order, plus the ranking."""
    try:
        report = analyze_payload(req.indicator_payload(), symbol=req.symbol)
        return {
            "symbol": report.symbol,
            "strategies": [serialize_signal(s) for s in report.signals],
            "ranking": [s.kind.value for s in report.ranked],
        }
    except InvalidSnapshotError as e:
        raise _invalid(e)
    except Exception as e:
        logger.error(f"Error scoring strategies for {req.symbol}: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Error scoring strategies: {str(e)}",
        )


@router.get("/schema")
async def get_advice_schema() -> dict:
    """
    Get schema information for the advice endpoint.

    Returns example request and response structure.
    """
    return {
        "endpoint": "/v1/advice",
        "method": "POST",
        "description": "Score momentum, mean reversion and breakout strategies and build trading advice",
        "request_schema": {
            "close": "float (required, > 0)",
            "rsi14": "float (optional) [0,100]",
            "macd": "object (optional) - {dif, dea, histogram?}",
            "ma20": "float (optional, > 0)",
            "ema5": "float (optional, > 0)",
            "volume": "float (optional, >= 0)",
            "symbol": "string (optional)",
            "explain": "bool (optional, default=false)",
            "debug": "bool (optional, default=false)",
        },
        "alternate_shape": {
            "indicators": {"close": 360.0, "rsi": {"14": 75.0}, "ma": {"20": 340.0}},
        },
        "response_schema": {
            "strategies": "array[object] - kind, strength [0,100], action BUY|SELL|HOLD, "
                          "direction, confidence strong|moderate|weak, risk_level, recommendation",
            "ranking": "array[string] - strategy kinds, strongest first",
            "aggregate": {
                "overall_score": "int [0,100]",
                "market_condition": "enum - strong_uptrend|strong_downtrend|mild_uptrend|mild_downtrend|ranging",
                "risk_level": "enum - low|medium|high",
            },
            "risk": "object - statistics, warnings, policy, checklist",
            "advice": "object - primary_action, secondary_actions, warnings, timeframe, steps, scenarios, "
                      "urgency immediate|soon|normal|patient|wait, contingencies, take_profit",
        },
        "example_request": {
            "symbol": "600519",
            "close": 360.0,
            "rsi14": 75.0,
            "macd": {"dif": 1.2, "dea": 0.8, "histogram": 0.4},
            "ma20": 340.0,
            "volume": 2_000_000,
        },
    }
