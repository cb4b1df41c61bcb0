"""
Metadata API endpoints.

Exposes the static tables the engine works from: rule weights and
position-sizing policies.
"""

from typing import Any, Dict

from fastapi import APIRouter

from ..signals.config import PRE_TRADE_CHECKLIST
from ..signals.engine import serialize_policy
from ..signals.risk import RISK_POLICIES
from ..signals.rules import CONDITION_RULES, RSI_EXTREME_RULE
from ..signals.strategies import STRATEGY_RULES

router = APIRouter(prefix="/v1/meta", tags=["metadata"])


def _rule_entry(rule) -> Dict[str, Any]:
    return {
        "rule_id": rule.rule_id,
        "weight": rule.weight,
        "requires": list(rule.requires),
        "description": rule.description,
    }


@router.get("/risk-policies")
async def get_risk_policies() -> Dict[str, Any]:
    """
    Get position-sizing policy per overall risk level.

    Example:
        {
            "policies": {"low": {"position_size": "50-80%", ...}, ...},
            "checklist": ["Stop-loss level is set", ...]
        }
    """
    return {
        "policies": {level.value: serialize_policy(policy) for level, policy in RISK_POLICIES.items()},
        "checklist": list(PRE_TRADE_CHECKLIST),
    }


@router.get("/rules")
async def get_rules() -> Dict[str, Any]:
    """Get the rule tables of every strategy, in evaluation order."""
    return {
        "strategies": {
            kind.value: [_rule_entry(rule) for rule in rules]
            for kind, rules in STRATEGY_RULES.items()
        },
        "market_condition": [_rule_entry(rule) for rule in CONDITION_RULES],
        "risk": [_rule_entry(RSI_EXTREME_RULE)],
    }
