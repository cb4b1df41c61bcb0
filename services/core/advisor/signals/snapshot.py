"""Normalize loosely-shaped indicator payloads into an IndicatorSnapshot.

This is the only place where input is rejected. Everything downstream of
``normalize_snapshot`` treats values as present or absent, never as errors.

Accepted shapes::

    {"close": 360, "rsi14": 75, "macd": {"dif": 1.2, "dea": 0.8}, "ma20": 340}
    {"indicators": {"close": 360, "rsi": {"14": 75}, "ma": {"20": 340}}}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .types import IndicatorSnapshot, MacdValues

logger = logging.getLogger(__name__)


FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]
Price = Annotated[float, Field(gt=0, allow_inf_nan=False)]
Oscillator = Annotated[float, Field(ge=0, le=100, allow_inf_nan=False)]
Volume = Annotated[float, Field(ge=0, allow_inf_nan=False)]

# Nested DTO keys -> (flat field, period)
_PERIOD_KEYS = {
    "rsi": ("rsi14", 14),
    "ma": ("ma20", 20),
    "ema": ("ema5", 5),
}


class InvalidSnapshotError(ValueError):
    """Raised when a payload cannot be turned into a snapshot."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Invalid indicator snapshot: " + "; ".join(self.errors))


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    return value


class MacdPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    dif: FiniteFloat
    dea: FiniteFloat
    histogram: FiniteFloat | None = None

    @field_validator("dif", "dea", "histogram", mode="before")
    @classmethod
    def reject_bool(cls, value: Any) -> Any:
        return _reject_bool(value)


class IndicatorPayload(BaseModel):
    """Validated payload; optional fields default to absent."""
    model_config = ConfigDict(extra="ignore")

    close: Price
    rsi14: Oscillator | None = None
    macd: MacdPayload | None = None
    ma20: Price | None = None
    ema5: Price | None = None
    volume: Volume | None = None

    @field_validator("close", "rsi14", "ma20", "ema5", "volume", mode="before")
    @classmethod
    def reject_bool(cls, value: Any) -> Any:
        return _reject_bool(value)

    @model_validator(mode="before")
    @classmethod
    def flatten_nested(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data  # pydantic rejects non-mappings itself

        flat = dict(data)
        nested = flat.pop("indicators", None)
        if isinstance(nested, Mapping):
            flat.update({k: v for k, v in nested.items() if v is not None or k not in flat})

        for key, (target, period) in _PERIOD_KEYS.items():
            value = flat.pop(key, None)
            if target in flat and flat[target] is not None:
                continue
            if isinstance(value, Mapping):
                flat[target] = value.get(str(period), value.get(period))
            elif value is not None:
                flat[target] = value

        # A MACD block without both lines is treated as absent
        macd = flat.get("macd")
        if isinstance(macd, Mapping) and (macd.get("dif") is None or macd.get("dea") is None):
            flat["macd"] = None

        return flat


def _format_error(error: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "payload"
    return f"{location}: {error.get('msg', 'invalid value')}"


def normalize_snapshot(payload: Any) -> IndicatorSnapshot:
    """
    Validate a raw payload and build an immutable snapshot.

    Args:
        payload: Mapping in one of the accepted shapes, or an existing snapshot

    Returns:
        IndicatorSnapshot with absent fields set to None

    Raises:
        InvalidSnapshotError: payload is malformed (wrong type, out of range,
            non-finite, or missing ``close``)
    """
    if isinstance(payload, IndicatorSnapshot):
        return payload

    try:
        parsed = IndicatorPayload.model_validate(payload)
    except ValidationError as exc:
        errors = [_format_error(e) for e in exc.errors()]
        logger.warning(f"Rejected indicator payload: {'; '.join(errors)}")
        raise InvalidSnapshotError(errors) from exc

    macd = None
    if parsed.macd is not None:
        macd = MacdValues(
            dif=parsed.macd.dif,
            dea=parsed.macd.dea,
            histogram=parsed.macd.histogram,
        )

    return IndicatorSnapshot(
        close=parsed.close,
        rsi14=parsed.rsi14,
        macd=macd,
        ma20=parsed.ma20,
        ema5=parsed.ema5,
        volume=parsed.volume,
    )
