"""
JSON serialization of full indicator state.

A restored indicator continues exactly where the original stopped: feeding
both the same samples yields identical outputs. Floats survive the round trip
bit-for-bit because ``json`` writes the shortest repr that parses back to the
same double.

Example:
    text = dumps(sma)
    clone = loads(text)
    assert clone.next(ts, 2.0) == sma.next(ts, 2.0)
"""

import json
import logging
from typing import Any, Dict, Type

from .errors import SerializationError
from .indicators import (
    BollingerBands,
    ExponentialMovingAverage,
    Indicator,
    MaxDrawdown,
    MaxDrawup,
    Maximum,
    Minimum,
    RelativeStrengthIndex,
    SimpleMovingAverage,
    StandardDeviation,
)

logger = logging.getLogger(__name__)

INDICATOR_TYPES: Dict[str, Type[Indicator]] = {
    cls.__name__: cls
    for cls in (
        SimpleMovingAverage,
        StandardDeviation,
        Maximum,
        Minimum,
        MaxDrawdown,
        MaxDrawup,
        BollingerBands,
        ExponentialMovingAverage,
        RelativeStrengthIndex,
    )
}


def to_dict(indicator: Indicator) -> Dict[str, Any]:
    """Snapshot an indicator as a JSON-compatible dict."""
    return indicator.to_dict()


def from_dict(payload: Dict[str, Any]) -> Indicator:
    """Rebuild any registered indicator from ``to_dict`` output."""
    if not isinstance(payload, dict):
        raise SerializationError("Indicator payload must be a mapping", payload)
    type_name = payload.get("type")
    cls = INDICATOR_TYPES.get(type_name)  # type: ignore[arg-type]
    if cls is None:
        raise SerializationError(f"Unknown indicator type {type_name!r}", payload)
    return cls.from_dict(payload)


def dumps(indicator: Indicator, **kwargs: Any) -> str:
    """Serialize an indicator to a JSON string."""
    payload = to_dict(indicator)
    try:
        return json.dumps(payload, allow_nan=False, **kwargs)
    except ValueError as e:
        raise SerializationError(f"{indicator} state is not JSON compliant: {e}", payload) from e


def loads(text: str) -> Indicator:
    """Restore an indicator from ``dumps`` output."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid indicator JSON: {e}") from e
    indicator = from_dict(payload)
    logger.debug(f"Loaded {indicator} from JSON")
    return indicator
