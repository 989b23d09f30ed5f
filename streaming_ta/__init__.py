"""Streaming technical-analysis indicators for mixed sampling cadences.

Public symbols are exposed lazily so importing `streaming_ta` does not eagerly
import the pandas/numpy stack used only by batch replay.
"""

from __future__ import annotations

import importlib
import logging
from typing import Dict, Tuple

__version__ = "0.3.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


__all__ = [
    # Errors
    "StreamingTAError",
    "InvalidParameter",
    "SerializationError",
    # Config
    "BucketingConfig",
    "IndicatorDefaults",
    "StreamingTAConfig",
    "DEFAULT_CONFIG",
    # Core
    "BucketingMode",
    "Sample",
    "TemporalBucketer",
    "AdaptiveTimeDetector",
    "SlidingWindow",
    "SumAccumulator",
    "SumOfSquaresAccumulator",
    "TimeWeightedExponentialSmoother",
    "to_timestamp_us",
    "to_duration_us",
    "from_timestamp_us",
    # Indicators
    "Indicator",
    "SimpleMovingAverage",
    "StandardDeviation",
    "Maximum",
    "Minimum",
    "MaxDrawdown",
    "MaxDrawup",
    "BollingerBands",
    "BollingerBandsOutput",
    "ExponentialMovingAverage",
    "RelativeStrengthIndex",
    "SMA",
    "SD",
    "MAX",
    "MIN",
    "BB",
    "EMA",
    "RSI",
    # Serialization
    "dumps",
    "loads",
    # Batch
    "replay",
    # Logging
    "setup_logging",
    "SampleContextFormatter",
]


_EXPORT_TO_SOURCE: Dict[str, Tuple[str, str]] = {}


def _register(module: str, names: list[str], aliases: Dict[str, str] | None = None) -> None:
    for name in names:
        _EXPORT_TO_SOURCE[name] = (module, name)
    if aliases:
        for public_name, source_name in aliases.items():
            _EXPORT_TO_SOURCE[public_name] = (module, source_name)


_register(".errors", ["StreamingTAError", "InvalidParameter", "SerializationError"])

_register(
    ".config",
    ["BucketingConfig", "IndicatorDefaults", "StreamingTAConfig", "DEFAULT_CONFIG"],
)

_register(
    ".core",
    [
        "BucketingMode",
        "Sample",
        "TemporalBucketer",
        "AdaptiveTimeDetector",
        "SlidingWindow",
        "SumAccumulator",
        "SumOfSquaresAccumulator",
        "TimeWeightedExponentialSmoother",
        "to_timestamp_us",
        "to_duration_us",
        "from_timestamp_us",
    ],
)

_register(
    ".indicators",
    [
        "Indicator",
        "SimpleMovingAverage",
        "StandardDeviation",
        "Maximum",
        "Minimum",
        "MaxDrawdown",
        "MaxDrawup",
        "BollingerBands",
        "BollingerBandsOutput",
        "ExponentialMovingAverage",
        "RelativeStrengthIndex",
        "SMA",
        "SD",
        "MAX",
        "MIN",
        "BB",
        "EMA",
        "RSI",
    ],
)

_register(".serialization", ["dumps", "loads"])

_register(".batch", ["replay"])

_register(".logging_config", ["setup_logging", "SampleContextFormatter"])


_missing_exports = [name for name in __all__ if name not in _EXPORT_TO_SOURCE]
if _missing_exports:
    raise RuntimeError(f"Lazy export map incomplete: {_missing_exports}")


def __getattr__(name: str):
    if name not in _EXPORT_TO_SOURCE:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, symbol_name = _EXPORT_TO_SOURCE[name]
    module = importlib.import_module(module_name, __name__)
    value = getattr(module, symbol_name)

    # Cache resolved symbol on module globals for subsequent fast access.
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(set(globals()) | set(__all__))
