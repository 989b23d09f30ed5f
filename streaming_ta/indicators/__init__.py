"""Concrete streaming indicators and their short aliases."""

from .base import Indicator, WindowIndicator, format_duration
from .bollinger_bands import BollingerBands, BollingerBandsOutput
from .drawdown import MaxDrawdown, MaxDrawup
from .exponential_moving_average import ExponentialMovingAverage
from .extrema import Maximum, Minimum
from .relative_strength_index import RelativeStrengthIndex
from .simple_moving_average import SimpleMovingAverage
from .standard_deviation import StandardDeviation

SMA = SimpleMovingAverage
SD = StandardDeviation
MAX = Maximum
MIN = Minimum
BB = BollingerBands
EMA = ExponentialMovingAverage
RSI = RelativeStrengthIndex

__all__ = [
    "Indicator",
    "WindowIndicator",
    "format_duration",
    "BollingerBands",
    "BollingerBandsOutput",
    "MaxDrawdown",
    "MaxDrawup",
    "ExponentialMovingAverage",
    "Maximum",
    "Minimum",
    "RelativeStrengthIndex",
    "SimpleMovingAverage",
    "StandardDeviation",
    "SMA",
    "SD",
    "MAX",
    "MIN",
    "BB",
    "EMA",
    "RSI",
]
