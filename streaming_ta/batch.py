"""
Batch replay of a series through a streaming indicator.

Useful for warming an indicator up from history, or for computing a whole
indicator column at once:

    closes = pd.Series(values, index=pd.DatetimeIndex(timestamps))
    sma_col = replay(SimpleMovingAverage(timedelta(days=3)), closes)

The indicator keeps its state afterwards, so live ``next`` calls can continue
from where the replay stopped. ``replay`` never resets the indicator.
"""

import logging
from typing import Any, Iterable, List, Tuple, Union

import numpy as np
import pandas as pd

from .core.data_types import TimestampLike
from .indicators import BollingerBandsOutput, Indicator

logger = logging.getLogger(__name__)

SeriesLike = Union[pd.Series, Iterable[Tuple[TimestampLike, float]]]


def _to_frame_or_series(outputs: List[Any], index: pd.Index, name: str) -> Union[pd.Series, pd.DataFrame]:
    if outputs and isinstance(outputs[0], BollingerBandsOutput):
        return pd.DataFrame(
            {
                "average": np.fromiter((o.average for o in outputs), dtype=float, count=len(outputs)),
                "upper": np.fromiter((o.upper for o in outputs), dtype=float, count=len(outputs)),
                "lower": np.fromiter((o.lower for o in outputs), dtype=float, count=len(outputs)),
            },
            index=index,
        )
    return pd.Series(np.asarray(outputs, dtype=float), index=index, name=name)


def replay(indicator: Indicator, data: SeriesLike) -> Union[pd.Series, pd.DataFrame]:
    """
    Feed every sample of ``data`` through ``indicator`` in order.

    Args:
        indicator: Any streaming indicator
        data: ``pandas.Series`` indexed by timestamps (DatetimeIndex or epoch
            seconds), or an iterable of ``(timestamp, value)`` pairs

    Returns:
        Series of outputs aligned with the input index (a DataFrame with
        ``average``/``upper``/``lower`` columns for Bollinger bands)
    """
    if isinstance(data, pd.Series):
        index = data.index
        pairs: Iterable[Tuple[TimestampLike, float]] = data.items()
    else:
        pairs = list(data)
        index = pd.Index([ts for ts, _ in pairs])

    outputs = [indicator.next(ts, value) for ts, value in pairs]
    logger.debug(f"Replayed {len(outputs)} samples through {indicator}")
    return _to_frame_or_series(outputs, index, str(indicator))
