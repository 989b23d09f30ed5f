"""
Opt-in logging for streaming_ta.

The library logs through ``logging.getLogger(__name__)`` and ships only a
NullHandler. Records about individual samples carry the sample time as
``timestamp_us`` and bucketer records carry ``mode``, both passed via
``extra``. ``SampleContextFormatter`` renders those fields readably:

    DEBUG streaming_ta.core.bucketer: Bucketer for duration 1209600000000us selected [mode DAILY_GAP]
    DEBUG streaming_ta.core.smoother: Ignoring out-of-order sample (last 1704101400000000us) [at 2024-01-01T09:29:00+00:00]

Environment:
    STREAMING_TA_LOG_LEVEL  level used when ``setup_logging`` gets none (default WARNING)
"""

import logging
import os
import sys
from typing import Optional, TextIO

from .core.data_types import BucketingMode, from_timestamp_us

PACKAGE_LOGGER = "streaming_ta"
LEVEL_ENV = "STREAMING_TA_LOG_LEVEL"
DEFAULT_FORMAT = "%(levelname)s %(name)s: %(message)s"


class SampleContextFormatter(logging.Formatter):
    """Appends sample time (UTC, microsecond precision) and bucketing mode."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = []

        timestamp_us = getattr(record, "timestamp_us", None)
        if timestamp_us is not None:
            context.append(f"at {from_timestamp_us(timestamp_us).isoformat()}")

        mode = getattr(record, "mode", None)
        if mode is not None:
            context.append(f"mode {mode.name if isinstance(mode, BucketingMode) else mode}")

        if not context:
            return message
        return f"{message} [{', '.join(context)}]"


def setup_logging(level: Optional[str] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Attach a single stream handler to the ``streaming_ta`` logger.

    Calling it again replaces the previous handler. The level falls back to
    ``STREAMING_TA_LOG_LEVEL`` and then WARNING.

    Example:
        >>> setup_logging("DEBUG")
        >>> SimpleMovingAverage(timedelta(days=14))  # mode selection is now visible
    """
    level = (level or os.getenv(LEVEL_ENV) or "WARNING").upper()
    numeric_level = getattr(logging, level, None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level {level!r}")

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(SampleContextFormatter(DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    return logger
