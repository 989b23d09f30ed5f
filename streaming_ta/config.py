"""
Streaming TA Configuration Module
Centralizes the temporal thresholds and construction defaults for indicators.

This module provides a single source of truth for the values that decide how
samples are grouped into slots, and for the defaults used when an indicator is
constructed without explicit parameters.
"""

from dataclasses import dataclass, field
from datetime import timedelta


@dataclass(frozen=True)
class BucketingConfig:
    """Slot selection thresholds for the temporal bucketer."""

    # Characteristic duration limits (mode selection)
    second_bucket_limit: timedelta = timedelta(minutes=5)  # D < 5min -> 1s buckets
    minute_bucket_limit: timedelta = timedelta(days=1)  # D < 1day -> 60s buckets

    # Bucket widths
    second_bucket_width: timedelta = timedelta(seconds=1)
    minute_bucket_width: timedelta = timedelta(seconds=60)

    # Daily data: minimum gap between two retained points.
    # Half-day (~3.5h) and full-day (~6.5h) sessions both keep open and close.
    daily_gap: timedelta = timedelta(hours=3, minutes=24)


@dataclass(frozen=True)
class IndicatorDefaults:
    """Defaults used by indicator constructors."""

    duration: timedelta = timedelta(days=14)
    period: int = 14
    period_duration: timedelta = timedelta(days=1)
    bollinger_multiplier: float = 2.0


@dataclass(frozen=True)
class StreamingTAConfig:
    """Master configuration containing all settings."""

    bucketing: BucketingConfig = field(default_factory=BucketingConfig)
    defaults: IndicatorDefaults = field(default_factory=IndicatorDefaults)


# Default configuration instance
DEFAULT_CONFIG = StreamingTAConfig()


def get_config() -> StreamingTAConfig:
    """Get the default configuration."""
    return DEFAULT_CONFIG
