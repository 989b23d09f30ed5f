"""Exceptions raised by streaming_ta."""

from typing import Any


class StreamingTAError(Exception):
    """Base exception for streaming_ta errors."""


class InvalidParameter(StreamingTAError, ValueError):
    """Raised at construction when a duration or period is not positive."""

    def __init__(self, parameter: str, value: Any):
        self.parameter = parameter
        self.value = value
        super().__init__(f"Invalid parameter {parameter}={value!r}: must be positive")


class SerializationError(StreamingTAError):
    """Raised when indicator state cannot be serialized or restored."""

    def __init__(self, message: str, payload: Any = None):
        self.payload = payload
        super().__init__(message)
