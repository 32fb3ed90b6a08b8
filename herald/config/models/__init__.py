"""Configuration section models."""

from herald.config.models.observability import LoggingConfig, ObservabilityConfig
from herald.config.models.stream import StreamConfig

__all__ = [
    "LoggingConfig",
    "ObservabilityConfig",
    "StreamConfig",
]
