"""Observability configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

LogFormat = Literal["json", "console"]


class LoggingConfig(BaseModel):
    """Structured logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum log level"
    )
    format: LogFormat = Field(default="json", description="Output format")
    redact_pii: bool = Field(
        default=True, description="Redact credentials and PII from log events"
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
