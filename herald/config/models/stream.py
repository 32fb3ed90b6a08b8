"""Stream transport and buffering configuration."""

from pydantic import BaseModel, Field


class StreamConfig(BaseModel):
    """Configuration for the turn stream reader and update buffer."""

    flush_interval_ms: int = Field(
        default=50,
        gt=0,
        description="Minimum interval between buffered text deliveries",
    )
    frame_prefix: str = Field(
        default="data: ",
        min_length=1,
        description="Marker that prefixes every event frame",
    )
    connect_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Connection timeout in seconds",
    )
    read_timeout: float | None = Field(
        default=None,
        description="Per-read timeout in seconds (None waits indefinitely)",
    )

    @property
    def flush_interval(self) -> float:
        """Flush interval in seconds."""
        return self.flush_interval_ms / 1000.0
