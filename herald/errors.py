"""Exception hierarchy for Herald.

All library exceptions inherit from HeraldError so callers can catch
everything raised by the core with a single clause.
"""


class HeraldError(Exception):
    """Base exception for all Herald errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(HeraldError):
    """Raised when configuration cannot be loaded or is invalid."""


class TransportError(HeraldError):
    """Raised when the stream request fails or the connection drops."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StreamCancelledError(HeraldError):
    """Raised when a stream is terminated through its cancellation token."""

    def __init__(self, message: str = "Stream cancelled") -> None:
        super().__init__(message)


class ApprovalError(HeraldError):
    """Raised when an approval decision cannot be applied."""

    def __init__(self, message: str, block_id: str | None = None) -> None:
        super().__init__(message)
        self.block_id = block_id
