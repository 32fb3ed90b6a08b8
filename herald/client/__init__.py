"""Herald client for streaming agent turns."""

from herald.client.client import HeraldClient, HeraldClientError, TurnInProgressError

__all__ = ["HeraldClient", "HeraldClientError", "TurnInProgressError"]
