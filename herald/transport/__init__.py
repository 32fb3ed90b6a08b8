"""Stream transport: cancellation, frame reassembly, HTTP reader."""

from herald.transport.cancellation import CancellationToken
from herald.transport.frames import FrameDecoder
from herald.transport.reader import TransportReader

__all__ = [
    "CancellationToken",
    "FrameDecoder",
    "TransportReader",
]
