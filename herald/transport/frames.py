"""Reassembly of newline-delimited event frames from a byte stream.

HTTP chunking gives no delivery-boundary guarantee, so a frame (or a
multi-byte character) may be split across reads. The decoder keeps the
residual bytes of the last incomplete line until more data arrives.
"""

import codecs
import json
from typing import Any

from herald.observability.logging import get_logger
from herald.observability.metrics import FRAMES_DECODED, FRAMES_DROPPED

logger = get_logger(__name__)

DEFAULT_FRAME_PREFIX = "data: "


class FrameDecoder:
    """Incremental decoder turning raw chunks into JSON payloads."""

    def __init__(self, prefix: str = DEFAULT_FRAME_PREFIX) -> None:
        self._prefix = prefix
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.dropped = 0

    @property
    def residual(self) -> str:
        """Text held back waiting for the end of its line."""
        return self._buffer

    def feed(self, chunk: bytes) -> list[Any]:
        """Consume a chunk and return the payloads of all completed frames."""
        self._buffer += self._decoder.decode(chunk)
        lines = self._buffer.split("\n")
        self._buffer = lines.pop()
        return self._decode_lines(lines)

    def close(self) -> list[Any]:
        """Flush the decoder at end of stream.

        A final frame without a trailing newline is still delivered.
        """
        self._buffer += self._decoder.decode(b"", final=True)
        remaining, self._buffer = self._buffer, ""
        return self._decode_lines([remaining]) if remaining else []

    def _decode_lines(self, lines: list[str]) -> list[Any]:
        payloads: list[Any] = []
        for line in lines:
            line = line.rstrip("\r")
            if not line.startswith(self._prefix):
                continue
            body = line[len(self._prefix):]
            try:
                payloads.append(json.loads(body))
            except json.JSONDecodeError:
                self.dropped += 1
                FRAMES_DROPPED.inc()
                logger.debug("frame_dropped", size=len(body))
                continue
            FRAMES_DECODED.inc()
        return payloads
