"""Transport reader: one streaming POST per turn."""

from collections.abc import AsyncIterator
from typing import Any

import httpx

from herald.errors import StreamCancelledError, TransportError
from herald.observability.logging import get_logger
from herald.transport.cancellation import CancellationToken
from herald.transport.frames import DEFAULT_FRAME_PREFIX, FrameDecoder

logger = get_logger(__name__)

ERROR_BODY_LIMIT = 200


class TransportReader:
    """Issues a stream request and yields decoded event payloads.

    Each call to ``stream`` opens a new connection; the returned iterator
    is not restartable. Malformed frames are dropped by the decoder and
    never abort the stream.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        frame_prefix: str = DEFAULT_FRAME_PREFIX,
        auth_token: str | None = None,
    ) -> None:
        self._client = client
        self._frame_prefix = frame_prefix
        self._auth_token = auth_token

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "text/event-stream",
        }
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        return headers

    async def stream(
        self,
        url: str,
        payload: dict[str, Any],
        cancel_token: CancellationToken,
    ) -> AsyncIterator[Any]:
        """Yield decoded payloads until the server closes the stream.

        Raises:
            TransportError: The request failed or the connection dropped
            StreamCancelledError: The cancellation token fired
        """
        cancel_token.raise_if_cancelled()
        decoder = FrameDecoder(self._frame_prefix)

        try:
            async with self._client.stream(
                "POST", url, json=payload, headers=self._headers()
            ) as response:
                if response.status_code >= 400:
                    body = await response.aread()
                    text = body.decode("utf-8", errors="replace")
                    raise TransportError(
                        f"HTTP {response.status_code}: {text[:ERROR_BODY_LIMIT]}",
                        status_code=response.status_code,
                    )

                async for chunk in response.aiter_bytes():
                    cancel_token.raise_if_cancelled()
                    for event in decoder.feed(chunk):
                        yield event
                        cancel_token.raise_if_cancelled()

                for event in decoder.close():
                    yield event
        except httpx.HTTPError as e:
            if cancel_token.cancelled:
                raise StreamCancelledError() from e
            logger.warning("stream_transport_failed", url=url, error=str(e))
            raise TransportError(f"Stream request failed: {e}") from e
        finally:
            if decoder.dropped:
                logger.debug("stream_frames_dropped", url=url, count=decoder.dropped)
