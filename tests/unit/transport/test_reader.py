"""Tests for the HTTP transport reader."""

import asyncio
import json
from collections.abc import AsyncIterator, Callable

import httpx
import pytest

from herald.errors import StreamCancelledError, TransportError
from herald.transport.cancellation import CancellationToken
from herald.transport.reader import TransportReader

URL = "http://agent.test/a2a"


def sse(*payloads: dict) -> bytes:
    return b"".join(f"data: {json.dumps(p)}\n\n".encode() for p in payloads)


def make_reader(
    handler: Callable[[httpx.Request], httpx.Response], **kwargs
) -> TransportReader:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TransportReader(client, **kwargs)


async def collect(reader: TransportReader, token: CancellationToken | None = None) -> list:
    return [
        event
        async for event in reader.stream(URL, {"jsonrpc": "2.0"}, token or CancellationToken())
    ]


class TestTransportReader:
    """Tests for TransportReader.stream."""

    @pytest.mark.asyncio
    async def test_yields_decoded_frames(self) -> None:
        """Should yield each decoded frame."""
        reader = make_reader(lambda request: httpx.Response(200, content=sse({"n": 1}, {"n": 2})))

        assert await collect(reader) == [{"n": 1}, {"n": 2}]

    @pytest.mark.asyncio
    async def test_reassembles_chunked_body(self) -> None:
        """Should reassemble frames across body chunks."""
        body = sse({"text": "Hello world"})

        async def chunks() -> AsyncIterator[bytes]:
            for i in range(0, len(body), 5):
                yield body[i:i + 5]

        reader = make_reader(lambda request: httpx.Response(200, content=chunks()))

        assert await collect(reader) == [{"text": "Hello world"}]

    @pytest.mark.asyncio
    async def test_request_shape(self) -> None:
        """Should POST JSON with stream and auth headers."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"")

        reader = make_reader(handler, auth_token="secret-token")
        await collect(reader)

        (request,) = seen
        assert request.method == "POST"
        assert request.headers["Accept"] == "text/event-stream"
        assert request.headers["Authorization"] == "Bearer secret-token"
        assert json.loads(request.content) == {"jsonrpc": "2.0"}

    @pytest.mark.asyncio
    async def test_no_auth_header_without_token(self) -> None:
        """Should omit the authorization header without a token."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"")

        await collect(make_reader(handler))

        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        """Should raise with the status and a truncated body."""
        reader = make_reader(lambda request: httpx.Response(503, content=b"x" * 500))

        with pytest.raises(TransportError) as exc_info:
            await collect(reader)

        assert exc_info.value.status_code == 503
        assert exc_info.value.message == "HTTP 503: " + "x" * 200

    @pytest.mark.asyncio
    async def test_connection_error_wrapped(self) -> None:
        """Should wrap connection errors."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError, match="connection refused"):
            await collect(make_reader(handler))

    @pytest.mark.asyncio
    async def test_malformed_frames_do_not_abort(self) -> None:
        """Should keep reading past malformed frames."""
        body = b"data: {broken\n\n" + sse({"ok": True})
        reader = make_reader(lambda request: httpx.Response(200, content=body))

        assert await collect(reader) == [{"ok": True}]

    @pytest.mark.asyncio
    async def test_already_cancelled_token(self) -> None:
        """Should raise a cancellation error when the token is already cancelled."""
        token = CancellationToken()
        token.cancel()
        reader = make_reader(lambda request: httpx.Response(200, content=sse({"n": 1})))

        with pytest.raises(StreamCancelledError):
            await collect(reader, token)

    @pytest.mark.asyncio
    async def test_cancel_mid_stream(self) -> None:
        """Should raise a cancellation error mid-stream."""
        never = asyncio.Event()

        async def chunks() -> AsyncIterator[bytes]:
            yield sse({"n": 1})
            await never.wait()
            yield sse({"n": 2})

        reader = make_reader(lambda request: httpx.Response(200, content=chunks()))
        token = CancellationToken()
        received: list = []

        with pytest.raises(StreamCancelledError):
            async for event in reader.stream(URL, {}, token):
                received.append(event)
                token.cancel()

        assert received == [{"n": 1}]
