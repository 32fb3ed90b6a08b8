"""Tests for event frame reassembly."""

import json

from herald.transport.frames import FrameDecoder


def frame(payload: dict) -> bytes:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n".encode()


class TestFrameDecoder:
    """Tests for FrameDecoder."""

    def test_single_complete_frame(self) -> None:
        """Should decode one complete frame."""
        decoder = FrameDecoder()
        assert decoder.feed(frame({"a": 1})) == [{"a": 1}]
        assert decoder.residual == ""

    def test_multiple_frames_in_one_chunk(self) -> None:
        """Should decode every frame in a chunk."""
        decoder = FrameDecoder()
        chunk = frame({"n": 1}) + b"\n" + frame({"n": 2})
        assert decoder.feed(chunk) == [{"n": 1}, {"n": 2}]

    def test_frame_split_mid_payload(self) -> None:
        """Should keep the partial line until the rest arrives."""
        decoder = FrameDecoder()
        raw = frame({"text": "Hello world"})

        assert decoder.feed(raw[:12]) == []
        assert decoder.residual == raw[:12].decode()
        assert decoder.feed(raw[12:]) == [{"text": "Hello world"}]

    def test_multibyte_character_split_across_chunks(self) -> None:
        """Should decode a character split across chunks."""
        decoder = FrameDecoder()
        raw = frame({"text": "héllo ✓"})
        split = raw.index("✓".encode()) + 1

        assert decoder.feed(raw[:split]) == []
        assert decoder.feed(raw[split:]) == [{"text": "héllo ✓"}]

    def test_crlf_line_endings(self) -> None:
        """Should strip a trailing carriage return."""
        decoder = FrameDecoder()
        assert decoder.feed(b'data: {"a": 1}\r\n') == [{"a": 1}]

    def test_lines_without_prefix_ignored(self) -> None:
        """Should ignore lines without the frame prefix."""
        decoder = FrameDecoder()
        chunk = b": keep-alive\nevent: message\n" + frame({"a": 1})
        assert decoder.feed(chunk) == [{"a": 1}]

    def test_malformed_frame_dropped(self) -> None:
        """Should drop frames that are not JSON."""
        decoder = FrameDecoder()
        chunk = b"data: {not json\n" + frame({"ok": True})

        assert decoder.feed(chunk) == [{"ok": True}]
        assert decoder.dropped == 1

    def test_close_flushes_unterminated_frame(self) -> None:
        """Should decode a final frame without a newline on close."""
        decoder = FrameDecoder()
        assert decoder.feed(b'data: {"last": true}') == []
        assert decoder.close() == [{"last": True}]
        assert decoder.residual == ""

    def test_close_with_nothing_pending(self) -> None:
        """Should return nothing on close when empty."""
        decoder = FrameDecoder()
        decoder.feed(frame({"a": 1}))
        assert decoder.close() == []

    def test_custom_prefix(self) -> None:
        """Should honor a configured prefix."""
        decoder = FrameDecoder(prefix="event-data:")
        assert decoder.feed(b'event-data:{"a": 1}\ndata: {"b": 2}\n') == [{"a": 1}]
