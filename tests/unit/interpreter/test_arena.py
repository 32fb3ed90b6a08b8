"""Tests for the turn arena."""

import pytest

from herald.conversation.models import (
    ImageBlock,
    MessageSnapshot,
    TextBlock,
    ToolInvocationBlock,
)
from herald.interpreter.arena import TurnArena


class TestTurnArena:
    def test_add_appends_to_order(self) -> None:
        """Should append new blocks to the content order."""
        arena = TurnArena()
        arena.add(TextBlock(id="b1"))
        arena.add(ToolInvocationBlock(id="tool_t1"))

        assert arena.order == ["b1", "tool_t1"]
        assert len(arena) == 2
        assert "tool_t1" in arena

    def test_duplicate_id_rejected(self) -> None:
        """Should reject a duplicate block id."""
        arena = TurnArena()
        arena.add(TextBlock(id="b1"))

        with pytest.raises(ValueError, match="b1"):
            arena.add(TextBlock(id="b1"))

    def test_order_is_a_copy(self) -> None:
        """Should not expose the internal order list."""
        arena = TurnArena()
        arena.add(TextBlock(id="b1"))

        arena.order.append("bogus")
        assert arena.order == ["b1"]

    def test_last_non_text_id(self) -> None:
        """Should find the most recent non-text block."""
        arena = TurnArena()
        assert arena.last_non_text_id() is None

        arena.add(TextBlock(id="b1"))
        arena.add(ImageBlock(id="image_1", url="https://img/1.png"))
        arena.add(TextBlock(id="b2"))

        assert arena.last_non_text_id() == "image_1"

    def test_commit_delta_only_touches_text(self) -> None:
        """Should commit deltas to text blocks only."""
        arena = TurnArena()
        arena.add(TextBlock(id="b1", content="Hel"))
        arena.add(ToolInvocationBlock(id="tool_t1"))

        arena.commit_delta("b1", "lo")
        arena.commit_delta("tool_t1", "ignored")
        arena.commit_delta("missing", "ignored")

        assert arena.get("b1").content == "Hello"
        assert arena.get("tool_t1").content == ""

    def test_replace_text_swaps_last_occurrence(self) -> None:
        """Should replace the last occurrence in the text projection."""
        arena = TurnArena()
        arena.text = "Hello. Hello"

        arena.replace_text("Hello", "Goodbye")

        assert arena.text == "Hello. Goodbye"

    def test_from_snapshot_orders_and_copies(self) -> None:
        """Should seed in content order and copy the snapshot blocks."""
        snapshot = MessageSnapshot(
            text="done",
            blocks=[
                ToolInvocationBlock(id="tool_t1"),
                TextBlock(id="b1", content="done"),
                TextBlock(id="straggler"),
            ],
            content_order=["b1", "tool_t1", "unknown"],
        )

        arena = TurnArena.from_snapshot(snapshot)
        arena.get("b1").content = "changed"

        assert arena.order == ["b1", "tool_t1", "straggler"]
        assert arena.text == "done"
        assert snapshot.blocks[1].content == "done"
