"""Tests for conversation content models."""

import pytest
from pydantic import ValidationError

from herald.conversation.models import (
    ApprovalRequestBlock,
    BlockKind,
    ImageBlock,
    MessageSnapshot,
    TextBlock,
    ThinkingBlock,
    ToolInvocationBlock,
    ToolStatus,
    TurnRef,
)


class TestBlocks:
    """Tests for block models."""

    def test_kinds_match_block_kind(self) -> None:
        """Should tag each block model with its BlockKind."""
        blocks = [
            TextBlock(id="t"),
            ToolInvocationBlock(id="tool"),
            ThinkingBlock(id="th"),
            ApprovalRequestBlock(id="a"),
            ImageBlock(id="i", url="https://example.com/x.png"),
        ]
        assert [BlockKind(b.kind) for b in blocks] == list(BlockKind)

    def test_empty_id_rejected(self) -> None:
        """Should reject an empty block id."""
        with pytest.raises(ValidationError):
            TextBlock(id="")

    def test_status_assignment_validated(self) -> None:
        """Should validate status on assignment."""
        block = ToolInvocationBlock(id="tool_1")
        block.status = "success"
        assert block.status == ToolStatus.SUCCESS

        with pytest.raises(ValidationError):
            block.status = "exploded"


class TestMessageSnapshot:
    """Tests for MessageSnapshot parsing and lookup."""

    def test_blocks_parsed_by_kind(self) -> None:
        """Should parse snapshot blocks by their kind discriminator."""
        snapshot = MessageSnapshot.model_validate(
            {
                "blocks": [
                    {"id": "b1", "kind": "text", "content": "hi"},
                    {"id": "b2", "kind": "tool", "name": "search", "status": "working"},
                ],
                "content_order": ["b1", "b2"],
            }
        )

        assert isinstance(snapshot.blocks[0], TextBlock)
        assert isinstance(snapshot.blocks[1], ToolInvocationBlock)
        assert snapshot.get_block("b2").name == "search"
        assert snapshot.get_block("missing") is None

    def test_unknown_kind_rejected(self) -> None:
        """Should reject a block with an unknown kind."""
        with pytest.raises(ValidationError):
            MessageSnapshot.model_validate({"blocks": [{"id": "b1", "kind": "video"}]})


class TestTurnRef:
    def test_frozen_and_hashable(self) -> None:
        """Should be immutable and usable as a dict key."""
        ref = TurnRef(session_id="s", message_id="m")

        with pytest.raises(ValidationError):
            ref.message_id = "other"
        assert {ref: 1}[TurnRef(session_id="s", message_id="m")] == 1
