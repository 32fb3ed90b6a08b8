"""Turn reference and message snapshot models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from herald.conversation.models.blocks import AnyBlock, ContentBlock


class TurnRef(BaseModel):
    """Addresses the agent message a turn streams into."""

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(..., min_length=1, description="Conversation identifier")
    message_id: str = Field(..., min_length=1, description="Target message identifier")


class MessageSnapshot(BaseModel):
    """Host-side view of an agent message."""

    text: str = ""
    blocks: list[ContentBlock] = Field(default_factory=list)
    content_order: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    cancelled: bool = False
    task_id: str | None = None

    def get_block(self, block_id: str) -> AnyBlock | None:
        """Return the block with the given id, if present."""
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None


class MessagePatch(BaseModel):
    """Partial update applied to a message; unset fields are left alone."""

    text: str | None = None
    blocks: list[ContentBlock] | None = None
    content_order: list[str] | None = None
    metadata: dict[str, Any] | None = None
    cancelled: bool | None = None
