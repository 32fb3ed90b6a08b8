"""Conversation content models.

Contains the typed content model reconstructed from a turn stream:
- Blocks (text, tool invocation, thinking, approval, image)
- Per-kind status enums
- Turn references, message snapshots and patches
"""

from herald.conversation.models.blocks import (
    AnyBlock,
    ApprovalRequestBlock,
    BaseBlock,
    ContentBlock,
    ImageBlock,
    TextBlock,
    ThinkingBlock,
    ToolInvocationBlock,
)
from herald.conversation.models.enums import (
    ApprovalDecision,
    ApprovalStatus,
    BlockKind,
    ImageStatus,
    TextStatus,
    ThinkingStatus,
    ToolStatus,
    TurnOutcome,
)
from herald.conversation.models.turn import MessagePatch, MessageSnapshot, TurnRef

__all__ = [
    # Enums
    "ApprovalDecision",
    "ApprovalStatus",
    "BlockKind",
    "ImageStatus",
    "TextStatus",
    "ThinkingStatus",
    "ToolStatus",
    "TurnOutcome",
    # Blocks
    "AnyBlock",
    "ApprovalRequestBlock",
    "BaseBlock",
    "ContentBlock",
    "ImageBlock",
    "TextBlock",
    "ThinkingBlock",
    "ToolInvocationBlock",
    # Turn
    "MessagePatch",
    "MessageSnapshot",
    "TurnRef",
]
