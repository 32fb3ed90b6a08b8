"""Content block models.

A block is an independently addressable unit of turn content. Its id is
stable for its lifetime and it is only ever mutated in place.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from herald.conversation.models.enums import (
    ApprovalDecision,
    ApprovalStatus,
    ImageStatus,
    TextStatus,
    ThinkingStatus,
    ToolStatus,
)


class BaseBlock(BaseModel):
    """Fields shared by every block kind."""

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    id: str = Field(..., min_length=1, description="Unique within the turn")
    content: str = Field(default="", description="Free text payload")
    author: str | None = Field(default=None, description="Attribution")
    expanded: bool = Field(default=True, description="Display hint")


class TextBlock(BaseBlock):
    """A run of free text."""

    kind: Literal["text"] = "text"
    status: TextStatus = TextStatus.ACTIVE


class ToolInvocationBlock(BaseBlock):
    """A tool call and its (possibly streamed) result."""

    kind: Literal["tool"] = "tool"
    status: ToolStatus = ToolStatus.WORKING
    name: str = Field(default="unknown", description="Tool name")
    args: dict[str, Any] = Field(default_factory=dict, description="Call arguments")


class ThinkingBlock(BaseBlock):
    """A reasoning trace."""

    kind: Literal["thinking"] = "thinking"
    status: ThinkingStatus = ThinkingStatus.ACTIVE
    thinking_type: str = Field(default="default", description="todo, goal, reflection, default")


class ApprovalRequestBlock(BaseBlock):
    """A human-in-the-loop approval gate over prior tool calls."""

    kind: Literal["approval"] = "approval"
    status: ApprovalStatus = ApprovalStatus.PENDING
    decision: ApprovalDecision | None = None
    tool_name: str = Field(default="Unknown Tool", description="Display name of the gated tool")
    tool_input: dict[str, Any] = Field(default_factory=dict, description="Display arguments")
    task_id: str | None = Field(default=None, description="Task that paused")
    gated_tool_call_ids: list[str] = Field(
        default_factory=list, description="Server call ids awaiting the decision"
    )
    prompt: str = Field(default="Human input required.", description="Prompt shown to the user")


class ImageBlock(BaseBlock):
    """A generated or referenced image."""

    kind: Literal["image"] = "image"
    status: ImageStatus = ImageStatus.LOADED
    url: str = Field(..., description="Image location")
    revised_prompt: str | None = None


AnyBlock = TextBlock | ToolInvocationBlock | ThinkingBlock | ApprovalRequestBlock | ImageBlock

ContentBlock = Annotated[AnyBlock, Field(discriminator="kind")]
