"""Normalized stream events.

The classifier decodes loosely-typed wire payloads once, at the
boundary, into these variants. Everything downstream works on them.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class EventModel(BaseModel):
    """Base for normalized events and parts (immutable)."""

    model_config = ConfigDict(frozen=True)


# Content parts


class TextPart(EventModel):
    """A free text fragment."""

    type: Literal["text"] = "text"
    text: str


class ToolUsePart(EventModel):
    """Start of a tool invocation."""

    type: Literal["tool_use"] = "tool_use"
    call_id: str
    name: str = "unknown"
    args: dict[str, Any] = Field(default_factory=dict)


class ToolResultPart(EventModel):
    """Result (or partial output) of a tool invocation."""

    type: Literal["tool_result"] = "tool_result"
    call_id: str
    content: str = ""
    is_error: bool = False
    status: str | None = None


class ThinkingPart(EventModel):
    """A fragment or snapshot of a thinking trace."""

    type: Literal["thinking"] = "thinking"
    thinking_id: str
    content: str = ""
    completed: bool = False
    thinking_type: str = "default"


class ImagePart(EventModel):
    """A generated or referenced image."""

    type: Literal["image"] = "image"
    image_id: str
    url: str
    revised_prompt: str | None = None


ContentPart = TextPart | ToolUsePart | ToolResultPart | ThinkingPart | ImagePart


# Events


class StatusEvent(EventModel):
    """Task status change, possibly a failure or a pause for approval."""

    type: Literal["status"] = "status"
    state: str
    task_id: str | None = None
    failure_message: str | None = None
    paused: bool = False
    gated_tool_call_ids: tuple[str, ...] = ()
    input_prompt: str | None = None

    @property
    def failed(self) -> bool:
        return self.failure_message is not None


class ContentEvent(EventModel):
    """Content update carrying one or more parts."""

    type: Literal["content"] = "content"
    task_id: str | None = None
    partial: bool = False
    invocation_id: str | None = None
    author: str | None = None
    active_author_id: str | None = None
    parts: tuple[ContentPart, ...] = ()
    metadata: dict[str, Any] = Field(default_factory=dict)


class TerminalSnapshotEvent(EventModel):
    """A full task object, expanded into content events."""

    type: Literal["snapshot"] = "snapshot"
    task_id: str | None = None
    contents: tuple[ContentEvent, ...] = ()


class UnrecognizedEvent(EventModel):
    """A payload the classifier does not understand."""

    type: Literal["unrecognized"] = "unrecognized"
    kind: str | None = None


StreamEvent = StatusEvent | ContentEvent | TerminalSnapshotEvent | UnrecognizedEvent
