"""A2A stream protocol: wire models, event classification, outbound requests."""

from herald.protocol.classifier import classify
from herald.protocol.events import (
    ContentEvent,
    ContentPart,
    ImagePart,
    StatusEvent,
    StreamEvent,
    TerminalSnapshotEvent,
    TextPart,
    ThinkingPart,
    ToolResultPart,
    ToolUsePart,
    UnrecognizedEvent,
)
from herald.protocol.requests import (
    Attachment,
    StreamRequest,
    build_approval_request,
    build_message_request,
)

__all__ = [
    "classify",
    # Events
    "ContentEvent",
    "StatusEvent",
    "StreamEvent",
    "TerminalSnapshotEvent",
    "UnrecognizedEvent",
    # Parts
    "ContentPart",
    "ImagePart",
    "TextPart",
    "ThinkingPart",
    "ToolResultPart",
    "ToolUsePart",
    # Requests
    "Attachment",
    "StreamRequest",
    "build_approval_request",
    "build_message_request",
]
