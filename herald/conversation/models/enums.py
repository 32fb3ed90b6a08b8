"""Enumerations for the turn content model."""

from enum import Enum


class BlockKind(str, Enum):
    """Discriminator for content blocks."""

    TEXT = "text"
    TOOL = "tool"
    THINKING = "thinking"
    APPROVAL = "approval"
    IMAGE = "image"


class TextStatus(str, Enum):
    """Lifecycle of a text block: active -> completed."""

    ACTIVE = "active"
    COMPLETED = "completed"


class ThinkingStatus(str, Enum):
    """Lifecycle of a thinking trace: active -> completed."""

    ACTIVE = "active"
    COMPLETED = "completed"


class ToolStatus(str, Enum):
    """Lifecycle of a tool invocation: working -> success | failed."""

    PENDING = "pending"
    WORKING = "working"
    SUCCESS = "success"
    FAILED = "failed"


class ApprovalStatus(str, Enum):
    """Lifecycle of an approval request: pending -> decided."""

    PENDING = "pending"
    DECIDED = "decided"


class ImageStatus(str, Enum):
    """Load state of an image block."""

    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class ApprovalDecision(str, Enum):
    """Decision a caller supplies for an approval request."""

    APPROVE = "approve"
    DENY = "deny"


class TurnOutcome(str, Enum):
    """Terminal state of a turn. Exactly one is reached per turn."""

    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
