"""Event classifier: decoded payload -> normalized stream event.

Pure and idempotent. Unknown data-part types and parts that fail
validation are skipped rather than failing the whole event.
"""

import json
from typing import Any

from pydantic import ValidationError

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
from herald.protocol.wire import WireArtifact, WireError, WireResult, unwrap_result

PAUSE_STATES = frozenset({"input-required", "input_required"})
FAILED_STATE = "failed"

DEFAULT_FAILURE_MESSAGE = "Agent execution failed with unknown error."
DEFAULT_INPUT_PROMPT = "Human input required."


def classify(payload: Any) -> StreamEvent:
    """Classify a decoded frame payload."""
    if not isinstance(payload, dict):
        return UnrecognizedEvent()

    error = payload.get("error")
    if isinstance(error, dict) and "result" not in payload:
        return _classify_rpc_error(error)

    try:
        result = WireResult.model_validate(unwrap_result(payload))
    except ValidationError:
        return UnrecognizedEvent()

    if result.kind == "status-update":
        return _classify_status(result)
    if result.kind == "artifact-update":
        return _classify_content(result, result.artifact)
    if result.kind == "task":
        contents = tuple(
            _classify_content(result, artifact) for artifact in result.artifacts or []
        )
        return TerminalSnapshotEvent(task_id=result.task_id, contents=contents)
    if result.artifact is not None:
        return _classify_content(result, result.artifact)
    return UnrecognizedEvent(kind=result.kind)


def _classify_rpc_error(error: dict[str, Any]) -> StatusEvent:
    try:
        wire_error = WireError.model_validate(error)
        message = wire_error.message or DEFAULT_FAILURE_MESSAGE
    except ValidationError:
        message = DEFAULT_FAILURE_MESSAGE
    return StatusEvent(state=FAILED_STATE, failure_message=message)


def _classify_status(result: WireResult) -> StatusEvent:
    state = result.status.state if result.status else ""

    if state == FAILED_STATE:
        message = None
        if result.status and result.status.message and result.status.message.parts:
            message = result.status.message.parts[0].text
        return StatusEvent(
            state=state,
            task_id=result.task_id,
            failure_message=message or DEFAULT_FAILURE_MESSAGE,
        )

    if state in PAUSE_STATES:
        ids = result.metadata.get("long_running_tool_ids") or []
        prompt = result.metadata.get("input_prompt") or DEFAULT_INPUT_PROMPT
        return StatusEvent(
            state=state,
            task_id=result.task_id,
            paused=True,
            gated_tool_call_ids=tuple(str(i) for i in ids),
            input_prompt=str(prompt),
        )

    return StatusEvent(state=state, task_id=result.task_id)


def _classify_content(result: WireResult, artifact: WireArtifact | None) -> ContentEvent:
    metadata = result.metadata
    author = metadata.get("author") or metadata.get("event_author")
    author = str(author) if author else None
    agent_id = metadata.get("agent_id")
    invocation_id = metadata.get("invocation_id")

    parts: list[ContentPart] = []

    # Legacy side channel: tool results attached to the event metadata
    for entry in metadata.get("tool_results") or []:
        if isinstance(entry, dict):
            part = _tool_result_part(entry)
            if part is not None:
                parts.append(part)

    if artifact is not None:
        for wire_part in artifact.parts:
            if wire_part.kind == "text" and wire_part.text:
                parts.append(TextPart(text=wire_part.text))
            elif wire_part.kind == "data" and isinstance(wire_part.data, dict):
                part = _data_part(wire_part.data)
                if part is not None:
                    parts.append(part)

    return ContentEvent(
        task_id=result.task_id,
        partial=metadata.get("partial") is True,
        invocation_id=str(invocation_id) if invocation_id else None,
        author=author,
        active_author_id=str(agent_id) if agent_id else author,
        parts=tuple(parts),
        metadata=dict(metadata),
    )


def _data_part(data: dict[str, Any]) -> ContentPart | None:
    data_type = data.get("type")
    try:
        if data_type == "thinking":
            if not data.get("id"):
                return None
            return ThinkingPart(
                thinking_id=str(data["id"]),
                content=_as_text(data.get("content")),
                completed=data.get("status") == "completed",
                thinking_type=str(data.get("thinking_type") or "default"),
            )
        if data_type == "tool_use":
            if not data.get("id"):
                return None
            args = data.get("arguments") or data.get("input") or {}
            return ToolUsePart(
                call_id=str(data["id"]),
                name=str(data.get("name") or "unknown"),
                args=args if isinstance(args, dict) else {"value": args},
            )
        if data_type == "tool_result":
            return _tool_result_part(data)
        if data_type == "image":
            if not data.get("url"):
                return None
            return ImagePart(
                image_id=str(data.get("id") or data["url"]),
                url=str(data["url"]),
                revised_prompt=data.get("revised_prompt"),
            )
    except ValidationError:
        return None
    return None


def _tool_result_part(entry: dict[str, Any]) -> ToolResultPart | None:
    call_id = entry.get("tool_call_id")
    if not call_id:
        return None
    status = entry.get("status")
    return ToolResultPart(
        call_id=str(call_id),
        content=_as_text(entry.get("content")),
        is_error=entry.get("is_error") is True,
        status=str(status) if status else None,
    )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)
