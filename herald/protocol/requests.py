"""Outbound JSON-RPC ``message/stream`` requests.

Follow-up turns are correlated by ``contextId`` only. A task id, when
known, travels inside approval data parts and never on the message, so
the far end does not treat the request as resuming a finished task.
"""

import base64
import random
import string
import time
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from herald.conversation.models import ApprovalDecision

STREAM_METHOD = "message/stream"

_ID_ALPHABET = string.digits + string.ascii_lowercase


class Attachment(BaseModel):
    """A file sent alongside a user message."""

    name: str
    mime_type: str
    data: bytes

    def to_part(self) -> dict[str, Any]:
        return {
            "kind": "file",
            "file": {
                "bytes": base64.b64encode(self.data).decode("ascii"),
                "mimeType": self.mime_type,
                "name": self.name,
            },
        }


class OutboundMessage(BaseModel):
    """The ``params.message`` of a stream request."""

    model_config = ConfigDict(populate_by_name=True)

    context_id: str | None = Field(default=None, alias="contextId")
    role: Literal["user"] = "user"
    parts: list[dict[str, Any]] = Field(default_factory=list)


class StreamRequest(BaseModel):
    """A JSON-RPC 2.0 ``message/stream`` request."""

    jsonrpc: Literal["2.0"] = "2.0"
    method: str = STREAM_METHOD
    params: dict[str, OutboundMessage]
    id: str

    @property
    def message(self) -> OutboundMessage:
        return self.params["message"]

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON body sent on the wire."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def generate_request_id() -> str:
    """Short request id: epoch milliseconds plus seven base36 characters."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=7))
    return f"{int(time.time() * 1000)}-{suffix}"


def build_message_request(
    context_id: str | None,
    text: str,
    attachments: list[Attachment] | tuple[Attachment, ...] = (),
) -> StreamRequest:
    """Build the request for a user message."""
    parts: list[dict[str, Any]] = []
    text = text.strip()
    if text:
        parts.append({"kind": "text", "text": text})
    parts.extend(attachment.to_part() for attachment in attachments)

    message = OutboundMessage(context_id=context_id, parts=parts)
    return StreamRequest(params={"message": message}, id=generate_request_id())


def build_approval_request(
    context_id: str | None,
    decision: ApprovalDecision,
    tool_call_ids: list[str],
    tool_name: str | None = None,
    task_id: str | None = None,
) -> StreamRequest:
    """Build the follow-up request carrying an approval decision.

    Each gated tool call gets its own ``tool_approval`` data part. Without
    call ids the decision is sent as a plain text token.
    """
    parts: list[dict[str, Any]] = []
    for tool_call_id in tool_call_ids:
        data: dict[str, Any] = {
            "type": "tool_approval",
            "decision": decision.value,
            "tool_call_id": tool_call_id,
        }
        if tool_name:
            data["tool_name"] = tool_name
        if task_id:
            data["task_id"] = task_id
        parts.append({"kind": "data", "data": data})

    if not parts:
        parts.append({"kind": "text", "text": decision.value})

    message = OutboundMessage(context_id=context_id, parts=parts)
    return StreamRequest(params={"message": message}, id=generate_request_id())
