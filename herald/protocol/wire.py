"""Pydantic models for the consumed A2A stream wire format.

Frames carry ``{"result": {...}}`` JSON-RPC envelopes or the unwrapped
result. The models accept unknown fields, since producers attach
arbitrary metadata. Producers that encode empty collections as ``null``
are accepted too.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WireModel(BaseModel):
    """Base for wire models: tolerant of extra fields, aliases by name."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class WirePart(WireModel):
    """A single artifact part: ``text`` or ``data``."""

    kind: str = ""
    text: str | None = None
    data: Any = None


class WireArtifact(WireModel):
    """An artifact carrying ordered parts."""

    artifact_id: str | None = Field(default=None, alias="artifactId")
    parts: list[WirePart] = Field(default_factory=list)

    @field_validator("parts", mode="before")
    @classmethod
    def null_parts(cls, v: Any) -> Any:
        return [] if v is None else v


class WireStatusMessage(WireModel):
    parts: list[WirePart] = Field(default_factory=list)

    @field_validator("parts", mode="before")
    @classmethod
    def null_parts(cls, v: Any) -> Any:
        return [] if v is None else v


class WireStatus(WireModel):
    """Task status carried by status updates."""

    state: str = ""
    message: WireStatusMessage | None = None


class WireResult(WireModel):
    """The unwrapped result of a stream frame."""

    kind: str | None = None
    task_id: str | None = Field(default=None, alias="taskId")
    status: WireStatus | None = None
    artifact: WireArtifact | None = None
    artifacts: list[WireArtifact] | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def null_metadata(cls, v: Any) -> Any:
        return {} if v is None else v


class WireError(WireModel):
    """A JSON-RPC error object."""

    code: int | None = None
    message: str = ""


def unwrap_result(payload: dict[str, Any]) -> dict[str, Any]:
    """Strip the JSON-RPC ``result`` envelope if present."""
    result = payload.get("result")
    if isinstance(result, dict):
        return result
    return payload
