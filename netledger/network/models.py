"""
Data models for observed network exchanges and their renderings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from netledger.config import Config

if TYPE_CHECKING:
    from patchright.async_api import Request, Response


@dataclass
class Exchange:
    """One request and the response attached to it, if any arrived yet."""

    id: str
    method: str
    url: str
    resource_type: str
    request_body: bytes | None = None
    response: Response | None = None

    @classmethod
    def from_request(cls, request: Request) -> Exchange:
        """Capture the immutable request side of a browser request."""
        return cls(
            id=request._guid,
            method=request.method.upper(),
            url=request.url,
            resource_type=request.resource_type,
            request_body=request.post_data_buffer,
        )

    @property
    def pending(self) -> bool:
        return self.response is None


class FilterCriteria(BaseModel):
    """Method / resource-type constraints. An empty set means no constraint."""
    methods: set[str] = Field(default_factory=set, description="HTTP methods, e.g. GET, POST")
    resource_types: set[str] = Field(default_factory=set, description="Resource types, e.g. xhr, document")

    @field_validator("methods")
    @classmethod
    def _upper_methods(cls, value: set[str]) -> set[str]:
        return {m.strip().upper() for m in value if m.strip()}

    @field_validator("resource_types")
    @classmethod
    def _lower_types(cls, value: set[str]) -> set[str]:
        return {t.strip().lower() for t in value if t.strip()}


class TruncationLimits(BaseModel):
    """Output budgets used when projecting and rendering exchanges."""
    request_body_bytes: int = Field(default_factory=lambda: Config.REQUEST_BODY_SNIPPET_BYTES, ge=0)
    json_max_array_length: int = Field(default_factory=lambda: Config.JSON_MAX_ARRAY_LENGTH, ge=0)
    json_max_string_length: int = Field(default_factory=lambda: Config.JSON_MAX_STRING_LENGTH, ge=0)
    json_max_bytes: int = Field(default_factory=lambda: Config.JSON_MAX_BYTES, ge=0)
    text_max_bytes: int = Field(default_factory=lambda: Config.TEXT_MAX_BYTES, ge=0)


class SummaryRecord(BaseModel):
    """Compact, serializable summary of one exchange (one JSONL line)."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    method: str
    url: str
    status: int | None = None
    resource_type: str = Field(alias="resourceType")
    request_body_snippet: str | None = None
    response_headers: dict[str, str] = Field(default_factory=dict)

    def to_line(self) -> str:
        return self.model_dump_json(by_alias=True)


# ── Render results ──────────────────────────────────────────────


class TextBody(BaseModel):
    """Textual body, linearly truncated."""
    kind: Literal["text"] = "text"
    text: str
    truncated: bool = Field(False, description="Whether the byte cap cut the body")


class JsonBody(BaseModel):
    """Structured body after structural truncation and the byte ceiling."""
    kind: Literal["json"] = "json"
    value: Any = Field(description="Structurally truncated value")
    text: str = Field(description="Serialized output, byte-ceiling applied")
    original_byte_length: int = Field(description="Size of the raw body in bytes")
    truncated: bool = Field(False, description="Whether the byte ceiling cut the text; if so it is not valid JSON")


class ImageBody(BaseModel):
    """Raw, untruncated image bytes."""
    kind: Literal["image"] = "image"
    data: bytes
    content_type: str


class OpaqueBody(BaseModel):
    """Binary content that is not displayed."""
    kind: Literal["opaque"] = "opaque"
    content_type: str

    @property
    def message(self) -> str:
        return (
            f'Response body is binary content of type "{self.content_type}" '
            "and cannot be displayed as text."
        )


class NotFound(BaseModel):
    kind: Literal["not_found"] = "not_found"
    request_id: str

    @property
    def message(self) -> str:
        return f"Request with id {self.request_id} not found."


class NoResponse(BaseModel):
    kind: Literal["no_response"] = "no_response"
    request_id: str

    @property
    def message(self) -> str:
        return f"Request with id {self.request_id} does not have a response."


class RenderError(BaseModel):
    kind: Literal["error"] = "error"
    request_id: str
    message: str


RenderedBody = Union[TextBody, JsonBody, ImageBody, OpaqueBody]
RenderResult = Union[TextBody, JsonBody, ImageBody, OpaqueBody, NotFound, NoResponse, RenderError]
