"""
Pydantic request/response schemas for the API.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class NavigateRequest(BaseModel):
    """Request body for navigating the inspected page."""
    url: str = Field(..., min_length=1, description="Absolute URL to open")


class NavigateResponse(BaseModel):
    url: str = Field(..., description="Page URL after navigation")
    exchanges: int = Field(0, description="Exchanges recorded so far")


class RenderResponse(BaseModel):
    """Rendered (non-image) response body."""
    request_id: str
    kind: str = Field(..., description="'text', 'json' or 'opaque'")
    content: str = Field(..., description="Rendered body, or a notice for opaque content")
    content_type: str = Field("", description="Content type of the response, when known")
    original_byte_length: int | None = Field(None, description="Raw body size for JSON bodies")
    truncated: bool = Field(False, description="True when a byte cap cut the content; cut JSON is not parseable")


class StatusResponse(BaseModel):
    """Health check / status."""
    status: str = "ok"
    page_url: str = ""
    recording: bool = False
    exchanges: int = 0
