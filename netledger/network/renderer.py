"""
Response renderer — renders one exchange's body under output budgets.

    resolve -> require response -> classify -> dispatch

Every outcome is returned as a result object; nothing raises out of
render(), and the exchange itself is never modified.
"""

from __future__ import annotations

import json
from typing import Mapping

from netledger.log import setup_logging
from netledger.network.content import ContentKind, charset, classify, content_type
from netledger.network.ledger import NetworkLedger
from netledger.network.models import (
    ImageBody,
    JsonBody,
    NoResponse,
    NotFound,
    OpaqueBody,
    RenderedBody,
    RenderError,
    RenderResult,
    TextBody,
    TruncationLimits,
)
from netledger.network.truncation import first_line, truncate_bytes, truncate_json

log = setup_logging("renderer")


class ResponseRenderer:
    """Render response bodies of exchanges recorded in a ledger."""

    def __init__(self, ledger: NetworkLedger, limits: TruncationLimits | None = None) -> None:
        self._ledger = ledger
        self.limits = limits or TruncationLimits()

    async def render(self, request_id: str) -> RenderResult:
        exchange = self._ledger.lookup(request_id)
        if exchange is None:
            log.info(f"Render: unknown request id {request_id}")
            return NotFound(request_id=request_id)

        response = exchange.response
        if response is None:
            log.info(f"Render: request {request_id} has no response yet")
            return NoResponse(request_id=request_id)

        try:
            headers = await response.all_headers()
            kind = classify(headers)
            if kind is ContentKind.OPAQUE:
                return OpaqueBody(content_type=content_type(headers))
            body = await response.body()
        except Exception as e:
            log.warning(f"Render failed for {request_id} ({exchange.url[:120]}): {e}")
            return RenderError(
                request_id=request_id,
                message=f"Could not retrieve body for request {request_id}: {first_line(e)}",
            )

        result = self.render_body(kind, body, headers)
        log.debug(f"Rendered {request_id} as {result.kind} ({len(body)} bytes)")
        return result

    def render_body(self, kind: ContentKind, body: bytes, headers: Mapping[str, str]) -> RenderedBody:
        """Dispatch an already-fetched body on its content kind."""
        if kind is ContentKind.STRUCTURED:
            try:
                value = json.loads(body)
                truncated, text, cut = truncate_json(value, self.limits)
            except (ValueError, RecursionError) as e:
                # Undecodable, or nested deeper than json can serialize
                log.debug(f"JSON rendering failed, rendering as text: {first_line(e)}")
            else:
                return JsonBody(value=truncated, text=text, original_byte_length=len(body), truncated=cut)
            return self._text(body, headers)

        if kind is ContentKind.TEXTUAL:
            return self._text(body, headers)

        if kind is ContentKind.IMAGE:
            return ImageBody(data=body, content_type=content_type(headers))

        return OpaqueBody(content_type=content_type(headers))

    def _text(self, body: bytes, headers: Mapping[str, str]) -> TextBody:
        limit = self.limits.text_max_bytes
        return TextBody(text=truncate_bytes(body, limit, charset(headers)), truncated=len(body) > limit)
