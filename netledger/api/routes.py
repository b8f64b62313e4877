"""
API routes — FastAPI router for network inspection.

Endpoints:
  GET  /network/requests             List exchanges as JSONL
  GET  /network/requests/{id}/body   Render one response body
  POST /navigate                     Navigate the inspected page
  GET  /status                       Page URL + ledger size
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import PlainTextResponse, Response

from netledger.api.schemas import NavigateRequest, NavigateResponse, RenderResponse, StatusResponse
from netledger.browser.manager import BrowserManager
from netledger.config import Config
from netledger.log import setup_logging
from netledger.network.ledger import NetworkLedger
from netledger.network.models import (
    FilterCriteria,
    ImageBody,
    JsonBody,
    NoResponse,
    NotFound,
    OpaqueBody,
    RenderError,
    TextBody,
)
from netledger.network.projector import list_requests
from netledger.network.renderer import ResponseRenderer
from netledger.network.truncation import first_line

log = setup_logging("api_routes")

router = APIRouter()

# Global references — set by the server on startup
_ledger: NetworkLedger | None = None
_renderer: ResponseRenderer | None = None
_browser: BrowserManager | None = None


def set_ledger(ledger: NetworkLedger, browser: BrowserManager | None = None) -> None:
    """Called by server.py to inject the ledger of the inspected page."""
    global _ledger, _renderer, _browser
    _ledger = ledger
    _renderer = ResponseRenderer(ledger)
    _browser = browser


def _get_ledger() -> NetworkLedger:
    if _ledger is None:
        raise HTTPException(status_code=503, detail="Network ledger not initialized")
    return _ledger


def _get_renderer() -> ResponseRenderer:
    if _renderer is None:
        raise HTTPException(status_code=503, detail="Network ledger not initialized")
    return _renderer


def _get_browser() -> BrowserManager:
    if _browser is None:
        raise HTTPException(status_code=503, detail="Browser not initialized")
    return _browser


# ── Network ─────────────────────────────────────────────────────


@router.get(
    "/network/requests",
    response_class=PlainTextResponse,
    description=(
        "All network requests since the page loaded, one JSON object per line. "
        "Method and resource-type filters are OR-combined: an entry matching "
        "either one is listed. Omitting resource_types applies the configured "
        "default; pass an empty value to list every type."
    ),
)
async def network_requests(
    methods: list[str] = Query([], description="HTTP methods, e.g. GET"),
    resource_types: list[str] | None = Query(None, description="Resource types, e.g. xhr, document"),
) -> PlainTextResponse:
    ledger = _get_ledger()
    if resource_types is None:
        resource_types = Config.DEFAULT_RESOURCE_TYPES
    criteria = FilterCriteria(methods=set(methods), resource_types=set(resource_types))
    log.info(f"GET /network/requests — methods={sorted(criteria.methods)} types={sorted(criteria.resource_types)}")

    lines = await list_requests(ledger, criteria, _get_renderer().limits)
    body = "\n".join(lines) + ("\n" if lines else "")
    return PlainTextResponse(body, media_type="application/x-ndjson")


@router.get(
    "/network/requests/{request_id}/body",
    response_model=RenderResponse,
    responses={200: {"content": {"image/*": {}}}},
)
async def network_response_body(request_id: str):
    """Response body of one request: images raw, JSON truncated, text capped."""
    renderer = _get_renderer()
    log.info(f"GET /network/requests/{request_id}/body")

    result = await renderer.render(request_id)

    if isinstance(result, NotFound):
        raise HTTPException(status_code=404, detail=result.message)
    if isinstance(result, NoResponse):
        raise HTTPException(status_code=409, detail=result.message)
    if isinstance(result, RenderError):
        raise HTTPException(status_code=502, detail=result.message)

    if isinstance(result, ImageBody):
        return Response(content=result.data, media_type=result.content_type)
    if isinstance(result, JsonBody):
        return RenderResponse(
            request_id=request_id,
            kind=result.kind,
            content=result.text,
            content_type="application/json",
            original_byte_length=result.original_byte_length,
            truncated=result.truncated,
        )
    if isinstance(result, OpaqueBody):
        return RenderResponse(
            request_id=request_id,
            kind=result.kind,
            content=result.message,
            content_type=result.content_type,
        )
    if isinstance(result, TextBody):
        return RenderResponse(request_id=request_id, kind=result.kind, content=result.text, truncated=result.truncated)

    raise HTTPException(status_code=500, detail=f"Unexpected render result: {result.kind}")


# ── Browser ─────────────────────────────────────────────────────


@router.post("/navigate", response_model=NavigateResponse)
async def navigate(req: NavigateRequest) -> NavigateResponse:
    """Navigate the inspected page. The ledger keeps recording."""
    browser = _get_browser()
    log.info(f"POST /navigate — {req.url}")

    try:
        await browser.navigate(req.url)
    except Exception as e:
        log.error(f"Navigation error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=first_line(e))
    return NavigateResponse(url=browser.page.url, exchanges=len(browser.ledger))


# ── Status ──────────────────────────────────────────────────────


@router.get("/status", response_model=StatusResponse)
async def status() -> StatusResponse:
    """Health check — page URL and ledger size."""
    if _ledger is None:
        return StatusResponse(status="starting")
    page_url = ""
    if _browser is not None:
        try:
            page_url = _browser.page.url
        except RuntimeError:
            page_url = ""
    return StatusResponse(status="ok", page_url=page_url, recording=_ledger.active, exchanges=len(_ledger))
