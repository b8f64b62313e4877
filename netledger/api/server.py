"""
FastAPI server — exposes the network ledger of a live browser page.

Launches the browser on startup, shuts it down on exit.

Usage:
    python -m netledger.api.server
    # or
    uvicorn netledger.api.server:app --host 127.0.0.1 --port 8000
"""

from __future__ import annotations

import hmac
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from netledger.browser.manager import BrowserManager
from netledger.config import Config
from netledger.api.routes import router, set_ledger
from netledger.log import setup_logging

log = setup_logging("api_server", log_file="api_server.log")

# Global instance — needed for lifespan
_browser: BrowserManager | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: launch browser and start recording. Shutdown: close it."""
    global _browser

    log.info("Starting browser for API server...")
    _browser = BrowserManager()
    await _browser.start()
    set_ledger(_browser.ledger, _browser)

    if Config.START_URL:
        try:
            await _browser.navigate(Config.START_URL)
        except Exception as e:
            # The page stays usable; /navigate can retry
            log.warning(f"Initial navigation to {Config.START_URL} failed: {e}")

    log.info("API server ready — browser launched, ledger recording")

    yield  # Server is running

    log.info("Shutting down — closing browser...")
    await _browser.close()
    log.info("Browser closed")


app = FastAPI(
    title="netledger",
    description=(
        "Network activity ledger for a live browser page. "
        "Lists observed requests and renders response bodies under size budgets."
    ),
    version="1.0.0",
    lifespan=lifespan,
)


# ── Auth & CORS ─────────────────────────────────────────────────
# Paths reachable without a token (docs and health-check)
OPEN_PATHS = frozenset({"/docs", "/redoc", "/openapi.json", "/healthz"})


def token_matches(header: str, token: str) -> bool:
    """Check an Authorization header against the configured token."""
    scheme, _, provided = header.partition(" ")
    if scheme.lower() != "bearer" or not provided:
        return False
    return hmac.compare_digest(provided.strip().encode(), token.encode())


@app.middleware("http")
async def require_token(request: Request, call_next):
    """Reject ledger routes without a valid bearer token when API_TOKEN is set."""
    token = Config.API_TOKEN
    if not token or request.method == "OPTIONS" or request.url.path in OPEN_PATHS:
        return await call_next(request)

    if not token_matches(request.headers.get("authorization", ""), token):
        log.info(f"Rejected unauthenticated {request.method} {request.url.path}")
        return JSONResponse(
            status_code=401,
            content={"detail": "Missing or invalid token, send Authorization: Bearer <API_TOKEN>"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return await call_next(request)


# Registered after the token check so preflight requests are answered first
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials="*" not in Config.CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)

app.include_router(router)


@app.get("/healthz", include_in_schema=False)
async def healthz():
    """Unauthenticated health-check for Docker / load-balancers."""
    return {"status": "ok"}


def run() -> None:
    import uvicorn

    uvicorn.run(
        "netledger.api.server:app",
        host=Config.API_HOST,
        port=Config.API_PORT,
        log_level="info",
    )


if __name__ == "__main__":
    run()
