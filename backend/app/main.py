from __future__ import annotations

import uuid

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from app.api import health as health_api
from app.core.errors import ApiError, api_error_handler, generic_exception_handler
from app.core.settings import get_settings
from app.logging_utils import (
    bind_request_context,
    configure_logging,
    get_logger,
)
from app.metrics import render_all_metrics_prometheus, track_http_request
from app.routers import sessions
from app.services.session_store import SessionStore

app = FastAPI(title="Session Transcriber")

# Configure structured logging for the API once at startup
configure_logging("api", get_settings().LOG_LEVEL)
logger = get_logger(__name__)

# The single in-memory store for this process; handlers reach it via app.state.
app.state.session_store = SessionStore()
# Provider client, built lazily by the first request that needs it.
app.state.openai_client = None

app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.on_event("shutdown")
async def close_openai_client() -> None:
    client = app.state.openai_client
    if client is not None:
        app.state.openai_client = None
        await client.close()


# ---------------------------------------------------------------------------
# Observability middleware (request ID + HTTP metrics)
# ---------------------------------------------------------------------------


@app.middleware("http")
async def observability_middleware(request: Request, call_next):
    """
    Attach a request_id to logs and track basic HTTP metrics
    (path/method/status + latency) for every request.
    """
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    bind_request_context(request_id)

    status_holder: dict[str, int] = {"status": 500}

    path = request.url.path
    method = request.method

    with track_http_request(path, method, lambda: status_holder["status"]):
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "unhandled error in request",
                extra={"path": path, "method": method},
            )
            raise
        status_holder["status"] = response.status_code

    response.headers["x-request-id"] = request_id
    return response


# ---------------------------------------------------------------------------
# Health + metrics
# ---------------------------------------------------------------------------

app.include_router(health_api.router)
# Alias for clients or reverse proxies that expect /api/healthz.
app.include_router(health_api.router, prefix="/api")


@app.get(
    "/metrics-prom",
    response_class=PlainTextResponse,
    include_in_schema=False,
)
async def metrics_prometheus() -> str:
    """Prometheus-style metrics endpoint for scraping and debugging."""
    return render_all_metrics_prometheus()


# ---------------------------------------------------------------------------
# API routers
# ---------------------------------------------------------------------------

app.include_router(sessions.router)
# The browser client historically posted to /api/sessions; keep that path alive.
app.include_router(sessions.router, prefix="/api", include_in_schema=False)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
