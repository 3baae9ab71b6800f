"""
Ali Kebaba menu API.
Public multilingual menu and locations; admin item management, XLSX round trip,
auto-translation and a live change stream behind a JWT admin session.
"""
from __future__ import annotations

import time
import uuid as uuid_lib

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response

from jelovnik.api import admin, auth, locations, menu, realtime, spreadsheet
from jelovnik.config import get_settings
from jelovnik.core.logging import configure_logging, request_id_ctx

settings = get_settings()
configure_logging(settings.log_level)

# Sentry (configurable via SENTRY_DSN)
if settings.sentry_dsn:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.app_env,
        traces_sample_rate=0.1,
        integrations=[FastApiIntegration()],
    )

app = FastAPI(
    title="Ali Kebaba Menu API",
    description="Multilingual restaurant menu with an admin back office.",
    version="1.0.0",
    openapi_tags=[
        {"name": "menu", "description": "Public menu tabs (hr/en/de/tr)"},
        {"name": "locations", "description": "Restaurant locations and working hours"},
        {"name": "auth", "description": "JWT login"},
        {"name": "admin", "description": "Menu item management (admin only)"},
        {"name": "spreadsheet", "description": "XLSX export / import (admin only)"},
        {"name": "realtime", "description": "Live menu change stream (admin only)"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Request-ID"],
)

# Prometheus metrics
REQUEST_COUNT = Counter("http_requests_total", "Total requests", ["method", "path", "status"])
REQUEST_LATENCY = Histogram("http_request_duration_seconds", "Request latency", ["method", "path"])


def _route_path(request: Request) -> str:
    # Templated path keeps label cardinality bounded (/admin/items/{external_id})
    route = request.scope.get("route")
    return getattr(route, "path", request.scope.get("path", ""))


@app.middleware("http")
async def request_id_and_metrics(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid_lib.uuid4())
    request_id_ctx.set(request_id)
    start = time.perf_counter()
    method = request.scope.get("method", "")
    response = await call_next(request)
    duration = time.perf_counter() - start
    path = _route_path(request)
    REQUEST_COUNT.labels(method=method, path=path, status=response.status_code).inc()
    REQUEST_LATENCY.labels(method=method, path=path).observe(duration)
    response.headers["X-Request-ID"] = request_id
    return response


prefix = settings.api_prefix
app.include_router(menu.router, prefix=prefix)
app.include_router(locations.router, prefix=prefix)
app.include_router(auth.router, prefix=prefix)
app.include_router(admin.router, prefix=prefix)
app.include_router(spreadsheet.router, prefix=prefix)
app.include_router(realtime.router, prefix=prefix)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/metrics")
async def metrics():
    return Response(generate_latest(), media_type="text/plain")


@app.get("/")
async def root():
    return {"message": "Ali Kebaba Menu API", "docs": "/docs"}
