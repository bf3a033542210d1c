# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP middleware: X-Request-ID propagation and request metrics.
"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from promptcadence.metrics.prometheus import REQUEST_COUNT, REQUEST_LATENCY, HTTP_ERRORS

REQUEST_ID_HEADER = "X-Request-ID"

# Path segments kept verbatim in metric labels; anything else is an id
ROUTE_SEGMENTS: frozenset[str] = frozenset({
    "api", "v1", "groups", "members", "rotate", "cadence", "cadences",
    "entries", "readiness", "schedule", "rebuild", "history",
})

UNMETERED_PATHS: frozenset[str] = frozenset({
    "/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc",
})


def route_template(path: str) -> str:
    """/api/v1/groups/<uuid>/members/u-1 -> /api/v1/groups/{id}/members/{id}"""
    segments = [s for s in path.split("/") if s]
    if not segments:
        return "/"
    return "/" + "/".join(s if s in ROUTE_SEGMENTS else "{id}" for s in segments)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Echo the caller's X-Request-ID, or mint one."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count and time API requests by method, route template and status."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        if request.url.path in UNMETERED_PATHS:
            return response

        endpoint = route_template(request.url.path)
        status = str(response.status_code)
        REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(
            time.perf_counter() - started
        )
        REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=status).inc()
        if response.status_code >= 400:
            HTTP_ERRORS.labels(method=request.method, endpoint=endpoint, status=status).inc()
        return response
