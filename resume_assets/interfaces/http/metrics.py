"""Prometheus metrics for the HTTP surface."""

import time

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.routing import Match

NAMESPACE = "resume_assets"
LABELS = ("method", "path", "status")

REQUEST_DURATION = Histogram(
    "request_duration_seconds",
    "HTTP request latency in seconds.",
    LABELS,
    namespace=NAMESPACE,
    subsystem="http",
)
REQUESTS_TOTAL = Counter(
    "requests",
    "Total HTTP requests.",
    LABELS,
    namespace=NAMESPACE,
    subsystem="http",
)
IN_FLIGHT = Gauge(
    "in_flight_requests",
    "HTTP requests currently being served.",
    namespace=NAMESPACE,
    subsystem="http",
)


def route_template(request: Request) -> str:
    """Label requests by route template so ids and keys don't explode cardinality."""
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", request.url.path)
    return request.url.path


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status_code = 500
        with IN_FLIGHT.track_inprogress():
            try:
                response = await call_next(request)
                status_code = response.status_code
            finally:
                labels = {
                    "method": request.method,
                    "path": route_template(request),
                    "status": str(status_code),
                }
                REQUEST_DURATION.labels(**labels).observe(time.perf_counter() - start)
                REQUESTS_TOTAL.labels(**labels).inc()
        return response


router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


__all__ = ["PrometheusMiddleware", "route_template", "router"]
