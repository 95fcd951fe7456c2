"""HTTP middleware."""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from resume_assets.core.logging import reset_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Ensure every request carries a correlation id, echoed on the response.

    A completion line (method, path, status, latency) is logged while the id
    is still bound, so it carries the same correlation id as the handler logs.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        token = set_correlation_id(correlation_id)
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            latency_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "%s %s -> %d in %.1fms",
                request.method,
                request.url.path,
                status_code,
                latency_ms,
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": status_code,
                    "latency_ms": round(latency_ms, 3),
                },
            )
            reset_correlation_id(token)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
