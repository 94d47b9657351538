from __future__ import annotations

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from standards_api.telemetry.logging import get_logger
from standards_api.telemetry.metrics import api_request_duration_seconds, api_requests_total


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        trace_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        logger = get_logger().bind(trace_id=trace_id)
        method = request.method.upper()

        t0 = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers.setdefault("X-Request-ID", trace_id)
            return response
        finally:
            dt = time.perf_counter() - t0
            # path template once routing has run, e.g. /api/files/{file_id}
            route = request.scope.get("route")
            endpoint = getattr(route, "path", None) or "unmatched"
            api_requests_total.labels(method=method, endpoint=endpoint, status=str(status_code)).inc()
            api_request_duration_seconds.labels(endpoint=endpoint).observe(dt)
            logger.info(
                "request",
                action=f"{method} {endpoint}",
                duration_ms=round(dt * 1000.0, 3),
                result="ok" if status_code < 400 else "error",
                status=status_code,
            )
