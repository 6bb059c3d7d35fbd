"""
Prometheus middleware recording per-request HTTP metrics.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.ulid_helper import is_valid_ulid
from ..monitoring.prometheus_metrics import prometheus_metrics

METRICS_PATH = "/metrics/prometheus"


def normalize_path(raw_path: str) -> str:
    """Collapse ULID and numeric segments so labels stay low-cardinality."""
    return "/".join(
        ":id" if segment.isdigit() or is_valid_ulid(segment) else segment
        for segment in raw_path.split("/")
    )


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Collect duration, count and in-flight gauges for each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == METRICS_PATH:
            return await call_next(request)

        method = request.method
        path = normalize_path(request.url.path)

        prometheus_metrics.track_http_request_start(method, path)
        start_time = time.time()
        try:
            response = await call_next(request)
            prometheus_metrics.record_http_request(
                method=method,
                endpoint=path,
                duration=time.time() - start_time,
                status_code=response.status_code,
            )
            return response
        finally:
            prometheus_metrics.track_http_request_end(method, path)
