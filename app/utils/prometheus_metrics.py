"""
Prometheus metrics: HTTP traffic, log volume and delivery lookups.

Exposed on ``GET /api/monitoring/metrics``.
"""
import re
from time import perf_counter
from typing import Callable

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST  # noqa: F401
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

EXCLUDED_PATHS = ("/api/monitoring/metrics",)

http_requests_total = Counter(
    'http_requests_total',
    'HTTP requests by route and status',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request latency',
    ['method', 'endpoint'],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
)

http_errors_total = Counter(
    'http_errors_total',
    'HTTP responses with status >= 400',
    ['method', 'endpoint', 'status_code']
)

requests_in_progress = Gauge(
    'http_requests_in_progress',
    'Requests currently being served'
)

log_messages_total = Counter(
    'log_messages_total',
    'Records emitted by app_logger',
    ['level']
)

delivery_resolutions_total = Counter(
    'delivery_resolutions_total',
    'Pincode resolutions by outcome',
    ['outcome']
)

pincode_directory_requests_total = Counter(
    'pincode_directory_requests_total',
    'Calls to the external pincode directory by result',
    ['result']
)


def route_label(request: Request) -> str:
    """
    Route template when the router matched one (``/api/delivery/public/check/{pincode}``),
    otherwise the raw path with numbers masked.
    """
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    if template:
        return template
    return re.sub(r'/\d+(?=/|$)', '/{id}', request.url.path)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Request count, latency and error metrics per route."""

    async def dispatch(self, request: Request, call_next: Callable):
        if request.url.path in EXCLUDED_PATHS:
            return await call_next(request)

        started = perf_counter()
        requests_in_progress.inc()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            requests_in_progress.dec()
            self._observe(request, status_code, perf_counter() - started)

    @staticmethod
    def _observe(request: Request, status_code: int, elapsed: float):
        method = request.method
        endpoint = route_label(request)
        http_requests_total.labels(method=method, endpoint=endpoint, status_code=status_code).inc()
        http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(elapsed)
        if status_code >= 400:
            http_errors_total.labels(method=method, endpoint=endpoint, status_code=status_code).inc()


def get_metrics():
    return generate_latest()


def record_log(level: str):
    log_messages_total.labels(level=level).inc()


def record_resolution(outcome: str):
    delivery_resolutions_total.labels(outcome=outcome).inc()


def record_directory_request(result: str):
    """result: ok, retry or failed."""
    pincode_directory_requests_total.labels(result=result).inc()
