"""Prometheus metrics for the Code KT API.

Adds an HTTP middleware that records request latency per method/path/status.
"""

from __future__ import annotations

import time
from typing import Callable, Awaitable

from prometheus_client import Histogram
from starlette.requests import Request
from starlette.responses import Response

REQUEST_LATENCY = Histogram(
    "codekt_request_latency_seconds",
    "HTTP request latency in seconds",
    labelnames=("method", "path", "status"),
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0),
)


def sanitize_path(path: str) -> str:
    """Reduce high-cardinality paths (e.g. /conversations/{id}) to a coarse label.

    The ``/api`` mount prefix is skipped so both mounts share labels.
    """
    if not path:
        return "/"
    segs = [s for s in path.split("?")[0].split("/") if s]
    if segs and segs[0] == "api":
        segs = segs[1:]
    if segs and segs[0] == "kt":
        segs = segs[1:]
    if not segs:
        return "/"
    return "/" + segs[0]


def metrics_middleware_factory() -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    async def middleware(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        if request.url.path.startswith("/metrics"):
            return await call_next(request)
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        REQUEST_LATENCY.labels(
            method=request.method,
            path=sanitize_path(request.url.path),
            status=str(response.status_code),
        ).observe(elapsed)
        return response

    return middleware
