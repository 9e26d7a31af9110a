"""Observability – per-request counter shared by every builder."""

from __future__ import annotations

import httpx

from nap.observability.metrics.ports import Metrics

REQUESTS_TOTAL = "nap_requests_total"
REQUEST_LABELS = ("method", "host", "path", "status_code")


def record_request(metrics: Metrics, request: httpx.Request, status_code: int) -> None:
    """Count one completed exchange under :data:`REQUESTS_TOTAL`.

    The path label is the URL path without its query string so that
    paginated or filtered calls to one endpoint share a series.
    """
    metrics.counter(REQUESTS_TOTAL, "HTTP requests completed by nap", REQUEST_LABELS).inc(
        method=request.method,
        host=request.url.host,
        path=request.url.path,
        status_code=str(status_code),
    )


__all__ = ["REQUESTS_TOTAL", "REQUEST_LABELS", "record_request"]
