"""Observability – metrics ports and backends."""
from nap.observability.metrics.noop import NoopMetrics
from nap.observability.metrics.ports import Counter, Metrics
from nap.observability.metrics.prometheus import PrometheusMetrics
from nap.observability.metrics.requests import REQUEST_LABELS, REQUESTS_TOTAL, record_request

__all__ = [
    "Counter",
    "Metrics",
    "NoopMetrics",
    "PrometheusMetrics",
    "REQUESTS_TOTAL",
    "REQUEST_LABELS",
    "record_request",
]
