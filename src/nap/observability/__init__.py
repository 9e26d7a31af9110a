"""Observability – structured logging and metrics."""

from nap.observability.logging import JsonLoggerFactory, SensitiveFieldsFilter, get_logger
from nap.observability.metrics import Counter, Metrics, NoopMetrics

__all__ = [
    "Counter",
    "JsonLoggerFactory",
    "Metrics",
    "NoopMetrics",
    "SensitiveFieldsFilter",
    "get_logger",
]
