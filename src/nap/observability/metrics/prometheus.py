"""Observability – Prometheus backend.

Optional dependency: ``prometheus-client``.  Install with::

    pip install nap[prometheus]
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Any

from nap.observability.metrics.ports import Counter, Metrics


def _prometheus_client() -> Any:
    try:
        import prometheus_client  # type: ignore[import-untyped]
    except ImportError as exc:
        raise ImportError("PrometheusMetrics needs 'nap[prometheus]'") from exc
    return prometheus_client


class _PrometheusCounter(Counter):
    def __init__(self, collector: Any, labelnames: tuple[str, ...]) -> None:
        self._collector = collector
        self._labelnames = labelnames

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        if not self._labelnames:
            self._collector.inc(amount)
            return
        # Prometheus rejects partial label sets; absent labels become "".
        values = [labels.get(name, "") for name in self._labelnames]
        self._collector.labels(*values).inc(amount)


class PrometheusMetrics(Metrics):
    """Registers one ``prometheus_client.Counter`` per name on *registry*.

    *registry* defaults to the process-wide ``REGISTRY``; tests pass a
    fresh ``CollectorRegistry``.
    """

    def __init__(self, registry: Any = None) -> None:
        client = _prometheus_client()
        self._counter_type = client.Counter
        self._registry = client.REGISTRY if registry is None else registry
        self._instruments: dict[str, _PrometheusCounter] = {}
        self._lock = threading.Lock()

    def counter(self, name: str, documentation: str = "", labelnames: Sequence[str] = ()) -> Counter:
        with self._lock:
            instrument = self._instruments.get(name)
            if instrument is None:
                names = tuple(labelnames)
                collector = self._counter_type(
                    name, documentation or name, labelnames=names, registry=self._registry
                )
                instrument = self._instruments[name] = _PrometheusCounter(collector, names)
            return instrument


__all__ = ["PrometheusMetrics"]
