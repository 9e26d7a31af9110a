"""Observability – metrics backend that records nothing."""

from __future__ import annotations

from collections.abc import Sequence

from nap.observability.metrics.ports import Counter, Metrics


class _DiscardingCounter(Counter):
    def inc(self, amount: float = 1.0, **labels: str) -> None:
        return None


_DISCARD = _DiscardingCounter()


class NoopMetrics(Metrics):
    """Default backend of a fresh :class:`~nap.rest.RequestBuilder`."""

    def counter(self, name: str, documentation: str = "", labelnames: Sequence[str] = ()) -> Counter:
        return _DISCARD


__all__ = ["NoopMetrics"]
