"""Observability – metric instrument ports.

Backends (Prometheus, the in-memory fake, the no-op default) implement
:class:`Metrics`; request code only ever calls ``counter(...).inc(...)``.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence


class Counter(abc.ABC):
    """Monotonic counter; label values are passed as keyword arguments."""

    @abc.abstractmethod
    def inc(self, amount: float = 1.0, **labels: str) -> None: ...


class Metrics(abc.ABC):
    """Port: hands out instruments by name.

    Asking twice for the same name returns the same instrument, so callers
    may look a counter up on every request instead of caching it.
    """

    @abc.abstractmethod
    def counter(self, name: str, documentation: str = "", labelnames: Sequence[str] = ()) -> Counter: ...


__all__ = ["Counter", "Metrics"]
