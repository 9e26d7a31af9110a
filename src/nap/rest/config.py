"""REST – immutable builder configuration."""
from __future__ import annotations

import dataclasses
from typing import Any

from nap.adapters.http.client import Doer
from nap.observability.metrics import Metrics, NoopMetrics
from nap.rest.decoder import JsonDecoder, ResponseDecoder
from nap.rest.response import SuccessDecider, decode_on_success


@dataclasses.dataclass(frozen=True)
class RestConfig:
    """Collaborators used by a :class:`~nap.rest.builder.RequestBuilder`.

    ``doer=None`` means the process default doer, resolved at call time.
    Builders share a config by reference; changes go through :meth:`evolve`.
    """

    doer: Doer | None = None
    response_decoder: ResponseDecoder = dataclasses.field(default_factory=JsonDecoder)
    success_decider: SuccessDecider = decode_on_success
    metrics: Metrics = dataclasses.field(default_factory=NoopMetrics)
    logger_name: str = "nap.rest"

    def evolve(self, **changes: Any) -> "RestConfig":
        return dataclasses.replace(self, **changes)


__all__ = ["RestConfig"]
