"""REST – Response wrapper, Raw sentinel and success deciders."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable

import httpx

SuccessDecider = Callable[[int], bool]


class Raw(bytes):
    """Response body captured verbatim.

    Pass the ``Raw`` type as a decode target to skip structured decoding.
    """


def decode_on_success(status_code: int) -> bool:
    """Decode into the success target for 2xx statuses."""
    return 200 <= status_code <= 299


@dataclasses.dataclass
class Response:
    """Outcome of a ``do``/``receive`` call.

    At most one of ``success`` and ``failure`` is set; both stay ``None``
    for a 204 or when no target was requested for the selected branch.
    ``succeeded`` records which branch the success decider picked.
    """

    http: httpx.Response
    succeeded: bool = True
    success: Any = None
    failure: Any = None

    @property
    def status_code(self) -> int:
        return self.http.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.http.headers


__all__ = ["Raw", "Response", "SuccessDecider", "decode_on_success"]
