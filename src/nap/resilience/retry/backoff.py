"""Resilience – backoff strategies.

A backoff is any callable ``(min_wait, max_wait, attempt, response) ->
seconds`` where *attempt* is the 0-based index of the attempt that just
failed and *response* is its response, if one arrived.
"""
from __future__ import annotations

import abc
import math
from typing import Callable

import httpx

from nap.resilience.retry.jitter import secure_uniform

Backoff = Callable[[float, float, int, "httpx.Response | None"], float]


def retry_after_seconds(response: httpx.Response | None) -> float | None:
    """Integer ``Retry-After`` of a 429 response, in seconds."""
    if response is None or response.status_code != httpx.codes.TOO_MANY_REQUESTS:
        return None
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return float(int(value.strip()))
    except ValueError:
        return None


class BackoffStrategy(abc.ABC):
    """Compute wait duration (seconds) after the *attempt*-th failure."""

    @abc.abstractmethod
    def compute(
        self,
        min_wait: float,
        max_wait: float,
        attempt: int,
        response: httpx.Response | None = None,
    ) -> float: ...

    def __call__(
        self,
        min_wait: float,
        max_wait: float,
        attempt: int,
        response: httpx.Response | None = None,
    ) -> float:
        return self.compute(min_wait, max_wait, attempt, response)


class ExponentialBackoff(BackoffStrategy):
    """Delay grows exponentially: ``min_wait * 2^attempt``, capped at ``max_wait``.

    A 429 carrying an integer ``Retry-After`` wins over the computed delay.
    """

    def compute(
        self,
        min_wait: float,
        max_wait: float,
        attempt: int,
        response: httpx.Response | None = None,
    ) -> float:
        retry_after = retry_after_seconds(response)
        if retry_after is not None:
            return retry_after
        try:
            sleep = min_wait * (2 ** attempt)
        except OverflowError:
            return max_wait
        if math.isinf(sleep) or sleep > max_wait:
            return max_wait
        return sleep


class LinearJitterBackoff(BackoffStrategy):
    """Linear backoff with jitter.

    ``min_wait`` and ``max_wait`` bound the per-attempt multiplier rather
    than the delay itself: each wait is ``uniform(min_wait, max_wait) *
    (attempt + 1)``. Equal bounds give strictly linear backoff.
    """

    def compute(
        self,
        min_wait: float,
        max_wait: float,
        attempt: int,
        response: httpx.Response | None = None,  # noqa: ARG002
    ) -> float:
        multiplier = attempt + 1
        if max_wait <= min_wait:
            return min_wait * multiplier
        return secure_uniform(min_wait, max_wait) * multiplier


__all__ = [
    "Backoff",
    "BackoffStrategy",
    "ExponentialBackoff",
    "LinearJitterBackoff",
    "retry_after_seconds",
]
