"""HTTP adapter – Doer capability and its httpx-backed default.

A :class:`Doer` executes one ``httpx.Request`` and returns the
``httpx.Response``. Doers stack: :class:`~nap.adapters.http.RetryDoer`
wraps another doer, and instrumented transports are just other doers.
"""
from __future__ import annotations

import abc
import threading
from typing import Any

import httpx

from nap.kernel.errors import TransportError
from nap.resilience.cancellation import cancellation_of


class Doer(abc.ABC):
    """Port: execute a request against a transport.

    Implementations raise :class:`~nap.kernel.errors.TransportError` when no
    response could be obtained and
    :class:`~nap.kernel.errors.CancellationError` when the request's token
    is already cancelled.
    """

    @abc.abstractmethod
    def execute(self, request: httpx.Request) -> httpx.Response: ...


class HttpxDoer(Doer):
    """Sends requests through an ``httpx.Client``.

    Responses are returned *streamed*: the body is still on the wire, and
    the caller must read or drain it and then close the response so the
    connection goes back to the pool.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
        **kwargs: Any,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            kwargs.setdefault("follow_redirects", True)
            client = httpx.Client(timeout=timeout, **kwargs)
        self._client = client

    @property
    def client(self) -> httpx.Client:
        return self._client

    def __enter__(self) -> "HttpxDoer":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def execute(self, request: httpx.Request) -> httpx.Response:
        token = cancellation_of(request)
        token.raise_if_cancelled()
        request.extensions["timeout"] = self._timeout_for(token.remaining_seconds)
        try:
            return self._client.send(request, stream=True)
        except httpx.HTTPError as exc:
            raise TransportError(
                f"{request.method} {request.url}: {str(exc) or type(exc).__name__}",
                method=request.method,
                url=str(request.url),
                cause=exc,
            ) from exc

    def _timeout_for(self, remaining: float | None) -> dict[str, float | None]:
        timeout = self._client.timeout.as_dict()
        if remaining is None:
            return timeout
        return {k: remaining if v is None else min(v, remaining) for k, v in timeout.items()}


_default_doer: HttpxDoer | None = None
_default_lock = threading.Lock()


def default_doer() -> HttpxDoer:
    """Return the process default doer, creating it on first use."""
    global _default_doer
    with _default_lock:
        if _default_doer is None:
            _default_doer = HttpxDoer()
        return _default_doer


def close_default_doer() -> None:
    """Close the process default doer; the next ``default_doer()`` makes a new one."""
    global _default_doer
    with _default_lock:
        if _default_doer is not None:
            _default_doer.close()
            _default_doer = None


__all__ = ["Doer", "HttpxDoer", "close_default_doer", "default_doer"]
