"""HTTP adapter – request body rewinding and bounded response draining."""
from __future__ import annotations

import httpx

from nap.kernel.errors import BodyEncodeError
from nap.observability.logging import get_logger

RESPONSE_READ_LIMIT = 4096

logger = get_logger(__name__)


class RewindableRequest:
    """A request whose body can be replayed for every attempt.

    The body is buffered once up front; ``rewind()`` installs a fresh
    stream over the same bytes before each send.
    """

    def __init__(self, request: httpx.Request, body: bytes) -> None:
        self.request = request
        self.body = body

    @classmethod
    def from_request(cls, request: httpx.Request) -> "RewindableRequest":
        try:
            body = request.read()
        except httpx.StreamError as exc:
            raise BodyEncodeError(
                f"request body for {request.method} {request.url} cannot be replayed: {exc}",
                cause=exc,
            ) from exc
        return cls(request, body)

    def rewind(self) -> httpx.Request:
        self.request.stream = httpx.ByteStream(self.body)
        return self.request


def drain_body(response: httpx.Response, limit: int | None = RESPONSE_READ_LIMIT) -> None:
    """Read at most *limit* bytes of the remaining body, then close.

    Pass ``limit=None`` to read everything. Read failures are logged, the
    response is closed regardless.
    """
    try:
        if response.is_stream_consumed or response.is_closed:
            return
        read = 0
        for chunk in response.iter_raw():
            read += len(chunk)
            if limit is not None and read >= limit:
                break
    except (httpx.HTTPError, httpx.StreamError) as exc:
        logger.warning("response.drain_failed", status_code=response.status_code, error=str(exc))
    finally:
        response.close()


__all__ = ["RESPONSE_READ_LIMIT", "RewindableRequest", "drain_body"]
