"""Resilience – CancellationToken.

A token is the explicit stand-in for a request-scoped cancellation signal.
It is attached to a request and checked at every point where a call may
suspend: before the transport is invoked and during the backoff wait
between retry attempts.
"""
from __future__ import annotations

import threading
import time

import httpx

from nap.kernel.errors import CancellationError

CANCELLATION_EXTENSION = "nap.cancellation"


class CancellationToken:
    """Cancellation signal with an optional absolute deadline.

    ``cancel()`` may be called from any thread. ``wait(seconds)`` blocks on
    an :class:`threading.Event`, so a cancellation wakes the waiter at once
    instead of being noticed on the next poll.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._event = threading.Event()
        self._reason = "operation cancelled"
        self._deadline = None if timeout is None else time.monotonic() + timeout

    @classmethod
    def with_timeout(cls, seconds: float) -> "CancellationToken":
        return cls(timeout=seconds)

    @property
    def remaining_seconds(self) -> float | None:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    @property
    def is_expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def is_cancelled(self) -> bool:
        """True once ``cancel()`` was called or the deadline passed."""
        return self._event.is_set() or self.is_expired

    def cancel(self, reason: str = "operation cancelled") -> None:
        self._reason = reason
        self._event.set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to *seconds*; return ``True`` if cancellation won the race."""
        limit = max(0.0, seconds)
        remaining = self.remaining_seconds
        if remaining is not None and remaining < limit:
            self._event.wait(remaining)
            return True
        if self._event.wait(limit):
            return True
        return self.is_expired

    def error(self) -> CancellationError:
        if self._event.is_set():
            return CancellationError(self._reason)
        return CancellationError("deadline exceeded", expired=True)

    def raise_if_cancelled(self) -> None:
        if self.is_cancelled:
            raise self.error()


class _NeverCancelled(CancellationToken):
    """Token for requests built without one; ``cancel()`` is ignored."""

    def cancel(self, reason: str = "operation cancelled") -> None:  # noqa: ARG002
        return None


NEVER_CANCELLED = _NeverCancelled()


def cancellation_of(request: httpx.Request) -> CancellationToken:
    """Return the token attached to *request*, or :data:`NEVER_CANCELLED`."""
    token = request.extensions.get(CANCELLATION_EXTENSION)
    if isinstance(token, CancellationToken):
        return token
    return NEVER_CANCELLED


__all__ = ["CANCELLATION_EXTENSION", "NEVER_CANCELLED", "CancellationToken", "cancellation_of"]
