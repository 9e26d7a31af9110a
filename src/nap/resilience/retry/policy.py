"""Resilience – retry policies and the immutable RetryPolicy configuration.

A *check-retry* policy is called after every attempt with the call's
cancellation token, the response (if any) and the transport error (if any).
It returns ``(retry, error)``: whether another attempt should be made, and
an optional error explaining the decision.
"""
from __future__ import annotations

import dataclasses
import ssl
from typing import Any, Callable, Iterator

import httpx

from nap.config import RetrySettings
from nap.kernel.errors import CancellationError, UnexpectedStatusError
from nap.resilience.cancellation import CancellationToken
from nap.resilience.retry.backoff import Backoff, ExponentialBackoff, LinearJitterBackoff

CheckRetry = Callable[
    [CancellationToken, "httpx.Response | None", "BaseException | None"],
    "tuple[bool, BaseException | None]",
]
ErrorHandler = Callable[["httpx.Response | None", "BaseException | None", int], httpx.Response]

_FATAL_TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    httpx.TooManyRedirects,
    httpx.UnsupportedProtocol,
    ssl.SSLCertVerificationError,
    CancellationError,
)


def _cause_chain(exc: BaseException | None) -> Iterator[BaseException]:
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        yield exc
        exc = exc.__cause__ or exc.__context__


def is_fatal_transport_error(error: BaseException) -> bool:
    """True for redirect-limit, protocol-scheme and certificate-trust failures."""
    return any(isinstance(exc, _FATAL_TRANSPORT_ERRORS) for exc in _cause_chain(error))


def _is_retryable_status(status_code: int) -> bool:
    # 0 and out-of-range codes count as server failures
    return status_code == 0 or (status_code >= 500 and status_code != httpx.codes.NOT_IMPLEMENTED)


def default_retry_policy(
    token: CancellationToken,
    response: httpx.Response | None,
    error: BaseException | None,
) -> tuple[bool, BaseException | None]:
    """Retry on connection errors, 429 and 5xx (except 501).

    Never reports an error value except the token's cancellation.
    """
    if token.is_cancelled:
        return False, token.error()

    if error is not None:
        if is_fatal_transport_error(error):
            return False, None
        return True, None

    if response is None:
        return False, None
    if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
        return True, None
    if _is_retryable_status(response.status_code):
        return True, None
    return False, None


def error_propagated_retry_policy(
    token: CancellationToken,
    response: httpx.Response | None,
    error: BaseException | None,
) -> tuple[bool, BaseException | None]:
    """Like :func:`default_retry_policy` but reports why it decided.

    Fatal transport errors come back as the error value, and retried
    statuses come back as :class:`UnexpectedStatusError`.
    """
    if token.is_cancelled:
        return False, token.error()

    if error is not None:
        if is_fatal_transport_error(error):
            return False, error
        return True, None

    if response is None:
        return False, None
    status = response.status_code
    if status == httpx.codes.TOO_MANY_REQUESTS or _is_retryable_status(status):
        return True, _status_error(response)
    return False, None


def _status_error(response: httpx.Response) -> UnexpectedStatusError:
    try:
        request = response.request
    except RuntimeError:
        return UnexpectedStatusError(response.status_code, response.reason_phrase)
    return UnexpectedStatusError(
        response.status_code,
        response.reason_phrase,
        method=request.method,
        url=str(request.url),
    )


@dataclasses.dataclass(frozen=True)
class RetryPolicy:
    """Immutable retry configuration shared by every call through a RetryDoer.

    ``retry_max`` counts retries, so a call makes at most ``retry_max + 1``
    attempts. Waits are in seconds.
    """

    retry_max: int = 4
    wait_min: float = 1.0
    wait_max: float = 30.0
    check_retry: CheckRetry = default_retry_policy
    backoff: Backoff = dataclasses.field(default_factory=ExponentialBackoff)
    error_handler: ErrorHandler | None = None

    def __post_init__(self) -> None:
        if self.retry_max < 0:
            raise ValueError("retry_max must be >= 0")
        if self.wait_min < 0 or self.wait_max < 0:
            raise ValueError("wait_min and wait_max must be >= 0")

    def evolve(self, **changes: Any) -> "RetryPolicy":
        """Return a copy with *changes* applied."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_settings(cls, settings: RetrySettings, **overrides: Any) -> "RetryPolicy":
        backoff: Backoff = (
            LinearJitterBackoff() if settings.backoff == "linear_jitter" else ExponentialBackoff()
        )
        check_retry = error_propagated_retry_policy if settings.propagate_errors else default_retry_policy
        values: dict[str, Any] = {
            "retry_max": settings.max,
            "wait_min": settings.wait_min,
            "wait_max": settings.wait_max,
            "check_retry": check_retry,
            "backoff": backoff,
        }
        values.update(overrides)
        return cls(**values)


__all__ = [
    "CheckRetry",
    "ErrorHandler",
    "RetryPolicy",
    "default_retry_policy",
    "error_propagated_retry_policy",
    "is_fatal_transport_error",
]
