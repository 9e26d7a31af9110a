"""HTTP adapter – RetryDoer.

Wraps another :class:`~nap.adapters.http.client.Doer` and re-sends a
request while the policy's check-retry function asks for it. Between
attempts the previous response is drained (bounded) and closed, the body
is rewound and the backoff wait races the request's cancellation token.
"""
from __future__ import annotations

import itertools

import httpx

from nap.adapters.http.client import Doer, default_doer
from nap.adapters.http.rewind import RewindableRequest, drain_body
from nap.kernel.errors import CancellationError, NapError, RetryExhaustedError
from nap.observability.logging import get_logger
from nap.resilience.cancellation import cancellation_of
from nap.resilience.retry import RetryPolicy

logger = get_logger(__name__)


class RetryDoer(Doer):
    """Doer with automatic retry on transient failures."""

    def __init__(self, inner: Doer | None = None, policy: RetryPolicy | None = None) -> None:
        self._inner = inner
        self._policy = policy or RetryPolicy()

    @property
    def inner(self) -> Doer:
        return self._inner or default_doer()

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def execute(self, request: httpx.Request) -> httpx.Response:
        policy = self._policy
        inner = self.inner
        token = cancellation_of(request)
        rewindable = RewindableRequest.from_request(request)

        attempt = 0
        response: httpx.Response | None = None
        transport_error: BaseException | None = None
        check_error: BaseException | None = None
        should_retry = False

        for i in itertools.count():
            attempt += 1
            response, transport_error = None, None
            try:
                response = inner.execute(rewindable.rewind())
            except (httpx.HTTPError, NapError) as exc:
                transport_error = exc

            should_retry, check_error = policy.check_retry(token, response, transport_error)

            if transport_error is not None:
                logger.error(
                    "request.failed",
                    method=request.method,
                    url=str(request.url),
                    attempt=attempt,
                    error=str(transport_error),
                )

            if not should_retry:
                break
            remain = policy.retry_max - i
            if remain <= 0:
                break

            if response is not None:
                drain_body(response)

            wait = policy.backoff(policy.wait_min, policy.wait_max, i, response)
            logger.info(
                "request.retrying",
                method=request.method,
                url=str(request.url),
                attempt=attempt,
                wait=wait,
                remaining=remain,
                status_code=response.status_code if response is not None else None,
            )
            if token.wait(wait):
                raise token.error()

        if transport_error is None and check_error is None and not should_retry:
            assert response is not None
            return response

        error = check_error or transport_error
        if policy.error_handler is not None:
            return policy.error_handler(response, error, attempt)

        if response is not None:
            drain_body(response)
        if isinstance(error, CancellationError):
            raise error
        raise RetryExhaustedError(request.method, str(request.url), attempt, cause=error) from error


__all__ = ["RetryDoer"]
