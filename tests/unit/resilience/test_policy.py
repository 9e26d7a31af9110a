"""Unit tests for the check-retry policies and RetryPolicy."""

from __future__ import annotations

import ssl

import httpx
import pytest

from nap.kernel.errors import CancellationError, TransportError, UnexpectedStatusError
from nap.resilience.cancellation import CancellationToken
from nap.resilience.retry import (
    ExponentialBackoff,
    RetryPolicy,
    default_retry_policy,
    error_propagated_retry_policy,
    is_fatal_transport_error,
)

POLICIES = [default_retry_policy, error_propagated_retry_policy]


def _wrapped(exc: BaseException) -> TransportError:
    try:
        raise TransportError("wrapped") from exc
    except TransportError as err:
        return err


# ---------------------------------------------------------------------------
# Fatal transport errors
# ---------------------------------------------------------------------------


class TestIsFatalTransportError:
    @pytest.mark.parametrize(
        "exc",
        [
            httpx.TooManyRedirects("too many"),
            httpx.UnsupportedProtocol("ftp"),
            ssl.SSLCertVerificationError("unknown authority"),
        ],
    )
    def test_fatal(self, exc: BaseException) -> None:
        assert is_fatal_transport_error(exc)
        assert is_fatal_transport_error(_wrapped(exc))

    def test_cert_error_deep_in_chain(self) -> None:
        try:
            try:
                raise ssl.SSLCertVerificationError("x509")
            except ssl.SSLError as inner:
                raise httpx.ConnectError("tls handshake") from inner
        except httpx.ConnectError as outer:
            assert is_fatal_transport_error(_wrapped(outer))

    def test_plain_connect_error_is_not_fatal(self) -> None:
        assert not is_fatal_transport_error(httpx.ConnectError("refused"))


# ---------------------------------------------------------------------------
# Shared behaviour of both named policies
# ---------------------------------------------------------------------------


class TestSharedPolicyBehaviour:
    @pytest.mark.parametrize("policy", POLICIES)
    def test_cancelled_token_stops(self, policy) -> None:  # type: ignore[no-untyped-def]
        token = CancellationToken()
        token.cancel()
        retry, err = policy(token, httpx.Response(503), None)
        assert retry is False
        assert isinstance(err, CancellationError)

    @pytest.mark.parametrize("policy", POLICIES)
    def test_expired_token_stops(self, policy) -> None:  # type: ignore[no-untyped-def]
        retry, err = policy(CancellationToken(timeout=0.0), None, httpx.ConnectError("x"))
        assert retry is False
        assert isinstance(err, CancellationError)
        assert err.expired

    @pytest.mark.parametrize("policy", POLICIES)
    def test_transient_transport_error_retries(self, policy) -> None:  # type: ignore[no-untyped-def]
        retry, err = policy(CancellationToken(), None, _wrapped(httpx.ConnectError("refused")))
        assert retry is True
        assert err is None

    @pytest.mark.parametrize("policy", POLICIES)
    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504, 599])
    def test_retryable_statuses(self, policy, status: int) -> None:  # type: ignore[no-untyped-def]
        retry, _ = policy(CancellationToken(), httpx.Response(status), None)
        assert retry is True

    @pytest.mark.parametrize("policy", POLICIES)
    @pytest.mark.parametrize("status", [200, 201, 204, 301, 400, 404, 501])
    def test_non_retryable_statuses(self, policy, status: int) -> None:  # type: ignore[no-untyped-def]
        assert policy(CancellationToken(), httpx.Response(status), None) == (False, None)

    @pytest.mark.parametrize("policy", POLICIES)
    def test_status_zero_retries(self, policy) -> None:  # type: ignore[no-untyped-def]
        response = httpx.Response(200)
        response.status_code = 0
        retry, _ = policy(CancellationToken(), response, None)
        assert retry is True


# ---------------------------------------------------------------------------
# Where the two policies differ
# ---------------------------------------------------------------------------


class TestDefaultRetryPolicy:
    def test_fatal_error_swallowed(self) -> None:
        exc = _wrapped(httpx.TooManyRedirects("loop"))
        assert default_retry_policy(CancellationToken(), None, exc) == (False, None)

    def test_retryable_status_reports_nothing(self) -> None:
        assert default_retry_policy(CancellationToken(), httpx.Response(503), None) == (True, None)


class TestErrorPropagatedRetryPolicy:
    def test_fatal_error_reported(self) -> None:
        exc = _wrapped(httpx.UnsupportedProtocol("gopher"))
        retry, err = error_propagated_retry_policy(CancellationToken(), None, exc)
        assert retry is False
        assert err is exc

    def test_retryable_status_reported(self) -> None:
        retry, err = error_propagated_retry_policy(CancellationToken(), httpx.Response(503), None)
        assert retry is True
        assert isinstance(err, UnexpectedStatusError)
        assert err.status_code == 503
        assert "503 Service Unavailable" in err.message

    def test_status_error_names_the_request(self) -> None:
        request = httpx.Request("PUT", "http://svc/items/7")
        _, err = error_propagated_retry_policy(
            CancellationToken(), httpx.Response(502, request=request), None
        )
        assert isinstance(err, UnexpectedStatusError)
        assert err.to_dict()["detail"] == {
            "method": "PUT",
            "url": "http://svc/items/7",
            "status_code": 502,
        }


# ---------------------------------------------------------------------------
# RetryPolicy configuration
# ---------------------------------------------------------------------------


class TestRetryPolicy:
    def test_defaults(self) -> None:
        policy = RetryPolicy()
        assert policy.retry_max == 4
        assert policy.wait_min == 1.0
        assert policy.wait_max == 30.0
        assert policy.check_retry is default_retry_policy
        assert isinstance(policy.backoff, ExponentialBackoff)
        assert policy.error_handler is None

    def test_is_frozen(self) -> None:
        policy = RetryPolicy()
        with pytest.raises(AttributeError):
            policy.retry_max = 9  # type: ignore[misc]

    def test_evolve(self) -> None:
        policy = RetryPolicy().evolve(retry_max=1, wait_min=0.0)
        assert policy.retry_max == 1
        assert policy.wait_min == 0.0

    @pytest.mark.parametrize("kwargs", [{"retry_max": -1}, {"wait_min": -0.1}, {"wait_max": -1.0}])
    def test_rejects_negative(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            RetryPolicy(**kwargs)
