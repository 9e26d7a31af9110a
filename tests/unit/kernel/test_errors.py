"""Unit tests for the error hierarchy."""

from __future__ import annotations

import json

import pytest

from nap.kernel.errors import (
    BaseError,
    BodyEncodeError,
    CancellationError,
    DecodeError,
    NapError,
    RetryExhaustedError,
    TransportError,
    UnexpectedStatusError,
    URLResolutionError,
)


class TestBaseError:
    def test_code_falls_back_to_class_default(self) -> None:
        assert BaseError("boom").code == "base_error"
        assert BaseError("boom", code="quota").code == "quota"

    def test_payload_shape(self) -> None:
        err = BaseError("rate limited", code="quota", detail={"limit": 60})
        assert err.to_dict() == {"code": "quota", "message": "rate limited", "detail": {"limit": 60}}

    def test_cause_is_chained_and_described(self) -> None:
        root = ConnectionResetError("peer went away")
        err = BaseError("send failed", cause=root)
        assert err.__cause__ is root
        assert err.to_dict()["cause"] == "ConnectionResetError: peer went away"

    def test_str_is_message(self) -> None:
        assert str(BaseError("oops", code="oops")) == "oops"

    def test_to_json_round_trips_payload(self) -> None:
        err = BaseError("oops", code="oops", detail={"x": 1})
        parsed = json.loads(err.to_json())
        assert parsed == {"code": "oops", "message": "oops", "detail": {"x": 1}}

    def test_to_dict_omits_empty_detail(self) -> None:
        assert "detail" not in BaseError("m").to_dict()

    def test_repr_names_class_and_code(self) -> None:
        assert repr(TransportError("boom")) == "<TransportError transport_error: 'boom'>"


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [
            URLResolutionError,
            BodyEncodeError,
            TransportError,
            UnexpectedStatusError,
            DecodeError,
            RetryExhaustedError,
            CancellationError,
        ],
    )
    def test_all_are_nap_errors(self, cls: type) -> None:
        assert issubclass(cls, NapError)
        assert issubclass(cls, BaseError)

    def test_unexpected_status_is_transport_error(self) -> None:
        assert issubclass(UnexpectedStatusError, TransportError)


class TestURLResolutionError:
    def test_default_message_mentions_url(self) -> None:
        err = URLResolutionError("http://bad:port")
        assert "http://bad:port" in err.message
        assert err.url == "http://bad:port"
        assert err.code == "url_resolution_error"


class TestUnexpectedStatusError:
    def test_message_and_status(self) -> None:
        err = UnexpectedStatusError(503, "Service Unavailable")
        assert err.status_code == 503
        assert err.message == "unexpected HTTP status 503 Service Unavailable"

    def test_without_reason(self) -> None:
        assert UnexpectedStatusError(599).message == "unexpected HTTP status 599"


class TestDecodeError:
    def test_carries_status_and_target(self) -> None:
        err = DecodeError("bad", status_code=200, target=dict)
        assert err.status_code == 200
        assert err.target is dict


class TestRetryExhaustedError:
    def test_message_without_cause(self) -> None:
        err = RetryExhaustedError("GET", "http://svc/x", 3)
        assert err.message == "GET http://svc/x giving up after 3 attempt(s)"
        assert err.attempts == 3
        assert err.cause is None

    def test_message_with_nap_cause(self) -> None:
        cause = UnexpectedStatusError(500, "Internal Server Error")
        err = RetryExhaustedError("POST", "http://svc/y", 5, cause=cause)
        assert err.message.endswith(": unexpected HTTP status 500 Internal Server Error")
        assert err.__cause__ is cause

    def test_message_with_plain_cause(self) -> None:
        err = RetryExhaustedError("GET", "http://svc", 1, cause=ConnectionResetError())
        assert err.message.endswith(": ConnectionResetError")


class TestCancellationError:
    def test_defaults(self) -> None:
        err = CancellationError()
        assert err.message == "operation cancelled"
        assert err.expired is False
        assert err.code == "cancelled"

    def test_expired_flag(self) -> None:
        assert CancellationError("deadline exceeded", expired=True).expired is True


class TestDetailFields:
    def test_transport_error_detail(self) -> None:
        err = TransportError("boom", method="GET", url="http://svc/x")
        assert err.to_dict()["detail"] == {"method": "GET", "url": "http://svc/x"}

    def test_none_attributes_are_skipped(self) -> None:
        assert TransportError("boom").detail == {}

    def test_status_error_includes_status(self) -> None:
        err = UnexpectedStatusError(502, method="POST", url="http://svc/y")
        assert err.detail == {"method": "POST", "url": "http://svc/y", "status_code": 502}

    def test_explicit_detail_wins(self) -> None:
        err = RetryExhaustedError("GET", "http://svc", 2, detail={"attempts": "two", "host": "svc"})
        assert err.detail == {"method": "GET", "url": "http://svc", "attempts": "two", "host": "svc"}

    def test_cancellation_detail_serialises(self) -> None:
        payload = json.loads(CancellationError("deadline exceeded", expired=True).to_json())
        assert payload["detail"] == {"expired": True}
