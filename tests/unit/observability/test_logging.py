"""Unit tests for observability logging."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
import structlog
from structlog.testing import capture_logs

from nap.observability.logging import (
    DEFAULT_SENSITIVE_FIELDS,
    JsonLoggerFactory,
    SensitiveFieldsFilter,
    get_logger,
)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


# ---------------------------------------------------------------------------
# SensitiveFieldsFilter
# ---------------------------------------------------------------------------


class TestSensitiveFieldsFilter:
    def test_default_fields(self) -> None:
        assert "authorization" in DEFAULT_SENSITIVE_FIELDS
        assert "cookie" in DEFAULT_SENSITIVE_FIELDS

    def test_redact_flat(self) -> None:
        f = SensitiveFieldsFilter()
        assert f.redact({"Authorization": "Bearer x", "accept": "*/*"}) == {
            "Authorization": SensitiveFieldsFilter.REDACTED,
            "accept": "*/*",
        }

    def test_redact_nested(self) -> None:
        f = SensitiveFieldsFilter()
        out = f.redact({"req": {"headers": {"cookie": "c=1"}}, "n": 1})
        assert out == {"req": {"headers": {"cookie": "[REDACTED]"}}, "n": 1}

    def test_is_sensitive_ignores_case(self) -> None:
        assert SensitiveFieldsFilter().is_sensitive("X-Api-Key")
        assert not SensitiveFieldsFilter().is_sensitive("accept")

    def test_acts_as_processor(self) -> None:
        f = SensitiveFieldsFilter()
        event = {"event": "request.sent", "token": "t", "status_code": 200}
        assert f(None, "info", event) == {
            "event": "request.sent",
            "token": "[REDACTED]",
            "status_code": 200,
        }
        assert event["token"] == "t"

    def test_redact_headers_multimap(self) -> None:
        f = SensitiveFieldsFilter()
        out = f.redact_headers([("accept", "a"), ("accept", "b"), ("authorization", "Basic x")])
        assert out == {"accept": ["a", "b"], "authorization": ["[REDACTED]"]}

    def test_custom_fields(self) -> None:
        f = SensitiveFieldsFilter(["X-Signature"])
        assert f.redact({"X-Signature": "s", "authorization": "a"}) == {
            "X-Signature": "[REDACTED]",
            "authorization": "a",
        }


# ---------------------------------------------------------------------------
# get_logger
# ---------------------------------------------------------------------------


class TestGetLogger:
    def test_binds_initial_values(self) -> None:
        with capture_logs() as logs:
            get_logger("nap.test", component="rest").info("request.sent", status_code=200)
        assert logs == [
            {"event": "request.sent", "log_level": "info", "component": "rest", "status_code": 200}
        ]


# ---------------------------------------------------------------------------
# JsonLoggerFactory
# ---------------------------------------------------------------------------


class TestJsonLoggerFactory:
    def test_renders_json_with_redaction(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(level=logging.INFO, sensitive_fields=DEFAULT_SENSITIVE_FIELDS)
        get_logger("nap.test").info("request.sent", authorization="Bearer t", status_code=201)
        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "request.sent"
        assert payload["authorization"] == "[REDACTED]"
        assert payload["status_code"] == 201
        assert payload["level"] == "info"
        assert payload["logger"] == "nap.test"

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(level=logging.WARNING)
        get_logger("nap.test").info("request.sent")
        assert capsys.readouterr().err == ""
