"""Observability – masking of credentials in log events."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

DEFAULT_SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {
        "authorization",
        "proxy-authorization",
        "cookie",
        "set-cookie",
        "x-api-key",
        "x-auth-token",
        "api_key",
        "password",
        "secret",
        "token",
    }
)


class SensitiveFieldsFilter:
    """Masks values stored under credential-bearing keys.

    Key matching is case-insensitive, since HTTP header names are. An
    instance is also a structlog processor: put it in the chain and every
    event dict is masked before rendering.
    """

    REDACTED = "[REDACTED]"

    def __init__(self, sensitive_fields: Iterable[str] | None = None) -> None:
        fields = DEFAULT_SENSITIVE_FIELDS if sensitive_fields is None else sensitive_fields
        self._fields = frozenset(name.lower() for name in fields)

    def is_sensitive(self, key: str) -> bool:
        return key.lower() in self._fields

    def redact(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Copy of *data* with sensitive values masked, nested mappings included."""
        masked: dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(key, str) and self.is_sensitive(key):
                masked[key] = self.REDACTED
            elif isinstance(value, Mapping):
                masked[key] = self.redact(value)
            else:
                masked[key] = value
        return masked

    def redact_headers(self, headers: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
        """Group a header multimap by name, masking sensitive values."""
        grouped: dict[str, list[str]] = {}
        for name, value in headers:
            grouped.setdefault(name, []).append(self.REDACTED if self.is_sensitive(name) else value)
        return grouped

    def __call__(self, logger: Any, method_name: str, event_dict: Mapping[str, Any]) -> dict[str, Any]:
        return self.redact(event_dict)


__all__ = ["DEFAULT_SENSITIVE_FIELDS", "SensitiveFieldsFilter"]
