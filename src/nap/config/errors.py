"""Errors raised while reading or validating settings."""

from __future__ import annotations

from typing import Any

from nap.kernel.errors import BaseError


class ConfigError(BaseError):
    """Settings could not be read, coerced or validated."""

    default_code = "config_error"
    detail_fields = ("setting_name",)

    def __init__(self, message: str, *, setting_name: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.setting_name = setting_name


class MissingRequiredSettingError(ConfigError):
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(f"{setting_name} is required but not set", setting_name=setting_name)


class InvalidSettingValueError(ConfigError):
    """A value was supplied but cannot be used (wrong type or out of range)."""

    default_code = "invalid_setting_value"
    detail_fields = ("setting_name", "value", "reason")

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(f"{setting_name}={value!r} rejected: {reason}", setting_name=setting_name)
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
