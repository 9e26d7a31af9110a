"""Twelve-factor settings: dataclass schemas filled from the environment.

A settings class is a dataclass deriving from :class:`Settings`. Each field
is read from ``<env_prefix>_<FIELD>`` (upper case) and coerced to the
field's annotation. Fields without a default are required.

Example::

    @dataclasses.dataclass
    class ClientSettings(Settings):
        env_prefix: ClassVar[str] = "GITHUB"

        base_url: str
        timeout: float = 10.0

    settings = EnvSettingsLoader().load(ClientSettings)   # GITHUB_BASE_URL, GITHUB_TIMEOUT
"""

from __future__ import annotations

import abc
import dataclasses
import os
import types
import typing
from collections.abc import Mapping
from typing import Any, ClassVar, TypeVar

from dotenv import dotenv_values

from nap.config.errors import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

S = TypeVar("S", bound="Settings")

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


@dataclasses.dataclass
class Settings:
    env_prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Hook for range and cross-field checks; raise :class:`ConfigError`."""

    @classmethod
    def env_key(cls, field_name: str) -> str:
        if not cls.env_prefix:
            return field_name.upper()
        return f"{cls.env_prefix}_{field_name}".upper()


class SettingsLoader(abc.ABC):
    """Port: build a :class:`Settings` instance from a key/value source."""

    @abc.abstractmethod
    def source(self) -> Mapping[str, str]:
        """Variables visible to this loader."""

    def load(self, settings_class: type[S]) -> S:
        values = self.source()
        hints = typing.get_type_hints(settings_class)
        kwargs: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):
            if not field.init:
                continue
            key = settings_class.env_key(field.name)
            raw = values.get(key)
            if raw is None:
                if _is_required(field):
                    raise MissingRequiredSettingError(key)
                continue
            try:
                kwargs[field.name] = _coerce(raw, hints.get(field.name, str))
            except ValueError as exc:
                raise InvalidSettingValueError(key, raw, str(exc)) from exc

        try:
            return settings_class(**kwargs)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"cannot build {settings_class.__name__}: {exc}", cause=exc) from exc


class EnvSettingsLoader(SettingsLoader):
    """Reads the process environment, or an explicit mapping in tests."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def source(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ


class DotenvSettingsLoader(SettingsLoader):
    """Reads a ``.env`` file layered with the process environment.

    Process variables win unless *override* is set. The process environment
    itself is never modified.
    """

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def source(self) -> Mapping[str, str]:
        file_values = {k: v for k, v in dotenv_values(self._env_file).items() if v is not None}
        if self._override:
            return {**os.environ, **file_values}
        return {**file_values, **os.environ}


def _is_required(field: dataclasses.Field[Any]) -> bool:
    return field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING


def _coerce(raw: str, hint: Any) -> Any:
    origin = typing.get_origin(hint)
    if origin in (typing.Union, types.UnionType):
        options = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if not raw:
            return None
        return _coerce(raw, options[0]) if len(options) == 1 else raw
    if hint is bool:
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError(f"expected a boolean, got {raw!r}")
    if hint in (int, float):
        return hint(raw)
    if origin in (list, tuple):
        items = [part.strip() for part in raw.split(",") if part.strip()]
        return items if origin is list else tuple(items)
    return raw


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "Settings", "SettingsLoader"]
