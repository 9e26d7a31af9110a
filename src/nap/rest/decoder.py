"""REST – response decoders.

A decoder reads the response body exactly once and validates it into a
target type through a pydantic ``TypeAdapter``, so targets can be models,
dataclasses, ``TypedDict``s, containers or plain scalars.
"""
from __future__ import annotations

import abc
import functools
import xml.etree.ElementTree as ET
from typing import Any

import httpx
import pydantic

from nap.kernel.errors import DecodeError


@functools.lru_cache(maxsize=256)
def _adapter(target: Any) -> pydantic.TypeAdapter[Any]:
    return pydantic.TypeAdapter(target)


class ResponseDecoder(abc.ABC):
    """Decodes a response body into an instance of *target*."""

    @abc.abstractmethod
    def decode(self, response: httpx.Response, target: Any) -> Any: ...


class JsonDecoder(ResponseDecoder):
    """Decodes JSON bodies."""

    def decode(self, response: httpx.Response, target: Any) -> Any:
        body = response.read()
        try:
            return _adapter(target).validate_json(body)
        except pydantic.ValidationError as exc:
            raise DecodeError(
                f"cannot decode JSON response into {_name(target)}: {exc.error_count()} error(s)",
                status_code=response.status_code,
                target=target,
                cause=exc,
            ) from exc


class XmlDecoder(ResponseDecoder):
    """Decodes XML bodies.

    The root element is dropped; its children become the fields of the
    target. Repeated child tags become lists, leaf elements become their
    text.
    """

    def decode(self, response: httpx.Response, target: Any) -> Any:
        body = response.read()
        try:
            root = ET.fromstring(body)
        except ET.ParseError as exc:
            raise DecodeError(
                f"cannot parse XML response: {exc}",
                status_code=response.status_code,
                target=target,
                cause=exc,
            ) from exc
        try:
            return _adapter(target).validate_python(element_to_python(root))
        except pydantic.ValidationError as exc:
            raise DecodeError(
                f"cannot decode XML response into {_name(target)}: {exc.error_count()} error(s)",
                status_code=response.status_code,
                target=target,
                cause=exc,
            ) from exc


def element_to_python(element: ET.Element) -> Any:
    """Convert an element into nested dicts, lists and strings."""
    children = list(element)
    if not children:
        return (element.text or "").strip()
    result: dict[str, Any] = {}
    for child in children:
        value = element_to_python(child)
        if child.tag in result:
            existing = result[child.tag]
            if not isinstance(existing, list):
                result[child.tag] = existing = [existing]
            existing.append(value)
        else:
            result[child.tag] = value
    return result


def _name(target: Any) -> str:
    return getattr(target, "__name__", repr(target))


__all__ = ["JsonDecoder", "ResponseDecoder", "XmlDecoder", "element_to_python"]
