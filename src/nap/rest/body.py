"""REST – request body providers.

Each provider is an immutable description of a request body. ``encode()``
turns it into an :class:`EncodedBody` holding the content type and the full
byte content. Providers that wrap one-shot sources (file objects, iterators)
buffer them on first use and replay the buffer afterwards, so a provider can
be shared between cloned builders and encoded once per request.
"""
from __future__ import annotations

import abc
import dataclasses
import json
import secrets
import threading
import xml.etree.ElementTree as ET
from typing import Any, Iterable, Mapping, Union

import pydantic_core

from nap.kernel.errors import BodyEncodeError
from nap.rest.query import encode_sorted, encode_values

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
XML_CONTENT_TYPE = "text/xml"

# bytes, text, anything with read(), or an iterable of byte chunks
BodySource = Union[bytes, bytearray, str, Any]


@dataclasses.dataclass(frozen=True)
class EncodedBody:
    content_type: str
    content: bytes


class BodyProvider(abc.ABC):
    """Encodes a payload into a content type and bytes."""

    #: Content type announced when the provider is selected ("" for none).
    content_type: str = ""

    @abc.abstractmethod
    def encode(self) -> EncodedBody: ...


class EmptyBody(BodyProvider):
    """No body at all."""

    def encode(self) -> EncodedBody:
        return EncodedBody("", b"")

    def __repr__(self) -> str:
        return "EmptyBody()"


EMPTY_BODY = EmptyBody()


def read_source(source: BodySource) -> bytes:
    """Read *source* to the end and close it if it can be closed."""
    try:
        if isinstance(source, (bytes, bytearray)):
            return bytes(source)
        if isinstance(source, str):
            return source.encode("utf-8")
        if hasattr(source, "read"):
            data = source.read()
            return data.encode("utf-8") if isinstance(data, str) else bytes(data)
        if isinstance(source, Iterable):
            return b"".join(
                chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk) for chunk in source
            )
        raise TypeError(f"cannot read body from {type(source).__name__}")
    finally:
        close = getattr(source, "close", None)
        if callable(close):
            close()


class _BufferedProvider(BodyProvider):
    """Caches the first successful encoding of a one-shot source."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._encoded: EncodedBody | None = None

    def encode(self) -> EncodedBody:
        with self._lock:
            if self._encoded is None:
                self._encoded = self._encode_once()
            return self._encoded

    @abc.abstractmethod
    def _encode_once(self) -> EncodedBody: ...


class RawBody(_BufferedProvider):
    """A caller-supplied body, sent verbatim without a content type."""

    def __init__(self, source: BodySource) -> None:
        super().__init__()
        self._source = source

    def _encode_once(self) -> EncodedBody:
        try:
            return EncodedBody("", read_source(self._source))
        except (OSError, TypeError) as exc:
            raise BodyEncodeError(f"cannot read raw body: {exc}", cause=exc) from exc


class JsonBody(BodyProvider):
    """JSON-encodes models, dataclasses, mappings and plain values."""

    content_type = JSON_CONTENT_TYPE

    def __init__(self, payload: Any) -> None:
        self.payload = payload

    def encode(self) -> EncodedBody:
        try:
            data = pydantic_core.to_jsonable_python(self.payload, by_alias=True)
            text = json.dumps(data, ensure_ascii=False, allow_nan=False)
        except (ValueError, TypeError, pydantic_core.PydanticSerializationError) as exc:
            raise BodyEncodeError(
                f"cannot encode JSON body: {exc}", content_type=self.content_type, cause=exc
            ) from exc
        return EncodedBody(self.content_type, text.encode("utf-8"))


class FormBody(BodyProvider):
    """URL-encodes a query structure (dataclass, model or mapping) as a form."""

    content_type = FORM_CONTENT_TYPE

    def __init__(self, payload: Any) -> None:
        self.payload = payload

    def encode(self) -> EncodedBody:
        try:
            pairs = encode_values(self.payload)
        except (TypeError, ValueError) as exc:
            raise BodyEncodeError(
                f"cannot encode form body: {exc}", content_type=self.content_type, cause=exc
            ) from exc
        return EncodedBody(self.content_type, encode_sorted(pairs).encode("ascii"))


class UrlEncodedBody(BodyProvider):
    """URL-encodes an explicit ``str -> str`` mapping as a form."""

    content_type = FORM_CONTENT_TYPE

    def __init__(self, values: Mapping[str, str]) -> None:
        self.values = dict(values)

    def encode(self) -> EncodedBody:
        pairs = [(str(k), str(v)) for k, v in self.values.items()]
        return EncodedBody(self.content_type, encode_sorted(pairs).encode("ascii"))


class MultipartBody(_BufferedProvider):
    """``multipart/form-data`` with plain fields and file fields.

    Every source is read fully and closed when it exposes ``close()``. File
    parts use the field name as their filename.
    """

    def __init__(
        self,
        fields: Mapping[str, BodySource] | None = None,
        files: Mapping[str, BodySource] | None = None,
        boundary: str | None = None,
    ) -> None:
        super().__init__()
        self.fields = dict(fields or {})
        self.files = dict(files or {})
        self.boundary = boundary or secrets.token_hex(16)
        self.content_type = f"multipart/form-data; boundary={self.boundary}"

    def _encode_once(self) -> EncodedBody:
        dash = f"--{self.boundary}".encode("ascii")
        out = bytearray()
        try:
            for key, src in self.fields.items():
                disposition = f'form-data; name="{_escape_quotes(key)}"'
                out += _part(dash, disposition, None, read_source(src))
            for key, src in self.files.items():
                name = _escape_quotes(key)
                disposition = f'form-data; name="{name}"; filename="{name}"'
                out += _part(dash, disposition, "application/octet-stream", read_source(src))
        except (OSError, TypeError, ValueError) as exc:
            raise BodyEncodeError(f"cannot build multipart body: {exc}", cause=exc) from exc
        out += dash + b"--\r\n"
        return EncodedBody(self.content_type, bytes(out))


def _escape_quotes(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _part(dash: bytes, disposition: str, content_type: str | None, content: bytes) -> bytes:
    head = f"Content-Disposition: {disposition}\r\n"
    if content_type:
        head += f"Content-Type: {content_type}\r\n"
    return dash + b"\r\n" + head.encode("utf-8") + b"\r\n" + content + b"\r\n"


class XmlBody(BodyProvider):
    """Pretty-printed XML.

    The root tag is *root* when given, else the single key of a one-key
    mapping, else the payload's type name.
    """

    content_type = XML_CONTENT_TYPE

    def __init__(self, payload: Any, root: str | None = None) -> None:
        self.payload = payload
        self.root = root

    def encode(self) -> EncodedBody:
        try:
            root, data = self._root_and_data()
            element = ET.Element(root)
            _fill(element, data)
            ET.indent(element, space="  ")
            text = ET.tostring(element, encoding="unicode")
        except (ValueError, TypeError, pydantic_core.PydanticSerializationError) as exc:
            raise BodyEncodeError(
                f"cannot encode XML body: {exc}", content_type=self.content_type, cause=exc
            ) from exc
        return EncodedBody(self.content_type, text.encode("utf-8"))

    def _root_and_data(self) -> tuple[str, Any]:
        data = pydantic_core.to_jsonable_python(self.payload, by_alias=True)
        if self.root is not None:
            return self.root, data
        if isinstance(self.payload, Mapping):
            if len(data) == 1:
                (root, inner), = data.items()
                return str(root), inner
            return "root", data
        return type(self.payload).__name__, data


def _fill(element: ET.Element, value: Any) -> None:
    if isinstance(value, dict):
        for key, child in value.items():
            items = child if isinstance(child, list) else [child]
            for item in items:
                if item is None:
                    continue
                _fill(ET.SubElement(element, str(key)), item)
    elif isinstance(value, list):
        for item in value:
            _fill(ET.SubElement(element, "item"), item)
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    elif value is not None:
        element.text = str(value)


__all__ = [
    "EMPTY_BODY",
    "FORM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "XML_CONTENT_TYPE",
    "BodyProvider",
    "BodySource",
    "EmptyBody",
    "EncodedBody",
    "FormBody",
    "JsonBody",
    "MultipartBody",
    "RawBody",
    "UrlEncodedBody",
    "XmlBody",
    "read_source",
]
