"""REST – flatten query structures and form payloads into URL values.

A *query structure* is one of:

* a mapping (``{"limit": 30}``),
* a dataclass whose fields may carry :func:`url_field` metadata,
* a pydantic model (dumped ``by_alias`` with ``None`` values excluded).

Values are rendered the way query strings conventionally spell them:
booleans as ``true``/``false``, sequences as repeated keys, enums by value,
dates and datetimes in ISO format; ``None`` is skipped.
"""
from __future__ import annotations

import dataclasses
import datetime
import enum
from typing import Any, Iterable, Mapping
from urllib.parse import parse_qsl, urlencode

import pydantic

Pairs = list[tuple[str, str]]


def url_field(name: str | None = None, *, omitempty: bool = False, **kwargs: Any) -> Any:
    """``dataclasses.field`` carrying the URL key and the omit-if-empty flag.

    A *name* of ``"-"`` excludes the field from encoding.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    if name is not None:
        metadata["url"] = name
    metadata["omitempty"] = omitempty
    return dataclasses.field(metadata=metadata, **kwargs)


def encode_values(obj: Any) -> Pairs:
    """Flatten *obj* into ordered ``(key, value)`` pairs."""
    if obj is None:
        return []
    pairs: Pairs = []
    if isinstance(obj, Mapping):
        for key, value in obj.items():
            _append(pairs, str(key), value, omitempty=False)
    elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        for field in dataclasses.fields(obj):
            key = field.metadata.get("url", field.name)
            if key == "-":
                continue
            _append(pairs, key, getattr(obj, field.name), omitempty=field.metadata.get("omitempty", False))
    elif isinstance(obj, pydantic.BaseModel):
        for key, value in obj.model_dump(by_alias=True, exclude_none=True).items():
            _append(pairs, key, value, omitempty=False)
    else:
        raise TypeError(f"cannot encode {type(obj).__name__} as URL values")
    return pairs


def _append(pairs: Pairs, key: str, value: Any, *, omitempty: bool) -> None:
    if value is None:
        return
    if omitempty and not value:
        return
    if isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            if item is not None:
                pairs.append((key, _format(item)))
        return
    pairs.append((key, _format(value)))


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return _format(value.value)
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def parse_query(query: str) -> Pairs:
    return parse_qsl(query, keep_blank_values=True)


def encode_sorted(pairs: Iterable[tuple[str, str]]) -> str:
    """URL-encode *pairs* with keys in sorted order.

    The sort is stable, so the values of a repeated key keep their
    insertion order.
    """
    return urlencode(sorted(pairs, key=lambda kv: kv[0]))


__all__ = ["Pairs", "encode_sorted", "encode_values", "parse_query", "url_field"]
