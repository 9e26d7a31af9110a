"""REST – Header multimap with canonicalised keys."""
from __future__ import annotations

import string
from typing import Iterator

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


def canonical_key(key: str) -> str:
    """Canonicalise *key* the MIME way: ``content-tYPE`` -> ``Content-Type``.

    Keys containing characters that are not valid in a header token are
    returned unchanged.
    """
    if not key or any(c not in _TOKEN_CHARS for c in key):
        return key
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))


class Header:
    """Ordered ``key -> [values]`` multimap.

    ``add`` appends to the values of a canonical key, ``set`` replaces them.
    """

    def __init__(self, items: dict[str, list[str]] | None = None) -> None:
        self._items: dict[str, list[str]] = {}
        for key, values in (items or {}).items():
            for value in values:
                self.add(key, value)

    def add(self, key: str, value: str) -> None:
        self._items.setdefault(canonical_key(key), []).append(value)

    def set(self, key: str, value: str) -> None:
        self._items[canonical_key(key)] = [value]

    def get(self, key: str) -> str | None:
        """First value for *key*, or ``None``."""
        values = self._items.get(canonical_key(key))
        return values[0] if values else None

    def values(self, key: str) -> list[str]:
        return list(self._items.get(canonical_key(key), []))

    def delete(self, key: str) -> None:
        self._items.pop(canonical_key(key), None)

    def copy(self) -> "Header":
        clone = Header()
        clone._items = {k: list(v) for k, v in self._items.items()}
        return clone

    def multi_items(self) -> list[tuple[str, str]]:
        return [(k, v) for k, values in self._items.items() for v in values]

    def to_dict(self) -> dict[str, list[str]]:
        return {k: list(v) for k, v in self._items.items()}

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and canonical_key(key) in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Header):
            return self._items == other._items
        if isinstance(other, dict):
            return self._items == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"Header({self._items!r})"


__all__ = ["Header", "canonical_key"]
