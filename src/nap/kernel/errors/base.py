"""Root error class for the nap error hierarchy."""

from __future__ import annotations

import json
from typing import Any, ClassVar


class BaseError(Exception):
    """Common ancestor of every error nap raises.

    Every error carries a human-readable ``message`` and a machine-readable
    ``code``. Subclasses list the attributes that describe the failed call
    (method, URL, status...) in ``detail_fields``; :meth:`to_dict` folds
    them into ``detail`` so a log line or an API error body gets them
    without per-class serialisation code.

    Args:
        message: Human-readable description.
        code: Machine-readable slug (defaults to ``default_code``).
        detail: Extra context merged over the attribute-derived fields.
        cause: Underlying exception, also installed as ``__cause__``.
    """

    default_code: ClassVar[str] = "base_error"
    detail_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.extra: dict[str, Any] = dict(detail or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def detail(self) -> dict[str, Any]:
        fields = {
            name: getattr(self, name)
            for name in self.detail_fields
            if getattr(self, name, None) is not None
        }
        fields.update(self.extra)
        return fields

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.code}: {self.message!r}>"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        detail = self.detail
        if detail:
            payload["detail"] = detail
        if self.cause is not None:
            payload["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return payload

    def to_json(self) -> str:
        """Single-line JSON rendering of :meth:`to_dict`."""
        return json.dumps(self.to_dict(), default=str)


__all__ = ["BaseError"]
