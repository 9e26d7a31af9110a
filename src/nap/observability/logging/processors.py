"""Observability – logger lookup used by every nap module."""
from __future__ import annotations

from typing import Any

import structlog


def get_logger(name: str | None = None, **bound: Any) -> Any:
    """Lazy structlog logger named *name*, with *bound* context attached.

    Rendering is decided by whatever structlog configuration is active when
    the first event is emitted, so module-level loggers are safe.
    """
    return structlog.get_logger(name, **bound)


__all__ = ["get_logger"]
