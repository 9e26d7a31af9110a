"""Observability – JsonLoggerFactory."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import IO, Any

import structlog

from nap.observability.logging.filters import SensitiveFieldsFilter


class JsonLoggerFactory:
    """One-call setup for applications that want nap's events as JSON lines.

    nap itself never configures logging; it only emits structlog events.
    Applications call :meth:`configure` once at start-up, or wire structlog
    themselves.
    """

    @staticmethod
    def configure(
        level: int = logging.INFO,
        sensitive_fields: Iterable[str] | None = None,
        *,
        stream: IO[str] | None = None,
    ) -> None:
        pre_chain: list[Any] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.processors.format_exc_info,
        ]
        if sensitive_fields is not None:
            pre_chain.insert(0, SensitiveFieldsFilter(sensitive_fields))

        structlog.configure(
            processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        handler = logging.StreamHandler(stream)
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.JSONRenderer(sort_keys=True),
                ],
            )
        )
        root = logging.getLogger()
        root.handlers[:] = [handler]
        root.setLevel(level)


__all__ = ["JsonLoggerFactory"]
