"""HTTP client errors: request construction, transport, decoding and retry."""

from __future__ import annotations

from typing import Any

from nap.kernel.errors.base import BaseError


class NapError(BaseError):
    """Any failure raised while building, sending or decoding a request."""

    default_code = "nap_error"


class URLResolutionError(NapError):
    """The base URL, a path reference or the final request URL is unparsable."""

    default_code = "url_resolution_error"
    detail_fields = ("url",)

    def __init__(self, url: str, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"Cannot resolve URL '{url}'", **kwargs)
        self.url = url


class BodyEncodeError(NapError):
    """The request body could not be encoded (marshal or multipart failure)."""

    default_code = "body_encode_error"
    detail_fields = ("content_type",)

    def __init__(
        self,
        message: str,
        *,
        content_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.content_type = content_type


class TransportError(NapError):
    """The transport failed to produce a response."""

    default_code = "transport_error"
    detail_fields = ("method", "url")

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.method = method
        self.url = url


class UnexpectedStatusError(TransportError):
    """A response arrived but its status is classified as a server failure."""

    default_code = "unexpected_status"
    detail_fields = ("method", "url", "status_code")

    def __init__(self, status_code: int, reason: str = "", **kwargs: Any) -> None:
        status = f"{status_code} {reason}".strip()
        super().__init__(f"unexpected HTTP status {status}", **kwargs)
        self.status_code = status_code


class DecodeError(NapError):
    """A response body could not be decoded into the requested target."""

    default_code = "decode_error"
    detail_fields = ("status_code",)

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        target: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.target = target


class RetryExhaustedError(NapError):
    """The retry loop gave up; carries the attempt count and the last cause."""

    default_code = "retry_exhausted"
    detail_fields = ("method", "url", "attempts")

    def __init__(
        self,
        method: str,
        url: str,
        attempts: int,
        cause: BaseException | None = None,
        **kwargs: Any,
    ) -> None:
        message = f"{method} {url} giving up after {attempts} attempt(s)"
        if cause is not None:
            message = f"{message}: {_describe(cause)}"
        super().__init__(message, cause=cause, **kwargs)
        self.method = method
        self.url = url
        self.attempts = attempts


class CancellationError(NapError):
    """The call was cancelled or its deadline expired."""

    default_code = "cancelled"
    detail_fields = ("expired",)

    def __init__(self, message: str = "operation cancelled", *, expired: bool = False, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.expired = expired


def _describe(exc: BaseException) -> str:
    if isinstance(exc, BaseError):
        return exc.message
    return str(exc) or type(exc).__name__


__all__ = [
    "BodyEncodeError",
    "CancellationError",
    "DecodeError",
    "NapError",
    "RetryExhaustedError",
    "TransportError",
    "URLResolutionError",
    "UnexpectedStatusError",
]
