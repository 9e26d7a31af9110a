"""Kernel – framework-agnostic building blocks shared by every nap layer."""

from nap.kernel.errors import (
    BaseError,
    BodyEncodeError,
    CancellationError,
    DecodeError,
    NapError,
    RetryExhaustedError,
    TransportError,
    UnexpectedStatusError,
    URLResolutionError,
)

__all__ = [
    "BaseError",
    "BodyEncodeError",
    "CancellationError",
    "DecodeError",
    "NapError",
    "RetryExhaustedError",
    "TransportError",
    "URLResolutionError",
    "UnexpectedStatusError",
]
