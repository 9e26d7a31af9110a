"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    └── NapError                  (http.py)
        ├── URLResolutionError
        ├── BodyEncodeError
        ├── TransportError
        │   └── UnexpectedStatusError
        ├── DecodeError
        ├── RetryExhaustedError
        └── CancellationError
"""

from nap.kernel.errors.base import BaseError
from nap.kernel.errors.http import (
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
