"""Resilience – explicit cancellation tokens carried on requests."""
from nap.resilience.cancellation.token import (
    CANCELLATION_EXTENSION,
    NEVER_CANCELLED,
    CancellationToken,
    cancellation_of,
)

__all__ = ["CANCELLATION_EXTENSION", "NEVER_CANCELLED", "CancellationToken", "cancellation_of"]
