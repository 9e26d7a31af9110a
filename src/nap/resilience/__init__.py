"""Resilience – cancellation tokens and retry policies."""

from nap.resilience.cancellation import CancellationToken, cancellation_of
from nap.resilience.retry import (
    BackoffStrategy,
    ExponentialBackoff,
    LinearJitterBackoff,
    RetryPolicy,
    default_retry_policy,
    error_propagated_retry_policy,
)

__all__ = [
    "BackoffStrategy",
    "CancellationToken",
    "ExponentialBackoff",
    "LinearJitterBackoff",
    "RetryPolicy",
    "cancellation_of",
    "default_retry_policy",
    "error_propagated_retry_policy",
]
