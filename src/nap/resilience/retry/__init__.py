"""Resilience – retry policies, backoff strategies and jitter."""
from nap.resilience.retry.backoff import (
    Backoff,
    BackoffStrategy,
    ExponentialBackoff,
    LinearJitterBackoff,
    retry_after_seconds,
)
from nap.resilience.retry.jitter import secure_fraction, secure_uniform
from nap.resilience.retry.policy import (
    CheckRetry,
    ErrorHandler,
    RetryPolicy,
    default_retry_policy,
    error_propagated_retry_policy,
    is_fatal_transport_error,
)

__all__ = [
    "Backoff",
    "BackoffStrategy",
    "CheckRetry",
    "ErrorHandler",
    "ExponentialBackoff",
    "LinearJitterBackoff",
    "RetryPolicy",
    "default_retry_policy",
    "error_propagated_retry_policy",
    "is_fatal_transport_error",
    "retry_after_seconds",
    "secure_fraction",
    "secure_uniform",
]
