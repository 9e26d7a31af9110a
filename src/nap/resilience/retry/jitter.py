"""Resilience – cryptographically sourced jitter."""
from __future__ import annotations

import secrets

_system_random = secrets.SystemRandom()


def secure_fraction() -> float:
    """Uniform random float in ``[0, 1)`` drawn from the OS entropy source."""
    return _system_random.random()


def secure_uniform(low: float, high: float) -> float:
    """Uniform random in ``[low, high)``."""
    return low + secure_fraction() * (high - low)


__all__ = ["secure_fraction", "secure_uniform"]
