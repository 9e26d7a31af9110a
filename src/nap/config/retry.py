"""Retry settings read from ``NAP_RETRY_*`` variables."""

from __future__ import annotations

import dataclasses
from typing import ClassVar

from nap.config.errors import InvalidSettingValueError
from nap.config.settings import Settings

BACKOFF_KINDS = ("exponential", "linear_jitter")


@dataclasses.dataclass
class RetrySettings(Settings):
    """Knobs for :meth:`nap.resilience.retry.RetryPolicy.from_settings`.

    ``propagate_errors`` selects the policy that reports why a status was
    retried instead of the silent default one.
    """

    env_prefix: ClassVar[str] = "NAP_RETRY"

    max: int = 4
    wait_min: float = 1.0
    wait_max: float = 30.0
    backoff: str = "exponential"
    propagate_errors: bool = False

    def validate(self) -> None:
        checks = (
            ("max", self.max, self.max >= 0, "must be >= 0"),
            ("wait_min", self.wait_min, self.wait_min >= 0, "must be >= 0"),
            ("wait_max", self.wait_max, self.wait_max >= self.wait_min, "must be >= wait_min"),
            ("backoff", self.backoff, self.backoff in BACKOFF_KINDS, f"expected one of {BACKOFF_KINDS}"),
        )
        for name, value, ok, reason in checks:
            if not ok:
                raise InvalidSettingValueError(self.env_key(name), value, reason)


__all__ = ["BACKOFF_KINDS", "RetrySettings"]
