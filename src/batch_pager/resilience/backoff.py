"""
Retry backoff policy.

Retryable failures wait ``attempt ** 2`` backoff units before being
resubmitted (1, 4, 9, 16, ... seconds with the default unit). The retry
ceiling is optional: ``max_retries=None`` keeps retrying until the request
either succeeds or fails terminally.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class BackoffPolicy:
    """Quadratic backoff with an optional retry ceiling.

    Attributes:
        unit_secs: Length of one backoff unit in seconds
        max_retries: Maximum retries per request (None = unbounded)
        max_delay_secs: Upper bound for a single sleep (None = uncapped)
    """

    unit_secs: float = 1.0
    max_retries: int | None = None
    max_delay_secs: float | None = None

    def __post_init__(self) -> None:
        if self.unit_secs < 0:
            raise ValueError("unit_secs must be >= 0")
        if self.max_retries is not None and self.max_retries < 0:
            raise ValueError("max_retries must be >= 0 or None")
        if self.max_delay_secs is not None and self.max_delay_secs < 0:
            raise ValueError("max_delay_secs must be >= 0 or None")

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> BackoffPolicy:
        """Create a policy from a plain mapping (e.g. a YAML section)."""
        if not data:
            return cls()
        return cls(
            unit_secs=float(data.get("unit_secs", 1.0)),
            max_retries=data.get("max_retries"),
            max_delay_secs=data.get("max_delay_secs"),
        )

    @classmethod
    def immediate(cls, max_retries: int | None = None) -> BackoffPolicy:
        """Policy that retries without sleeping."""
        return cls(unit_secs=0.0, max_retries=max_retries)

    def delay_units(self, attempt: int) -> int:
        """Backoff length in units for the Nth consecutive retry (1-based)."""
        if attempt < 1:
            return 0
        return attempt**2

    def delay_for(self, attempt: int) -> float:
        """Backoff in seconds for the Nth consecutive retry (1-based).

        Args:
            attempt: Retry number, starting at 1 for the first retry

        Returns:
            Delay in seconds
        """
        delay = self.delay_units(attempt) * self.unit_secs
        if self.max_delay_secs is not None:
            delay = min(delay, self.max_delay_secs)
        return delay

    def should_retry(self, attempt: int) -> bool:
        """Check whether the Nth retry (1-based) is still allowed."""
        if self.max_retries is None:
            return True
        return attempt <= self.max_retries
