"""
Resilience layer - backoff and backpressure.

- BackoffPolicy: attempt-squared backoff with an optional retry ceiling
- Backpressure: semaphore-based concurrency control shared by a batch round
"""

from batch_pager.resilience.backoff import BackoffPolicy
from batch_pager.resilience.backpressure import (
    DEFAULT_CONCURRENCY_LIMIT,
    Backpressure,
    BackpressureConfig,
)

__all__ = [
    "DEFAULT_CONCURRENCY_LIMIT",
    "BackoffPolicy",
    "Backpressure",
    "BackpressureConfig",
]
