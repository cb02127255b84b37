"""
Backpressure control using semaphores.

Limits concurrent requests to the remote API. A single Backpressure instance
is shared by every request of a batch round, retries included.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


DEFAULT_CONCURRENCY_LIMIT = 40


@dataclass
class BackpressureConfig:
    """Configuration for backpressure control.

    Attributes:
        max_concurrent: Maximum concurrent requests
    """

    max_concurrent: int = DEFAULT_CONCURRENCY_LIMIT

    def __post_init__(self) -> None:
        if self.max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1")


class Backpressure:
    """Semaphore-bounded request pool.

    Example:
        >>> bp = Backpressure(BackpressureConfig(max_concurrent=20))
        >>> async with bp.acquire():
        ...     await transport.send(descriptor)
    """

    def __init__(self, config: BackpressureConfig | None = None) -> None:
        self._config = config or BackpressureConfig()
        self._semaphore = asyncio.Semaphore(self._config.max_concurrent)

        # Statistics
        self._current_inflight = 0
        self._peak_inflight = 0

    @property
    def max_concurrent(self) -> int:
        return self._config.max_concurrent

    @property
    def peak_inflight(self) -> int:
        """Highest number of simultaneous in-flight requests seen."""
        return self._peak_inflight

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[None]:
        """Hold a permit for the duration of one request."""
        await self._semaphore.acquire()
        self._current_inflight += 1
        self._peak_inflight = max(self._peak_inflight, self._current_inflight)
        try:
            yield
        finally:
            self._current_inflight -= 1
            self._semaphore.release()

    def __repr__(self) -> str:
        return (
            f"Backpressure("
            f"inflight={self._current_inflight}/{self._config.max_concurrent})"
        )
