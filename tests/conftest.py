"""Root pytest fixtures for batch-pager tests."""

from __future__ import annotations

import pytest
from fakes import ScriptedApi

from batch_pager.batch import BatchExecutor, RetryEvent
from batch_pager.resilience import BackoffPolicy


@pytest.fixture
def api() -> ScriptedApi:
    """Fresh scripted API."""
    return ScriptedApi()


@pytest.fixture
def retry_events() -> list[RetryEvent]:
    """Collects retry events from executors built by ``make_executor``."""
    return []


@pytest.fixture
def make_executor(api: ScriptedApi, retry_events: list[RetryEvent]):
    """Factory for executors wired to the scripted API, with no real sleeping."""

    def _make(
        *,
        concurrency_limit: int = 40,
        backoff: BackoffPolicy | None = None,
    ) -> BatchExecutor:
        return BatchExecutor(
            api.transport(),
            concurrency_limit=concurrency_limit,
            backoff=backoff or BackoffPolicy.immediate(),
            on_retry=retry_events.append,
        )

    return _make
